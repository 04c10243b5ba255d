"""Standardized response utilities for MCP tools."""

from typing import Any, Dict, Optional


def success_response(data: Any) -> Dict[str, Any]:
    """Create a successful response envelope.

    Args:
        data: The response data

    Returns:
        Standardized success response
    """
    return {
        "ok": True,
        "data": data
    }


def error_response(
    message: str,
    code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Create an error response envelope.

    Args:
        message: Error message
        code: Optional error code
        details: Optional error details

    Returns:
        Standardized error response
    """
    error = {"message": message}

    if code:
        error["code"] = code

    if details:
        error["details"] = details

    return {
        "ok": False,
        "error": error
    }
