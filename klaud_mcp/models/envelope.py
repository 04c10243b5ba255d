"""Invocation result model.

Every call through the dispatcher produces exactly one ``InvocationResult``:
either the upstream JSON payload or an error kind with a readable message.
Callers branch on ``ok`` / ``error_kind`` instead of catching exceptions.
"""

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from ..core.errors import DispatchError, ErrorKind, UpstreamError
from ..utils.response import error_response, success_response


class InvocationResult(BaseModel):
    """Uniform success/error envelope for one operation invocation.

    Attributes:
        ok: True when the upstream answered 2xx with valid JSON
        operation: Operation name as requested by the caller
        data: Parsed upstream JSON (success only)
        error_kind: Failure category (error only)
        message: Human-readable error message (error only)
        status_code: Upstream HTTP status, when one was received
    """

    ok: bool
    operation: str
    data: Any = None
    error_kind: Optional[ErrorKind] = Field(
        None,
        description="Failure category; None on success"
    )
    message: Optional[str] = None
    status_code: Optional[int] = None

    @classmethod
    def success(cls, operation: str, data: Any, status_code: Optional[int] = None) -> "InvocationResult":
        return cls(ok=True, operation=operation, data=data, status_code=status_code)

    @classmethod
    def failure(cls, operation: str, error: DispatchError) -> "InvocationResult":
        status_code = error.status_code if isinstance(error, UpstreamError) else None
        return cls(
            ok=False,
            operation=operation,
            error_kind=error.kind,
            message=error.message,
            status_code=status_code,
        )

    @property
    def is_error(self) -> bool:
        return not self.ok

    def to_text(self) -> str:
        """Caller-facing text: pretty-printed JSON on success, the message otherwise."""
        if self.ok:
            return json.dumps(self.data, indent=2, ensure_ascii=False)
        return self.message or "Unknown error"

    def to_response(self) -> Dict[str, Any]:
        """Render as the standard ``{"ok": ...}`` envelope dict."""
        if self.ok:
            return success_response(self.data)
        details = {"status_code": self.status_code} if self.status_code is not None else None
        return error_response(
            self.message or "Unknown error",
            code=self.error_kind.value if self.error_kind else None,
            details=details,
        )
