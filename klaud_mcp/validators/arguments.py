"""Argument validation against operation parameter schemas."""

import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

from ..core.errors import InvalidArgument
from ..registry.operation_registry import (
    Destination,
    OperationDescriptor,
    ParameterSpec,
    ParamType,
)

logger = logging.getLogger(__name__)

URL_SCHEMES = ("http", "https")


def is_empty(value: Any) -> bool:
    """None and "" mean "not supplied"; upstream defaults apply."""
    return value is None or (isinstance(value, str) and value == "")


def validate_arguments(
    operation: OperationDescriptor,
    arguments: Optional[Mapping[str, Any]]
) -> Dict[str, Any]:
    """Validate arguments and return the normalized mapping.

    Present values are type-checked, missing optional values get their
    defaults, empty optional values are dropped. Names the operation does not
    declare are ignored.

    Args:
        operation: Operation whose schema applies
        arguments: Caller-supplied arguments (may be None)

    Returns:
        Normalized arguments, containing only parameters to send

    Raises:
        InvalidArgument: On the first violation found, naming the parameter
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise InvalidArgument(None, f"Arguments for '{operation.name}' must be an object")

    normalized: Dict[str, Any] = {}

    for param in operation.parameters:
        value = arguments.get(param.name)

        if is_empty(value):
            if param.required:
                raise InvalidArgument(
                    param.name,
                    f"Missing required parameter '{param.name}' for operation '{operation.name}'"
                )
            if param.default is not None:
                normalized[param.name] = param.default
            continue

        normalized[param.name] = _check_value(param, value)

    if operation.require_any and not any(name in normalized for name in operation.require_any):
        raise InvalidArgument(
            ", ".join(operation.require_any),
            f"Provide at least one of: {', '.join(operation.require_any)}"
        )

    unknown = sorted(set(arguments) - {p.name for p in operation.parameters})
    if unknown:
        logger.debug(f"Ignoring undeclared arguments for {operation.name}: {unknown}")

    return normalized


def _check_value(param: ParameterSpec, value: Any) -> Any:
    if param.type == ParamType.INTEGER:
        return _check_integer(param, value)
    if param.type == ParamType.BOOLEAN:
        return _check_boolean(param, value)
    if param.type == ParamType.STRING_ARRAY:
        return _check_string_array(param, value)

    if not isinstance(value, str):
        raise InvalidArgument(param.name, f"Parameter '{param.name}' must be a string")

    # Tokens go into headers; never echo the value back
    if param.destination == Destination.CREDENTIAL and not _is_header_safe(value):
        raise InvalidArgument(
            param.name,
            f"Parameter '{param.name}' must contain only printable ASCII characters"
        )

    if param.max_length is not None and len(value) > param.max_length:
        raise InvalidArgument(
            param.name,
            f"Parameter '{param.name}' must be at most {param.max_length} characters"
        )

    if param.type == ParamType.ENUM and value not in param.choices:
        raise InvalidArgument(
            param.name,
            f"Parameter '{param.name}' must be one of: {', '.join(param.choices)}"
        )

    if param.type == ParamType.URL and not _is_url(value):
        raise InvalidArgument(
            param.name,
            f"Parameter '{param.name}' must be an absolute http(s) URL"
        )

    return value


def _check_integer(param: ParameterSpec, value: Any) -> int:
    # bool is an int subclass; JSON true is not a number
    if isinstance(value, bool):
        raise InvalidArgument(param.name, f"Parameter '{param.name}' must be an integer")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise InvalidArgument(param.name, f"Parameter '{param.name}' must be an integer")

    too_low = param.minimum is not None and value < param.minimum
    too_high = param.maximum is not None and value > param.maximum
    if too_low or too_high:
        raise InvalidArgument(
            param.name,
            f"Parameter '{param.name}' must be between {param.minimum} and {param.maximum}"
        )
    return value


def _check_boolean(param: ParameterSpec, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value in ("true", "false"):
        return value == "true"
    raise InvalidArgument(param.name, f"Parameter '{param.name}' must be a boolean")


def _check_string_array(param: ParameterSpec, value: Any) -> list:
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise InvalidArgument(
            param.name,
            f"Parameter '{param.name}' must be an array of strings"
        )
    if param.max_items is not None and len(value) > param.max_items:
        raise InvalidArgument(
            param.name,
            f"Parameter '{param.name}' accepts at most {param.max_items} entries"
        )
    return list(value)


def _is_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in URL_SCHEMES and bool(parsed.netloc)


def _is_header_safe(value: str) -> bool:
    return all(0x20 <= ord(ch) < 0x7F for ch in value)


def validate_token(operation: OperationDescriptor, token: Optional[str]) -> None:
    """Reject an effective credential that cannot be sent as a header value.

    Covers tokens from overrides and the environment, which bypass
    validate_arguments. The message never includes the token.

    Raises:
        InvalidArgument: If the token contains non-printable or non-ASCII characters
    """
    if token and not _is_header_safe(token):
        raise InvalidArgument(
            None,
            f"Credential for '{operation.name}' must contain only printable ASCII characters"
        )
