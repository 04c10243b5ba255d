"""Error taxonomy for operation dispatch.

Every failure an invocation can hit maps to one ``ErrorKind``. The dispatcher
catches all of them at the invocation boundary and turns them into error
envelopes, so none of these ever reaches the MCP host as a crash.
"""

from enum import Enum
from typing import Optional

UPSTREAM_EXCERPT_LIMIT = 200


class ErrorKind(str, Enum):
    """Kinds of invocation failure."""
    UNKNOWN_OPERATION = "unknown_operation"
    INVALID_ARGUMENT = "invalid_argument"
    UPSTREAM_ERROR = "upstream_error"
    TRANSPORT_ERROR = "transport_error"
    INTERNAL_ERROR = "internal_error"


class DispatchError(Exception):
    """Base class for failures surfaced by the dispatcher."""
    kind: ErrorKind = ErrorKind.INTERNAL_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidArgument(DispatchError):
    """Arguments violate the operation's schema. Never sent upstream."""
    kind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, parameter: Optional[str], message: str):
        self.parameter = parameter
        super().__init__(message)


class UpstreamError(DispatchError):
    """Upstream answered with a non-2xx status."""
    kind = ErrorKind.UPSTREAM_ERROR

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.excerpt = (body or "")[:UPSTREAM_EXCERPT_LIMIT]
        super().__init__(f"API {status_code}: {self.excerpt}")


class TransportError(DispatchError):
    """Upstream could not be reached (DNS, refused connection, timeout)."""
    kind = ErrorKind.TRANSPORT_ERROR

    def __init__(self, cause: str):
        self.cause = cause
        super().__init__(f"Transport error: {cause}")


class InternalError(DispatchError):
    """Anything else that went wrong while building or parsing."""
    kind = ErrorKind.INTERNAL_ERROR
