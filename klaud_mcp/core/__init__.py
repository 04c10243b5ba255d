"""
Core Layer - request building and dispatch for the upstream API.

Modules:
- errors: error taxonomy shared by registry and dispatcher
- request_builder: turns an operation plus arguments into a RequestDescriptor
- dispatcher: validates, executes and wraps a single invocation
"""

from .errors import (
    DispatchError,
    ErrorKind,
    InternalError,
    InvalidArgument,
    TransportError,
    UpstreamError,
)

__all__ = [
    'DispatchError',
    'ErrorKind',
    'InternalError',
    'InvalidArgument',
    'TransportError',
    'UpstreamError',
]
