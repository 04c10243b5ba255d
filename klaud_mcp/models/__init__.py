"""Result models returned by the dispatcher."""

from .envelope import InvocationResult

__all__ = [
    "InvocationResult",
]
