"""Request descriptor construction.

Interprets an operation's mapping rule: each validated argument goes to the
query string, a path segment, the JSON body or the raw body, and the effective
credential goes wherever the operation's family expects it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import quote, urlencode, urlparse

from ..registry.operation_registry import (
    BODY_METHODS,
    PATH_PLACEHOLDER,
    CredentialPlacement,
    Destination,
    OperationDescriptor,
)


@dataclass(frozen=True)
class RequestDescriptor:
    """One outgoing HTTP request. Built per invocation, never reused.

    Headers, query params and bodies are left out of ``repr`` since they can
    carry credentials.
    """
    method: str
    url: str
    params: Dict[str, str] = field(default_factory=dict, repr=False)
    headers: Dict[str, str] = field(default_factory=dict, repr=False)
    json_body: Optional[Dict[str, Any]] = field(default=None, repr=False)
    content: Optional[str] = field(default=None, repr=False)

    @property
    def path(self) -> str:
        return urlparse(self.url).path

    @property
    def full_url(self) -> str:
        if not self.params:
            return self.url
        return f"{self.url}?{urlencode(self.params)}"


def build_request(
    operation: OperationDescriptor,
    arguments: Dict[str, Any],
    api_base: str,
    user_agent: str,
    token: Optional[str] = None,
) -> RequestDescriptor:
    """Build the request descriptor for a validated call.

    Args:
        operation: Operation being invoked
        arguments: Normalized arguments (output of validate_arguments)
        api_base: Upstream origin
        user_agent: Client identifier header value
        token: Effective credential, if any

    Returns:
        RequestDescriptor ready to execute
    """
    path = PATH_PLACEHOLDER.sub(
        lambda m: _path_segment(arguments[m.group(1)]),
        operation.path,
    )

    params: Dict[str, str] = {}
    for param in operation.parameters_for(Destination.QUERY):
        if param.name in arguments:
            params[param.name] = _query_value(arguments[param.name])

    headers = {
        "User-Agent": user_agent,
        "Accept": "application/json",
    }

    json_body = None
    content = None
    if operation.method in BODY_METHODS:
        body = {
            p.name: arguments[p.name]
            for p in operation.parameters_for(Destination.BODY)
            if p.name in arguments
        }
        if body:
            json_body = body
            headers["Content-Type"] = "application/json"

        for param in operation.parameters_for(Destination.RAW_BODY):
            if param.name in arguments:
                content = str(arguments[param.name])
                headers["Content-Type"] = "text/plain; charset=utf-8"

    if token and operation.credential:
        binding = operation.credential
        if binding.placement == CredentialPlacement.HEADER:
            headers[binding.field_name] = binding.render(token)
        else:
            params[binding.field_name] = binding.render(token)

    return RequestDescriptor(
        method=operation.method,
        url=f"{api_base.rstrip('/')}{path}",
        params=params,
        headers=headers,
        json_body=json_body,
        content=content,
    )


def _path_segment(value: Any) -> str:
    segment = quote(str(value), safe="")
    # "." and ".." survive quote() and would be resolved as dot segments
    if segment in (".", ".."):
        segment = segment.replace(".", "%2E")
    return segment


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(value)
    return str(value)
