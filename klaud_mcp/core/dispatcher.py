"""
Dispatcher - executes one operation call end-to-end.

resolve -> validate -> pick credential -> build request -> one HTTP call -> wrap

``invoke`` never raises for a failed call: unknown operations, bad arguments,
upstream errors, network failures and unexpected bugs all come back as an
``InvocationResult`` with ``ok=False`` and an ``error_kind``.
"""

import logging
from typing import Any, Mapping, Optional, Union

import httpx

from ..config.settings import Settings
from ..models.envelope import InvocationResult
from ..registry.operation_registry import (
    CredentialKind,
    Destination,
    OperationDescriptor,
    OperationRegistry,
)
from ..registry.operations import create_registry
from ..validators.arguments import validate_arguments, validate_token
from .errors import DispatchError, InternalError, TransportError, UpstreamError
from .request_builder import RequestDescriptor, build_request

logger = logging.getLogger(__name__)

CredentialOverrides = Mapping[Union[CredentialKind, str], Optional[str]]


class Dispatcher:
    """Generic executor for registered operations.

    Args:
        settings: Upstream origin, client identifier and credential source
        registry: Operation catalog (default: a fresh registry with every family)
        client: HTTP client to use; one is created (and owned) if omitted
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: Optional[OperationRegistry] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or Settings.from_env()
        self.registry = registry if registry is not None else create_registry()
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        """Close the HTTP client if this dispatcher created it."""
        if self._owns_client:
            await self.client.aclose()

    # ========================================================================
    # Public API
    # ========================================================================

    async def invoke(
        self,
        operation_name: str,
        arguments: Optional[Mapping[str, Any]] = None,
        credential_overrides: Optional[CredentialOverrides] = None,
    ) -> InvocationResult:
        """
        Invoke an operation and return its envelope.

        Args:
            operation_name: Registered operation name
            arguments: Caller arguments, validated against the operation schema
            credential_overrides: Per-call tokens keyed by CredentialKind (or
                its value); used when the arguments carry no token

        Returns:
            InvocationResult, success or error; never raises for call failures
        """
        try:
            request = self.build_request(operation_name, arguments, credential_overrides)
            logger.info(f"Invoking {operation_name}: {request.method} {request.path}")
            status_code, data = await self._execute(request)
        except DispatchError as e:
            logger.warning(f"{operation_name} failed ({e.kind.value}): {e.message}")
            return InvocationResult.failure(operation_name, e)
        except Exception:
            logger.exception(f"Unexpected error while invoking {operation_name}")
            return InvocationResult.failure(
                operation_name,
                InternalError(f"Internal error while invoking '{operation_name}'")
            )

        return InvocationResult.success(operation_name, data, status_code=status_code)

    def build_request(
        self,
        operation_name: str,
        arguments: Optional[Mapping[str, Any]] = None,
        credential_overrides: Optional[CredentialOverrides] = None,
    ) -> RequestDescriptor:
        """
        Resolve, validate and build the request without sending it.

        Raises:
            UnknownOperation: If the operation is not registered
            InvalidArgument: If the arguments violate the schema
        """
        operation = self.registry.resolve(operation_name)
        normalized = validate_arguments(operation, arguments)
        token = self.resolve_credential(operation, normalized, credential_overrides)
        validate_token(operation, token)
        return build_request(
            operation,
            normalized,
            api_base=self.settings.api_base,
            user_agent=self.settings.user_agent,
            token=token,
        )

    def resolve_credential(
        self,
        operation: OperationDescriptor,
        arguments: Mapping[str, Any],
        credential_overrides: Optional[CredentialOverrides] = None,
    ) -> Optional[str]:
        """Pick the effective token: call argument, then override, then environment."""
        if operation.credential is None:
            return None

        for param in operation.parameters_for(Destination.CREDENTIAL):
            if arguments.get(param.name):
                return arguments[param.name]

        kind = operation.credential.kind
        if credential_overrides:
            override = credential_overrides.get(kind) or credential_overrides.get(kind.value)
            if override:
                return override

        return self.settings.credential(kind)

    # ========================================================================
    # Execution
    # ========================================================================

    async def _execute(self, request: RequestDescriptor):
        """Send the request once and return (status_code, parsed JSON)."""
        try:
            response = await self.client.request(
                request.method,
                request.url,
                params=request.params or None,
                headers=request.headers,
                json=request.json_body,
                content=request.content,
            )
        except httpx.TransportError as e:
            raise TransportError(_describe(e)) from e

        if not response.is_success:
            raise UpstreamError(response.status_code, response.text)

        if not response.content:
            return response.status_code, None

        try:
            return response.status_code, response.json()
        except ValueError as e:
            raise InternalError(
                f"Upstream returned invalid JSON (HTTP {response.status_code})"
            ) from e


def _describe(error: Exception) -> str:
    name = type(error).__name__
    # Protocol errors quote the offending request line or header value
    if isinstance(error, httpx.ProtocolError):
        return name
    detail = str(error)
    return f"{name}: {detail}" if detail else name
