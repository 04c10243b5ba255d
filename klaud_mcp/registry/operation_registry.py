"""
Operation Registry - Typed catalog of upstream API operations.

Each operation is plain data: a parameter schema plus a mapping rule that says
where every parameter goes in the outgoing HTTP request. A single generic
executor (see ``klaud_mcp.core.dispatcher``) interprets the descriptors.

Provides:
- Immutable operation descriptors with JSON schemas for tool discovery
- Parameter destinations (query, path, body, raw body, credential)
- Credential bindings per resource family
- Lookup, listing and documentation helpers
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..core.errors import DispatchError, ErrorKind

logger = logging.getLogger(__name__)

# Type aliases
JSONSchema = Dict[str, Any]

PATH_PLACEHOLDER = re.compile(r"\{([a-zA-Z_][a-zA-Z0-9_]*)\}")
_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


# ============================================================================
# Enums
# ============================================================================

class OperationCategory(Enum):
    """Resource families exposed by the upstream API."""
    CONTENT = "content"       # news, literature, prices, extraction
    STORE = "store"           # key-value store
    MESSAGING = "messaging"   # agent mailbox and channels
    REGISTRY = "registry"     # capability registry
    TASKS = "tasks"           # projects, tasks, comments


class ParamType(Enum):
    """Semantic parameter types."""
    STRING = "string"
    ENUM = "enum"
    INTEGER = "integer"
    STRING_ARRAY = "string_array"
    URL = "url"
    BOOLEAN = "boolean"


class Destination(Enum):
    """Where a parameter lands in the outgoing request."""
    QUERY = "query"
    PATH = "path"
    BODY = "body"             # field of the JSON body
    RAW_BODY = "raw_body"     # the whole request body, sent as text
    CREDENTIAL = "credential"  # per-call token, attached per CredentialSpec


class CredentialKind(Enum):
    """Credential scopes understood by the upstream."""
    API_KEY = "api_key"
    STORE = "store"
    MESSAGING = "messaging"


class CredentialPlacement(Enum):
    HEADER = "header"
    QUERY = "query"


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class CredentialSpec:
    """How a family attaches its token to outgoing requests."""
    kind: CredentialKind
    placement: CredentialPlacement
    field_name: str               # header or query parameter name
    prefix: str = ""              # e.g. "Bearer "

    def render(self, token: str) -> str:
        return f"{self.prefix}{token}"


@dataclass(frozen=True)
class ParameterSpec:
    """
    Describes one operation parameter.

    Constraints are optional and only meaningful for the matching type:
    ``choices`` for ENUM, ``minimum``/``maximum`` for INTEGER,
    ``max_length`` for STRING/URL, ``max_items`` for STRING_ARRAY.
    """
    name: str
    type: ParamType
    destination: Destination
    description: str = ""
    required: bool = False
    default: Any = None
    choices: Tuple[str, ...] = ()
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    max_length: Optional[int] = None
    max_items: Optional[int] = None

    def json_schema(self) -> JSONSchema:
        """Render this parameter as a JSON Schema property."""
        if self.type == ParamType.INTEGER:
            schema: JSONSchema = {"type": "integer"}
            if self.minimum is not None:
                schema["minimum"] = self.minimum
            if self.maximum is not None:
                schema["maximum"] = self.maximum
        elif self.type == ParamType.BOOLEAN:
            schema = {"type": "boolean"}
        elif self.type == ParamType.STRING_ARRAY:
            schema = {"type": "array", "items": {"type": "string"}}
            if self.max_items is not None:
                schema["maxItems"] = self.max_items
        else:
            schema = {"type": "string"}
            if self.type == ParamType.ENUM:
                schema["enum"] = list(self.choices)
            if self.type == ParamType.URL:
                schema["format"] = "uri"
            if self.max_length is not None:
                schema["maxLength"] = self.max_length

        if self.description:
            schema["description"] = self.description
        if self.default is not None:
            schema["default"] = self.default
        return schema


@dataclass(frozen=True)
class OperationDescriptor:
    """
    Describes one upstream operation for the registry.

    Immutable after construction; the dispatcher never mutates descriptors.
    """
    name: str                          # Tool identifier (e.g., "search_pubmed")
    category: OperationCategory
    description: str                   # One-line, caller-facing
    method: str                        # GET, POST, PUT, PATCH
    path: str                          # Path template, e.g. "/api/kv/{key}"
    parameters: Tuple[ParameterSpec, ...] = ()
    credential: Optional[CredentialSpec] = None
    require_any: Tuple[str, ...] = ()  # at least one of these must be present

    def parameter(self, name: str) -> Optional[ParameterSpec]:
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def parameters_for(self, destination: Destination) -> List[ParameterSpec]:
        return [p for p in self.parameters if p.destination == destination]

    @property
    def required_parameters(self) -> List[str]:
        return [p.name for p in self.parameters if p.required]

    @property
    def input_schema(self) -> JSONSchema:
        """JSON Schema for the operation's arguments (used for tool listing)."""
        schema: JSONSchema = {
            "type": "object",
            "properties": {p.name: p.json_schema() for p in self.parameters},
            "required": self.required_parameters,
            "additionalProperties": True,
        }
        if self.require_any:
            schema["anyOf"] = [{"required": [name]} for name in self.require_any]
        return schema


# ============================================================================
# Exceptions
# ============================================================================

class OperationRegistryError(Exception):
    """Base exception for registry errors."""
    pass


class UnknownOperation(OperationRegistryError, DispatchError):
    """Operation not found in registry."""
    kind = ErrorKind.UNKNOWN_OPERATION

    def __init__(self, name: str):
        self.operation_name = name
        super().__init__(f"Unknown operation: '{name}'")


class OperationAlreadyRegistered(OperationRegistryError):
    """Operation already registered."""
    pass


class InvalidOperationDescriptor(OperationRegistryError):
    """Invalid operation descriptor."""
    pass


# ============================================================================
# Operation Registry
# ============================================================================

class OperationRegistry:
    """
    Central registry for upstream operations.

    Populated once at startup and read-only afterwards.
    """

    def __init__(self):
        """Initialize registry."""
        self._operations: Dict[str, OperationDescriptor] = {}
        self._category_index: Dict[OperationCategory, List[str]] = {}

        logger.debug("OperationRegistry initialized")

    # ========================================================================
    # Registration
    # ========================================================================

    def register(self, operation: OperationDescriptor) -> None:
        """
        Register a new operation.

        Args:
            operation: Operation descriptor to register

        Raises:
            OperationAlreadyRegistered: If operation name already exists
            InvalidOperationDescriptor: If descriptor validation fails
        """
        self._validate_descriptor(operation)

        if operation.name in self._operations:
            raise OperationAlreadyRegistered(
                f"Operation '{operation.name}' already registered"
            )

        self._operations[operation.name] = operation
        self._category_index.setdefault(operation.category, []).append(operation.name)

        logger.debug(
            f"Registered operation: {operation.name} "
            f"({operation.method} {operation.path}, category: {operation.category.value})"
        )

    def register_all(self, operations: List[OperationDescriptor]) -> None:
        """
        Register multiple operations at once.

        Args:
            operations: List of operation descriptors to register
        """
        for operation in operations:
            self.register(operation)

    # ========================================================================
    # Retrieval
    # ========================================================================

    def resolve(self, name: str) -> OperationDescriptor:
        """
        Retrieve an operation by name.

        Raises:
            UnknownOperation: If operation doesn't exist
        """
        try:
            return self._operations[name]
        except KeyError:
            raise UnknownOperation(name) from None

    def list_operations(
        self,
        category: Optional[OperationCategory] = None
    ) -> Iterator[OperationDescriptor]:
        """
        Iterate over registered operations in registration order.

        Each call returns a fresh generator, so discovery can be repeated.

        Args:
            category: Filter by resource family
        """
        names = self._category_index.get(category, []) if category else list(self._operations)
        for name in names:
            yield self._operations[name]

    def names(self) -> List[str]:
        return list(self._operations)

    def exists(self, name: str) -> bool:
        """Check if operation exists."""
        return name in self._operations

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def __len__(self) -> int:
        return len(self._operations)

    # ========================================================================
    # Internal Helpers
    # ========================================================================

    def _validate_descriptor(self, operation: OperationDescriptor) -> None:
        """
        Validate operation descriptor.

        Raises:
            InvalidOperationDescriptor: If validation fails
        """
        if not operation.name:
            raise InvalidOperationDescriptor("Operation name is required")

        if not operation.description:
            raise InvalidOperationDescriptor(
                f"Operation '{operation.name}' has no description"
            )

        if operation.method not in _METHODS:
            raise InvalidOperationDescriptor(
                f"Operation '{operation.name}' has unsupported method: {operation.method}"
            )

        if not operation.path.startswith("/"):
            raise InvalidOperationDescriptor(
                f"Operation '{operation.name}' path must start with '/': {operation.path}"
            )

        names = [p.name for p in operation.parameters]
        duplicates = {n for n in names if names.count(n) > 1}
        if duplicates:
            raise InvalidOperationDescriptor(
                f"Operation '{operation.name}' declares duplicate parameters: {sorted(duplicates)}"
            )

        placeholders = set(PATH_PLACEHOLDER.findall(operation.path))
        path_params = {p.name for p in operation.parameters_for(Destination.PATH)}
        if placeholders != path_params:
            raise InvalidOperationDescriptor(
                f"Operation '{operation.name}' path placeholders {sorted(placeholders)} "
                f"do not match path parameters {sorted(path_params)}"
            )
        for param in operation.parameters_for(Destination.PATH):
            if not param.required:
                raise InvalidOperationDescriptor(
                    f"Path parameter '{param.name}' of '{operation.name}' must be required"
                )

        body_params = (
            operation.parameters_for(Destination.BODY)
            + operation.parameters_for(Destination.RAW_BODY)
        )
        if body_params and operation.method not in BODY_METHODS:
            raise InvalidOperationDescriptor(
                f"Operation '{operation.name}' sends a body with {operation.method}"
            )

        if operation.parameters_for(Destination.RAW_BODY) and operation.parameters_for(Destination.BODY):
            raise InvalidOperationDescriptor(
                f"Operation '{operation.name}' mixes raw body and JSON body parameters"
            )

        if len(operation.parameters_for(Destination.RAW_BODY)) > 1:
            raise InvalidOperationDescriptor(
                f"Operation '{operation.name}' declares more than one raw body parameter"
            )

        if operation.parameters_for(Destination.CREDENTIAL) and operation.credential is None:
            raise InvalidOperationDescriptor(
                f"Operation '{operation.name}' takes a token but has no credential binding"
            )

        for name in operation.require_any:
            if name not in names:
                raise InvalidOperationDescriptor(
                    f"Operation '{operation.name}' require_any names unknown parameter '{name}'"
                )

        for param in operation.parameters:
            if param.type == ParamType.ENUM and not param.choices:
                raise InvalidOperationDescriptor(
                    f"Enum parameter '{param.name}' of '{operation.name}' has no choices"
                )


# ============================================================================
# Singleton
# ============================================================================

_registry_instance: Optional[OperationRegistry] = None


def get_operation_registry() -> OperationRegistry:
    """
    Get singleton instance of operation registry.

    Returns:
        OperationRegistry singleton
    """
    global _registry_instance

    if _registry_instance is None:
        _registry_instance = OperationRegistry()

    return _registry_instance


def reset_operation_registry() -> None:
    """Reset singleton (for testing)."""
    global _registry_instance
    _registry_instance = None
