"""
Tests for OperationRegistry and the registered catalog.

Tests cover:
1. resolve() on known and unknown names
2. Duplicate and malformed descriptor rejection
3. list_operations() laziness, restartability and category filtering
4. JSON Schema generation for tool listing
5. Catalog-wide consistency (every family registered, schemas well formed)
"""

import types

import pytest

from klaud_mcp.core.errors import DispatchError, ErrorKind
from klaud_mcp.registry import (
    CredentialKind,
    CredentialPlacement,
    CredentialSpec,
    Destination,
    InvalidOperationDescriptor,
    OperationAlreadyRegistered,
    OperationCategory,
    OperationDescriptor,
    OperationRegistry,
    ParameterSpec,
    ParamType,
    UnknownOperation,
    get_operation_registry,
    reset_operation_registry,
)
from klaud_mcp.registry.operations import create_registry, register_all_operations


# ============================================================================
# Test Fixtures
# ============================================================================

@pytest.fixture
def registry():
    """Fully populated registry."""
    return create_registry()


@pytest.fixture
def empty_registry():
    return OperationRegistry()


def _operation(name="demo_op", **overrides):
    fields = dict(
        name=name,
        category=OperationCategory.CONTENT,
        description="Demo operation",
        method="GET",
        path="/api/demo",
        parameters=(
            ParameterSpec(name="q", type=ParamType.STRING, destination=Destination.QUERY),
        ),
    )
    fields.update(overrides)
    return OperationDescriptor(**fields)


# ============================================================================
# Resolution
# ============================================================================

class TestResolve:
    """resolve() contract."""

    def test_unknown_name_raises(self, registry):
        with pytest.raises(UnknownOperation) as exc_info:
            registry.resolve("hn_top_stories")

        assert "hn_top_stories" in str(exc_info.value)
        assert exc_info.value.kind == ErrorKind.UNKNOWN_OPERATION
        assert isinstance(exc_info.value, DispatchError)

    def test_every_registered_name_resolves(self, registry):
        for name in registry.names():
            operation = registry.resolve(name)
            assert operation.name == name
            for required in operation.required_parameters:
                assert required
                assert required in operation.input_schema["properties"]

    def test_contains_and_exists(self, registry):
        assert "search_pubmed" in registry
        assert registry.exists("kv_set")
        assert not registry.exists("pubmed_search")


# ============================================================================
# Registration
# ============================================================================

class TestRegistration:
    """Registration-time validation."""

    def test_duplicate_name_rejected(self, empty_registry):
        empty_registry.register(_operation())

        with pytest.raises(OperationAlreadyRegistered):
            empty_registry.register(_operation())

    def test_missing_description_rejected(self, empty_registry):
        with pytest.raises(InvalidOperationDescriptor):
            empty_registry.register(_operation(description=""))

    def test_unsupported_method_rejected(self, empty_registry):
        with pytest.raises(InvalidOperationDescriptor):
            empty_registry.register(_operation(method="FETCH"))

    def test_path_placeholder_must_match_path_parameter(self, empty_registry):
        with pytest.raises(InvalidOperationDescriptor) as exc_info:
            empty_registry.register(_operation(path="/api/demo/{item}"))

        assert "item" in str(exc_info.value)

    def test_path_parameter_must_be_required(self, empty_registry):
        op = _operation(
            path="/api/demo/{item}",
            parameters=(
                ParameterSpec(name="item", type=ParamType.STRING, destination=Destination.PATH),
            ),
        )
        with pytest.raises(InvalidOperationDescriptor):
            empty_registry.register(op)

    def test_body_on_get_rejected(self, empty_registry):
        op = _operation(
            parameters=(
                ParameterSpec(name="q", type=ParamType.STRING, destination=Destination.BODY),
            ),
        )
        with pytest.raises(InvalidOperationDescriptor):
            empty_registry.register(op)

    def test_token_without_credential_binding_rejected(self, empty_registry):
        op = _operation(
            parameters=(
                ParameterSpec(name="token", type=ParamType.STRING, destination=Destination.CREDENTIAL),
            ),
        )
        with pytest.raises(InvalidOperationDescriptor):
            empty_registry.register(op)

    def test_enum_without_choices_rejected(self, empty_registry):
        op = _operation(
            parameters=(
                ParameterSpec(name="mode", type=ParamType.ENUM, destination=Destination.QUERY),
            ),
        )
        with pytest.raises(InvalidOperationDescriptor):
            empty_registry.register(op)

    def test_require_any_must_name_parameters(self, empty_registry):
        with pytest.raises(InvalidOperationDescriptor):
            empty_registry.register(_operation(require_any=("q", "missing")))

    def test_descriptors_are_immutable(self):
        op = _operation()
        with pytest.raises(AttributeError):
            op.name = "renamed"


# ============================================================================
# Listing
# ============================================================================

class TestListOperations:
    """Discovery via list_operations()."""

    def test_returns_lazy_generator(self, registry):
        assert isinstance(registry.list_operations(), types.GeneratorType)

    def test_restartable(self, registry):
        first = [op.name for op in registry.list_operations()]
        second = [op.name for op in registry.list_operations()]

        assert first == second
        assert len(first) == len(registry)

    def test_registration_order_preserved(self, registry):
        names = [op.name for op in registry.list_operations()]
        assert names[0] == "search_hackernews"
        assert names.index("kv_create_store") < names.index("msg_register_agent")

    def test_category_filter(self, registry):
        store_ops = [op.name for op in registry.list_operations(OperationCategory.STORE)]
        assert store_ops == ["kv_create_store", "kv_get", "kv_set", "kv_list"]

    def test_empty_registry_yields_nothing(self, empty_registry):
        assert list(empty_registry.list_operations()) == []


# ============================================================================
# Schemas
# ============================================================================

class TestSchemas:
    """JSON Schema rendering used for MCP tool listing."""

    def test_hackernews_schema(self, registry):
        schema = registry.resolve("search_hackernews").input_schema

        assert schema["type"] == "object"
        assert schema["required"] == []
        assert schema["properties"]["category"]["enum"] == [
            "ai", "crypto", "dev", "science", "security", "all"
        ]
        assert schema["properties"]["category"]["default"] == "all"
        assert schema["properties"]["limit"] == {
            "type": "integer",
            "minimum": 1,
            "maximum": 30,
            "description": "Number of stories to return",
            "default": 10,
        }

    def test_url_and_length_constraints(self, registry):
        url_schema = registry.resolve("extract_url").input_schema["properties"]["url"]

        assert url_schema["format"] == "uri"
        assert url_schema["maxLength"] == 2048

    def test_string_array_schema(self, registry):
        caps = registry.resolve("registry_register").input_schema["properties"]["capabilities"]

        assert caps["type"] == "array"
        assert caps["items"] == {"type": "string"}
        assert caps["maxItems"] == 30

    def test_require_any_rendered_as_any_of(self, registry):
        schema = registry.resolve("search_drugs").input_schema

        assert schema["anyOf"] == [{"required": ["query"]}, {"required": ["target"]}]

    def test_undeclared_arguments_allowed(self, registry):
        for operation in registry.list_operations():
            assert operation.input_schema["additionalProperties"] is True

    def test_boolean_flag_schema(self, registry):
        flag = registry.resolve("msg_inbox").input_schema["properties"]["unread_only"]

        assert flag["type"] == "boolean"
        assert flag["default"] is False


# ============================================================================
# Catalog
# ============================================================================

class TestCatalog:
    """Consistency of the full catalog."""

    def test_every_family_registered(self, registry):
        families = {op.category for op in registry.list_operations()}
        assert families == set(OperationCategory)

    def test_expected_operation_count(self, registry):
        assert len(registry) == 31

    def test_credential_bindings(self, registry):
        assert registry.resolve("search_pubmed").credential == CredentialSpec(
            kind=CredentialKind.API_KEY,
            placement=CredentialPlacement.QUERY,
            field_name="key",
        )
        assert registry.resolve("kv_get").credential.field_name == "X-Store-Token"
        assert registry.resolve("msg_send").credential.prefix == "Bearer "
        assert registry.resolve("tasks_add_comment").credential.kind == CredentialKind.MESSAGING
        assert registry.resolve("kv_create_store").credential is None
        assert registry.resolve("msg_register_agent").credential is None

    def test_methods_by_intent(self, registry):
        assert registry.resolve("tasks_update_task").method == "PATCH"
        assert registry.resolve("msg_send").method == "POST"
        assert all(
            op.method == "GET"
            for op in registry.list_operations(OperationCategory.CONTENT)
        )


class TestSingleton:
    """Process-wide registry helpers."""

    def test_register_all_populates_singleton(self):
        reset_operation_registry()
        try:
            register_all_operations()
            assert len(get_operation_registry()) == 31
        finally:
            reset_operation_registry()

    def test_reset_gives_fresh_instance(self):
        first = get_operation_registry()
        reset_operation_registry()
        assert get_operation_registry() is not first
        reset_operation_registry()
