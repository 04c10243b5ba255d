"""
Tests for request descriptor construction.

Tests cover:
1. Query, path, JSON body and raw body destinations
2. Omission of empty optional values across the whole catalog
3. Percent-encoding of path segments
4. Credential placement and precedence
5. Descriptor independence between calls
"""

import pytest

from klaud_mcp.config.settings import Settings
from klaud_mcp.core.dispatcher import Dispatcher
from klaud_mcp.registry import CredentialKind, Destination, ParamType
from klaud_mcp.registry.operations import create_registry

API_BASE = "https://upstream.test"

REGISTRY = create_registry()


def _sample_value(param):
    """A value that passes validation for ``param``."""
    if param.type == ParamType.INTEGER:
        return param.minimum if param.minimum is not None else 1
    if param.type == ParamType.ENUM:
        return param.choices[0]
    if param.type == ParamType.BOOLEAN:
        return True
    if param.type == ParamType.URL:
        return "https://example.com"
    if param.type == ParamType.STRING_ARRAY:
        return ["x"]
    return "x"


def _minimal_arguments(operation):
    arguments = {p.name: _sample_value(p) for p in operation.parameters if p.required}
    if operation.require_any:
        first = operation.parameter(operation.require_any[0])
        arguments[first.name] = _sample_value(first)
    return arguments


def _optional_without_default():
    cases = []
    for operation in REGISTRY.list_operations():
        for param in operation.parameters:
            if param.required or param.default is not None:
                continue
            if param.destination == Destination.CREDENTIAL:
                continue
            if param.name in operation.require_any:
                continue
            cases.append((operation.name, param.name))
    return cases


@pytest.fixture
def dispatcher():
    return Dispatcher(Settings(api_base=API_BASE, environ={}), registry=REGISTRY)


@pytest.fixture
def env_dispatcher():
    environ = {
        "KLAUD_API_KEY": "env-key",
        "KLAUD_KV_TOKEN": "env-store",
        "KLAUD_MSG_TOKEN": "env-msg",
    }
    return Dispatcher(Settings(api_base=API_BASE, environ=environ), registry=REGISTRY)


# ============================================================================
# Destinations
# ============================================================================

class TestDestinations:
    """Each parameter lands where its mapping rule says."""

    def test_story_listing_query(self, dispatcher):
        request = dispatcher.build_request("search_hackernews", {"category": "ai", "limit": 3})

        assert request.method == "GET"
        assert request.url == f"{API_BASE}/api/hn"
        assert request.params == {"category": "ai", "limit": "3"}
        assert request.json_body is None
        assert request.content is None
        assert request.full_url == f"{API_BASE}/api/hn?category=ai&limit=3"

    def test_fixed_client_headers(self, dispatcher):
        request = dispatcher.build_request("search_hackernews", {})

        assert request.headers["User-Agent"] == "klaud-api-mcp/1.0"
        assert request.headers["Accept"] == "application/json"

    def test_kv_write_raw_body(self, dispatcher):
        request = dispatcher.build_request(
            "kv_set", {"key": "x", "value": "hello", "token": "tok123"}
        )

        assert request.method == "PUT"
        assert request.url == f"{API_BASE}/api/kv/x"
        assert request.headers["X-Store-Token"] == "tok123"
        assert request.content == "hello"
        assert request.json_body is None
        assert request.headers["Content-Type"].startswith("text/plain")
        assert request.params == {}

    def test_json_body_for_post(self, dispatcher):
        request = dispatcher.build_request(
            "msg_send", {"to": "bob", "content": "hi", "token": "t"}
        )

        assert request.method == "POST"
        assert request.json_body == {"to": "bob", "content": "hi"}
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Authorization"] == "Bearer t"

    def test_patch_sends_only_supplied_fields(self, dispatcher):
        request = dispatcher.build_request(
            "tasks_update_task", {"task_id": "t-1", "status": "done", "title": ""}
        )

        assert request.method == "PATCH"
        assert request.url == f"{API_BASE}/api/tasks/t-1"
        assert request.json_body == {"status": "done"}

    def test_post_without_body_fields(self, dispatcher):
        request = dispatcher.build_request("msg_join_channel", {"channel": "general"})

        assert request.url == f"{API_BASE}/api/channels/general/join"
        assert request.json_body is None
        assert "Content-Type" not in request.headers

    def test_body_defaults_included(self, dispatcher):
        request = dispatcher.build_request(
            "tasks_create_task", {"project_id": "p1", "title": "Write tests", "tags": ["qa"]}
        )

        assert request.json_body == {"title": "Write tests", "priority": "medium", "tags": ["qa"]}

    def test_array_query_values_comma_joined(self):
        from klaud_mcp.core.request_builder import _query_value

        assert _query_value(["a", "b"]) == "a,b"
        assert _query_value(7) == "7"
        assert _query_value(True) == "true"
        assert _query_value(False) == "false"

    def test_boolean_flag_in_query(self, dispatcher):
        default = dispatcher.build_request("msg_inbox", {})
        unread = dispatcher.build_request("msg_inbox", {"unread_only": True})

        assert default.params["unread_only"] == "false"
        assert unread.params["unread_only"] == "true"

    @pytest.mark.parametrize("key,encoded", [
        ("a/b", "a%2Fb"),
        ("with space", "with%20space"),
        ("q?x=1#frag", "q%3Fx%3D1%23frag"),
        ("ünï", "%C3%BCn%C3%AF"),
        (".", "%2E"),
        ("..", "%2E%2E"),
        ("...", "..."),
        ("a..b", "a..b"),
    ])
    def test_path_segments_percent_encoded(self, dispatcher, key, encoded):
        request = dispatcher.build_request("kv_get", {"key": key})

        assert request.url == f"{API_BASE}/api/kv/{encoded}"
        assert request.path == f"/api/kv/{encoded}"


# ============================================================================
# Empty values
# ============================================================================

class TestEmptyOmission:
    """Optional values that are None or "" never reach the request."""

    @pytest.mark.parametrize("operation_name,param_name", _optional_without_default())
    @pytest.mark.parametrize("empty", [None, ""])
    def test_empty_optional_omitted(self, dispatcher, operation_name, param_name, empty):
        operation = REGISTRY.resolve(operation_name)
        arguments = _minimal_arguments(operation)
        arguments[param_name] = empty

        request = dispatcher.build_request(operation_name, arguments)

        assert param_name not in request.params
        assert param_name not in (request.json_body or {})

    def test_drug_search_with_target_only(self, dispatcher):
        request = dispatcher.build_request("search_drugs", {"query": "", "target": "EGFR"})

        assert request.params == {"target": "EGFR"}


# ============================================================================
# Credentials
# ============================================================================

class TestCredentials:
    """Credential attachment and precedence."""

    def test_no_credential_configured(self, dispatcher):
        request = dispatcher.build_request("search_pubmed", {"query": "CRISPR"})

        assert "key" not in request.params

    def test_environment_api_key_as_query(self, env_dispatcher):
        request = env_dispatcher.build_request("search_pubmed", {"query": "CRISPR"})

        assert request.params["key"] == "env-key"

    def test_call_argument_beats_environment(self, env_dispatcher):
        request = env_dispatcher.build_request(
            "search_pubmed", {"query": "CRISPR", "api_key": "call-key"}
        )

        assert request.params["key"] == "call-key"
        assert "api_key" not in request.params

    def test_store_token_precedence(self, env_dispatcher):
        from_env = env_dispatcher.build_request("kv_get", {"key": "x"})
        from_call = env_dispatcher.build_request("kv_get", {"key": "x", "token": "call-store"})

        assert from_env.headers["X-Store-Token"] == "env-store"
        assert from_call.headers["X-Store-Token"] == "call-store"

    def test_overrides_beat_environment(self, env_dispatcher):
        request = env_dispatcher.build_request(
            "msg_inbox", {}, credential_overrides={CredentialKind.MESSAGING: "override"}
        )

        assert request.headers["Authorization"] == "Bearer override"

    def test_overrides_accept_string_keys(self, env_dispatcher):
        request = env_dispatcher.build_request(
            "kv_list", {}, credential_overrides={"store": "override"}
        )

        assert request.headers["X-Store-Token"] == "override"

    def test_call_argument_beats_overrides(self, env_dispatcher):
        request = env_dispatcher.build_request(
            "tasks_list_projects",
            {"token": "call"},
            credential_overrides={CredentialKind.MESSAGING: "override"},
        )

        assert request.headers["Authorization"] == "Bearer call"

    def test_empty_token_argument_falls_back(self, env_dispatcher):
        request = env_dispatcher.build_request("registry_list_mine", {"token": ""})

        assert request.headers["Authorization"] == "Bearer env-msg"

    def test_unauthenticated_operation_never_gets_token(self, env_dispatcher):
        request = env_dispatcher.build_request("kv_create_store", {"name": "scratch"})

        assert "X-Store-Token" not in request.headers
        assert "Authorization" not in request.headers
        assert request.json_body == {"name": "scratch"}

    def test_credentials_hidden_from_repr(self, env_dispatcher):
        request = env_dispatcher.build_request("kv_set", {"key": "x", "value": "v", "token": "secret"})

        assert "secret" not in repr(request)

    def test_environment_read_on_every_call(self):
        environ = {}
        dispatcher = Dispatcher(Settings(api_base=API_BASE, environ=environ), registry=REGISTRY)

        before = dispatcher.build_request("kv_get", {"key": "x"})
        environ["KLAUD_KV_TOKEN"] = "late"
        after = dispatcher.build_request("kv_get", {"key": "x"})

        assert "X-Store-Token" not in before.headers
        assert after.headers["X-Store-Token"] == "late"


class TestIndependence:
    """No hidden state affects request shape."""

    def test_same_arguments_same_shape(self, env_dispatcher):
        arguments = {"query": "LLM agents", "limit": 4}

        first = env_dispatcher.build_request("search_arxiv", arguments)
        second = env_dispatcher.build_request("search_arxiv", arguments)

        assert first is not second
        assert first == second
        assert first.headers is not second.headers
        assert arguments == {"query": "LLM agents", "limit": 4}
