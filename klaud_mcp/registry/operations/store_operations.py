"""
Key-value store operation registrations.

Stores are created anonymously and return a token; every other call carries
that token in the ``X-Store-Token`` header. Keys are path segments and are
percent-encoded, so keys containing '/' or spaces are safe.
"""

import logging
from typing import Optional

from ..operation_registry import (
    CredentialKind,
    CredentialPlacement,
    CredentialSpec,
    Destination,
    OperationCategory,
    OperationDescriptor,
    OperationRegistry,
    ParameterSpec,
    ParamType,
    get_operation_registry,
)

logger = logging.getLogger(__name__)

MAX_KEY_LENGTH = 512
MAX_VALUE_LENGTH = 65536

STORE_CREDENTIAL = CredentialSpec(
    kind=CredentialKind.STORE,
    placement=CredentialPlacement.HEADER,
    field_name="X-Store-Token",
)

STORE_TOKEN_PARAM = ParameterSpec(
    name="token",
    type=ParamType.STRING,
    destination=Destination.CREDENTIAL,
    description="Store token (overrides KLAUD_KV_TOKEN)",
)

KEY_PARAM = ParameterSpec(
    name="key",
    type=ParamType.STRING,
    destination=Destination.PATH,
    description="Key name",
    required=True,
    max_length=MAX_KEY_LENGTH,
)


KV_CREATE_STORE = OperationDescriptor(
    name="kv_create_store",
    category=OperationCategory.STORE,
    description="Create a new key-value store and return its access token",
    method="POST",
    path="/api/kv",
    parameters=(
        ParameterSpec(
            name="name",
            type=ParamType.STRING,
            destination=Destination.BODY,
            description="Optional human-readable store name",
            max_length=128,
        ),
    ),
)

KV_GET = OperationDescriptor(
    name="kv_get",
    category=OperationCategory.STORE,
    description="Read the value stored under a key",
    method="GET",
    path="/api/kv/{key}",
    parameters=(KEY_PARAM, STORE_TOKEN_PARAM),
    credential=STORE_CREDENTIAL,
)

KV_SET = OperationDescriptor(
    name="kv_set",
    category=OperationCategory.STORE,
    description="Write a value under a key (creates or overwrites)",
    method="PUT",
    path="/api/kv/{key}",
    parameters=(
        KEY_PARAM,
        ParameterSpec(
            name="value",
            type=ParamType.STRING,
            destination=Destination.RAW_BODY,
            description="Value to store (sent as the raw request body)",
            required=True,
            max_length=MAX_VALUE_LENGTH,
        ),
        STORE_TOKEN_PARAM,
    ),
    credential=STORE_CREDENTIAL,
)

KV_LIST = OperationDescriptor(
    name="kv_list",
    category=OperationCategory.STORE,
    description="List keys in the store, optionally filtered by prefix",
    method="GET",
    path="/api/kv",
    parameters=(
        ParameterSpec(
            name="prefix",
            type=ParamType.STRING,
            destination=Destination.QUERY,
            description="Only return keys starting with this prefix",
            max_length=MAX_KEY_LENGTH,
        ),
        ParameterSpec(
            name="limit",
            type=ParamType.INTEGER,
            destination=Destination.QUERY,
            description="Maximum number of keys to return",
            minimum=1,
            maximum=1000,
            default=100,
        ),
        STORE_TOKEN_PARAM,
    ),
    credential=STORE_CREDENTIAL,
)

STORE_OPERATIONS = [
    KV_CREATE_STORE,
    KV_GET,
    KV_SET,
    KV_LIST,
]


def register_store_operations(registry: Optional[OperationRegistry] = None):
    """Register all key-value store operations with the registry."""
    registry = registry if registry is not None else get_operation_registry()
    registry.register_all(STORE_OPERATIONS)
    logger.debug(f"Registered {len(STORE_OPERATIONS)} store operations")
