"""
Capability registry operation registrations.

Agents publish what they can do and discover each other by capability.
"""

import logging
from typing import Optional

from ..operation_registry import (
    Destination,
    OperationCategory,
    OperationDescriptor,
    OperationRegistry,
    ParameterSpec,
    ParamType,
    get_operation_registry,
)
from .messaging_operations import AGENT_CREDENTIAL, AGENT_TOKEN_PARAM

logger = logging.getLogger(__name__)


REGISTRY_REGISTER = OperationDescriptor(
    name="registry_register",
    category=OperationCategory.REGISTRY,
    description="Publish this agent's capabilities to the registry",
    method="POST",
    path="/api/registry",
    parameters=(
        ParameterSpec(
            name="name",
            type=ParamType.STRING,
            destination=Destination.BODY,
            description="Agent display name",
            required=True,
            max_length=128,
        ),
        ParameterSpec(
            name="description",
            type=ParamType.STRING,
            destination=Destination.BODY,
            description="What the agent offers",
            required=True,
            max_length=2048,
        ),
        ParameterSpec(
            name="capabilities",
            type=ParamType.STRING_ARRAY,
            destination=Destination.BODY,
            description="Capability tags (e.g. ['summarize', 'translate'])",
            required=True,
            max_items=30,
        ),
        ParameterSpec(
            name="endpoint",
            type=ParamType.URL,
            destination=Destination.BODY,
            description="Optional public endpoint where the agent can be reached",
            max_length=2048,
        ),
        AGENT_TOKEN_PARAM,
    ),
    credential=AGENT_CREDENTIAL,
)

REGISTRY_SEARCH = OperationDescriptor(
    name="registry_search",
    category=OperationCategory.REGISTRY,
    description="Search registered agents by free text or capability",
    method="GET",
    path="/api/registry/search",
    parameters=(
        ParameterSpec(
            name="query",
            type=ParamType.STRING,
            destination=Destination.QUERY,
            description="Free-text search",
            max_length=2048,
        ),
        ParameterSpec(
            name="capability",
            type=ParamType.STRING,
            destination=Destination.QUERY,
            description="Exact capability tag to match",
            max_length=128,
        ),
        ParameterSpec(
            name="limit",
            type=ParamType.INTEGER,
            destination=Destination.QUERY,
            description="Maximum number of agents to return",
            minimum=1,
            maximum=50,
            default=10,
        ),
        AGENT_TOKEN_PARAM,
    ),
    credential=AGENT_CREDENTIAL,
)

REGISTRY_GET = OperationDescriptor(
    name="registry_get",
    category=OperationCategory.REGISTRY,
    description="Get one registry entry by agent id",
    method="GET",
    path="/api/registry/{agent_id}",
    parameters=(
        ParameterSpec(
            name="agent_id",
            type=ParamType.STRING,
            destination=Destination.PATH,
            description="Registry entry id",
            required=True,
            max_length=128,
        ),
        AGENT_TOKEN_PARAM,
    ),
    credential=AGENT_CREDENTIAL,
)

REGISTRY_LIST_MINE = OperationDescriptor(
    name="registry_list_mine",
    category=OperationCategory.REGISTRY,
    description="List registry entries owned by this agent",
    method="GET",
    path="/api/registry/mine",
    parameters=(AGENT_TOKEN_PARAM,),
    credential=AGENT_CREDENTIAL,
)

AGENT_REGISTRY_OPERATIONS = [
    REGISTRY_REGISTER,
    REGISTRY_SEARCH,
    REGISTRY_GET,
    REGISTRY_LIST_MINE,
]


def register_agent_registry_operations(registry: Optional[OperationRegistry] = None):
    """Register all capability registry operations with the registry."""
    registry = registry if registry is not None else get_operation_registry()
    registry.register_all(AGENT_REGISTRY_OPERATIONS)
    logger.debug(f"Registered {len(AGENT_REGISTRY_OPERATIONS)} capability registry operations")
