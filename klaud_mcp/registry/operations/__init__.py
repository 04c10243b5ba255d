"""
Operation registrations for klaud-api-mcp.

One module per upstream resource family.
"""

import logging
from typing import Optional

from ..operation_registry import OperationRegistry, get_operation_registry
from .agent_registry_operations import register_agent_registry_operations
from .content_operations import register_content_operations
from .messaging_operations import register_messaging_operations
from .store_operations import register_store_operations
from .task_operations import register_task_operations

logger = logging.getLogger(__name__)


def register_all_operations(registry: Optional[OperationRegistry] = None) -> OperationRegistry:
    """Register every family with ``registry`` (default: the singleton)."""
    registry = registry if registry is not None else get_operation_registry()
    register_content_operations(registry)
    register_store_operations(registry)
    register_messaging_operations(registry)
    register_agent_registry_operations(registry)
    register_task_operations(registry)
    logger.info(f"Registered {len(registry)} operations")
    return registry


def create_registry() -> OperationRegistry:
    """Build a fresh, fully populated registry."""
    return register_all_operations(OperationRegistry())


__all__ = [
    'create_registry',
    'register_all_operations',
    'register_agent_registry_operations',
    'register_content_operations',
    'register_messaging_operations',
    'register_store_operations',
    'register_task_operations',
]
