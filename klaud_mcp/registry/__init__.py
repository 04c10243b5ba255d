"""
Operation Registry for klaud-api-mcp.

Provides the typed, discoverable catalog of upstream operations.
"""

from .operation_registry import (
    CredentialKind,
    CredentialPlacement,
    CredentialSpec,
    Destination,
    OperationCategory,
    OperationDescriptor,
    OperationRegistry,
    ParameterSpec,
    ParamType,
    # Exceptions
    InvalidOperationDescriptor,
    OperationAlreadyRegistered,
    OperationRegistryError,
    UnknownOperation,
    # Singleton
    get_operation_registry,
    reset_operation_registry,
)

__all__ = [
    'CredentialKind',
    'CredentialPlacement',
    'CredentialSpec',
    'Destination',
    'OperationCategory',
    'OperationDescriptor',
    'OperationRegistry',
    'ParameterSpec',
    'ParamType',
    # Exceptions
    'InvalidOperationDescriptor',
    'OperationAlreadyRegistered',
    'OperationRegistryError',
    'UnknownOperation',
    # Singleton
    'get_operation_registry',
    'reset_operation_registry',
]
