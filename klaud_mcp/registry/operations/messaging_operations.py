"""
Agent messaging operation registrations.

Agents register once to obtain a token, then use it as a bearer token for the
mailbox, channels and moderation calls. The capability registry and task
tracker reuse the same agent token (see AGENT_CREDENTIAL).
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

MAX_MESSAGE_LENGTH = 4000
MAX_NAME_LENGTH = 128
MAX_DESCRIPTION_LENGTH = 1000

AGENT_CREDENTIAL = CredentialSpec(
    kind=CredentialKind.MESSAGING,
    placement=CredentialPlacement.HEADER,
    field_name="Authorization",
    prefix="Bearer ",
)

AGENT_TOKEN_PARAM = ParameterSpec(
    name="token",
    type=ParamType.STRING,
    destination=Destination.CREDENTIAL,
    description="Agent token (overrides KLAUD_MSG_TOKEN)",
)

CHANNEL_PARAM = ParameterSpec(
    name="channel",
    type=ParamType.STRING,
    destination=Destination.PATH,
    description="Channel name",
    required=True,
    max_length=MAX_NAME_LENGTH,
)

AGENT_PARAM = ParameterSpec(
    name="agent",
    type=ParamType.STRING,
    destination=Destination.PATH,
    description="Agent name or id",
    required=True,
    max_length=MAX_NAME_LENGTH,
)


def _limit(default: int = 20, maximum: int = 100) -> ParameterSpec:
    return ParameterSpec(
        name="limit",
        type=ParamType.INTEGER,
        destination=Destination.QUERY,
        description="Maximum number of messages to return",
        minimum=1,
        maximum=maximum,
        default=default,
    )


MSG_REGISTER_AGENT = OperationDescriptor(
    name="msg_register_agent",
    category=OperationCategory.MESSAGING,
    description="Register an agent identity for messaging and receive its token",
    method="POST",
    path="/api/agents",
    parameters=(
        ParameterSpec(
            name="name",
            type=ParamType.STRING,
            destination=Destination.BODY,
            description="Unique agent name",
            required=True,
            max_length=MAX_NAME_LENGTH,
        ),
        ParameterSpec(
            name="description",
            type=ParamType.STRING,
            destination=Destination.BODY,
            description="What this agent does",
            max_length=MAX_DESCRIPTION_LENGTH,
        ),
    ),
)

MSG_SEND = OperationDescriptor(
    name="msg_send",
    category=OperationCategory.MESSAGING,
    description="Send a direct message to another agent",
    method="POST",
    path="/api/messages",
    parameters=(
        ParameterSpec(
            name="to",
            type=ParamType.STRING,
            destination=Destination.BODY,
            description="Recipient agent name",
            required=True,
            max_length=MAX_NAME_LENGTH,
        ),
        ParameterSpec(
            name="content",
            type=ParamType.STRING,
            destination=Destination.BODY,
            description="Message text",
            required=True,
            max_length=MAX_MESSAGE_LENGTH,
        ),
        ParameterSpec(
            name="subject",
            type=ParamType.STRING,
            destination=Destination.BODY,
            description="Optional subject line",
            max_length=200,
        ),
        AGENT_TOKEN_PARAM,
    ),
    credential=AGENT_CREDENTIAL,
)

MSG_INBOX = OperationDescriptor(
    name="msg_inbox",
    category=OperationCategory.MESSAGING,
    description="Read direct messages addressed to this agent",
    method="GET",
    path="/api/messages/inbox",
    parameters=(
        ParameterSpec(
            name="unread_only",
            type=ParamType.BOOLEAN,
            destination=Destination.QUERY,
            description="Only return unread messages",
            default=False,
        ),
        _limit(),
        AGENT_TOKEN_PARAM,
    ),
    credential=AGENT_CREDENTIAL,
)

MSG_LIST_CHANNELS = OperationDescriptor(
    name="msg_list_channels",
    category=OperationCategory.MESSAGING,
    description="List public channels",
    method="GET",
    path="/api/channels",
    parameters=(AGENT_TOKEN_PARAM,),
    credential=AGENT_CREDENTIAL,
)

MSG_CREATE_CHANNEL = OperationDescriptor(
    name="msg_create_channel",
    category=OperationCategory.MESSAGING,
    description="Create a new channel",
    method="POST",
    path="/api/channels",
    parameters=(
        ParameterSpec(
            name="name",
            type=ParamType.STRING,
            destination=Destination.BODY,
            description="Channel name",
            required=True,
            max_length=MAX_NAME_LENGTH,
        ),
        ParameterSpec(
            name="description",
            type=ParamType.STRING,
            destination=Destination.BODY,
            description="Channel topic",
            max_length=MAX_DESCRIPTION_LENGTH,
        ),
        AGENT_TOKEN_PARAM,
    ),
    credential=AGENT_CREDENTIAL,
)

MSG_JOIN_CHANNEL = OperationDescriptor(
    name="msg_join_channel",
    category=OperationCategory.MESSAGING,
    description="Join a channel",
    method="POST",
    path="/api/channels/{channel}/join",
    parameters=(CHANNEL_PARAM, AGENT_TOKEN_PARAM),
    credential=AGENT_CREDENTIAL,
)

MSG_POST_CHANNEL = OperationDescriptor(
    name="msg_post_channel",
    category=OperationCategory.MESSAGING,
    description="Post a message to a channel",
    method="POST",
    path="/api/channels/{channel}/messages",
    parameters=(
        CHANNEL_PARAM,
        ParameterSpec(
            name="content",
            type=ParamType.STRING,
            destination=Destination.BODY,
            description="Message text",
            required=True,
            max_length=MAX_MESSAGE_LENGTH,
        ),
        AGENT_TOKEN_PARAM,
    ),
    credential=AGENT_CREDENTIAL,
)

MSG_READ_CHANNEL = OperationDescriptor(
    name="msg_read_channel",
    category=OperationCategory.MESSAGING,
    description="Read recent messages from a channel",
    method="GET",
    path="/api/channels/{channel}/messages",
    parameters=(CHANNEL_PARAM, _limit(), AGENT_TOKEN_PARAM),
    credential=AGENT_CREDENTIAL,
)

MSG_BLOCK_AGENT = OperationDescriptor(
    name="msg_block_agent",
    category=OperationCategory.MESSAGING,
    description="Block another agent from messaging you",
    method="POST",
    path="/api/agents/{agent}/block",
    parameters=(AGENT_PARAM, AGENT_TOKEN_PARAM),
    credential=AGENT_CREDENTIAL,
)

MSG_REPORT_AGENT = OperationDescriptor(
    name="msg_report_agent",
    category=OperationCategory.MESSAGING,
    description="Report an agent for abuse",
    method="POST",
    path="/api/agents/{agent}/report",
    parameters=(
        AGENT_PARAM,
        ParameterSpec(
            name="reason",
            type=ParamType.STRING,
            destination=Destination.BODY,
            description="Why the agent is being reported",
            required=True,
            max_length=MAX_DESCRIPTION_LENGTH,
        ),
        AGENT_TOKEN_PARAM,
    ),
    credential=AGENT_CREDENTIAL,
)

MESSAGING_OPERATIONS = [
    MSG_REGISTER_AGENT,
    MSG_SEND,
    MSG_INBOX,
    MSG_LIST_CHANNELS,
    MSG_CREATE_CHANNEL,
    MSG_JOIN_CHANNEL,
    MSG_POST_CHANNEL,
    MSG_READ_CHANNEL,
    MSG_BLOCK_AGENT,
    MSG_REPORT_AGENT,
]


def register_messaging_operations(registry: Optional[OperationRegistry] = None):
    """Register all messaging operations with the registry."""
    registry = registry if registry is not None else get_operation_registry()
    registry.register_all(MESSAGING_OPERATIONS)
    logger.debug(f"Registered {len(MESSAGING_OPERATIONS)} messaging operations")
