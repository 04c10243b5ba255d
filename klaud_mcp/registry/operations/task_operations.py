"""
Task tracker operation registrations.

Projects contain tasks; tasks carry status, priority, assignee, tags and a
comment thread. Updates are partial (PATCH): only supplied fields change.
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

TASK_STATUSES = ("todo", "in_progress", "done", "blocked")
TASK_PRIORITIES = ("low", "medium", "high", "urgent")

PROJECT_ID_PARAM = ParameterSpec(
    name="project_id",
    type=ParamType.STRING,
    destination=Destination.PATH,
    description="Project id",
    required=True,
    max_length=128,
)

TASK_ID_PARAM = ParameterSpec(
    name="task_id",
    type=ParamType.STRING,
    destination=Destination.PATH,
    description="Task id",
    required=True,
    max_length=128,
)


def _text(name: str, description: str, required: bool = False, max_length: int = 2048,
          destination: Destination = Destination.BODY) -> ParameterSpec:
    return ParameterSpec(
        name=name,
        type=ParamType.STRING,
        destination=destination,
        description=description,
        required=required,
        max_length=max_length,
    )


TASKS_CREATE_PROJECT = OperationDescriptor(
    name="tasks_create_project",
    category=OperationCategory.TASKS,
    description="Create a project to group tasks",
    method="POST",
    path="/api/projects",
    parameters=(
        _text("name", "Project name", required=True, max_length=200),
        _text("description", "Project description"),
        AGENT_TOKEN_PARAM,
    ),
    credential=AGENT_CREDENTIAL,
)

TASKS_LIST_PROJECTS = OperationDescriptor(
    name="tasks_list_projects",
    category=OperationCategory.TASKS,
    description="List projects visible to this agent",
    method="GET",
    path="/api/projects",
    parameters=(AGENT_TOKEN_PARAM,),
    credential=AGENT_CREDENTIAL,
)

TASKS_CREATE_TASK = OperationDescriptor(
    name="tasks_create_task",
    category=OperationCategory.TASKS,
    description="Create a task in a project",
    method="POST",
    path="/api/projects/{project_id}/tasks",
    parameters=(
        PROJECT_ID_PARAM,
        _text("title", "Task title", required=True, max_length=200),
        _text("description", "Task details"),
        _text("assignee", "Agent the task is assigned to", max_length=128),
        ParameterSpec(
            name="priority",
            type=ParamType.ENUM,
            destination=Destination.BODY,
            description="Task priority",
            choices=TASK_PRIORITIES,
            default="medium",
        ),
        ParameterSpec(
            name="tags",
            type=ParamType.STRING_ARRAY,
            destination=Destination.BODY,
            description="Free-form labels",
            max_items=30,
        ),
        AGENT_TOKEN_PARAM,
    ),
    credential=AGENT_CREDENTIAL,
)

TASKS_LIST_TASKS = OperationDescriptor(
    name="tasks_list_tasks",
    category=OperationCategory.TASKS,
    description="List tasks in a project, optionally filtered by status or assignee",
    method="GET",
    path="/api/projects/{project_id}/tasks",
    parameters=(
        PROJECT_ID_PARAM,
        ParameterSpec(
            name="status",
            type=ParamType.ENUM,
            destination=Destination.QUERY,
            description="Only tasks in this status",
            choices=TASK_STATUSES,
        ),
        _text("assignee", "Only tasks assigned to this agent", max_length=128,
              destination=Destination.QUERY),
        AGENT_TOKEN_PARAM,
    ),
    credential=AGENT_CREDENTIAL,
)

TASKS_UPDATE_TASK = OperationDescriptor(
    name="tasks_update_task",
    category=OperationCategory.TASKS,
    description="Update fields of a task (only supplied fields change)",
    method="PATCH",
    path="/api/tasks/{task_id}",
    parameters=(
        TASK_ID_PARAM,
        _text("title", "New title", max_length=200),
        _text("description", "New details"),
        _text("assignee", "New assignee", max_length=128),
        ParameterSpec(
            name="status",
            type=ParamType.ENUM,
            destination=Destination.BODY,
            description="New status",
            choices=TASK_STATUSES,
        ),
        ParameterSpec(
            name="priority",
            type=ParamType.ENUM,
            destination=Destination.BODY,
            description="New priority",
            choices=TASK_PRIORITIES,
        ),
        AGENT_TOKEN_PARAM,
    ),
    credential=AGENT_CREDENTIAL,
)

TASKS_ADD_COMMENT = OperationDescriptor(
    name="tasks_add_comment",
    category=OperationCategory.TASKS,
    description="Add a comment to a task",
    method="POST",
    path="/api/tasks/{task_id}/comments",
    parameters=(
        TASK_ID_PARAM,
        _text("content", "Comment text", required=True, max_length=4000),
        AGENT_TOKEN_PARAM,
    ),
    credential=AGENT_CREDENTIAL,
)

TASK_OPERATIONS = [
    TASKS_CREATE_PROJECT,
    TASKS_LIST_PROJECTS,
    TASKS_CREATE_TASK,
    TASKS_LIST_TASKS,
    TASKS_UPDATE_TASK,
    TASKS_ADD_COMMENT,
]


def register_task_operations(registry: Optional[OperationRegistry] = None):
    """Register all task tracker operations with the registry."""
    registry = registry if registry is not None else get_operation_registry()
    registry.register_all(TASK_OPERATIONS)
    logger.debug(f"Registered {len(TASK_OPERATIONS)} task operations")
