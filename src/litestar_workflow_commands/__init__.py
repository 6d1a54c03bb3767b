"""Litestar Workflow Commands - the editor Workflow command for Litestar.

This package provides the command an editor uses to advance a content item
through its workflow. The item may be moved by someone else while the user
answers the unsaved-changes prompt or fills in the comment dialog, so the
requested workflow command is re-validated against the item's current state
every time the operation resumes.

Key Features:
    - Pure transition validity guard
    - Resumable operation driven by an explicit state machine
    - Protocols for the item store, workflow engine and client dialogs
    - In-memory item store and local asyncio workflow engine
    - Litestar plugin with a REST API for the execute/postback cycle

Example:
    >>> from litestar_workflow_commands import WorkflowTransitionCommand
    >>>
    >>> command = WorkflowTransitionCommand(item_store=store, workflow_engine=engine)
    >>> operation = await command.execute(
    ...     {"id": "home", "language": "en", "version": "1", "commandid": "submit", "workflowid": "sample", "ui": "1"}
    ... )
    >>> operation = await command.resume(operation.handle, '{"Comments": "Ready for review"}')
"""

from __future__ import annotations

from litestar_workflow_commands.__metadata__ import __project__, __version__
from litestar_workflow_commands.command import BaseCommand, WorkflowTransitionCommand
from litestar_workflow_commands.config import WorkflowCommandConfig
from litestar_workflow_commands.exceptions import (
    InvalidParameterError,
    ItemNotFoundError,
    MalformedDialogResultError,
    MissingCommandIdError,
    MissingWorkflowError,
    MissingWorkflowStateError,
    OperationAlreadyFinishedError,
    OperationNotFoundError,
    PreconditionError,
    StaleTransitionError,
    WorkflowCommandsError,
    WorkflowMismatchError,
)
from litestar_workflow_commands.guard import check_command_validity, ensure_command_valid
from litestar_workflow_commands.plugin import WorkflowCommandPlugin, WorkflowCommandPluginConfig

__all__ = (
    "BaseCommand",
    "InvalidParameterError",
    "ItemNotFoundError",
    "MalformedDialogResultError",
    "MissingCommandIdError",
    "MissingWorkflowError",
    "MissingWorkflowStateError",
    "OperationAlreadyFinishedError",
    "OperationNotFoundError",
    "PreconditionError",
    "StaleTransitionError",
    "WorkflowCommandConfig",
    "WorkflowCommandPlugin",
    "WorkflowCommandPluginConfig",
    "WorkflowCommandsError",
    "WorkflowMismatchError",
    "WorkflowTransitionCommand",
    "__project__",
    "__version__",
    "check_command_validity",
    "ensure_command_valid",
)
