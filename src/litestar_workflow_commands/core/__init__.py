"""Core domain module for litestar-workflow-commands.

This module exports the fundamental building blocks of the workflow command:
types, models, the resumable operation, effects and collaborator protocols.
"""

from __future__ import annotations

from litestar_workflow_commands.core.effects import (
    Alert,
    CheckModified,
    Effect,
    ExecuteTransition,
    Redraw,
    SendMessage,
    ShowCommentDialog,
)
from litestar_workflow_commands.core.models import (
    ItemLocator,
    TransitionParameters,
    Workflow,
    WorkflowCommand,
    WorkflowItem,
    WorkflowState,
)
from litestar_workflow_commands.core.operation import TransitionOperation
from litestar_workflow_commands.core.protocols import (
    ClientChannel,
    ClientResponse,
    CompletionCallback,
    FailureCallback,
    DialogService,
    ItemStore,
    WorkflowEngine,
)
from litestar_workflow_commands.core.types import CommandState, CommentFields, OperationState

__all__ = [
    "Alert",
    "CheckModified",
    "ClientChannel",
    "ClientResponse",
    "CommandState",
    "CommentFields",
    "CompletionCallback",
    "FailureCallback",
    "DialogService",
    "Effect",
    "ExecuteTransition",
    "ItemLocator",
    "ItemStore",
    "OperationState",
    "Redraw",
    "SendMessage",
    "ShowCommentDialog",
    "TransitionOperation",
    "TransitionParameters",
    "Workflow",
    "WorkflowCommand",
    "WorkflowEngine",
    "WorkflowItem",
    "WorkflowState",
]
