"""Core type definitions for litestar-workflow-commands.

This module defines the enums and type aliases shared by the guard, the
orchestration state machine and the web layer.
"""

from __future__ import annotations

from enum import StrEnum, auto
from typing import TypeAlias

__all__ = [
    "CommandState",
    "CommentFields",
    "OperationState",
]


class CommandState(StrEnum):
    """Visibility and availability of a command in the editor.

    Attributes:
        ENABLED: The command is shown and can be invoked.
        DISABLED: The command is shown but cannot be invoked.
        HIDDEN: The command is not shown at all.
    """

    ENABLED = auto()
    DISABLED = auto()
    HIDDEN = auto()


class OperationState(StrEnum):
    """Lifecycle state of a workflow transition operation.

    Attributes:
        INITIATED: The user action has been received.
        AWAITING_UNSAVED_CHANGES_DECISION: Suspended until the user saves or discards local edits.
        AWAITING_COMMENT_INPUT: Suspended until the comment dialog is submitted.
        EXECUTING: The transition has been dispatched to the workflow engine.
        COMPLETED: The workflow engine reported completion.
        CANCELLED: The user cancelled at a suspend point.
        REJECTED: The command was no longer legal for the item's current state.
        FAILED: The workflow engine could not apply the transition.
    """

    INITIATED = auto()
    AWAITING_UNSAVED_CHANGES_DECISION = auto()
    AWAITING_COMMENT_INPUT = auto()
    EXECUTING = auto()
    COMPLETED = auto()
    CANCELLED = auto()
    REJECTED = auto()
    FAILED = auto()

    @property
    def is_suspended(self) -> bool:
        """Whether the operation is waiting for a postback."""
        return self in {OperationState.AWAITING_UNSAVED_CHANGES_DECISION, OperationState.AWAITING_COMMENT_INPUT}

    @property
    def is_terminal(self) -> bool:
        """Whether the operation can no longer change state."""
        return self in {
            OperationState.COMPLETED,
            OperationState.CANCELLED,
            OperationState.REJECTED,
            OperationState.FAILED,
        }


CommentFields: TypeAlias = dict[str, str]
"""Mapping of comment field name to the value entered by the user."""
