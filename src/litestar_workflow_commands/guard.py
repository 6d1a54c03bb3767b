"""Transition validity guard.

A workflow command is only legal while the item sits in a state that offers
it. Other users may move the item between the moment the editor rendered the
command and the moment it runs, so the guard is evaluated against a freshly
fetched item every time the operation starts or resumes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from litestar_workflow_commands.exceptions import (
    ItemNotFoundError,
    MissingCommandIdError,
    MissingWorkflowError,
    MissingWorkflowStateError,
    StaleTransitionError,
)

if TYPE_CHECKING:
    from litestar_workflow_commands.core.models import ItemLocator, Workflow, WorkflowItem, WorkflowState

__all__ = ["check_command_validity", "ensure_command_valid"]


def _current_state(item: WorkflowItem | None, command_id: str) -> tuple[ItemLocator, Workflow, WorkflowState]:
    if not command_id:
        raise MissingCommandIdError
    if item is None:
        raise ItemNotFoundError
    if item.workflow is None:
        raise MissingWorkflowError(item.locator)
    if item.state is None:
        raise MissingWorkflowStateError(item.locator)
    return item.locator, item.workflow, item.state


def _is_legal(workflow: Workflow, state: WorkflowState, command_id: str) -> bool:
    return any(command.command_id == command_id for command in workflow.get_commands(state.state_id))


def check_command_validity(item: WorkflowItem | None, command_id: str) -> bool:
    """Check whether a command can run against the item's current state.

    Args:
        item: Current snapshot of the item.
        command_id: The workflow command to invoke.

    Returns:
        True if the command is one of the commands legal in the item's
        current workflow state, False otherwise.

    Raises:
        MissingCommandIdError: If ``command_id`` is empty.
        ItemNotFoundError: If ``item`` is None.
        MissingWorkflowError: If the item has no workflow.
        MissingWorkflowStateError: If the item has no workflow state.

    Example:
        >>> check_command_validity(item, "submit")
        True
    """
    _, workflow, state = _current_state(item, command_id)
    return _is_legal(workflow, state, command_id)


def ensure_command_valid(item: WorkflowItem | None, command_id: str) -> None:
    """Raise if a command cannot run against the item's current state.

    Args:
        item: Current snapshot of the item.
        command_id: The workflow command to invoke.

    Raises:
        PreconditionError: If the command id, item, workflow or state is missing.
        StaleTransitionError: If the command is not legal in the current state.
    """
    locator, workflow, state = _current_state(item, command_id)
    if not _is_legal(workflow, state, command_id):
        raise StaleTransitionError(locator, command_id, state.state_id)
