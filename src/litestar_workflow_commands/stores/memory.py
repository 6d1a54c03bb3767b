"""In-memory item store.

This module provides an item store suitable for development, testing and
single-process deployments. It keeps workflows, the workflow state of each
item revision and a workflow history per item.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from litestar_workflow_commands.core.models import ItemLocator, WorkflowItem
from litestar_workflow_commands.exceptions import (
    ItemNotFoundError,
    MissingWorkflowError,
    MissingWorkflowStateError,
    StaleTransitionError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from litestar_workflow_commands.core.models import Workflow
    from litestar_workflow_commands.core.types import CommentFields

__all__ = ["InMemoryItemStore", "WorkflowHistoryEntry"]

logger = logging.getLogger(__name__)


@dataclass
class WorkflowHistoryEntry:
    """Record of one workflow transition applied to an item.

    Attributes:
        locator: The item that was transitioned.
        old_state_id: State before the transition.
        new_state_id: State after the transition.
        command_id: The command that caused the transition.
        comment_fields: Comment fields entered by the user.
        date: When the transition was applied.
    """

    locator: ItemLocator
    old_state_id: str | None
    new_state_id: str | None
    command_id: str
    comment_fields: CommentFields = field(default_factory=dict)
    date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class _ItemRecord:
    workflow_id: str | None
    state_id: str | None


class InMemoryItemStore:
    """Item store keeping everything in process memory.

    Snapshots are built on every :meth:`get_item` call, so a state change made
    through :meth:`set_state` or :meth:`apply_command` is visible immediately.
    State changes are serialized by an :class:`asyncio.Lock`.

    Example:
        >>> store = InMemoryItemStore(workflows=[sample_workflow])
        >>> store.add_item(ItemLocator("home", "en", 1), workflow_id="sample")
        >>> item = await store.get_item(ItemLocator("home", "en", 1))
        >>> item.state.state_id
        'draft'
    """

    def __init__(self, workflows: Iterable[Workflow] = ()) -> None:
        """Initialize the store.

        Args:
            workflows: Workflows to register up front.
        """
        self._workflows: dict[str, Workflow] = {}
        self._items: dict[ItemLocator, _ItemRecord] = {}
        self._history: dict[ItemLocator, list[WorkflowHistoryEntry]] = {}
        self._lock = asyncio.Lock()
        for workflow in workflows:
            self.add_workflow(workflow)

    def add_workflow(self, workflow: Workflow) -> None:
        """Register a workflow, replacing any workflow with the same id."""
        self._workflows[workflow.workflow_id] = workflow

    def get_workflow(self, workflow_id: str) -> Workflow | None:
        """Return a registered workflow, or None."""
        return self._workflows.get(workflow_id)

    def add_item(
        self,
        locator: ItemLocator,
        workflow_id: str | None = None,
        state_id: str | None = None,
    ) -> None:
        """Add an item revision to the store.

        Args:
            locator: The address of the item revision.
            workflow_id: The workflow the item is in, if any.
            state_id: The item's workflow state. Defaults to the workflow's
                initial state.
        """
        if state_id is None and workflow_id is not None:
            workflow = self._workflows.get(workflow_id)
            state_id = workflow.initial_state_id if workflow else None
        self._items[locator] = _ItemRecord(workflow_id=workflow_id, state_id=state_id)

    async def get_item(self, locator: ItemLocator) -> WorkflowItem | None:
        """Build the current snapshot of an item.

        Args:
            locator: The address of the item revision.

        Returns:
            The item, or None if it is unknown.
        """
        record = self._items.get(locator)
        if record is None:
            return None

        workflow = self._workflows.get(record.workflow_id) if record.workflow_id else None
        state = workflow.get_state(record.state_id) if workflow and record.state_id else None
        return WorkflowItem(locator=locator, workflow=workflow, state=state)

    async def set_state(self, locator: ItemLocator, state_id: str) -> None:
        """Move an item to a state without running a command.

        Args:
            locator: The address of the item revision.
            state_id: The new workflow state.

        Raises:
            ItemNotFoundError: If the item is unknown.
        """
        async with self._lock:
            record = self._record(locator)
            record.state_id = state_id

    async def apply_command(
        self,
        locator: ItemLocator,
        command_id: str,
        comment_fields: CommentFields | None = None,
    ) -> WorkflowHistoryEntry:
        """Run a workflow command against an item's current state.

        Args:
            locator: The address of the item revision.
            command_id: The command to run.
            comment_fields: Comment fields to record in the history.

        Returns:
            The history entry recorded for the transition.

        Raises:
            ItemNotFoundError: If the item is unknown.
            MissingWorkflowError: If the item has no workflow.
            MissingWorkflowStateError: If the item has no workflow state.
            StaleTransitionError: If the command is not legal in the current state.
        """
        async with self._lock:
            record = self._record(locator)
            workflow = self._workflows.get(record.workflow_id) if record.workflow_id else None
            if workflow is None:
                raise MissingWorkflowError(locator)
            if record.state_id is None:
                raise MissingWorkflowStateError(locator)

            command = next(
                (command for command in workflow.get_commands(record.state_id) if command.command_id == command_id),
                None,
            )
            if command is None:
                raise StaleTransitionError(locator, command_id, record.state_id)

            entry = WorkflowHistoryEntry(
                locator=locator,
                old_state_id=record.state_id,
                new_state_id=command.next_state_id or record.state_id,
                command_id=command_id,
                comment_fields=dict(comment_fields or {}),
            )
            record.state_id = entry.new_state_id
            self._history.setdefault(locator, []).append(entry)

        logger.debug("Item %s moved from %s to %s", locator, entry.old_state_id, entry.new_state_id)
        return entry

    def get_history(self, locator: ItemLocator) -> list[WorkflowHistoryEntry]:
        """Return the workflow history of an item, oldest first."""
        return list(self._history.get(locator, []))

    def _record(self, locator: ItemLocator) -> _ItemRecord:
        try:
            return self._items[locator]
        except KeyError as e:
            raise ItemNotFoundError(locator) from e
