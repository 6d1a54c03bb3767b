"""Local in-memory async workflow engine.

This module provides a local, in-process workflow engine suitable for
development, testing, and single-instance deployments.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from litestar_workflow_commands.exceptions import WorkflowCommandsError, WorkflowMismatchError

if TYPE_CHECKING:
    from litestar_workflow_commands.core.models import ItemLocator
    from litestar_workflow_commands.core.protocols import CompletionCallback, FailureCallback
    from litestar_workflow_commands.core.types import CommentFields
    from litestar_workflow_commands.stores.memory import InMemoryItemStore

__all__ = ["LocalWorkflowEngine"]

logger = logging.getLogger(__name__)


class LocalWorkflowEngine:
    """In-memory async engine applying workflow commands.

    Each transition runs in its own asyncio task. The completion callback is
    awaited when the transition was applied. Otherwise the failure is logged
    and the failure callback, if any, is awaited with the error.

    Attributes:
        item_store: The store holding the items and their workflow state.
        _running: Transitions that have been scheduled but not finished.
    """

    def __init__(self, item_store: InMemoryItemStore) -> None:
        """Initialize the local workflow engine.

        Args:
            item_store: The store holding the items and their workflow state.
        """
        self.item_store = item_store
        self._running: set[asyncio.Task[None]] = set()

    async def execute_command(
        self,
        locator: ItemLocator,
        workflow_id: str,
        command_id: str,
        comment_fields: CommentFields,
        callback: CompletionCallback,
        on_failure: FailureCallback | None = None,
    ) -> None:
        """Schedule a workflow transition and return immediately.

        Args:
            locator: The item to transition.
            workflow_id: The workflow the command belongs to. Empty to use the
                item's own workflow.
            command_id: The command to invoke.
            comment_fields: Comment fields entered by the user.
            callback: Awaited with the applied comment fields on completion.
            on_failure: Awaited with the error if the transition cannot be applied.

        Example:
            >>> await engine.execute_command(locator, "sample", "submit", {}, on_done)
            >>> await engine.wait()
        """
        task = asyncio.create_task(
            self._run(locator, workflow_id, command_id, dict(comment_fields), callback, on_failure)
        )
        self._running.add(task)
        task.add_done_callback(self._running.discard)

    async def wait(self) -> None:
        """Wait until every scheduled transition has finished."""
        while self._running:
            await asyncio.gather(*list(self._running))

    async def _run(
        self,
        locator: ItemLocator,
        workflow_id: str,
        command_id: str,
        comment_fields: CommentFields,
        callback: CompletionCallback,
        on_failure: FailureCallback | None,
    ) -> None:
        try:
            item = await self.item_store.get_item(locator)
            if (
                workflow_id
                and item is not None
                and item.workflow is not None
                and item.workflow.workflow_id != workflow_id
            ):
                raise WorkflowMismatchError(locator, workflow_id, item.workflow.workflow_id)
            await self.item_store.apply_command(locator, command_id, comment_fields)
        except WorkflowCommandsError as e:
            logger.exception("Workflow command %s failed for item %s", command_id, locator)
            if on_failure is not None:
                await on_failure(e)
            return

        logger.info("Workflow command %s completed for item %s", command_id, locator)
        await callback(comment_fields)
