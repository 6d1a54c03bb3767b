"""The Workflow editor command.

This module provides :class:`WorkflowTransitionCommand`, which advances an item
through its workflow from the editor. The command suspends while the user
resolves unsaved changes or fills in the comment dialog, and re-checks that the
requested workflow command is still legal each time it resumes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from functools import partial
from typing import TYPE_CHECKING, Any
from uuid import UUID

from litestar_workflow_commands.client import ClientCommandBuffer
from litestar_workflow_commands.config import WorkflowCommandConfig
from litestar_workflow_commands.core.effects import (
    Alert,
    CheckModified,
    ExecuteTransition,
    Redraw,
    SendMessage,
    ShowCommentDialog,
)
from litestar_workflow_commands.core.models import TransitionParameters
from litestar_workflow_commands.core.operation import TransitionOperation
from litestar_workflow_commands.core.types import CommandState, OperationState
from litestar_workflow_commands.exceptions import OperationAlreadyFinishedError, OperationNotFoundError
from litestar_workflow_commands.machine import Transition, TransitionStateMachine

if TYPE_CHECKING:
    from litestar_workflow_commands.core.effects import Effect
    from litestar_workflow_commands.core.protocols import ClientChannel, ItemStore, WorkflowEngine
    from litestar_workflow_commands.core.types import CommentFields
    from litestar_workflow_commands.exceptions import WorkflowCommandsError

__all__ = ["BaseCommand", "WorkflowTransitionCommand"]

logger = logging.getLogger(__name__)


class BaseCommand:
    """Base implementation shared by editor commands.

    Subclass this to create a command and override :meth:`query_state` to
    control when it is shown.
    """

    name: str = ""
    """Identifier the editor uses to invoke the command."""

    def query_state(self) -> CommandState:
        """Return whether the command is shown and enabled.

        Returns:
            ``CommandState.ENABLED`` unless overridden.
        """
        return CommandState.ENABLED


class WorkflowTransitionCommand(BaseCommand):
    """Editor command that invokes a workflow command on an item.

    The command keeps suspended operations in memory, keyed by their handle,
    until the page has collected their last client commands.

    Attributes:
        item_store: Store used to fetch the current item on every step.
        workflow_engine: Engine that applies the transition.
        config: Command configuration.
        machine: The transition state machine.
        client_factory: Builds the client channel for an operation.

    Example:
        >>> command = WorkflowTransitionCommand(item_store=store, workflow_engine=engine)
        >>> operation = await command.execute(
        ...     {"id": "home", "language": "en", "version": "1", "commandid": "submit", "workflowid": "sample"}
        ... )
        >>> operation.state
        <OperationState.EXECUTING: 'executing'>
    """

    name = "item:workflow"

    def __init__(
        self,
        item_store: ItemStore,
        workflow_engine: WorkflowEngine,
        config: WorkflowCommandConfig | None = None,
        client_factory: Callable[[TransitionOperation], ClientChannel] | None = None,
    ) -> None:
        """Initialize the command.

        Args:
            item_store: Store used to fetch the current item.
            workflow_engine: Engine that applies the transition.
            config: Optional command configuration.
            client_factory: Optional factory for the per-operation client
                channel. Defaults to a :class:`ClientCommandBuffer` queueing
                into the operation.
        """
        self.item_store = item_store
        self.workflow_engine = workflow_engine
        self.config = config or WorkflowCommandConfig()
        self.machine = TransitionStateMachine(self.config)
        self.client_factory = client_factory or ClientCommandBuffer.for_operation
        self._operations: dict[UUID, TransitionOperation] = {}
        self._resuming: set[UUID] = set()

    def query_state(self) -> CommandState:
        """Hide the command when workflows are disabled."""
        if not self.config.workflows_enabled:
            return CommandState.HIDDEN
        return super().query_state()

    async def execute(
        self,
        parameters: Mapping[str, str | None] | TransitionParameters,
        page_modified: bool = False,
    ) -> TransitionOperation | None:
        """Start a workflow transition for the user's action.

        Unsaved local edits are always checked for, whatever the incoming
        ``checkmodified`` flag says.

        Args:
            parameters: The raw parameter bag or already parsed parameters.
            page_modified: Whether the editor holds unsaved local edits.

        Returns:
            The operation after its first step, or None if the item does not exist.

        Raises:
            PreconditionError: If the parameters are invalid or the item has no
                workflow or workflow state.
        """
        if not isinstance(parameters, TransitionParameters):
            parameters = TransitionParameters.from_mapping(parameters)

        item = await self.item_store.get_item(parameters.locator)
        if item is None:
            logger.debug("Item %s not found, workflow command %s ignored", parameters.locator, parameters.command_id)
            return None

        operation = TransitionOperation(parameters=replace(parameters, check_modified=True))
        transition = self.machine.advance(operation, item, page_modified=page_modified)
        return await self._apply(transition)

    async def resume(
        self,
        handle: UUID,
        result: str | None,
        page_modified: bool = False,
    ) -> TransitionOperation:
        """Resume a suspended operation with the result of a postback.

        The item is fetched again so that a transition made by someone else in
        the meantime is detected.

        Args:
            handle: The operation's correlation handle.
            result: The dialog result posted back by the page.
            page_modified: Whether the editor holds unsaved local edits.

        Returns:
            The operation after this step.

        Raises:
            OperationNotFoundError: If no operation has this handle.
            OperationAlreadyFinishedError: If the operation is not suspended or
                another postback for it is being handled.
        """
        operation = self.get_operation(handle)
        if not operation.state.is_suspended:
            raise OperationAlreadyFinishedError(handle, operation.state)
        if handle in self._resuming:
            raise OperationAlreadyFinishedError(handle, "being resumed")

        # claim the handle before the first await
        self._resuming.add(handle)
        try:
            logger.debug("Resuming operation %s from %s", handle, operation.state)
            item = await self.item_store.get_item(operation.parameters.locator)
            transition = self.machine.advance(operation, item, page_modified=page_modified, result=result)
            return await self._apply(transition)
        finally:
            self._resuming.discard(handle)

    async def on_workflow_completed(self, handle: UUID, comment_fields: CommentFields) -> None:
        """Completion callback awaited by the workflow engine.

        Args:
            handle: The operation's correlation handle.
            comment_fields: The comment fields the engine applied.
        """
        operation = self.get_operation(handle)
        await self._apply(self.machine.complete(operation, comment_fields))

    async def on_workflow_failed(self, handle: UUID, error: WorkflowCommandsError) -> None:
        """Failure callback awaited by the workflow engine.

        Args:
            handle: The operation's correlation handle.
            error: The error that kept the engine from applying the transition.
        """
        operation = self.get_operation(handle)
        await self._apply(self.machine.fail(operation, error))

    def get_operation(self, handle: UUID) -> TransitionOperation:
        """Look up a tracked operation.

        Raises:
            OperationNotFoundError: If no operation has this handle.
        """
        try:
            return self._operations[handle]
        except KeyError as e:
            raise OperationNotFoundError(handle) from e

    def collect(self, handle: UUID) -> tuple[TransitionOperation, list[dict[str, Any]]]:
        """Return an operation with its pending client commands.

        Terminal operations are forgotten once their commands are collected.

        Args:
            handle: The operation's correlation handle.

        Returns:
            The operation and the client commands queued since the last collection.

        Raises:
            OperationNotFoundError: If no operation has this handle.
        """
        operation = self.get_operation(handle)
        commands = operation.drain_client_commands()
        if operation.state.is_terminal:
            del self._operations[handle]
        return operation, commands

    def list_operations(self) -> list[TransitionOperation]:
        """Return all operations currently tracked."""
        return list(self._operations.values())

    async def _apply(self, transition: Transition) -> TransitionOperation:
        operation = transition.operation
        self._operations[operation.handle] = operation

        if operation.state == OperationState.REJECTED:
            logger.warning(
                "Workflow command %s is no longer available for item %s",
                operation.parameters.command_id,
                operation.parameters.locator,
            )
        elif operation.state.is_suspended:
            logger.debug("Operation %s suspended in %s", operation.handle, operation.state)
        elif operation.state == OperationState.CANCELLED:
            logger.debug("Operation %s cancelled", operation.handle)
        elif operation.state == OperationState.FAILED:
            logger.warning("Operation %s failed", operation.handle)

        client = self.client_factory(operation)
        for effect in transition.effects:
            await self._dispatch(operation, effect, client)

        # the engine may have completed the operation while it was dispatched
        return self._operations.get(operation.handle, operation)

    async def _dispatch(self, operation: TransitionOperation, effect: Effect, client: ClientChannel) -> None:
        if isinstance(effect, Alert):
            client.alert(effect.message)
        elif isinstance(effect, SendMessage):
            client.send_message(effect.message)
        elif isinstance(effect, Redraw):
            client.redraw()
        elif isinstance(effect, CheckModified):
            client.check_modified(resume_previous=effect.resume_previous)
        elif isinstance(effect, ShowCommentDialog):
            client.show_comment_dialog(list(effect.locators), effect.command_id)
        elif isinstance(effect, ExecuteTransition):
            logger.info(
                "Executing workflow command %s of workflow %s on item %s",
                effect.command_id,
                effect.workflow_id,
                effect.locator,
            )
            await self.workflow_engine.execute_command(
                effect.locator,
                effect.workflow_id,
                effect.command_id,
                effect.comment_fields,
                partial(self.on_workflow_completed, operation.handle),
                on_failure=partial(self.on_workflow_failed, operation.handle),
            )
        else:
            msg = f"Unsupported effect {effect!r}"
            raise TypeError(msg)
