"""State machine driving a workflow transition operation.

Each call to :meth:`TransitionStateMachine.advance` is a pure transition from
``(operation state, item snapshot, postback result)`` to a new operation state
plus the effects the caller must dispatch. No collaborator is called here.

States::

    INITIATED
      -> AWAITING_UNSAVED_CHANGES_DECISION   (check_modified and page modified)
      -> AWAITING_COMMENT_INPUT              (ui enabled and comment not suppressed)
      -> EXECUTING
      -> COMPLETED

Any step may end in REJECTED (command no longer legal) or CANCELLED (user
cancelled, or the comment dialog returned no value). An executing operation
ends in REJECTED when the engine finds the command stale, or FAILED when the
engine fails for another reason.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from litestar_workflow_commands.comments import parse_comment_fields
from litestar_workflow_commands.config import WorkflowCommandConfig
from litestar_workflow_commands.core.effects import (
    Alert,
    CheckModified,
    Effect,
    ExecuteTransition,
    Redraw,
    SendMessage,
    ShowCommentDialog,
)
from litestar_workflow_commands.core.types import CommentFields, OperationState
from litestar_workflow_commands.exceptions import OperationAlreadyFinishedError, StaleTransitionError
from litestar_workflow_commands.guard import check_command_validity

if TYPE_CHECKING:
    from litestar_workflow_commands.core.models import WorkflowItem
    from litestar_workflow_commands.core.operation import TransitionOperation
    from litestar_workflow_commands.exceptions import WorkflowCommandsError

__all__ = ["Transition", "TransitionStateMachine"]


@dataclass
class Transition:
    """Result of advancing an operation.

    Attributes:
        operation: The operation in its new state.
        effects: Side effects to dispatch, in order.
    """

    operation: TransitionOperation
    effects: list[Effect] = field(default_factory=list)


class TransitionStateMachine:
    """Pure state machine for workflow transition operations.

    Attributes:
        config: Messages and postback markers used by the machine.
    """

    def __init__(self, config: WorkflowCommandConfig | None = None) -> None:
        """Initialize the state machine.

        Args:
            config: Optional command configuration.
        """
        self.config = config or WorkflowCommandConfig()

    def advance(
        self,
        operation: TransitionOperation,
        item: WorkflowItem | None,
        *,
        page_modified: bool = False,
        result: str | None = None,
    ) -> Transition:
        """Move an initiated or suspended operation forward.

        The command's validity is checked against ``item`` before anything
        else, on every call.

        Args:
            operation: The operation to advance.
            item: A snapshot of the item fetched for this call.
            page_modified: Whether the editor holds unsaved local edits.
            result: The postback result when resuming a suspended operation.

        Returns:
            The operation's new state and the effects to dispatch.

        Raises:
            OperationAlreadyFinishedError: If the operation is executing or terminal.
            PreconditionError: If the item, its workflow, its state or the
                command id is missing.
        """
        state = operation.state
        if state == OperationState.EXECUTING or state.is_terminal:
            raise OperationAlreadyFinishedError(operation.handle, state)

        if not check_command_validity(item, operation.parameters.command_id):
            return self._reject(operation)

        if state == OperationState.INITIATED:
            if operation.parameters.check_modified and page_modified:
                return Transition(
                    operation.with_state(OperationState.AWAITING_UNSAVED_CHANGES_DECISION),
                    [CheckModified(resume_previous=True)],
                )
            return self._request_comment_or_execute(operation)

        if state == OperationState.AWAITING_UNSAVED_CHANGES_DECISION:
            if result == self.config.cancel_result:
                return Transition(operation.with_state(OperationState.CANCELLED))
            return self._request_comment_or_execute(operation)

        # AWAITING_COMMENT_INPUT
        if result is None or result == self.config.cancel_result or result in self.config.empty_results:
            return Transition(operation.with_state(OperationState.CANCELLED))
        return self._execute(operation, parse_comment_fields(result))

    def complete(self, operation: TransitionOperation, comment_fields: CommentFields) -> Transition:
        """Finish an executing operation once the workflow engine reports back.

        Args:
            operation: The executing operation.
            comment_fields: The comment fields the engine applied.

        Returns:
            The completed operation, with a full item refresh when comments
            were recorded and a redraw otherwise.

        Raises:
            OperationAlreadyFinishedError: If the operation is not executing.
        """
        if operation.state != OperationState.EXECUTING:
            raise OperationAlreadyFinishedError(operation.handle, operation.state)

        effect: Effect = SendMessage(self.config.refresh_message) if comment_fields else Redraw()
        return Transition(operation.with_state(OperationState.COMPLETED), [effect])

    def fail(self, operation: TransitionOperation, error: WorkflowCommandsError) -> Transition:
        """End an executing operation the workflow engine could not apply.

        Args:
            operation: The executing operation.
            error: The error reported by the engine.

        Returns:
            The rejected operation with the stale-transition alert and a full
            item refresh when the command was no longer legal, and the failed
            operation with the failure alert otherwise.

        Raises:
            OperationAlreadyFinishedError: If the operation is not executing.
        """
        if operation.state != OperationState.EXECUTING:
            raise OperationAlreadyFinishedError(operation.handle, operation.state)

        if isinstance(error, StaleTransitionError):
            return self._reject(operation)
        return Transition(operation.with_state(OperationState.FAILED), [Alert(self.config.failure_message)])

    def _reject(self, operation: TransitionOperation) -> Transition:
        return Transition(
            operation.with_state(OperationState.REJECTED),
            [Alert(self.config.stale_transition_message), SendMessage(self.config.refresh_message)],
        )

    def _request_comment_or_execute(self, operation: TransitionOperation) -> Transition:
        parameters = operation.parameters
        if parameters.wants_comment:
            return Transition(
                operation.with_state(OperationState.AWAITING_COMMENT_INPUT),
                [ShowCommentDialog(locators=(parameters.locator,), command_id=parameters.command_id)],
            )
        return self._execute(operation, {})

    def _execute(self, operation: TransitionOperation, comment_fields: CommentFields) -> Transition:
        parameters = operation.parameters
        return Transition(
            operation.with_state(OperationState.EXECUTING, comment_fields=comment_fields),
            [
                ExecuteTransition(
                    locator=parameters.locator,
                    workflow_id=parameters.workflow_id,
                    command_id=parameters.command_id,
                    comment_fields=dict(comment_fields),
                )
            ],
        )
