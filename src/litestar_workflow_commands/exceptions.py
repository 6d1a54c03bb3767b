"""Exception hierarchy for litestar-workflow-commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from litestar_workflow_commands.core.models import ItemLocator

__all__ = (
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
    "WorkflowCommandsError",
    "WorkflowMismatchError",
)


class WorkflowCommandsError(Exception):
    """Base exception for all litestar-workflow-commands errors.

    All exceptions raised by litestar-workflow-commands inherit from this class,
    so callers can catch every command-related error with a single except clause.
    """


class PreconditionError(WorkflowCommandsError):
    """Base exception for caller errors that abort the current operation.

    Precondition violations are not recoverable: a missing item, workflow,
    workflow state or command identifier means the command was invoked with
    data it cannot act upon.
    """


class ItemNotFoundError(PreconditionError):
    """Raised when the item addressed by a locator does not exist.

    Attributes:
        locator: The locator that did not resolve to an item.
    """

    def __init__(self, locator: ItemLocator | None = None) -> None:
        """Initialize the exception with the missing item's locator.

        Args:
            locator: The locator that did not resolve to an item, if known.
        """
        self.locator = locator
        if locator is None:
            super().__init__("Item not found")
        else:
            super().__init__(f"Item '{locator}' not found")


class MissingWorkflowError(PreconditionError):
    """Raised when an item is not associated with any workflow.

    Attributes:
        locator: The locator of the item without a workflow.
    """

    def __init__(self, locator: ItemLocator) -> None:
        """Initialize the exception with item details.

        Args:
            locator: The locator of the item without a workflow.
        """
        self.locator = locator
        super().__init__(f"Item '{locator}' has no workflow")


class MissingWorkflowStateError(PreconditionError):
    """Raised when an item has a workflow but no current workflow state.

    Attributes:
        locator: The locator of the item without a workflow state.
    """

    def __init__(self, locator: ItemLocator) -> None:
        """Initialize the exception with item details.

        Args:
            locator: The locator of the item without a workflow state.
        """
        self.locator = locator
        super().__init__(f"Item '{locator}' has no workflow state")


class MissingCommandIdError(PreconditionError):
    """Raised when a transition is requested without a command identifier."""

    def __init__(self) -> None:
        """Initialize the exception."""
        super().__init__("A workflow command id is required")


class InvalidParameterError(PreconditionError):
    """Raised when a command parameter cannot be parsed.

    Attributes:
        key: The parameter key.
        value: The raw value that failed to parse.
    """

    def __init__(self, key: str, value: str | None, reason: str | None = None) -> None:
        """Initialize the exception with parameter details.

        Args:
            key: The parameter key.
            value: The raw value that failed to parse.
            reason: Additional context about why the value is invalid.
        """
        self.key = key
        self.value = value
        msg = f"Invalid value {value!r} for parameter '{key}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class StaleTransitionError(WorkflowCommandsError):
    """Raised when a command is no longer legal for the item's current state.

    This happens when another user moved the item to a different workflow
    state between the moment the command was offered and the moment it is
    about to run.

    Attributes:
        locator: The locator of the item.
        command_id: The command that is no longer legal.
        state_id: The item's current workflow state.
    """

    def __init__(self, locator: ItemLocator, command_id: str, state_id: str) -> None:
        """Initialize the exception with transition details.

        Args:
            locator: The locator of the item.
            command_id: The command that is no longer legal.
            state_id: The item's current workflow state.
        """
        self.locator = locator
        self.command_id = command_id
        self.state_id = state_id
        super().__init__(f"Command '{command_id}' is not available in state '{state_id}' of item '{locator}'")


class MalformedDialogResultError(WorkflowCommandsError):
    """Raised when a comment dialog posts back data that cannot be parsed.

    Attributes:
        result: The raw dialog result.
    """

    def __init__(self, result: str, reason: str | None = None) -> None:
        """Initialize the exception with the raw dialog result.

        Args:
            result: The raw dialog result.
            reason: Additional context about why parsing failed.
        """
        self.result = result
        msg = "Malformed comment dialog result"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class OperationNotFoundError(WorkflowCommandsError):
    """Raised when a postback refers to an unknown operation.

    Attributes:
        handle: The correlation handle that was not found.
    """

    def __init__(self, handle: str | UUID) -> None:
        """Initialize the exception with the handle.

        Args:
            handle: The correlation handle that was not found.
        """
        self.handle = handle
        super().__init__(f"Operation '{handle}' not found")


class OperationAlreadyFinishedError(WorkflowCommandsError):
    """Raised when a postback targets an operation that is no longer suspended.

    Attributes:
        handle: The correlation handle of the operation.
        state: The state the operation is in.
    """

    def __init__(self, handle: str | UUID, state: str) -> None:
        """Initialize the exception with operation details.

        Args:
            handle: The correlation handle of the operation.
            state: The state the operation is in.
        """
        self.handle = handle
        self.state = state
        super().__init__(f"Operation '{handle}' is already {state}")


class WorkflowMismatchError(WorkflowCommandsError):
    """Raised when a command targets a workflow other than the item's.

    Attributes:
        locator: The locator of the item.
        workflow_id: The workflow the command was addressed to.
        actual_workflow_id: The workflow the item belongs to.
    """

    def __init__(self, locator: ItemLocator, workflow_id: str, actual_workflow_id: str) -> None:
        """Initialize the exception with workflow details.

        Args:
            locator: The locator of the item.
            workflow_id: The workflow the command was addressed to.
            actual_workflow_id: The workflow the item belongs to.
        """
        self.locator = locator
        self.workflow_id = workflow_id
        self.actual_workflow_id = actual_workflow_id
        super().__init__(f"Item '{locator}' is in workflow '{actual_workflow_id}', not '{workflow_id}'")
