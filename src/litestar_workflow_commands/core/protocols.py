"""Core protocols for litestar-workflow-commands.

This module defines the Protocol-based interfaces of the collaborators the
workflow command depends on but does not own: the item store, the workflow
engine and the client-side dialog and response services.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from litestar_workflow_commands.core.models import ItemLocator, WorkflowItem
    from litestar_workflow_commands.core.types import CommentFields
    from litestar_workflow_commands.exceptions import WorkflowCommandsError

__all__ = [
    "ClientChannel",
    "ClientResponse",
    "CompletionCallback",
    "DialogService",
    "FailureCallback",
    "ItemStore",
    "WorkflowEngine",
]

CompletionCallback: TypeAlias = "Callable[[CommentFields], Awaitable[None]]"
"""Callback awaited by the workflow engine once a transition has been applied."""

FailureCallback: TypeAlias = "Callable[[WorkflowCommandsError], Awaitable[None]]"
"""Callback awaited by the workflow engine when a transition could not be applied."""


@runtime_checkable
class ItemStore(Protocol):
    """Protocol for looking up content items.

    The store owns the items and serializes changes to their workflow state.
    Every lookup must reflect the current state; callers rely on this to
    detect concurrent transitions.

    Example:
        >>> item = await store.get_item(ItemLocator("home", "en", 1))
        >>> item.state.state_id if item and item.state else None
        'draft'
    """

    async def get_item(self, locator: ItemLocator) -> WorkflowItem | None:
        """Fetch the current snapshot of an item.

        Args:
            locator: The address of the item revision.

        Returns:
            The item, or None if it does not exist.
        """
        ...


@runtime_checkable
class WorkflowEngine(Protocol):
    """Protocol for the engine that applies workflow transitions.

    Execution is fire-and-forget: ``execute_command`` returns once the
    transition has been scheduled. The engine later awaits ``callback`` when
    the transition was applied, or ``on_failure`` when it was not.
    """

    async def execute_command(
        self,
        locator: ItemLocator,
        workflow_id: str,
        command_id: str,
        comment_fields: CommentFields,
        callback: CompletionCallback,
        on_failure: FailureCallback | None = None,
    ) -> None:
        """Schedule a workflow transition.

        Args:
            locator: The item to transition.
            workflow_id: The workflow the command belongs to.
            command_id: The command to invoke.
            comment_fields: Comment fields entered by the user.
            callback: Awaited with the applied comment fields on completion.
            on_failure: Awaited with the error when the transition cannot be
                applied, for example because the item left the state that
                offered the command.
        """
        ...


class DialogService(Protocol):
    """Protocol for the dialogs the command presents to the user."""

    def show_comment_dialog(self, locators: Sequence[ItemLocator], command_id: str) -> None:
        """Present the comment entry dialog for a workflow command.

        Args:
            locators: The items the comment applies to.
            command_id: The workflow command being invoked.
        """
        ...

    def check_modified(self, resume_previous: bool = True) -> None:
        """Ask the user to save or discard unsaved local edits.

        Args:
            resume_previous: Whether the interrupted operation resumes afterwards.
        """
        ...


class ClientResponse(Protocol):
    """Protocol for instructions sent back to the editor page."""

    def alert(self, message: str) -> None:
        """Show a message to the user."""
        ...

    def send_message(self, message: str) -> None:
        """Send a shell message such as ``item:refresh``."""
        ...

    def redraw(self) -> None:
        """Redraw the displayed item without reloading it."""
        ...


class ClientChannel(ClientResponse, DialogService, Protocol):
    """Both client-side services bound to a single operation."""
