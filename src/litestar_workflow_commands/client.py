"""Buffered client channel.

Web clients cannot be called back directly, so the dialogs and responses the
command produces are queued as plain dictionaries and returned with the next
HTTP response. The page replays them in order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

    from litestar_workflow_commands.core.models import ItemLocator
    from litestar_workflow_commands.core.operation import TransitionOperation

__all__ = ["ClientCommandBuffer"]


class ClientCommandBuffer:
    """Queue of client commands for a single operation.

    Implements both :class:`~litestar_workflow_commands.core.protocols.ClientResponse`
    and :class:`~litestar_workflow_commands.core.protocols.DialogService`.

    Attributes:
        commands: The queued client commands.

    Example:
        >>> buffer = ClientCommandBuffer()
        >>> buffer.send_message("item:refresh")
        >>> buffer.commands
        [{'command': 'message', 'message': 'item:refresh'}]
    """

    def __init__(self, commands: list[dict[str, Any]] | None = None) -> None:
        """Initialize the buffer.

        Args:
            commands: Optional list to append to. A new list is used if omitted.
        """
        self.commands: list[dict[str, Any]] = commands if commands is not None else []

    @classmethod
    def for_operation(cls, operation: TransitionOperation) -> ClientCommandBuffer:
        """Create a buffer that queues into an operation's client commands."""
        return cls(operation.client_commands)

    def alert(self, message: str) -> None:
        self.commands.append({"command": "alert", "message": message})

    def send_message(self, message: str) -> None:
        self.commands.append({"command": "message", "message": message})

    def redraw(self) -> None:
        self.commands.append({"command": "redraw"})

    def check_modified(self, resume_previous: bool = True) -> None:
        self.commands.append({"command": "check_modified", "resume_previous": resume_previous})

    def show_comment_dialog(self, locators: Sequence[ItemLocator], command_id: str) -> None:
        self.commands.append(
            {
                "command": "comment_dialog",
                "items": [
                    {"id": locator.id, "language": locator.language, "version": locator.version}
                    for locator in locators
                ],
                "command_id": command_id,
            }
        )
