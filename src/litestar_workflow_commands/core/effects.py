"""Side effects produced by the transition state machine.

The state machine never talks to the outside world. Each transition returns a
list of effects which the command then dispatches to the client response, the
dialog service or the workflow engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from litestar_workflow_commands.core.models import ItemLocator
    from litestar_workflow_commands.core.types import CommentFields

__all__ = [
    "Alert",
    "CheckModified",
    "Effect",
    "ExecuteTransition",
    "Redraw",
    "SendMessage",
    "ShowCommentDialog",
]


@dataclass(frozen=True)
class Alert:
    """Show a user-facing message.

    Attributes:
        message: The text to display.
    """

    message: str


@dataclass(frozen=True)
class SendMessage:
    """Send a shell message such as ``item:refresh`` to the editor.

    Attributes:
        message: The message to send.
    """

    message: str


@dataclass(frozen=True)
class Redraw:
    """Request a lightweight redraw of the displayed item."""


@dataclass(frozen=True)
class CheckModified:
    """Ask the user to resolve unsaved local edits.

    Attributes:
        resume_previous: Whether the interrupted operation resumes afterwards.
    """

    resume_previous: bool = True


@dataclass(frozen=True)
class ShowCommentDialog:
    """Present the workflow comment dialog.

    Attributes:
        locators: The items the comment applies to.
        command_id: The workflow command being invoked.
    """

    locators: tuple[ItemLocator, ...]
    command_id: str


@dataclass(frozen=True)
class ExecuteTransition:
    """Dispatch the transition to the workflow engine.

    Attributes:
        locator: The item to transition.
        workflow_id: The workflow the command belongs to.
        command_id: The command to invoke.
        comment_fields: Comment fields entered by the user.
    """

    locator: ItemLocator
    workflow_id: str
    command_id: str
    comment_fields: CommentFields = field(default_factory=dict)


Effect: TypeAlias = Alert | SendMessage | Redraw | CheckModified | ShowCommentDialog | ExecuteTransition
"""Any side effect the state machine may request."""
