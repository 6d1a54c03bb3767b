"""Data Transfer Objects for the workflow command web API.

This module defines DTOs for serializing and deserializing command requests,
postbacks and operation state in REST API requests and responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from uuid import UUID

if TYPE_CHECKING:
    from litestar_workflow_commands.core.operation import TransitionOperation

__all__ = [
    "CommandStateDTO",
    "ExecuteCommandDTO",
    "OperationDTO",
    "PostbackDTO",
]


@dataclass
class ExecuteCommandDTO:
    """DTO for invoking the workflow command.

    Attributes:
        parameters: The string-keyed command parameters (``id``, ``language``,
            ``version``, ``commandid``, ``workflowid``, ``ui``,
            ``checkmodified``, ``suppresscomment``).
        page_modified: Whether the editor holds unsaved local edits.
    """

    parameters: dict[str, str | None]
    page_modified: bool = False


@dataclass
class PostbackDTO:
    """DTO for resuming a suspended operation.

    Attributes:
        result: The dialog result, e.g. ``"cancel"`` or serialized comment fields.
        page_modified: Whether the editor holds unsaved local edits.
    """

    result: str | None = None
    page_modified: bool = False


@dataclass
class CommandStateDTO:
    """DTO for the command's visibility.

    Attributes:
        state: One of ``enabled``, ``disabled`` or ``hidden``.
    """

    state: str


@dataclass
class OperationDTO:
    """DTO for a transition operation.

    Attributes:
        handle: Correlation handle to post back to.
        state: Current operation state.
        item_id: The item identifier.
        language: The item language.
        version: The item version.
        command_id: The workflow command being invoked.
        workflow_id: The workflow the command belongs to.
        comment_fields: Comment fields entered by the user.
        client_commands: Client commands for the page to replay, in order.
    """

    handle: UUID
    state: str
    item_id: str
    language: str
    version: int
    command_id: str
    workflow_id: str
    comment_fields: dict[str, str] = field(default_factory=dict)
    client_commands: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_operation(
        cls,
        operation: TransitionOperation,
        client_commands: list[dict[str, Any]],
    ) -> OperationDTO:
        """Build the DTO for an operation and the commands collected from it."""
        parameters = operation.parameters
        return cls(
            handle=operation.handle,
            state=operation.state.value,
            item_id=parameters.id,
            language=parameters.language,
            version=parameters.version,
            command_id=parameters.command_id,
            workflow_id=parameters.workflow_id,
            comment_fields=dict(operation.comment_fields),
            client_commands=client_commands,
        )
