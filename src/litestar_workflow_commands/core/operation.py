"""Resumable transition operation.

This module provides the TransitionOperation dataclass which carries the state
of one workflow command invocation across its postbacks.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

from litestar_workflow_commands.core.types import OperationState

if TYPE_CHECKING:
    from litestar_workflow_commands.core.models import TransitionParameters
    from litestar_workflow_commands.core.types import CommentFields

__all__ = ["TransitionOperation"]


@dataclass
class TransitionOperation:
    """A workflow transition that may be suspended and resumed.

    Attributes:
        parameters: The typed parameters of the request.
        handle: Correlation id used by postbacks to find the operation.
        state: Where the operation is in its lifecycle.
        comment_fields: Comment fields entered by the user, once parsed.
        client_commands: Serialized client commands not yet delivered to the page.
        created_at: Timestamp when the operation was created.
        updated_at: Timestamp of the last state change.
    """

    parameters: TransitionParameters
    handle: UUID = field(default_factory=uuid4)
    state: OperationState = OperationState.INITIATED
    comment_fields: CommentFields = field(default_factory=dict)
    client_commands: list[dict[str, Any]] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def with_state(self, state: OperationState, **changes: Any) -> TransitionOperation:
        """Return a copy of the operation moved to a new state.

        The ``client_commands`` list is shared with the original so commands
        queued on either copy are delivered together.

        Args:
            state: The new operation state.
            **changes: Other fields to replace.

        Returns:
            A new TransitionOperation.
        """
        return replace(self, state=state, updated_at=datetime.now(timezone.utc), **changes)

    def drain_client_commands(self) -> list[dict[str, Any]]:
        """Remove and return the queued client commands."""
        commands = list(self.client_commands)
        self.client_commands.clear()
        return commands
