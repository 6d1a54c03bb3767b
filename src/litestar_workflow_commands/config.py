"""Configuration for the workflow command.

This module provides the settings that govern the command's availability and
the messages it sends to the editor.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["DEFAULT_FAILURE_MESSAGE", "DEFAULT_STALE_TRANSITION_MESSAGE", "WorkflowCommandConfig"]

DEFAULT_STALE_TRANSITION_MESSAGE = (
    "The item has been moved to a different workflow state. It will therefore be reloaded."
)
DEFAULT_FAILURE_MESSAGE = "The workflow command could not be executed."


@dataclass
class WorkflowCommandConfig:
    """Configuration for the workflow command.

    Attributes:
        workflows_enabled: Whether workflows are enabled at all. When False the
            command is hidden.
        stale_transition_message: Alert shown when the requested command is no
            longer legal for the item's current state.
        failure_message: Alert shown when the workflow engine fails to apply
            the transition.
        refresh_message: Shell message that reloads the displayed item.
        cancel_result: Postback result meaning the user cancelled.
        empty_results: Comment dialog results meaning no value was submitted.

    Example:
        >>> config = WorkflowCommandConfig(workflows_enabled=False)
        >>> config.refresh_message
        'item:refresh'
    """

    workflows_enabled: bool = True
    stale_transition_message: str = DEFAULT_STALE_TRANSITION_MESSAGE
    failure_message: str = DEFAULT_FAILURE_MESSAGE
    refresh_message: str = "item:refresh"
    cancel_result: str = "cancel"
    empty_results: tuple[str, ...] = ("null", "undefined")
