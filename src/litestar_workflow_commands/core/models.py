"""Concrete data models for litestar-workflow-commands.

This module provides the dataclasses describing workflow items, workflows and
the typed parameters of a transition request.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from litestar_workflow_commands.exceptions import InvalidParameterError

__all__ = [
    "ItemLocator",
    "TransitionParameters",
    "Workflow",
    "WorkflowCommand",
    "WorkflowItem",
    "WorkflowState",
]

ID_KEY = "id"
LANGUAGE_KEY = "language"
VERSION_KEY = "version"
COMMAND_ID_KEY = "commandid"
WORKFLOW_ID_KEY = "workflowid"
UI_KEY = "ui"
CHECK_MODIFIED_KEY = "checkmodified"
SUPPRESS_COMMENT_KEY = "suppresscomment"


@dataclass(frozen=True)
class ItemLocator:
    """Address of a specific content item revision.

    Attributes:
        id: The item identifier.
        language: The language of the item variant.
        version: The version number of the item revision.
    """

    id: str
    language: str
    version: int

    def __str__(self) -> str:
        return f"{self.id}/{self.language}/{self.version}"


@dataclass(frozen=True)
class WorkflowCommand:
    """A named transition that moves an item from one state to another.

    Attributes:
        command_id: Stable identifier of the command.
        name: Human-readable name shown in the editor.
        next_state_id: State the item is moved to when the command runs.
    """

    command_id: str
    name: str = ""
    next_state_id: str | None = None


@dataclass
class WorkflowState:
    """A node in a workflow with its legal outbound commands.

    Attributes:
        state_id: Stable identifier of the state.
        name: Human-readable name of the state.
        commands: Commands that may be invoked from this state.
        final: Whether the state ends the workflow.
    """

    state_id: str
    name: str = ""
    commands: list[WorkflowCommand] = field(default_factory=list)
    final: bool = False


@dataclass
class Workflow:
    """A named state machine governing the transitions of an item.

    Attributes:
        workflow_id: Stable identifier of the workflow.
        name: Human-readable name of the workflow.
        states: States of the workflow keyed by state id.
        initial_state_id: State new items enter the workflow in.

    Example:
        >>> workflow = Workflow(
        ...     workflow_id="sample",
        ...     states={
        ...         "draft": WorkflowState("draft", commands=[WorkflowCommand("submit", next_state_id="review")]),
        ...         "review": WorkflowState("review"),
        ...     },
        ...     initial_state_id="draft",
        ... )
        >>> [command.command_id for command in workflow.get_commands("draft")]
        ['submit']
    """

    workflow_id: str
    name: str = ""
    states: dict[str, WorkflowState] = field(default_factory=dict)
    initial_state_id: str | None = None

    def get_state(self, state_id: str) -> WorkflowState | None:
        """Return the state with the given id, or None if it does not exist."""
        return self.states.get(state_id)

    def get_commands(self, state_id: str) -> list[WorkflowCommand]:
        """Return the commands legally invocable from a state.

        Args:
            state_id: The workflow state to look up.

        Returns:
            The state's commands, or an empty list for an unknown state.
        """
        state = self.states.get(state_id)
        if state is None:
            return []
        return list(state.commands)


@dataclass
class WorkflowItem:
    """Snapshot of a content item as returned by the item store.

    Attributes:
        locator: The address of the item revision.
        workflow: The workflow the item is in, if any.
        state: The item's current workflow state, if any.
    """

    locator: ItemLocator
    workflow: Workflow | None = None
    state: WorkflowState | None = None


def _flag(value: str | None) -> bool:
    return (value or "").strip() == "1"


@dataclass
class TransitionParameters:
    """Typed parameters of a workflow transition request.

    Attributes:
        id: The item identifier.
        language: The language of the item variant.
        version: The version number of the item revision.
        command_id: The workflow command to invoke.
        workflow_id: The workflow the command belongs to.
        ui_enabled: Whether the comment dialog may be shown. True only when the
            ``ui`` flag is ``"1"``, so a bag without ``ui`` skips the dialog.
            Callers written against the Sitecore Workflow command, which shows
            the dialog unless ``ui`` is ``"1"``, must send ``ui="1"`` to keep
            prompting for comments.
        check_modified: Whether unsaved local edits must be resolved first.
        suppress_comment: Whether the comment dialog is skipped.
    """

    id: str
    language: str
    version: int
    command_id: str
    workflow_id: str = ""
    ui_enabled: bool = False
    check_modified: bool = False
    suppress_comment: bool = False

    @property
    def locator(self) -> ItemLocator:
        """The locator of the item the transition applies to."""
        return ItemLocator(id=self.id, language=self.language, version=self.version)

    @property
    def wants_comment(self) -> bool:
        """Whether the comment dialog should be shown before executing."""
        return self.ui_enabled and not self.suppress_comment

    @classmethod
    def from_mapping(cls, parameters: Mapping[str, str | None]) -> TransitionParameters:
        """Parse a string-keyed parameter bag.

        Recognized keys are ``id``, ``language``, ``version``, ``commandid``,
        ``workflowid``, ``ui``, ``checkmodified`` and ``suppresscomment``.
        Flags are true only when their value is ``"1"``.

        Args:
            parameters: The raw command parameters.

        Returns:
            The parsed parameters.

        Raises:
            InvalidParameterError: If ``id`` is empty or ``version`` is not an integer.
        """
        item_id = (parameters.get(ID_KEY) or "").strip()
        if not item_id:
            raise InvalidParameterError(ID_KEY, parameters.get(ID_KEY), "an item id is required")

        raw_version = parameters.get(VERSION_KEY)
        try:
            version = int(raw_version) if raw_version not in (None, "") else 0
        except ValueError as e:
            raise InvalidParameterError(VERSION_KEY, raw_version, "expected an integer") from e

        return cls(
            id=item_id,
            language=parameters.get(LANGUAGE_KEY) or "",
            version=version,
            command_id=parameters.get(COMMAND_ID_KEY) or "",
            workflow_id=parameters.get(WORKFLOW_ID_KEY) or "",
            ui_enabled=_flag(parameters.get(UI_KEY)),
            check_modified=_flag(parameters.get(CHECK_MODIFIED_KEY)),
            suppress_comment=_flag(parameters.get(SUPPRESS_COMMENT_KEY)),
        )

    def to_mapping(self) -> dict[str, str]:
        """Serialize back into the string-keyed parameter bag."""
        return {
            ID_KEY: self.id,
            LANGUAGE_KEY: self.language,
            VERSION_KEY: str(self.version),
            COMMAND_ID_KEY: self.command_id,
            WORKFLOW_ID_KEY: self.workflow_id,
            UI_KEY: "1" if self.ui_enabled else "0",
            CHECK_MODIFIED_KEY: "1" if self.check_modified else "0",
            SUPPRESS_COMMENT_KEY: "1" if self.suppress_comment else "0",
        }
