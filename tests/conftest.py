"""Shared test fixtures for litestar-workflow-commands test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock

import pytest

from litestar_workflow_commands.core.models import ItemLocator, Workflow, WorkflowCommand, WorkflowState

if TYPE_CHECKING:
    from litestar_workflow_commands.command import WorkflowTransitionCommand
    from litestar_workflow_commands.engine.local import LocalWorkflowEngine
    from litestar_workflow_commands.stores.memory import InMemoryItemStore


SAMPLE_WORKFLOW_ID = "sample-workflow"


def make_parameters(command_id: str = "submit", **overrides: str) -> dict[str, str]:
    """Build a raw command parameter bag for the sample item.

    Args:
        command_id: The workflow command to invoke.
        **overrides: Keys to add or replace.

    Returns:
        The string-keyed parameter mapping.
    """
    parameters = {
        "id": "home",
        "language": "en",
        "version": "1",
        "commandid": command_id,
        "workflowid": SAMPLE_WORKFLOW_ID,
        "ui": "0",
        "checkmodified": "0",
        "suppresscomment": "0",
    }
    parameters.update(overrides)
    return parameters


@pytest.fixture
def sample_workflow() -> Workflow:
    """Create a draft -> awaiting approval -> approved workflow.

    Returns:
        Workflow instance
    """
    return Workflow(
        workflow_id=SAMPLE_WORKFLOW_ID,
        name="Sample Workflow",
        states={
            "draft": WorkflowState(
                state_id="draft",
                name="Draft",
                commands=[WorkflowCommand("submit", "Submit", next_state_id="awaiting-approval")],
            ),
            "awaiting-approval": WorkflowState(
                state_id="awaiting-approval",
                name="Awaiting Approval",
                commands=[
                    WorkflowCommand("approve", "Approve", next_state_id="approved"),
                    WorkflowCommand("reject", "Reject", next_state_id="draft"),
                ],
            ),
            "approved": WorkflowState(state_id="approved", name="Approved", final=True),
        },
        initial_state_id="draft",
    )


@pytest.fixture
def locator() -> ItemLocator:
    """Locator of the sample item."""
    return ItemLocator(id="home", language="en", version=1)


@pytest.fixture
def item_store(sample_workflow: Workflow, locator: ItemLocator) -> InMemoryItemStore:
    """Create an item store holding the sample item in the draft state.

    Args:
        sample_workflow: Workflow fixture
        locator: Item locator fixture

    Returns:
        InMemoryItemStore instance
    """
    from litestar_workflow_commands.stores.memory import InMemoryItemStore

    store = InMemoryItemStore(workflows=[sample_workflow])
    store.add_item(locator, workflow_id=sample_workflow.workflow_id)
    return store


@pytest.fixture
def local_engine(item_store: InMemoryItemStore) -> LocalWorkflowEngine:
    """Create a local workflow engine over the item store.

    Args:
        item_store: Item store fixture

    Returns:
        LocalWorkflowEngine instance
    """
    from litestar_workflow_commands.engine.local import LocalWorkflowEngine

    return LocalWorkflowEngine(item_store)


@pytest.fixture
def mock_engine() -> AsyncMock:
    """Create a workflow engine double that records dispatched transitions."""
    return AsyncMock()


@pytest.fixture
def command(item_store: InMemoryItemStore, mock_engine: AsyncMock) -> WorkflowTransitionCommand:
    """Create a workflow command whose engine never runs transitions itself.

    Args:
        item_store: Item store fixture
        mock_engine: Engine double fixture

    Returns:
        WorkflowTransitionCommand instance
    """
    from litestar_workflow_commands.command import WorkflowTransitionCommand

    return WorkflowTransitionCommand(item_store=item_store, workflow_engine=mock_engine)


@pytest.fixture
def live_command(item_store: InMemoryItemStore, local_engine: LocalWorkflowEngine) -> WorkflowTransitionCommand:
    """Create a workflow command backed by the local engine.

    Args:
        item_store: Item store fixture
        local_engine: Local engine fixture

    Returns:
        WorkflowTransitionCommand instance
    """
    from litestar_workflow_commands.command import WorkflowTransitionCommand

    return WorkflowTransitionCommand(item_store=item_store, workflow_engine=local_engine)
