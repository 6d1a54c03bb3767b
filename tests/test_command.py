"""Tests for the workflow command orchestration."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest

from litestar_workflow_commands.command import BaseCommand, WorkflowTransitionCommand
from litestar_workflow_commands.config import (
    DEFAULT_FAILURE_MESSAGE,
    DEFAULT_STALE_TRANSITION_MESSAGE,
    WorkflowCommandConfig,
)
from litestar_workflow_commands.core.models import ItemLocator, TransitionParameters
from litestar_workflow_commands.core.types import CommandState, OperationState
from litestar_workflow_commands.exceptions import (
    MissingCommandIdError,
    MissingWorkflowError,
    OperationAlreadyFinishedError,
    OperationNotFoundError,
    StaleTransitionError,
)
from tests.conftest import SAMPLE_WORKFLOW_ID, make_parameters

if TYPE_CHECKING:
    from litestar_workflow_commands.core.models import WorkflowItem
    from litestar_workflow_commands.stores.memory import InMemoryItemStore


class _YieldingItemStore:
    """Item store that hands control back to the event loop on every lookup."""

    def __init__(self, store: InMemoryItemStore) -> None:
        self.store = store

    async def get_item(self, locator: ItemLocator) -> WorkflowItem | None:
        await asyncio.sleep(0)
        return await self.store.get_item(locator)


@pytest.mark.unit
class TestQueryState:
    """Tests for the command's visibility."""

    def test_base_command_is_enabled(self) -> None:
        """The base rule enables commands."""
        assert BaseCommand().query_state() == CommandState.ENABLED

    def test_enabled_when_workflows_enabled(self, command: WorkflowTransitionCommand) -> None:
        """The command defers to the base rule when workflows are on."""
        assert command.query_state() == CommandState.ENABLED

    def test_hidden_when_workflows_disabled(self, item_store: InMemoryItemStore) -> None:
        """The command is hidden when workflows are disabled."""
        command = WorkflowTransitionCommand(
            item_store=item_store,
            workflow_engine=AsyncMock(),
            config=WorkflowCommandConfig(workflows_enabled=False),
        )

        assert command.query_state() == CommandState.HIDDEN


@pytest.mark.asyncio
class TestExecute:
    """Tests for starting a transition."""

    async def test_scenario_valid_command(self, command: WorkflowTransitionCommand, mock_engine: AsyncMock) -> None:
        """A legal command is dispatched and completion without comments redraws."""
        operation = await command.execute(make_parameters("submit"))

        assert operation is not None
        assert operation.state == OperationState.EXECUTING
        mock_engine.execute_command.assert_awaited_once()
        locator, workflow_id, command_id, comment_fields, callback = mock_engine.execute_command.await_args.args
        assert locator == ItemLocator("home", "en", 1)
        assert workflow_id == SAMPLE_WORKFLOW_ID
        assert command_id == "submit"
        assert comment_fields == {}

        await callback({})

        completed, client_commands = command.collect(operation.handle)
        assert completed.state == OperationState.COMPLETED
        assert client_commands == [{"command": "redraw"}]

    async def test_scenario_stale_command(self, command: WorkflowTransitionCommand, mock_engine: AsyncMock) -> None:
        """A command no longer legal alerts, refreshes and never reaches the engine."""
        operation = await command.execute(make_parameters("approve"))

        assert operation is not None
        assert operation.state == OperationState.REJECTED
        mock_engine.execute_command.assert_not_awaited()
        _, client_commands = command.collect(operation.handle)
        assert client_commands == [
            {"command": "alert", "message": DEFAULT_STALE_TRANSITION_MESSAGE},
            {"command": "message", "message": "item:refresh"},
        ]

    async def test_missing_item_is_ignored(self, command: WorkflowTransitionCommand, mock_engine: AsyncMock) -> None:
        """An unknown item ends the command without an operation."""
        assert await command.execute(make_parameters(id="unknown")) is None
        mock_engine.execute_command.assert_not_awaited()
        assert command.list_operations() == []

    async def test_missing_command_id(self, command: WorkflowTransitionCommand) -> None:
        """An empty command id is fatal."""
        with pytest.raises(MissingCommandIdError):
            await command.execute(make_parameters(""))

    async def test_item_without_workflow(
        self,
        command: WorkflowTransitionCommand,
        item_store: InMemoryItemStore,
    ) -> None:
        """An item outside any workflow is fatal."""
        item_store.add_item(ItemLocator("orphan", "en", 1))

        with pytest.raises(MissingWorkflowError):
            await command.execute(make_parameters(id="orphan"))

    async def test_always_checks_modified(self, command: WorkflowTransitionCommand) -> None:
        """Unsaved changes are checked for even when checkmodified is not set."""
        operation = await command.execute(make_parameters(checkmodified="0"), page_modified=True)

        assert operation is not None
        assert operation.parameters.check_modified is True
        assert operation.state == OperationState.AWAITING_UNSAVED_CHANGES_DECISION
        _, client_commands = command.collect(operation.handle)
        assert client_commands == [{"command": "check_modified", "resume_previous": True}]

    async def test_accepts_parsed_parameters(self, command: WorkflowTransitionCommand) -> None:
        """Already parsed parameters are accepted as-is."""
        parameters = TransitionParameters.from_mapping(make_parameters("submit", ui="1"))

        operation = await command.execute(parameters)

        assert operation is not None
        assert operation.state == OperationState.AWAITING_COMMENT_INPUT
        _, client_commands = command.collect(operation.handle)
        assert client_commands == [
            {
                "command": "comment_dialog",
                "items": [{"id": "home", "language": "en", "version": 1}],
                "command_id": "submit",
            }
        ]

    async def test_suppressed_comment(self, command: WorkflowTransitionCommand, mock_engine: AsyncMock) -> None:
        """ui=1 with suppresscomment=1 executes straight away with no comments."""
        operation = await command.execute(make_parameters(ui="1", suppresscomment="1"))

        assert operation is not None
        assert operation.state == OperationState.EXECUTING
        assert mock_engine.execute_command.await_args.args[3] == {}


@pytest.mark.asyncio
class TestResume:
    """Tests for postbacks."""

    async def test_comment_flow(self, command: WorkflowTransitionCommand, mock_engine: AsyncMock) -> None:
        """Submitted comments are passed on and completion refreshes the item."""
        operation = await command.execute(make_parameters(ui="1"))
        assert operation is not None
        command.collect(operation.handle)

        resumed = await command.resume(operation.handle, '{"Comments": "Please review"}')

        assert resumed.state == OperationState.EXECUTING
        args = mock_engine.execute_command.await_args.args
        assert args[3] == {"Comments": "Please review"}

        await args[4]({"Comments": "Please review"})

        completed, client_commands = command.collect(operation.handle)
        assert completed.state == OperationState.COMPLETED
        assert client_commands == [{"command": "message", "message": "item:refresh"}]

    @pytest.mark.parametrize("result", ["null", "undefined"])
    async def test_empty_dialog_result(
        self,
        command: WorkflowTransitionCommand,
        mock_engine: AsyncMock,
        result: str,
    ) -> None:
        """A dialog closed without a value ends silently."""
        operation = await command.execute(make_parameters(ui="1"))
        assert operation is not None

        resumed = await command.resume(operation.handle, result)

        assert resumed.state == OperationState.CANCELLED
        mock_engine.execute_command.assert_not_awaited()

    async def test_cancel_unsaved_changes(self, command: WorkflowTransitionCommand, mock_engine: AsyncMock) -> None:
        """Cancelling the unsaved-changes prompt ends silently."""
        operation = await command.execute(make_parameters(), page_modified=True)
        assert operation is not None
        command.collect(operation.handle)

        resumed = await command.resume(operation.handle, "cancel")

        assert resumed.state == OperationState.CANCELLED
        _, client_commands = command.collect(operation.handle)
        assert client_commands == []
        mock_engine.execute_command.assert_not_awaited()

    async def test_concurrent_transition_while_suspended(
        self,
        command: WorkflowTransitionCommand,
        mock_engine: AsyncMock,
        item_store: InMemoryItemStore,
        locator: ItemLocator,
    ) -> None:
        """Another user moving the item during the dialog rejects the postback."""
        operation = await command.execute(make_parameters(ui="1"))
        assert operation is not None
        command.collect(operation.handle)

        await item_store.set_state(locator, "awaiting-approval")
        resumed = await command.resume(operation.handle, '{"Comments": "Too late"}')

        assert resumed.state == OperationState.REJECTED
        mock_engine.execute_command.assert_not_awaited()
        _, client_commands = command.collect(operation.handle)
        assert {"command": "message", "message": "item:refresh"} in client_commands

    async def test_unknown_handle(self, command: WorkflowTransitionCommand) -> None:
        """Postbacks for unknown operations raise."""
        with pytest.raises(OperationNotFoundError):
            await command.resume(uuid4(), "cancel")

    async def test_resume_executing_operation(self, command: WorkflowTransitionCommand) -> None:
        """Only suspended operations accept postbacks."""
        operation = await command.execute(make_parameters())
        assert operation is not None

        with pytest.raises(OperationAlreadyFinishedError):
            await command.resume(operation.handle, "yes")

    async def test_concurrent_postbacks_dispatch_once(
        self,
        item_store: InMemoryItemStore,
        mock_engine: AsyncMock,
    ) -> None:
        """A second postback arriving while the first is handled is refused."""
        command = WorkflowTransitionCommand(item_store=_YieldingItemStore(item_store), workflow_engine=mock_engine)
        operation = await command.execute(make_parameters(ui="1"))
        assert operation is not None

        first, second = await asyncio.gather(
            command.resume(operation.handle, '{"Comments": "a"}'),
            command.resume(operation.handle, '{"Comments": "b"}'),
            return_exceptions=True,
        )

        mock_engine.execute_command.assert_awaited_once()
        assert mock_engine.execute_command.await_args.args[3] == {"Comments": "a"}
        assert isinstance(second, OperationAlreadyFinishedError)
        assert not isinstance(first, BaseException)
        assert first.state == OperationState.EXECUTING

    async def test_handle_released_after_postback(
        self,
        item_store: InMemoryItemStore,
        mock_engine: AsyncMock,
    ) -> None:
        """The handle is released once a postback has been handled."""
        command = WorkflowTransitionCommand(item_store=_YieldingItemStore(item_store), workflow_engine=mock_engine)
        operation = await command.execute(make_parameters(ui="1"), page_modified=True)
        assert operation is not None

        operation = await command.resume(operation.handle, "yes")
        assert operation.state == OperationState.AWAITING_COMMENT_INPUT

        operation = await command.resume(operation.handle, '{"Comments": "a"}')
        assert operation.state == OperationState.EXECUTING


@pytest.mark.asyncio
class TestEngineFailure:
    """Tests for the failure callback handed to the engine."""

    async def test_stale_at_apply_time(
        self,
        command: WorkflowTransitionCommand,
        mock_engine: AsyncMock,
        locator: ItemLocator,
    ) -> None:
        """A stale command reported by the engine rejects and forgets the operation."""
        operation = await command.execute(make_parameters())
        assert operation is not None

        on_failure = mock_engine.execute_command.await_args.kwargs["on_failure"]
        await on_failure(StaleTransitionError(locator, "submit", "awaiting-approval"))

        rejected, client_commands = command.collect(operation.handle)
        assert rejected.state == OperationState.REJECTED
        assert client_commands == [
            {"command": "alert", "message": DEFAULT_STALE_TRANSITION_MESSAGE},
            {"command": "message", "message": "item:refresh"},
        ]
        assert command.list_operations() == []

    async def test_other_failure(self, command: WorkflowTransitionCommand, mock_engine: AsyncMock) -> None:
        """Other engine failures end the operation with an alert."""
        operation = await command.execute(make_parameters())
        assert operation is not None

        on_failure = mock_engine.execute_command.await_args.kwargs["on_failure"]
        await on_failure(MissingWorkflowError(operation.parameters.locator))

        failed, client_commands = command.collect(operation.handle)
        assert failed.state == OperationState.FAILED
        assert client_commands == [{"command": "alert", "message": DEFAULT_FAILURE_MESSAGE}]
        assert command.list_operations() == []

@pytest.mark.asyncio
class TestCollect:
    """Tests for collecting client commands."""

    async def test_terminal_operations_are_forgotten(self, command: WorkflowTransitionCommand) -> None:
        """Once collected, finished operations are discarded."""
        operation = await command.execute(make_parameters("approve"))
        assert operation is not None

        command.collect(operation.handle)

        with pytest.raises(OperationNotFoundError):
            command.get_operation(operation.handle)

    async def test_suspended_operations_are_kept(self, command: WorkflowTransitionCommand) -> None:
        """Suspended operations stay available for their postback."""
        operation = await command.execute(make_parameters(ui="1"))
        assert operation is not None

        command.collect(operation.handle)

        assert command.get_operation(operation.handle).state == OperationState.AWAITING_COMMENT_INPUT
        assert command.collect(operation.handle)[1] == []


@pytest.mark.asyncio
async def test_custom_client_factory(item_store: InMemoryItemStore, mock_engine: AsyncMock) -> None:
    """Client effects go to the channel built by the factory."""
    channel = Mock()
    command = WorkflowTransitionCommand(
        item_store=item_store,
        workflow_engine=mock_engine,
        client_factory=lambda operation: channel,
    )

    await command.execute(make_parameters("approve"))

    channel.alert.assert_called_once_with(DEFAULT_STALE_TRANSITION_MESSAGE)
    channel.send_message.assert_called_once_with("item:refresh")
