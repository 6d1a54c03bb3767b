"""REST API controller for the workflow command.

The editor page invokes the command, replays the client commands it gets back
(dialogs, alerts, refresh requests) and posts the user's answer to the
operation's postback endpoint until the operation finishes.
"""

from __future__ import annotations

from typing import ClassVar
from uuid import UUID

from litestar import Controller, get, post
from litestar.exceptions import NotFoundException, PermissionDeniedException
from litestar.status_codes import HTTP_200_OK

from litestar_workflow_commands.command import WorkflowTransitionCommand  # noqa: TC001 - needed for DI
from litestar_workflow_commands.core.types import CommandState
from litestar_workflow_commands.web.dto import CommandStateDTO, ExecuteCommandDTO, OperationDTO, PostbackDTO

__all__ = ["WorkflowCommandController"]


class WorkflowCommandController(Controller):
    """API controller for the workflow command.

    Tags: Workflow Commands
    """

    path = "/"
    tags: ClassVar[list[str]] = ["Workflow Commands"]

    @get("/state")
    async def get_state(self, workflow_command: WorkflowTransitionCommand) -> CommandStateDTO:
        """Return whether the workflow command is shown.

        Args:
            workflow_command: Injected workflow command.

        Returns:
            Command state DTO.
        """
        return CommandStateDTO(state=workflow_command.query_state().value)

    @post("/execute", status_code=HTTP_200_OK)
    async def execute(
        self,
        data: ExecuteCommandDTO,
        workflow_command: WorkflowTransitionCommand,
    ) -> OperationDTO:
        """Invoke the workflow command for an item.

        Args:
            data: Command parameters and page state.
            workflow_command: Injected workflow command.

        Returns:
            The operation and the client commands to replay.

        Raises:
            PermissionDeniedException: If workflows are disabled.
            NotFoundException: If the item does not exist.
        """
        if workflow_command.query_state() == CommandState.HIDDEN:
            raise PermissionDeniedException(detail="Workflows are disabled")

        operation = await workflow_command.execute(data.parameters, page_modified=data.page_modified)
        if operation is None:
            raise NotFoundException(detail=f"Item '{data.parameters.get('id')}' not found")

        operation, client_commands = workflow_command.collect(operation.handle)
        return OperationDTO.from_operation(operation, client_commands)

    @post("/{handle:uuid}/postback", status_code=HTTP_200_OK)
    async def postback(
        self,
        handle: UUID,
        data: PostbackDTO,
        workflow_command: WorkflowTransitionCommand,
    ) -> OperationDTO:
        """Resume a suspended operation with the user's answer.

        Args:
            handle: The operation handle.
            data: The dialog result and page state.
            workflow_command: Injected workflow command.

        Returns:
            The operation and the client commands to replay.
        """
        operation = await workflow_command.resume(handle, data.result, page_modified=data.page_modified)
        operation, client_commands = workflow_command.collect(operation.handle)
        return OperationDTO.from_operation(operation, client_commands)

    @get("/{handle:uuid}")
    async def get_operation(
        self,
        handle: UUID,
        workflow_command: WorkflowTransitionCommand,
    ) -> OperationDTO:
        """Poll an operation for its state and new client commands.

        Finished operations are forgotten once polled.

        Args:
            handle: The operation handle.
            workflow_command: Injected workflow command.

        Returns:
            The operation and the client commands queued since the last call.
        """
        operation, client_commands = workflow_command.collect(handle)
        return OperationDTO.from_operation(operation, client_commands)
