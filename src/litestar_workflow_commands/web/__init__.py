"""Web integration for litestar-workflow-commands.

This module provides the REST API controller through which an editor page
drives the workflow command. The API is registered automatically when using
WorkflowCommandPlugin with enable_api=True (the default).

Example:
    Basic usage::

        from litestar import Litestar
        from litestar_workflow_commands import WorkflowCommandPlugin, WorkflowCommandPluginConfig

        app = Litestar(
            plugins=[
                WorkflowCommandPlugin(
                    config=WorkflowCommandPluginConfig(api_path_prefix="/shell/commands/workflow"),
                ),
            ],
        )
"""

from __future__ import annotations

from litestar_workflow_commands.web.controllers import WorkflowCommandController
from litestar_workflow_commands.web.dto import CommandStateDTO, ExecuteCommandDTO, OperationDTO, PostbackDTO
from litestar_workflow_commands.web.exceptions import workflow_command_error_handler

__all__ = [
    "CommandStateDTO",
    "ExecuteCommandDTO",
    "OperationDTO",
    "PostbackDTO",
    "WorkflowCommandController",
    "workflow_command_error_handler",
]
