"""Litestar plugin for the workflow command.

This module provides the WorkflowCommandPlugin for seamless integration of
litestar-workflow-commands with Litestar applications.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from litestar.di import Provide
from litestar.exceptions import ImproperlyConfiguredException
from litestar.plugins import InitPluginProtocol

from litestar_workflow_commands.command import WorkflowTransitionCommand
from litestar_workflow_commands.config import WorkflowCommandConfig
from litestar_workflow_commands.engine.local import LocalWorkflowEngine
from litestar_workflow_commands.stores.memory import InMemoryItemStore

if TYPE_CHECKING:
    from litestar.config.app import AppConfig

    from litestar_workflow_commands.core.protocols import ItemStore, WorkflowEngine

__all__ = ["WorkflowCommandPlugin", "WorkflowCommandPluginConfig"]


@dataclass
class WorkflowCommandPluginConfig:
    """Configuration for the WorkflowCommandPlugin.

    Attributes:
        item_store: Optional item store. If not provided, an empty
            InMemoryItemStore is created.
        workflow_engine: Optional workflow engine. If not provided, a
            LocalWorkflowEngine is created on top of the in-memory store.
        command: Optional pre-configured command. Takes precedence over
            item_store, workflow_engine and command_config.
        command_config: Settings of the workflow command.
        dependency_key_command: The key used for dependency injection of the
            command. Defaults to "workflow_command".
        enable_api: Whether to enable the REST API endpoints. Defaults to True.
        api_path_prefix: URL path prefix for the command endpoints.
            Defaults to "/commands/workflow".
        api_guards: List of Litestar guards to apply to the command endpoints.
        api_tags: OpenAPI tags to apply to the command endpoints.
        include_api_in_schema: Whether to include the endpoints in the OpenAPI
            schema. Defaults to True.
    """

    item_store: ItemStore | None = None
    workflow_engine: WorkflowEngine | None = None
    command: WorkflowTransitionCommand | None = None
    command_config: WorkflowCommandConfig = field(default_factory=WorkflowCommandConfig)
    dependency_key_command: str = "workflow_command"
    enable_api: bool = True
    api_path_prefix: str = "/commands/workflow"
    api_guards: list[Any] = field(default_factory=list)
    api_tags: list[str] = field(default_factory=lambda: ["Workflow Commands"])
    include_api_in_schema: bool = True


class WorkflowCommandPlugin(InitPluginProtocol):
    """Litestar plugin for the workflow command.

    This plugin builds a :class:`WorkflowTransitionCommand`, provides it
    through dependency injection and registers its REST API.

    Example:
        Wiring in an existing item store and engine::

            from litestar import Litestar
            from litestar_workflow_commands import WorkflowCommandPlugin, WorkflowCommandPluginConfig

            app = Litestar(
                plugins=[
                    WorkflowCommandPlugin(
                        config=WorkflowCommandPluginConfig(
                            item_store=cms_item_store,
                            workflow_engine=cms_workflow_engine,
                        )
                    )
                ]
            )

        Using the command in a route handler::

            @get("/items/{item_id:str}/workflow-visible")
            async def workflow_visible(item_id: str, workflow_command: WorkflowTransitionCommand) -> bool:
                return workflow_command.query_state() != CommandState.HIDDEN
    """

    __slots__ = ("_command", "_config")

    def __init__(self, config: WorkflowCommandPluginConfig | None = None) -> None:
        """Initialize the plugin.

        Args:
            config: Optional configuration for the plugin.
        """
        self._config = config or WorkflowCommandPluginConfig()
        self._command: WorkflowTransitionCommand | None = None

    @property
    def command(self) -> WorkflowTransitionCommand:
        """Get the workflow command.

        Returns:
            The WorkflowTransitionCommand instance.

        Raises:
            RuntimeError: If accessed before plugin initialization.
        """
        if self._command is None:
            msg = "WorkflowCommandPlugin has not been initialized. Access command after app startup."
            raise RuntimeError(msg)
        return self._command

    def _build_command(self) -> WorkflowTransitionCommand:
        if self._config.command is not None:
            return self._config.command

        item_store = self._config.item_store
        workflow_engine = self._config.workflow_engine
        if workflow_engine is None:
            if item_store is None:
                item_store = InMemoryItemStore()
            if not isinstance(item_store, InMemoryItemStore):
                msg = "A workflow_engine is required when item_store is not an InMemoryItemStore"
                raise ImproperlyConfiguredException(msg)
            workflow_engine = LocalWorkflowEngine(item_store)
        elif item_store is None:
            msg = "An item_store is required when a workflow_engine is provided"
            raise ImproperlyConfiguredException(msg)

        return WorkflowTransitionCommand(
            item_store=item_store,
            workflow_engine=workflow_engine,
            config=self._config.command_config,
        )

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Initialize the plugin when the Litestar app starts.

        This method:
        1. Creates or uses the provided WorkflowTransitionCommand
        2. Adds its dependency provider to the app config
        3. Optionally registers the REST API controller if enable_api=True

        Args:
            app_config: The Litestar application configuration.

        Returns:
            The modified application configuration.
        """
        self._command = self._build_command()

        def provide_command() -> WorkflowTransitionCommand:
            return self._command  # type: ignore[return-value]

        app_config.dependencies[self._config.dependency_key_command] = Provide(
            provide_command,
            sync_to_thread=False,
        )

        if self._config.enable_api:
            from litestar import Router

            from litestar_workflow_commands.exceptions import WorkflowCommandsError
            from litestar_workflow_commands.web.controllers import WorkflowCommandController
            from litestar_workflow_commands.web.exceptions import workflow_command_error_handler

            command_router = Router(
                path=self._config.api_path_prefix,
                route_handlers=[WorkflowCommandController],
                guards=self._config.api_guards,
                tags=self._config.api_tags,
                include_in_schema=self._config.include_api_in_schema,
            )
            app_config.route_handlers.append(command_router)
            app_config.exception_handlers[WorkflowCommandsError] = workflow_command_error_handler  # type: ignore[assignment]

        return app_config
