"""Litestar plugin for approval workflow integration.

This module provides the ApprovalPlugin for integrating litestar-approvals
with Litestar applications.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from litestar.di import Provide
from litestar.plugins import InitPluginProtocol

from litestar_approvals.config import ApprovalConfig
from litestar_approvals.engine.local import LocalApprovalEngine

if TYPE_CHECKING:
    from litestar.config.app import AppConfig

    from litestar_approvals.core import ContentStore

__all__ = ["ApprovalPlugin", "ApprovalPluginConfig"]


@dataclass
class ApprovalPluginConfig:
    """Configuration for the ApprovalPlugin.

    Attributes:
        engine: Optional pre-configured runtime. If not provided, a
            LocalApprovalEngine is created from ``approval_config`` and ``content_store``.
        approval_config: Routing and escalation configuration for a created engine.
        content_store: Optional content store for a created engine.
        dependency_key_engine: The key used for dependency injection of the
            runtime. Defaults to "approval_engine". The bundled API expects the
            default key.
        enable_api: Whether to enable the REST API endpoints. Defaults to True.
        api_path_prefix: URL path prefix for the approval API. Defaults to "/approvals".
        api_guards: List of Litestar guards to apply to all approval API endpoints.
        api_tags: OpenAPI tags to apply to approval API endpoints.
        include_api_in_schema: Whether to include API endpoints in OpenAPI schema.
            Defaults to True.
    """

    engine: LocalApprovalEngine | None = None
    approval_config: ApprovalConfig = field(default_factory=ApprovalConfig)
    content_store: ContentStore | None = None
    dependency_key_engine: str = "approval_engine"
    enable_api: bool = True
    api_path_prefix: str = "/approvals"
    api_guards: list[Any] = field(default_factory=list)
    api_tags: list[str] = field(default_factory=lambda: ["Approvals"])
    include_api_in_schema: bool = True


class ApprovalPlugin(InitPluginProtocol):
    """Litestar plugin for hierarchical approval workflows.

    This plugin provides the approval runtime through dependency injection and
    optionally mounts the approval REST API.

    Example:
        Basic usage::

            from litestar import Litestar
            from litestar_approvals import ApprovalConfig, ApprovalPlugin, ApprovalPluginConfig

            app = Litestar(
                plugins=[
                    ApprovalPlugin(
                        config=ApprovalPluginConfig(
                            approval_config=ApprovalConfig(default_threshold_hours=24),
                        )
                    )
                ]
            )

        Using the runtime in a route handler::

            from litestar import post
            from litestar_approvals import LocalApprovalEngine


            @post("/pages/{page_id:str}/submit")
            async def submit_page(page_id: str, approval_engine: LocalApprovalEngine) -> dict:
                instance = await approval_engine.start_workflow(f"/content/site/{page_id}")
                return {"instance_id": str(instance.id), "assignee": instance.assignee_group}
    """

    __slots__ = ("_config", "_engine")

    def __init__(self, config: ApprovalPluginConfig | None = None) -> None:
        """Initialize the plugin.

        Args:
            config: Optional configuration for the plugin.
        """
        self._config = config or ApprovalPluginConfig()
        self._engine: LocalApprovalEngine | None = None

    @property
    def engine(self) -> LocalApprovalEngine:
        """Get the approval runtime.

        Raises:
            RuntimeError: If accessed before plugin initialization.
        """
        if self._engine is None:
            msg = "ApprovalPlugin has not been initialized. Access engine after app startup."
            raise RuntimeError(msg)
        return self._engine

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Initialize the plugin when the Litestar app starts.

        This method:
        1. Creates or uses the provided LocalApprovalEngine
        2. Adds the engine dependency provider to the app config
        3. Optionally registers the REST API controller if enable_api=True

        Args:
            app_config: The Litestar application configuration.

        Returns:
            The modified application configuration.
        """
        self._engine = self._config.engine or LocalApprovalEngine(
            config=self._config.approval_config,
            content_store=self._config.content_store,
        )

        def provide_engine() -> LocalApprovalEngine:
            return self._engine  # type: ignore[return-value]

        app_config.dependencies[self._config.dependency_key_engine] = Provide(
            provide_engine,
            sync_to_thread=False,
        )

        if self._config.enable_api:
            from litestar import Router

            from litestar_approvals.web.controllers import ApprovalController

            approval_router = Router(
                path=self._config.api_path_prefix,
                route_handlers=[ApprovalController],
                guards=self._config.api_guards,
                tags=self._config.api_tags,
                include_in_schema=self._config.include_api_in_schema,
            )
            app_config.route_handlers.append(approval_router)

        return app_config
