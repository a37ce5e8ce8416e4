"""RestMap Application — wires registry, store, controllers, routes and the auth gate onto FastAPI.

Invariants:
    - Construction order: database manager → ModelRegistry → Store → controllers
    - One controller instance per resource name for the application's lifetime
    - map() runs the mapping callback exactly once; the route table is frozen afterwards
    - AuthGate installed only when an `authentication` option is supplied, and
      only with a signing secret from the option or JWT_SECRET (no built-in default)
    - A mapping callback that raises leaves no routes behind
    - start() never listens if building the app fails

Design Decisions:
    - Mapping callback receives the Router as a parameter (no rebound receiver)
    - Pre-built FastAPI instance reused when passed as `app`
    - uvicorn serves the app; the engine is disposed when serving ends
"""

import logging
from collections.abc import Callable
from typing import Any

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from restmap.api.auth_gate import AuthGate, AuthGateMiddleware
from restmap.api.error_handlers import register_error_handlers
from restmap.api.route_binding import bind_routes
from restmap.config import ApplicationConfig, Settings, get_settings
from restmap.core.errors import ConfigurationError
from restmap.core.naming import controller_resource_name
from restmap.core.route_table import Route, Router
from restmap.db.registry import ModelRegistry
from restmap.infrastructure.database import DatabaseSessionManager
from restmap.infrastructure.loader import load_mapped_classes, load_subclasses
from restmap.infrastructure.observability import setup_logging
from restmap.infrastructure.token_verifier import TokenVerifier
from restmap.services.controller import Controller
from restmap.services.store import Store

logger = logging.getLogger(__name__)


class Application:
    """Convention-based REST application."""

    def __init__(
        self,
        config: ApplicationConfig | None = None,
        *,
        settings: Settings | None = None,
        **options: Any,
    ):
        self.settings = settings or get_settings()
        self.config = config or ApplicationConfig.model_validate(options)
        self.database = self._build_database()
        self.registry = ModelRegistry(self._model_classes())
        self.store = Store(self.registry, self.database)
        self.controllers = self._build_controllers()
        self.router = Router(self.controllers)
        self.gate = self._build_gate()
        self._mapped = False
        self._app: FastAPI | None = None
        self._server: uvicorn.Server | None = None

    @property
    def routes(self) -> tuple[Route, ...]:
        return self.router.routes

    def map(self, mapping: Callable[[Router], Any]) -> "Application":
        """Run the route mapping callback once and freeze the table."""
        if self._mapped:
            raise ConfigurationError("Routes have already been mapped")
        if self._app is not None:
            raise ConfigurationError("Routes must be mapped before get_app()")
        router = Router(self.controllers)
        mapping(router)
        router.freeze()
        self.router = router
        self._mapped = True
        logger.info(f"Mapped {len(self.router.routes)} route(s)")
        return self

    def get_app(self) -> FastAPI:
        """FastAPI app with error handlers, auth gate and bound routes."""
        if self._app is not None:
            return self._app
        app = self.config.app
        if app is None:
            app = FastAPI(title="RestMap API")
        register_error_handlers(app)
        if self.gate is not None:
            app.add_middleware(AuthGateMiddleware, gate=self.gate)
        if self.settings.cors_origins:
            app.add_middleware(
                CORSMiddleware,
                allow_origins=self.settings.cors_origins,
                allow_methods=["*"],
                allow_headers=["*"],
            )
        bind_routes(app, self.router.freeze())
        self._app = app
        return app

    async def start(self, port: int | None = None, host: str | None = None) -> None:
        """Build the app and serve it until shutdown."""
        setup_logging(self.settings.log_level, self.settings.log_format)
        app = self.get_app()
        port = _first_set(port, self.config.port, self.settings.port)
        host = host or self.settings.host
        self._server = uvicorn.Server(
            uvicorn.Config(app, host=host, port=port, log_config=None),
        )
        logger.info(f"Starting RestMap on {host}:{port}", extra={"port": port})
        try:
            await self._server.serve()
        finally:
            await self.close()
            logger.info("RestMap stopped")

    async def close(self) -> None:
        await self.database.dispose()

    # ─── Construction ────────────────────────────────────────────

    def _build_database(self) -> DatabaseSessionManager:
        connection = self.config.database.connection
        if isinstance(connection, AsyncEngine):
            return DatabaseSessionManager(connection)
        return DatabaseSessionManager.from_url(
            connection or self.settings.database_url,
            pool_size=self.settings.database_pool_size,
            max_overflow=self.settings.database_max_overflow,
        )

    def _model_classes(self) -> list[type]:
        models = self.config.database.models
        classes = list(models.classes)
        if models.dir is not None:
            classes.extend(load_mapped_classes(models.dir))
        return classes

    def _build_controllers(self) -> dict[str, Controller]:
        classes = list(self.config.controllers.classes)
        if self.config.controllers.dir is not None:
            classes.extend(load_subclasses(self.config.controllers.dir, Controller))

        controllers: dict[str, Controller] = {}
        for cls in classes:
            if not issubclass(cls, Controller):
                raise ConfigurationError(f"{cls.__name__} is not a Controller")
            existing = controllers.get(controller_resource_name(cls.__name__))
            if existing is not None:
                if type(existing) is cls:
                    continue
                raise ConfigurationError(
                    f"Controllers {type(existing).__name__} and {cls.__name__} "
                    f"both claim '{existing.name}'",
                )
            controller = cls(self.store)
            controllers[controller.name] = controller
        logger.debug(f"Constructed controllers: {sorted(controllers)}")
        return controllers

    def _build_gate(self) -> AuthGate | None:
        auth = self.config.authentication
        if auth is None:
            return None
        secret = auth.secret or self.settings.jwt_secret
        if not secret:
            raise ConfigurationError(
                "Authentication enabled but no signing secret: "
                "pass authentication.secret or set JWT_SECRET",
            )
        verifier = TokenVerifier(
            secret, auth.algorithms or [self.settings.jwt_algorithm],
        )
        return AuthGate(verifier, auth.unauthenticated)


def _first_set(*values: int | None) -> int:
    return next(v for v in values if v is not None)
