"""FastAPI application factory. No business logic; only wiring and startup."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from rolegate.api import router
from rolegate.api.errors import register_exception_handlers
from rolegate.core.config import Settings, get_settings
from rolegate.core.context import AppContext
from rolegate.services.bootstrap import bootstrap


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app around a fresh AppContext; bootstrap runs when the app starts."""
    context = AppContext.from_settings(settings or get_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        bootstrap(context)
        yield
        context.engine.dispose()

    app = FastAPI(
        title="Rolegate",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if context.settings.APP_ENV == "dev" else None,
        redoc_url=None,
    )
    app.state.context = context
    register_exception_handlers(app)
    app.include_router(router)
    return app
