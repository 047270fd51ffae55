from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from tasktracker.app import App
from tasktracker.config import Config
from tasktracker.errors import UserError
from tasktracker.web.error_handlers import (
    general_exception_handler,
    request_validation_error_handler,
    user_error_handler,
)
from tasktracker.web.openapi import set_custom_openapi
from tasktracker.web.ratelimit import LoginRateLimiter
from tasktracker.web.routers import tasks_router, users_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="TaskTracker API",
        lifespan=lifespan,
        openapi_tags=[],  # Tags will be added by custom OpenAPI function
    )

    # Shared state is read-only after startup, except the limiter storage which locks internally
    app.state.app = app_instance
    app.state.config = config
    app.state.login_limiter = LoginRateLimiter(
        attempts=config.login_rate_limit_attempts,
        window_seconds=config.login_rate_limit_window_seconds,
    )

    # Cookies are only sent cross-origin with credentials enabled
    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Health check endpoint (at root level, not versioned)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    # API v1 routes
    app.include_router(users_router, prefix="/api/v1")
    app.include_router(tasks_router, prefix="/api/v1")

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
