"""FastAPI application factory for Gatekeeper policy authoring."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

from gatekeeper_authoring import __version__
from gatekeeper_authoring.api.deps import init_workspace
from gatekeeper_authoring.api.middleware import RequestBodyLimitMiddleware, RequestTimingMiddleware
from gatekeeper_authoring.api.routers import authoring, lint
from gatekeeper_authoring.api.schemas import HealthResponse
from gatekeeper_authoring.service.workspace import PolicyWorkspace
from gatekeeper_authoring.settings import Settings


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Gatekeeper Authoring",
        description=(
            "Lints Rego against its parameters schema and builds Gatekeeper "
            "constraint template and constraint YAML."
        ),
        version=__version__,
    )
    app.state.settings = settings
    init_workspace(PolicyWorkspace())

    # Middleware
    app.add_middleware(RequestBodyLimitMiddleware, max_bytes=settings.max_request_body_bytes)
    app.add_middleware(RequestTimingMiddleware)

    app.include_router(lint.router, tags=["lint"])
    app.include_router(authoring.router, tags=["authoring"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


def main() -> None:
    """Run the REST API server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger = logging.getLogger("gatekeeper_authoring.api")
    logger.info(
        "Gatekeeper Authoring API v%s starting (host=%s, port=%d)",
        __version__,
        settings.api_server_host,
        settings.effective_port,
    )

    uvicorn.run(
        "gatekeeper_authoring.api.app:create_app",
        factory=True,
        host=settings.api_server_host,
        port=settings.effective_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
