# 📄 File: app/main.py
#
# 🧭 Purpose (Layman Explanation):
# The control center that starts the Plant Health app, connects its parts together and
# makes sure everything is ready to handle requests from the mobile app.
#
# 🧪 Purpose (Technical Summary):
# FastAPI application factory and entry point: logging setup, ServiceContainer lifespan,
# middleware, router registration and the PlantCareException handler.
#
# 🔗 Dependencies:
# - FastAPI framework, uvicorn
# - app.shared.config.settings
# - app.modules.plant_health.container
# - app.api.v1.router
#
# 🔄 Connected Modules / Calls From:
# - uvicorn server startup
# - Development server commands (python -m app.main)

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.middleware.logging import RequestLoggingMiddleware
from app.api.v1.router import api_v1_router
from app.modules.plant_health.container import ServiceContainer
from app.shared.config.settings import Settings, get_settings
from app.shared.core.exceptions import PlantCareException, is_client_error
from app.shared.utils.logging import (
    get_logger,
    log_shutdown_event,
    log_startup_event,
    setup_logging,
)

logger = get_logger(__name__)


def create_application(
    container: Optional[ServiceContainer] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Application factory function.

    Args:
        container: Prebuilt services (tests). When omitted the lifespan builds
            one from settings and closes it on shutdown.
        settings: Settings override, defaults to the container's or get_settings()

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = settings or (container.settings if container else get_settings())
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        log_startup_event(settings.APP_NAME, settings.APP_VERSION, {"environment": settings.ENVIRONMENT})

        owns_container = container is None
        app.state.container = container or ServiceContainer.from_settings(settings)
        try:
            yield
        finally:
            if owns_container:
                await app.state.container.close()
            log_shutdown_event(settings.APP_NAME)

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )

    # =========================================================================
    # MIDDLEWARE CONFIGURATION
    # =========================================================================

    if not settings.is_testing:
        app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # =========================================================================
    # ROUTER REGISTRATION
    # =========================================================================

    app.include_router(api_v1_router, prefix="/api/v1")

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    @app.exception_handler(PlantCareException)
    async def plant_care_exception_handler(
        request: Request,
        exc: PlantCareException
    ) -> JSONResponse:
        """Handle Plant Health application exceptions."""
        log = logger.info if is_client_error(exc) else logger.error
        log(
            f"{exc.error_code}: {exc.message}",
            extra={"path": request.url.path, "status_code": exc.status_code}
        )

        body = exc.to_dict()
        body["error"]["timestamp"] = datetime.now(timezone.utc).isoformat()
        body["error"]["request_id"] = getattr(request.state, "request_id", None)
        return JSONResponse(status_code=exc.status_code, content=body)

    # =========================================================================
    # ROOT ENDPOINTS
    # =========================================================================

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "description": settings.APP_DESCRIPTION,
            "docs_url": "/docs" if settings.DEBUG else None,
            "health_check": "/api/v1/health",
            "api_base": "/api/v1",
        }

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        """Favicon endpoint to prevent 404 errors."""
        return Response(status_code=204)

    return app


def main():
    """
    Run the application in development.

    Used when running with python -m app.main or the plant-health script.
    """
    settings = get_settings()
    uvicorn.run(
        "app.main:create_application",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD and settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
