"""
Main entrypoint for the Congest API.

This module assembles the FastAPI application, sets up logging and
attaches the service registry.  The ``create_app`` function builds
and configures the app, which is then instantiated at module import
time as ``app``::

    uvicorn congest.app.main:app
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.router import router
from .core.config import settings
from .core.logging_config import setup_logging
from .services.registry import ServiceRegistry


def create_app(registry: Optional[ServiceRegistry] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    registry : ServiceRegistry, optional
        Registry served by the application.  A new one, with its own
        scheduler, is created if omitted.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(settings.log_level, settings.log_file)

    service_registry = registry or ServiceRegistry(settings=settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Timers only run while the application is being served.
        service_registry.start()
        try:
            yield
        finally:
            service_registry.shutdown(wait=False)

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)
    app.state.registry = service_registry

    app.include_router(router)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Malformed bodies are a client error like any other: answer 400.
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
