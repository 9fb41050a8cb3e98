"""FastAPI dependencies shared by the endpoints."""

from fastapi import Request

from congest.app.services.registry import ServiceRegistry


def get_registry(request: Request) -> ServiceRegistry:
    """Return the registry owned by the running application."""
    return request.app.state.registry
