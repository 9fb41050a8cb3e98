"""
API endpoints for scheduled webhook services.

These routes register and deregister services, stop or resume their
timers and report what is currently scheduled.  Duplicate ids are
reported with HTTP 400; deregistering an unknown id is acknowledged
like any other deregistration.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from congest.app.api.deps import get_registry
from congest.app.schemas.service import (
    MessageResponse,
    ServiceDefinition,
    ServiceDeregister,
    ServiceStatus,
)
from congest.app.services.registry import ServiceRegistry

router = APIRouter()


@router.get(
    "/status",
    response_model=List[ServiceStatus],
    summary="List registered services",
)
async def list_services(
    registry: ServiceRegistry = Depends(get_registry),
) -> List[ServiceStatus]:
    return [service.to_status() for service in registry.list()]


@router.get(
    "/status/{service_id}",
    response_model=ServiceStatus,
    summary="Get a registered service",
)
async def get_service(
    service_id: str,
    registry: ServiceRegistry = Depends(get_registry),
) -> ServiceStatus:
    service = registry.get(service_id)
    if service is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")
    return service.to_status()


@router.post(
    "/register",
    response_model=MessageResponse,
    summary="Register a scheduled service",
)
async def register_service(
    data: ServiceDefinition,
    registry: ServiceRegistry = Depends(get_registry),
) -> MessageResponse:
    """Register a service and arm its timer.

    With ``recurring`` false the call fires once, ``interval``
    milliseconds from now.  With ``recurring`` true it fires every
    ``interval`` milliseconds, truncated to whole seconds.
    """
    if registry.register(data) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Service already exists")
    return MessageResponse(message=f"Service with ID: {data.id} has been registered.")


@router.delete(
    "/deregister",
    response_model=MessageResponse,
    summary="Deregister a scheduled service",
)
async def deregister_service(
    data: ServiceDeregister,
    registry: ServiceRegistry = Depends(get_registry),
) -> MessageResponse:
    # Unknown ids are logged by the registry and acknowledged anyway.
    registry.deregister(data.id)
    return MessageResponse(message=f"Service with ID: {data.id} has been de-registered.")


@router.post(
    "/stop-all",
    response_model=MessageResponse,
    summary="Stop every timer",
)
async def stop_all(registry: ServiceRegistry = Depends(get_registry)) -> MessageResponse:
    registry.stop_all()
    return MessageResponse(message="stopped all")


@router.post(
    "/start-all",
    response_model=MessageResponse,
    summary="Resume every stopped timer",
)
async def start_all(registry: ServiceRegistry = Depends(get_registry)) -> MessageResponse:
    registry.start_all()
    return MessageResponse(message="started all")


@router.post(
    "/services/{service_id}/stop",
    response_model=MessageResponse,
    summary="Stop one service's timer",
)
async def stop_service(
    service_id: str,
    registry: ServiceRegistry = Depends(get_registry),
) -> MessageResponse:
    if not registry.stop_service(service_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")
    return MessageResponse(message=f"Service with ID: {service_id} has been stopped.")


@router.post(
    "/services/{service_id}/start",
    response_model=MessageResponse,
    summary="Resume one service's timer",
)
async def start_service(
    service_id: str,
    registry: ServiceRegistry = Depends(get_registry),
) -> MessageResponse:
    if not registry.start_service(service_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")
    return MessageResponse(message=f"Service with ID: {service_id} has been started.")
