"""
Pydantic schemas for scheduled webhook services.

A service definition names an HTTP call (target URL, method and JSON
payload) and a timing rule.  With ``recurring`` unset or false the
``interval`` is a one-shot delay in milliseconds measured from
registration; with ``recurring`` true it is the repeat period.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from congest.app.services.timing import MAX_INTERVAL_MS


class HttpMethod(str, Enum):
    """HTTP methods a scheduled service may use."""

    POST = "POST"
    GET = "GET"
    DELETE = "DELETE"
    PUT = "PUT"


class ServiceDefinition(BaseModel):
    """Schema for registering a scheduled service."""

    id: str = Field(..., min_length=1, description="Caller-supplied unique identifier")
    url: str = Field(..., min_length=1, description="Target URL invoked on every firing")
    payload: Dict[str, Any] = Field(
        ...,
        description="JSON object sent verbatim as the request body",
    )
    method: HttpMethod = Field(..., description="HTTP method used for the call")
    interval: int = Field(
        ...,
        ge=0,
        le=MAX_INTERVAL_MS,
        description="Milliseconds: one-shot delay, or repeat period when recurring (at most ten years)",
    )
    recurring: bool = Field(
        default=False,
        description="Fire every ``interval`` instead of once after it",
    )

    model_config = {
        "frozen": True,
    }

    @field_validator("recurring", mode="before")
    @classmethod
    def default_recurring(cls, v):
        """Treat an explicit ``null`` like an omitted flag."""
        if v is None:
            return False
        return v


class ServiceDeregister(BaseModel):
    """Schema for the deregistration request body."""

    id: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    """Generic acknowledgement returned by mutating endpoints."""

    success: bool = True
    message: str


class ServiceStatus(BaseModel):
    """Schema for reading a registered service.

    ``state`` is one of ``armed``, ``invoking``, ``inert`` (a one-shot
    that already fired) or ``stopped``.  ``next_run_time`` is ``None``
    whenever the timer will not fire again on its own.
    """

    id: str
    url: str
    payload: Dict[str, Any]
    method: HttpMethod
    interval: int
    recurring: bool
    state: str
    next_run_time: Optional[datetime] = None
