"""
Atomsmiths Backend — Shared Schemas
=====================================

What:  Envelope, error and helper models shared by every resource.
Who:   Routes use the envelope as response_model; services subclass
       DocumentModel for the records they return.

Wire conventions:
    - Field names are camelCase on the wire and in the store; Python code
      uses snake_case attributes through an alias generator.
    - Document identity is exposed as a string `_id`.
    - Successful responses are wrapped as {"ok": true, "data": ...}.
"""

from datetime import datetime
from typing import Any, Generic, Optional, Type, TypeVar

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from app.exceptions import ValidationError

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class CamelModel(BaseModel):
    """Base for every API model: camelCase aliases, populate by either name."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class DocumentModel(CamelModel):
    """
    A stored document as returned to clients.

    Built straight from the raw Motor dict with model_validate(doc); the
    ObjectId under `_id` is converted to its hex string.
    """

    id: str = Field(alias="_id", description="Document identifier (ObjectId hex)")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, v: Any) -> Any:
        if isinstance(v, ObjectId):
            return str(v)
        return v


class DataResponse(BaseModel, Generic[T]):
    """Success envelope returned by every data endpoint."""

    ok: bool = True
    data: T


class DeleteResult(CamelModel):
    """Payload of a successful delete."""

    message: str


class MemberDeleteResult(DeleteResult):
    deleted_blogs: int = Field(description="Blogs removed along with the member")


class JoinResponse(BaseModel):
    """Response of POST /api/join."""

    success: bool = True
    id: str


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "ok": false,
            "error": "validation_error",
            "message": "Name and email are required",
            "details": {"field": "name"},
            "request_id": "a1b2c3d4"
        }
    """

    ok: bool = False
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""

    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


def parse_payload(model: Type[M], payload: Any) -> M:
    """
    Validate a decoded JSON body against an input model.

    Pydantic failures are re-raised as the application's ValidationError so
    they share the 400 response format with the services' own checks.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError(message="Request body must be a JSON object")
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        message = first.get("msg", "Invalid input")
        if field:
            message = f"Invalid value for '{field}': {message}"
        raise ValidationError(message=message, field=field)
