"""Serial request/response schemas (camelCase for FE contract)."""

from datetime import datetime
from typing import Any, Generic, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field, model_serializer

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Response wrapper shared by every endpoint."""

    success: bool = True
    msg: Optional[str] = None
    data: Optional[T] = None

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler):
        # msg and data are left out of the body when unset; entity fields keep their nulls
        return {k: v for k, v in handler(self).items() if v is not None}


class SerialCreateBody(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    image: Optional[str] = None
    blogUrl: Optional[str] = None


class SerialUpdateBody(BaseModel):
    """Partial update; only fields present in the request are applied."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    image: Optional[str] = None
    blogUrl: Optional[str] = None


class SerialResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    blogUrl: Optional[str] = None
    createdAt: datetime


def serial_fields(body: BaseModel) -> dict[str, Any]:
    """Map a request body to model attribute names, keeping only fields the client sent."""
    data = body.model_dump(exclude_unset=True)
    if "blogUrl" in data:
        data["blog_url"] = data.pop("blogUrl")
    return data


def serial_to_response(serial) -> SerialResponse:
    return SerialResponse(
        id=serial.id,
        name=serial.name,
        description=serial.description,
        image=serial.image,
        blogUrl=serial.blog_url,
        createdAt=serial.created_at,
    )
