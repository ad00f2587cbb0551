from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict

from app.schemas.status_schema import ComplaintStatus


class ComplaintCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    photo: str | None = Field(
        None, description="data:image/...;base64 payload or an http(s) image URL"
    )


class ComplaintSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    name: str
    location: str
    description: str
    image_url: str | None = None
    status: ComplaintStatus = ComplaintStatus.PENDING
    assigned_worker_id: UUID | None = None
    assigned_worker_name: str | None = None
    assigned_worker_phone: str | None = None
    created_at: datetime
    updated_at: datetime


class AssignWorkerSchema(BaseModel):
    worker_id: UUID


class ComplaintStatusUpdate(BaseModel):
    status: ComplaintStatus
