from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict, field_validator

from app.schemas.status_schema import ReportStatus


class ReportCreate(BaseModel):
    complaint_id: UUID
    description: str = Field(..., max_length=2000)

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Description cannot be blank")
        return value.strip()


class ReportSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    complaint_id: UUID
    description: str
    status: ReportStatus = ReportStatus.PENDING
    created_at: datetime


class ReportStatusUpdate(BaseModel):
    status: ReportStatus
