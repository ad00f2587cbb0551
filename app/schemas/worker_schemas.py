from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict


class WorkerCreate(BaseModel):
    name: str
    phone: str
    area: str
    price_steel: float = Field(0, ge=0)
    price_plastic: float = Field(0, ge=0)
    price_paper: float = Field(0, ge=0)


class WorkerSchema(WorkerCreate):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
