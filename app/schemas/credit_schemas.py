from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict


class RedeemCodeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    code: str
    user_id: UUID
    redeemed: bool = False
    created_at: datetime


class RedeemResponse(BaseModel):
    success: bool = True
    redeem_code: RedeemCodeSchema
    credits: int
