from datetime import datetime
from uuid import UUID
from pydantic import EmailStr, BaseModel, Field, ConfigDict

from app.schemas.status_schema import UserRole


class SignupSchema(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=100)


class SignupResponse(BaseModel):
    id: UUID
    email: EmailStr
    name: str
    email_verified: bool
    message: str


class VerifyEmailSchema(BaseModel):
    email: EmailStr
    code: str


class LoginSchema(BaseModel):
    email: EmailStr
    password: str
    role: UserRole | None = None


class AccountSchema(BaseModel):
    """Credential record owned by the identity provider"""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    password: str
    name: str
    email_verified: bool = False
    verification_code: str | None = None
    created_at: datetime


class SessionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    revoked: bool = False
    created_at: datetime


class ProfileSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    name: str
    email: str
    role: UserRole = UserRole.USER
    credits: int = Field(0, ge=0)
    created_at: datetime
    updated_at: datetime


class LoginResponse(BaseModel):
    success: bool = True
    user: ProfileSchema
    token: str
    token_type: str = "bearer"


class CreditsGrant(BaseModel):
    """Additive credit grant issued by an admin"""

    credits: int = Field(..., ge=1, le=1000)


class CreditsUpdate(BaseModel):
    """Absolute credit balance"""

    credits: int = Field(..., ge=0)


class CreditsBalance(BaseModel):
    user_id: UUID
    credits: int
    eco_level: str
    credits_to_next_reward: int
