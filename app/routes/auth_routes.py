from fastapi import APIRouter, Depends, Request, status

from app.auth.auth import get_current_user, get_token_payload
from app.config.config import settings
from app.repositories.base import Repository
from app.repositories.dependencies import get_repository
from app.schemas.user_schemas import (
    LoginResponse,
    LoginSchema,
    ProfileSchema,
    SignupResponse,
    SignupSchema,
    VerifyEmailSchema,
)
from app.services import auth_service
from app.utils.limiter import limiter


router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/login", status_code=status.HTTP_200_OK)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login_user(
    request: Request,
    login_data: LoginSchema,
    repository: Repository = Depends(get_repository),
) -> LoginResponse:
    """
    Sign in with email and password.

    The profile is created on first sign-in. Passing ``role`` switches the
    stored role before the token is issued.
    """
    return await auth_service.login(repository=repository, login_data=login_data)


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    signup_data: SignupSchema,
    repository: Repository = Depends(get_repository),
) -> SignupResponse:
    return await auth_service.signup(repository=repository, signup_data=signup_data)


@router.post("/verify-email", status_code=status.HTTP_200_OK)
async def verify_email(
    data: VerifyEmailSchema,
    repository: Repository = Depends(get_repository),
) -> dict:
    return await auth_service.verify_email(repository=repository, data=data)


@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout(
    payload: dict = Depends(get_token_payload),
    repository: Repository = Depends(get_repository),
) -> dict:
    """Revoke the session behind the current token"""
    return await auth_service.logout(
        repository=repository, session_id=payload["session_id"]
    )


@router.get("/me", status_code=status.HTTP_200_OK)
async def get_me(current_user: ProfileSchema = Depends(get_current_user)) -> ProfileSchema:
    return current_user
