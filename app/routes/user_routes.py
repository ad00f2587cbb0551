from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.auth.auth import get_current_admin_user, get_current_user
from app.repositories.base import Repository
from app.repositories.dependencies import get_repository
from app.schemas.user_schemas import (
    CreditsBalance,
    CreditsGrant,
    CreditsUpdate,
    ProfileSchema,
)
from app.services import credit_service


router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", status_code=status.HTTP_200_OK)
async def get_users(
    repository: Repository = Depends(get_repository),
    current_user: ProfileSchema = Depends(get_current_admin_user),
) -> list[ProfileSchema]:
    """
    List citizen profiles (admin only)
    """
    return await credit_service.get_users(repository=repository)


@router.get("/{user_id}/credits", status_code=status.HTTP_200_OK)
async def get_user_credits(
    user_id: UUID,
    repository: Repository = Depends(get_repository),
    current_user: ProfileSchema = Depends(get_current_user),
) -> CreditsBalance:
    return await credit_service.get_balance(
        repository=repository, user_id=user_id, current_user=current_user
    )


@router.post("/{user_id}/credits", status_code=status.HTTP_200_OK)
async def grant_user_credits(
    user_id: UUID,
    grant: CreditsGrant,
    repository: Repository = Depends(get_repository),
    current_user: ProfileSchema = Depends(get_current_admin_user),
) -> ProfileSchema:
    """
    Add 1-1000 credits to a user's balance (admin only)
    """
    return await credit_service.grant_credits(
        repository=repository, user_id=user_id, grant=grant
    )


@router.put("/{user_id}/credits", status_code=status.HTTP_200_OK)
async def update_user_credits(
    user_id: UUID,
    credits_data: CreditsUpdate,
    repository: Repository = Depends(get_repository),
    current_user: ProfileSchema = Depends(get_current_admin_user),
) -> ProfileSchema:
    """
    Overwrite a user's balance (admin only)
    """
    return await credit_service.update_credits(
        repository=repository, user_id=user_id, credits_data=credits_data
    )
