from uuid import UUID

from fastapi import HTTPException, status

from app.config.config import settings
from app.repositories.base import InsufficientCredits, Repository
from app.schemas.credit_schemas import RedeemCodeSchema, RedeemResponse
from app.schemas.status_schema import UserRole
from app.schemas.user_schemas import (
    CreditsBalance,
    CreditsGrant,
    CreditsUpdate,
    ProfileSchema,
)
from app.utils.logger_config import setup_logger
from app.utils.utils import credits_to_next_reward, generate_redeem_code, get_eco_level

logger = setup_logger()


def _user_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


async def get_users(repository: Repository) -> list[ProfileSchema]:
    """Citizen profiles, ordered by name"""
    users = await repository.list_profiles(role=UserRole.USER)
    return sorted(users, key=lambda p: p.name.lower())


async def get_balance(
    repository: Repository, user_id: UUID, current_user: ProfileSchema
) -> CreditsBalance:
    if current_user.role != UserRole.ADMIN and current_user.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to view these credits",
        )

    profile = await repository.get_profile(user_id)
    if not profile:
        raise _user_not_found()

    return CreditsBalance(
        user_id=profile.user_id,
        credits=profile.credits,
        eco_level=get_eco_level(profile.credits),
        credits_to_next_reward=credits_to_next_reward(profile.credits),
    )


async def grant_credits(
    repository: Repository, user_id: UUID, grant: CreditsGrant
) -> ProfileSchema:
    """Add ``grant.credits`` to a balance in one atomic step"""
    profile = await repository.add_credits(user_id, grant.credits)
    if not profile:
        raise _user_not_found()
    logger.info(f"Added {grant.credits} credits to {profile.email} (now {profile.credits})")
    return profile


async def update_credits(
    repository: Repository, user_id: UUID, credits_data: CreditsUpdate
) -> ProfileSchema:
    """Overwrite a balance"""
    profile = await repository.update_profile(user_id, credits=credits_data.credits)
    if not profile:
        raise _user_not_found()
    logger.info(f"Set credits of {profile.email} to {profile.credits}")
    return profile


async def redeem_credits(
    repository: Repository, current_user: ProfileSchema
) -> RedeemResponse:
    """
    Exchange REDEEM_COST credits for a reward code.

    The debit and the new code are written together or not at all.
    """
    code = generate_redeem_code()
    try:
        result = await repository.redeem_credits(
            user_id=current_user.user_id, cost=settings.REDEEM_COST, code=code
        )
    except InsufficientCredits:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Insufficient credits"
        )

    if result is None:
        raise _user_not_found()

    profile, redeem_code = result
    logger.info(f"{profile.email} redeemed {settings.REDEEM_COST} credits for {redeem_code.code}")
    return RedeemResponse(redeem_code=redeem_code, credits=profile.credits)


async def get_redeem_codes(
    repository: Repository, current_user: ProfileSchema, limit: int | None = None
) -> list[RedeemCodeSchema]:
    if current_user.role == UserRole.ADMIN:
        return await repository.list_redeem_codes(limit=limit)
    return await repository.list_redeem_codes(user_id=current_user.user_id, limit=limit)
