from fastapi import APIRouter, Depends, Query, status

from app.auth.auth import get_current_user
from app.repositories.base import Repository
from app.repositories.dependencies import get_repository
from app.schemas.credit_schemas import RedeemCodeSchema, RedeemResponse
from app.schemas.user_schemas import ProfileSchema
from app.services import credit_service

router = APIRouter(prefix="/api", tags=["Credits"])


@router.post("/credits/redeem", status_code=status.HTTP_200_OK)
async def redeem_credits(
    repository: Repository = Depends(get_repository),
    current_user: ProfileSchema = Depends(get_current_user),
) -> RedeemResponse:
    """
    Exchange 100 credits for a reward code
    """
    return await credit_service.redeem_credits(
        repository=repository, current_user=current_user
    )


@router.get("/redeem-codes", status_code=status.HTTP_200_OK)
async def get_redeem_codes(
    limit: int | None = Query(None, ge=1, le=500),
    repository: Repository = Depends(get_repository),
    current_user: ProfileSchema = Depends(get_current_user),
) -> list[RedeemCodeSchema]:
    """
    Issued reward codes, newest first (all for admins, own for citizens)
    """
    return await credit_service.get_redeem_codes(
        repository=repository, current_user=current_user, limit=limit
    )
