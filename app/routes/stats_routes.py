from fastapi import APIRouter, Depends, status

from app.auth.auth import get_current_admin_user
from app.repositories.base import Repository
from app.repositories.dependencies import get_repository
from app.schemas.stats_schema import AdminStats, ChampionSchema, LeaderboardResponse
from app.schemas.user_schemas import ProfileSchema
from app.services import stats_service

router = APIRouter(prefix="/api", tags=["Statistics"])


@router.get(
    "/stats",
    response_model=AdminStats,
    status_code=status.HTTP_200_OK,
    summary="Get dashboard statistics",
    description="Complaint, report and credit aggregates for administrators.",
)
async def get_admin_stats(
    repository: Repository = Depends(get_repository),
    current_user: ProfileSchema = Depends(get_current_admin_user),
):
    """
    Get dashboard statistics.

    - **Requires**: Admin access
    - **Returns**: Totals per entity, status breakdowns and credit aggregates

    **Example Response:**
    ```json
    {
        "total_users": 5,
        "complaints": {"total": 4, "pending": 1, "assigned": 1, "completed": 2, "resolution_rate": 0.5},
        "reports": {"total": 1, "pending": 1, "reviewed": 0, "resolved": 0},
        "credits": {"total_credits": 340, "average_credits": 68, "active_users": 4,
                    "eligible_users": 1, "redeem_codes_issued": 0}
    }
    ```
    """
    return await stats_service.get_admin_stats(repository)


@router.get("/green-champion", status_code=status.HTTP_200_OK)
async def get_green_champion(
    repository: Repository = Depends(get_repository),
) -> ChampionSchema:
    """
    The citizen with the most eco-credits
    """
    return await stats_service.get_green_champion(repository)


@router.get("/leaderboard", status_code=status.HTTP_200_OK)
async def get_leaderboard(
    repository: Repository = Depends(get_repository),
) -> LeaderboardResponse:
    return await stats_service.get_leaderboard(repository)
