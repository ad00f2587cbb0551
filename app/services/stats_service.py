from fastapi import HTTPException, status

from app.config.config import settings
from app.repositories.base import Repository
from app.schemas.stats_schema import (
    AdminStats,
    ChampionSchema,
    ComplaintStats,
    CreditStats,
    LeaderboardEntry,
    LeaderboardResponse,
    ReportStats,
)
from app.schemas.status_schema import ComplaintStatus, ReportStatus, UserRole
from app.schemas.user_schemas import ProfileSchema


def _average(values: list[int]) -> int:
    return round(sum(values) / len(values)) if values else 0


async def get_admin_stats(repository: Repository) -> AdminStats:
    """
    Aggregate counts for the admin dashboard.

    Everything is recomputed from full result sets on each call.
    """
    # Sequential: a database-backed repository shares one session per request
    profiles = await repository.list_profiles()
    complaints = await repository.list_complaints()
    reports = await repository.list_reports()
    codes = await repository.list_redeem_codes()

    completed = sum(1 for c in complaints if c.status == ComplaintStatus.COMPLETED)
    complaint_stats = ComplaintStats(
        total=len(complaints),
        pending=sum(1 for c in complaints if c.status == ComplaintStatus.PENDING),
        assigned=sum(1 for c in complaints if c.status == ComplaintStatus.ASSIGNED),
        completed=completed,
        resolution_rate=round(completed / len(complaints), 4) if complaints else 0.0,
    )

    report_stats = ReportStats(
        total=len(reports),
        pending=sum(1 for r in reports if r.status == ReportStatus.PENDING),
        reviewed=sum(1 for r in reports if r.status == ReportStatus.REVIEWED),
        resolved=sum(1 for r in reports if r.status == ReportStatus.RESOLVED),
    )

    balances = [p.credits for p in profiles]
    credit_stats = CreditStats(
        total_credits=sum(balances),
        average_credits=_average(balances),
        active_users=sum(1 for b in balances if b > 0),
        eligible_users=sum(1 for b in balances if b >= settings.REDEEM_COST),
        redeem_codes_issued=len(codes),
    )

    return AdminStats(
        total_users=len(profiles),
        complaints=complaint_stats,
        reports=report_stats,
        credits=credit_stats,
    )


def _to_champion(profile: ProfileSchema) -> ChampionSchema:
    return ChampionSchema(
        user_id=profile.user_id,
        name=profile.name,
        email=profile.email,
        credits=profile.credits,
    )


async def get_green_champion(repository: Repository) -> ChampionSchema:
    """The citizen with the strictly highest balance; earlier profiles win ties."""
    users = await repository.list_profiles(role=UserRole.USER)
    if not users:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No users found"
        )

    champion = users[0]
    for user in users[1:]:
        if user.credits > champion.credits:
            champion = user
    return _to_champion(champion)


async def get_leaderboard(repository: Repository) -> LeaderboardResponse:
    users = await repository.list_profiles(role=UserRole.USER)
    # sorted() is stable, so equal balances keep creation order
    ranked = sorted(users, key=lambda p: p.credits, reverse=True)
    balances = [p.credits for p in ranked]

    return LeaderboardResponse(
        entries=[
            LeaderboardEntry(rank=index, **_to_champion(profile).model_dump())
            for index, profile in enumerate(ranked, start=1)
        ],
        highest_credits=max(balances, default=0),
        average_credits=_average(balances),
        eligible_users=sum(1 for b in balances if b >= settings.REDEEM_COST),
    )
