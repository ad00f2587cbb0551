from uuid import UUID
from pydantic import BaseModel, Field


class ComplaintStats(BaseModel):
    """Complaint counts per status"""

    total: int = Field(default=0, description="All complaints")
    pending: int = Field(default=0, description="Complaints awaiting a worker")
    assigned: int = Field(default=0, description="Complaints with a worker")
    completed: int = Field(default=0, description="Resolved complaints")
    resolution_rate: float = Field(
        default=0.0, description="completed / total, 0 when there are none"
    )


class ReportStats(BaseModel):
    """Misconduct report counts per status"""

    total: int = 0
    pending: int = 0
    reviewed: int = 0
    resolved: int = 0


class CreditStats(BaseModel):
    """Aggregates over every profile balance"""

    total_credits: int = 0
    average_credits: int = 0
    active_users: int = Field(default=0, description="Profiles with credits > 0")
    eligible_users: int = Field(
        default=0, description="Profiles that can redeem right now"
    )
    redeem_codes_issued: int = 0


class AdminStats(BaseModel):
    total_users: int
    complaints: ComplaintStats
    reports: ReportStats
    credits: CreditStats


class ChampionSchema(BaseModel):
    user_id: UUID
    name: str
    email: str
    credits: int


class LeaderboardEntry(ChampionSchema):
    rank: int


class LeaderboardResponse(BaseModel):
    entries: list[LeaderboardEntry]
    highest_credits: int
    average_credits: int
    eligible_users: int
