from abc import ABC, abstractmethod
from uuid import UUID

from app.schemas.complaint_schemas import ComplaintSchema
from app.schemas.credit_schemas import RedeemCodeSchema
from app.schemas.report_schemas import ReportSchema
from app.schemas.status_schema import ComplaintStatus, UserRole
from app.schemas.user_schemas import AccountSchema, ProfileSchema, SessionSchema
from app.schemas.worker_schemas import WorkerCreate, WorkerSchema


class InsufficientCredits(Exception):
    """Raised by ``redeem_credits`` when the balance is below the cost."""


class Repository(ABC):
    """
    Storage boundary for every record the service owns.

    Implementations return pydantic record schemas, never ORM objects, so the
    services behave the same against the in-memory store and the database.
    Single-row patches are last-write-wins; the operations documented as
    atomic must commit all of their effects or none.
    """

    # ---- accounts & sessions

    @abstractmethod
    async def create_account(
        self,
        email: str,
        password: str,
        name: str,
        email_verified: bool,
        verification_code: str | None = None,
    ) -> AccountSchema | None:
        """Insert an account; None when the email is already registered."""

    @abstractmethod
    async def get_account_by_email(self, email: str) -> AccountSchema | None: ...

    @abstractmethod
    async def mark_account_verified(self, account_id: UUID) -> None: ...

    @abstractmethod
    async def create_session(self, user_id: UUID) -> SessionSchema: ...

    @abstractmethod
    async def get_session(self, session_id: UUID) -> SessionSchema | None: ...

    @abstractmethod
    async def revoke_session(self, session_id: UUID) -> bool: ...

    # ---- profiles

    @abstractmethod
    async def get_profile(self, user_id: UUID) -> ProfileSchema | None: ...

    @abstractmethod
    async def get_or_create_profile(
        self, user_id: UUID, name: str, email: str, role: UserRole, credits: int
    ) -> tuple[ProfileSchema, bool]:
        """Insert-if-absent. Returns the stored profile and whether it was created."""

    @abstractmethod
    async def list_profiles(self, role: UserRole | None = None) -> list[ProfileSchema]:
        """Profiles in creation order."""

    @abstractmethod
    async def update_profile(self, user_id: UUID, **fields) -> ProfileSchema | None: ...

    @abstractmethod
    async def add_credits(self, user_id: UUID, delta: int) -> ProfileSchema | None:
        """Atomic increment of a balance."""

    @abstractmethod
    async def redeem_credits(
        self, user_id: UUID, cost: int, code: str
    ) -> tuple[ProfileSchema, RedeemCodeSchema] | None:
        """
        Atomically debit ``cost`` and mint ``code``.

        Returns None for an unknown user and raises InsufficientCredits when
        the balance is below ``cost``; in both cases nothing is written.
        """

    # ---- workers

    @abstractmethod
    async def create_worker(self, worker: WorkerCreate) -> WorkerSchema: ...

    @abstractmethod
    async def get_worker(self, worker_id: UUID) -> WorkerSchema | None: ...

    @abstractmethod
    async def list_workers(self) -> list[WorkerSchema]:
        """Workers ordered by name."""

    # ---- complaints

    @abstractmethod
    async def create_complaint(
        self,
        user_id: UUID,
        name: str,
        location: str,
        description: str,
        image_url: str | None,
    ) -> ComplaintSchema: ...

    @abstractmethod
    async def get_complaint(self, complaint_id: UUID) -> ComplaintSchema | None: ...

    @abstractmethod
    async def list_complaints(self, user_id: UUID | None = None) -> list[ComplaintSchema]:
        """Newest first."""

    @abstractmethod
    async def update_complaint(
        self,
        complaint_id: UUID,
        expected_status: ComplaintStatus | None = None,
        **fields,
    ) -> ComplaintSchema | None:
        """
        Patch fields and bump updated_at.

        With ``expected_status`` the write only happens while the complaint is
        still in that status, checked atomically with the write. Returns None
        when the complaint is missing or its status has moved on.
        """

    # ---- reports

    @abstractmethod
    async def create_report(
        self, user_id: UUID, complaint_id: UUID, description: str
    ) -> ReportSchema: ...

    @abstractmethod
    async def get_report(self, report_id: UUID) -> ReportSchema | None: ...

    @abstractmethod
    async def list_reports(self, user_id: UUID | None = None) -> list[ReportSchema]:
        """Newest first."""

    @abstractmethod
    async def update_report(self, report_id: UUID, **fields) -> ReportSchema | None: ...

    # ---- redeem codes

    @abstractmethod
    async def list_redeem_codes(
        self, user_id: UUID | None = None, limit: int | None = None
    ) -> list[RedeemCodeSchema]:
        """Newest first."""
