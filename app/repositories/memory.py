import asyncio
from datetime import datetime, timezone
from uuid import UUID, uuid4

from app.repositories.base import InsufficientCredits, Repository
from app.schemas.complaint_schemas import ComplaintSchema
from app.schemas.credit_schemas import RedeemCodeSchema
from app.schemas.report_schemas import ReportSchema
from app.schemas.status_schema import ComplaintStatus, ReportStatus
from app.schemas.user_schemas import AccountSchema, ProfileSchema, SessionSchema
from app.schemas.worker_schemas import WorkerCreate, WorkerSchema


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryRepository(Repository):
    """
    Process-local store used for development and tests.

    Every instance owns its own collections, so two instances never share
    state. Dicts keep insertion order, which stands in for creation order.
    Records are copied on the way in and out; callers cannot mutate the
    stored rows.
    """

    def __init__(self):
        self._lock = asyncio.Lock()
        self.accounts: dict[UUID, AccountSchema] = {}
        self.sessions: dict[UUID, SessionSchema] = {}
        self.profiles: dict[UUID, ProfileSchema] = {}
        self.workers: dict[UUID, WorkerSchema] = {}
        self.complaints: dict[UUID, ComplaintSchema] = {}
        self.reports: dict[UUID, ReportSchema] = {}
        self.redeem_codes: dict[UUID, RedeemCodeSchema] = {}

    # ---- accounts & sessions

    async def create_account(
        self, email, password, name, email_verified, verification_code=None
    ):
        async with self._lock:
            if await self._find_account(email):
                return None
            account = AccountSchema(
                id=uuid4(),
                email=email.lower(),
                password=password,
                name=name,
                email_verified=email_verified,
                verification_code=verification_code,
                created_at=_now(),
            )
            self.accounts[account.id] = account
            return account.model_copy()

    async def _find_account(self, email: str) -> AccountSchema | None:
        email = email.lower()
        return next((a for a in self.accounts.values() if a.email == email), None)

    async def get_account_by_email(self, email):
        account = await self._find_account(email)
        return account.model_copy() if account else None

    async def mark_account_verified(self, account_id):
        async with self._lock:
            account = self.accounts.get(account_id)
            if account:
                self.accounts[account_id] = account.model_copy(
                    update={"email_verified": True, "verification_code": None}
                )

    async def create_session(self, user_id):
        session = SessionSchema(id=uuid4(), user_id=user_id, created_at=_now())
        self.sessions[session.id] = session
        return session.model_copy()

    async def get_session(self, session_id):
        session = self.sessions.get(session_id)
        return session.model_copy() if session else None

    async def revoke_session(self, session_id):
        session = self.sessions.get(session_id)
        if not session or session.revoked:
            return False
        self.sessions[session_id] = session.model_copy(update={"revoked": True})
        return True

    # ---- profiles

    async def get_profile(self, user_id):
        profile = self.profiles.get(user_id)
        return profile.model_copy() if profile else None

    async def get_or_create_profile(self, user_id, name, email, role, credits):
        async with self._lock:
            existing = self.profiles.get(user_id)
            if existing:
                return existing.model_copy(), False
            now = _now()
            profile = ProfileSchema(
                id=uuid4(),
                user_id=user_id,
                name=name,
                email=email,
                role=role,
                credits=credits,
                created_at=now,
                updated_at=now,
            )
            self.profiles[user_id] = profile
            return profile.model_copy(), True

    async def list_profiles(self, role=None):
        return [
            p.model_copy()
            for p in self.profiles.values()
            if role is None or p.role == role
        ]

    async def update_profile(self, user_id, **fields):
        async with self._lock:
            return self._patch_profile(user_id, **fields)

    def _patch_profile(self, user_id: UUID, **fields) -> ProfileSchema | None:
        profile = self.profiles.get(user_id)
        if not profile:
            return None
        fields["updated_at"] = _now()
        profile = profile.model_copy(update=fields)
        self.profiles[user_id] = profile
        return profile.model_copy()

    async def add_credits(self, user_id, delta):
        async with self._lock:
            profile = self.profiles.get(user_id)
            if not profile:
                return None
            return self._patch_profile(user_id, credits=max(0, profile.credits + delta))

    async def redeem_credits(self, user_id, cost, code):
        async with self._lock:
            profile = self.profiles.get(user_id)
            if not profile:
                return None
            if profile.credits < cost:
                raise InsufficientCredits(profile.credits)
            redeem_code = RedeemCodeSchema(
                id=uuid4(), code=code, user_id=user_id, redeemed=False, created_at=_now()
            )
            self.redeem_codes[redeem_code.id] = redeem_code
            updated = self._patch_profile(user_id, credits=profile.credits - cost)
            return updated, redeem_code.model_copy()

    # ---- workers

    async def create_worker(self, worker: WorkerCreate):
        record = WorkerSchema(id=uuid4(), **worker.model_dump())
        self.workers[record.id] = record
        return record.model_copy()

    async def get_worker(self, worker_id):
        worker = self.workers.get(worker_id)
        return worker.model_copy() if worker else None

    async def list_workers(self):
        return [w.model_copy() for w in sorted(self.workers.values(), key=lambda w: w.name)]

    # ---- complaints

    async def create_complaint(self, user_id, name, location, description, image_url):
        now = _now()
        complaint = ComplaintSchema(
            id=uuid4(),
            user_id=user_id,
            name=name,
            location=location,
            description=description,
            image_url=image_url,
            status=ComplaintStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        self.complaints[complaint.id] = complaint
        return complaint.model_copy()

    async def get_complaint(self, complaint_id):
        complaint = self.complaints.get(complaint_id)
        return complaint.model_copy() if complaint else None

    async def list_complaints(self, user_id=None):
        return [
            c.model_copy()
            for c in reversed(self.complaints.values())
            if user_id is None or c.user_id == user_id
        ]

    async def update_complaint(self, complaint_id, expected_status=None, **fields):
        async with self._lock:
            complaint = self.complaints.get(complaint_id)
            if not complaint:
                return None
            if expected_status is not None and complaint.status != expected_status:
                return None
            fields["updated_at"] = _now()
            complaint = complaint.model_copy(update=fields)
            self.complaints[complaint_id] = complaint
            return complaint.model_copy()

    # ---- reports

    async def create_report(self, user_id, complaint_id, description):
        report = ReportSchema(
            id=uuid4(),
            user_id=user_id,
            complaint_id=complaint_id,
            description=description,
            status=ReportStatus.PENDING,
            created_at=_now(),
        )
        self.reports[report.id] = report
        return report.model_copy()

    async def get_report(self, report_id):
        report = self.reports.get(report_id)
        return report.model_copy() if report else None

    async def list_reports(self, user_id=None):
        return [
            r.model_copy()
            for r in reversed(self.reports.values())
            if user_id is None or r.user_id == user_id
        ]

    async def update_report(self, report_id, **fields):
        async with self._lock:
            report = self.reports.get(report_id)
            if not report:
                return None
            report = report.model_copy(update=fields)
            self.reports[report_id] = report
            return report.model_copy()

    # ---- redeem codes

    async def list_redeem_codes(self, user_id=None, limit=None):
        codes = [
            c.model_copy()
            for c in reversed(self.redeem_codes.values())
            if user_id is None or c.user_id == user_id
        ]
        return codes[:limit] if limit is not None else codes

