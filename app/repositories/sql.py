from uuid import UUID, uuid4

from sqlalchemy import func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.models import (
    Account,
    Complaint,
    Profile,
    RedeemCode,
    Report,
    Session,
    Worker,
    utcnow,
)
from app.repositories.base import InsufficientCredits, Repository
from app.schemas.complaint_schemas import ComplaintSchema
from app.schemas.credit_schemas import RedeemCodeSchema
from app.schemas.report_schemas import ReportSchema
from app.schemas.user_schemas import AccountSchema, ProfileSchema, SessionSchema
from app.schemas.worker_schemas import WorkerCreate, WorkerSchema


class SqlRepository(Repository):
    """Repository backed by an async SQLAlchemy session (one per request)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _insert(self, table):
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(table)
        if dialect == "sqlite":
            return sqlite.insert(table)
        raise NotImplementedError(f"Unsupported dialect: {dialect}")

    # ---- accounts & sessions

    async def create_account(
        self, email, password, name, email_verified, verification_code=None
    ):
        account = Account(
            email=email.lower(),
            password=password,
            name=name,
            email_verified=email_verified,
            verification_code=verification_code,
        )
        self.db.add(account)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            return None
        return AccountSchema.model_validate(account)

    async def get_account_by_email(self, email):
        result = await self.db.execute(
            select(Account)
            .where(func.lower(Account.email) == email.lower())
            .execution_options(populate_existing=True)
        )
        account = result.scalar_one_or_none()
        return AccountSchema.model_validate(account) if account else None

    async def mark_account_verified(self, account_id):
        await self.db.execute(
            update(Account)
            .where(Account.id == account_id)
            .values(email_verified=True, verification_code=None)
        )
        await self.db.commit()

    async def create_session(self, user_id):
        session = Session(user_id=user_id)
        self.db.add(session)
        await self.db.commit()
        return SessionSchema.model_validate(session)

    async def get_session(self, session_id):
        session = await self.db.get(Session, session_id, populate_existing=True)
        return SessionSchema.model_validate(session) if session else None

    async def revoke_session(self, session_id):
        result = await self.db.execute(
            update(Session)
            .where(Session.id == session_id, Session.revoked.is_(False))
            .values(revoked=True)
        )
        await self.db.commit()
        return result.rowcount == 1

    # ---- profiles

    async def _fetch_profile(self, user_id: UUID) -> Profile | None:
        result = await self.db.execute(
            select(Profile)
            .where(Profile.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_profile(self, user_id):
        profile = await self._fetch_profile(user_id)
        return ProfileSchema.model_validate(profile) if profile else None

    async def get_or_create_profile(self, user_id, name, email, role, credits):
        now = utcnow()
        stmt = (
            self._insert(Profile)
            .values(
                id=uuid4(),
                user_id=user_id,
                name=name,
                email=email,
                role=role,
                credits=credits,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_nothing(index_elements=[Profile.user_id])
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        created = result.rowcount == 1

        profile = await self._fetch_profile(user_id)
        return ProfileSchema.model_validate(profile), created

    async def list_profiles(self, role=None):
        stmt = select(Profile).order_by(Profile.created_at, Profile.id)
        if role is not None:
            stmt = stmt.where(Profile.role == role)
        result = await self.db.execute(stmt)
        return [ProfileSchema.model_validate(p) for p in result.scalars().all()]

    async def update_profile(self, user_id, **fields):
        profile = await self._fetch_profile(user_id)
        if not profile:
            return None
        for key, value in fields.items():
            setattr(profile, key, value)
        profile.updated_at = utcnow()
        await self.db.commit()
        await self.db.refresh(profile)
        return ProfileSchema.model_validate(profile)

    async def add_credits(self, user_id, delta):
        result = await self.db.execute(
            update(Profile)
            .where(Profile.user_id == user_id)
            .values(credits=Profile.credits + delta, updated_at=utcnow())
        )
        await self.db.commit()
        if result.rowcount != 1:
            return None
        return await self.get_profile(user_id)

    async def redeem_credits(self, user_id, cost, code):
        try:
            # Conditional debit: the WHERE clause is the balance check
            result = await self.db.execute(
                update(Profile)
                .where(Profile.user_id == user_id, Profile.credits >= cost)
                .values(credits=Profile.credits - cost, updated_at=utcnow())
            )
            if result.rowcount != 1:
                await self.db.rollback()
                profile = await self._fetch_profile(user_id)
                if not profile:
                    return None
                raise InsufficientCredits(profile.credits)

            redeem_code = RedeemCode(code=code, user_id=user_id)
            self.db.add(redeem_code)
            await self.db.commit()
        except InsufficientCredits:
            raise
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(redeem_code)
        profile = await self._fetch_profile(user_id)
        return (
            ProfileSchema.model_validate(profile),
            RedeemCodeSchema.model_validate(redeem_code),
        )

    # ---- workers

    async def create_worker(self, worker: WorkerCreate):
        record = Worker(**worker.model_dump())
        self.db.add(record)
        await self.db.commit()
        return WorkerSchema.model_validate(record)

    async def get_worker(self, worker_id):
        worker = await self.db.get(Worker, worker_id)
        return WorkerSchema.model_validate(worker) if worker else None

    async def list_workers(self):
        result = await self.db.execute(select(Worker).order_by(Worker.name))
        return [WorkerSchema.model_validate(w) for w in result.scalars().all()]

    # ---- complaints

    async def create_complaint(self, user_id, name, location, description, image_url):
        complaint = Complaint(
            user_id=user_id,
            name=name,
            location=location,
            description=description,
            image_url=image_url,
        )
        self.db.add(complaint)
        await self.db.commit()
        await self.db.refresh(complaint)
        return ComplaintSchema.model_validate(complaint)

    async def get_complaint(self, complaint_id):
        complaint = await self.db.get(Complaint, complaint_id, populate_existing=True)
        return ComplaintSchema.model_validate(complaint) if complaint else None

    async def list_complaints(self, user_id=None):
        stmt = select(Complaint).order_by(Complaint.created_at.desc())
        if user_id is not None:
            stmt = stmt.where(Complaint.user_id == user_id)
        result = await self.db.execute(stmt)
        return [ComplaintSchema.model_validate(c) for c in result.scalars().all()]

    async def update_complaint(self, complaint_id, expected_status=None, **fields):
        stmt = update(Complaint).where(Complaint.id == complaint_id)
        if expected_status is not None:
            # Conditional write: the WHERE clause is the transition check
            stmt = stmt.where(Complaint.status == expected_status)
        try:
            result = await self.db.execute(stmt.values(**fields, updated_at=utcnow()))
            if result.rowcount != 1:
                await self.db.rollback()
                return None
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        result = await self.db.execute(
            select(Complaint)
            .where(Complaint.id == complaint_id)
            .execution_options(populate_existing=True)
        )
        return ComplaintSchema.model_validate(result.scalar_one())

    # ---- reports

    async def create_report(self, user_id, complaint_id, description):
        report = Report(user_id=user_id, complaint_id=complaint_id, description=description)
        self.db.add(report)
        await self.db.commit()
        await self.db.refresh(report)
        return ReportSchema.model_validate(report)

    async def get_report(self, report_id):
        report = await self.db.get(Report, report_id)
        return ReportSchema.model_validate(report) if report else None

    async def list_reports(self, user_id=None):
        stmt = select(Report).order_by(Report.created_at.desc())
        if user_id is not None:
            stmt = stmt.where(Report.user_id == user_id)
        result = await self.db.execute(stmt)
        return [ReportSchema.model_validate(r) for r in result.scalars().all()]

    async def update_report(self, report_id, **fields):
        report = await self.db.get(Report, report_id)
        if not report:
            return None
        for key, value in fields.items():
            setattr(report, key, value)
        await self.db.commit()
        await self.db.refresh(report)
        return ReportSchema.model_validate(report)

    # ---- redeem codes

    async def list_redeem_codes(self, user_id=None, limit=None):
        stmt = select(RedeemCode).order_by(RedeemCode.created_at.desc())
        if user_id is not None:
            stmt = stmt.where(RedeemCode.user_id == user_id)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.db.execute(stmt)
        return [RedeemCodeSchema.model_validate(c) for c in result.scalars().all()]
