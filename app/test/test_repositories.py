import asyncio
from uuid import uuid4

import pytest

from app.repositories.base import InsufficientCredits
from app.repositories.memory import InMemoryRepository
from app.repositories.seed import DEMO_USERS, DEMO_WORKERS, seed_demo_data
from app.schemas.status_schema import ComplaintStatus, ReportStatus, UserRole
from app.test.factories import WorkerFactory


@pytest.fixture(params=["memory", "sql"])
def repo(request):
    """Run the same contract checks against both backends."""
    if request.param == "memory":
        return request.getfixturevalue("repository")
    return request.getfixturevalue("sql_repository")


async def make_profile(repo, email="eco@example.com", credits=100, role=UserRole.USER):
    account = await repo.create_account(
        email=email, password="hashed", name=email.split("@")[0], email_verified=True
    )
    profile, _ = await repo.get_or_create_profile(
        user_id=account.id, name=account.name, email=email, role=role, credits=credits
    )
    return profile


class TestAccounts:
    """Test account and session storage."""

    async def test_duplicate_email_case_insensitive(self, repo):
        first = await repo.create_account(
            email="Dup@Example.com", password="x", name="Dup", email_verified=True
        )
        second = await repo.create_account(
            email="dup@example.com", password="y", name="Dup", email_verified=True
        )

        assert first is not None
        assert first.email == "dup@example.com"
        assert second is None

    async def test_mark_verified(self, repo):
        account = await repo.create_account(
            email="v@example.com", password="x", name="V",
            email_verified=False, verification_code="123456",
        )

        await repo.mark_account_verified(account.id)

        stored = await repo.get_account_by_email("v@example.com")
        assert stored.email_verified is True
        assert stored.verification_code is None

    async def test_revoke_session_once(self, repo):
        account = await repo.create_account(
            email="s@example.com", password="x", name="S", email_verified=True
        )
        session = await repo.create_session(account.id)

        assert await repo.revoke_session(session.id) is True
        assert await repo.revoke_session(session.id) is False
        assert (await repo.get_session(session.id)).revoked is True


class TestProfiles:
    """Test profile bootstrap and credit arithmetic."""

    async def test_get_or_create_is_idempotent(self, repo):
        user_id = uuid4()

        first, created = await repo.get_or_create_profile(
            user_id=user_id, name="A", email="a@example.com", role=UserRole.USER, credits=100
        )
        second, created_again = await repo.get_or_create_profile(
            user_id=user_id, name="B", email="b@example.com", role=UserRole.ADMIN, credits=5
        )

        assert created is True
        assert created_again is False
        assert second.id == first.id
        assert second.name == "A"
        assert second.credits == 100

    async def test_list_profiles_by_role_in_creation_order(self, repo):
        await make_profile(repo, "one@example.com")
        await make_profile(repo, "boss@example.com", role=UserRole.ADMIN)
        await make_profile(repo, "two@example.com")

        users = await repo.list_profiles(role=UserRole.USER)
        everyone = await repo.list_profiles()

        assert [p.email for p in users] == ["one@example.com", "two@example.com"]
        assert len(everyone) == 3

    async def test_add_credits(self, repo):
        profile = await make_profile(repo, credits=10)

        updated = await repo.add_credits(profile.user_id, 15)

        assert updated.credits == 25
        assert await repo.add_credits(uuid4(), 5) is None

    async def test_update_profile_bumps_timestamp(self, repo):
        profile = await make_profile(repo)

        updated = await repo.update_profile(profile.user_id, credits=3, role=UserRole.ADMIN)

        assert updated.credits == 3
        assert updated.role == UserRole.ADMIN
        assert updated.updated_at >= profile.updated_at

    async def test_redeem_debits_and_issues_code(self, repo):
        profile = await make_profile(repo, credits=130)

        updated, code = await repo.redeem_credits(profile.user_id, 100, "ECO-AAAA1111")

        assert updated.credits == 30
        assert code.code == "ECO-AAAA1111"
        assert code.user_id == profile.user_id
        assert [c.code for c in await repo.list_redeem_codes(profile.user_id)] == ["ECO-AAAA1111"]

    async def test_redeem_insufficient_leaves_state(self, repo):
        profile = await make_profile(repo, credits=99)

        with pytest.raises(InsufficientCredits):
            await repo.redeem_credits(profile.user_id, 100, "ECO-BBBB2222")

        assert (await repo.get_profile(profile.user_id)).credits == 99
        assert await repo.list_redeem_codes() == []

    async def test_redeem_unknown_user(self, repo):
        assert await repo.redeem_credits(uuid4(), 100, "ECO-CCCC3333") is None

    async def test_redeem_codes_limit_zero(self, repo):
        profile = await make_profile(repo, credits=300)
        await repo.redeem_credits(profile.user_id, 100, "ECO-FFFF6666")
        await repo.redeem_credits(profile.user_id, 100, "ECO-GGGG7777")

        assert await repo.list_redeem_codes(limit=0) == []
        assert len(await repo.list_redeem_codes(limit=1)) == 1
        assert len(await repo.list_redeem_codes()) == 2


class TestRecords:
    """Test complaints, reports and workers."""

    async def test_complaint_update(self, repo):
        worker = await repo.create_worker(WorkerFactory())
        complaint = await repo.create_complaint(
            user_id=uuid4(), name="N", location="L", description="D", image_url=None
        )

        updated = await repo.update_complaint(
            complaint.id,
            status=ComplaintStatus.ASSIGNED,
            assigned_worker_id=worker.id,
            assigned_worker_name=worker.name,
            assigned_worker_phone=worker.phone,
        )

        assert updated.status == ComplaintStatus.ASSIGNED
        assert updated.assigned_worker_id == worker.id
        assert updated.updated_at >= complaint.updated_at
        assert (await repo.get_complaint(complaint.id)).assigned_worker_name == worker.name

    async def test_complaint_update_checks_expected_status(self, repo):
        complaint = await repo.create_complaint(
            user_id=uuid4(), name="N", location="L", description="D", image_url=None
        )

        stale = await repo.update_complaint(
            complaint.id,
            expected_status=ComplaintStatus.ASSIGNED,
            status=ComplaintStatus.COMPLETED,
        )
        moved = await repo.update_complaint(
            complaint.id,
            expected_status=ComplaintStatus.PENDING,
            status=ComplaintStatus.COMPLETED,
        )

        assert stale is None
        assert moved.status == ComplaintStatus.COMPLETED
        assert await repo.update_complaint(
            uuid4(), expected_status=ComplaintStatus.PENDING, status=ComplaintStatus.COMPLETED
        ) is None

    async def test_complaints_filtered_by_user(self, repo):
        owner = uuid4()
        await repo.create_complaint(
            user_id=owner, name="N", location="L", description="D", image_url=None
        )
        await repo.create_complaint(
            user_id=uuid4(), name="N", location="L", description="D", image_url=None
        )

        assert len(await repo.list_complaints(user_id=owner)) == 1
        assert len(await repo.list_complaints()) == 2

    async def test_report_update(self, repo):
        complaint = await repo.create_complaint(
            user_id=uuid4(), name="N", location="L", description="D", image_url=None
        )
        report = await repo.create_report(
            user_id=complaint.user_id, complaint_id=complaint.id, description="Late"
        )

        updated = await repo.update_report(report.id, status=ReportStatus.REVIEWED)

        assert updated.status == ReportStatus.REVIEWED
        assert (await repo.get_complaint(complaint.id)).status == ComplaintStatus.PENDING
        assert await repo.update_report(uuid4(), status=ReportStatus.RESOLVED) is None

    async def test_workers_sorted_by_name(self, repo):
        workers = await repo.list_workers()
        assert [w.name for w in workers] == sorted(w.name for w in DEMO_WORKERS)


class TestMemoryStore:
    """Behaviour specific to the in-process store."""

    async def test_instances_do_not_share_state(self):
        first, second = InMemoryRepository(), InMemoryRepository()

        await make_profile(first)

        assert len(await first.list_profiles()) == 1
        assert await second.list_profiles() == []

    async def test_returned_records_are_copies(self, repository):
        profile = await make_profile(repository, credits=40)

        profile.credits = 999

        assert (await repository.get_profile(profile.user_id)).credits == 40

    async def test_concurrent_redeems_never_overdraw(self, repository):
        profile = await make_profile(repository, credits=150)

        results = await asyncio.gather(
            repository.redeem_credits(profile.user_id, 100, "ECO-DDDD4444"),
            repository.redeem_credits(profile.user_id, 100, "ECO-EEEE5555"),
            return_exceptions=True,
        )

        assert sum(isinstance(r, InsufficientCredits) for r in results) == 1
        assert (await repository.get_profile(profile.user_id)).credits == 50
        assert len(await repository.list_redeem_codes()) == 1

    async def test_seed_demo_data_is_repeatable(self):
        repo = InMemoryRepository()

        await seed_demo_data(repo)
        await seed_demo_data(repo)

        assert len(await repo.list_workers()) == len(DEMO_WORKERS)
        assert len(await repo.list_profiles()) == len(DEMO_USERS)
        jane = next(p for p in await repo.list_profiles() if p.email == "jane@example.com")
        assert jane.credits == 120
