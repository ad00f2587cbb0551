from app.config.config import settings
from app.repositories.base import Repository
from app.schemas.status_schema import UserRole
from app.schemas.worker_schemas import WorkerCreate
from app.services.auth_service import hash_password
from app.utils.logger_config import setup_logger

logger = setup_logger()


DEMO_WORKERS = [
    WorkerCreate(name="Worker Alpha", phone="123-456-7890", area="North District",
                 price_steel=15, price_plastic=8, price_paper=5),
    WorkerCreate(name="Worker Beta", phone="234-567-8901", area="South District",
                 price_steel=12, price_plastic=10, price_paper=4),
    WorkerCreate(name="Worker Gamma", phone="345-678-9012", area="East District",
                 price_steel=18, price_plastic=7, price_paper=6),
    WorkerCreate(name="Worker Delta", phone="456-789-0123", area="West District",
                 price_steel=14, price_plastic=9, price_paper=5),
    WorkerCreate(name="Worker Epsilon", phone="567-890-1234", area="Central District",
                 price_steel=16, price_plastic=8, price_paper=7),
]

# (name, email, role, credits)
DEMO_USERS = [
    ("John Doe", "john@example.com", UserRole.USER, 75),
    ("Jane Smith", "jane@example.com", UserRole.USER, 120),
    ("Admin User", "admin@example.com", UserRole.ADMIN, 0),
    ("Alice Johnson", "alice@example.com", UserRole.USER, 95),
    ("Bob Wilson", "bob@example.com", UserRole.USER, 50),
]


async def seed_workers(repository: Repository) -> None:
    if await repository.list_workers():
        return
    for worker in DEMO_WORKERS:
        await repository.create_worker(worker)
    logger.info(f"Seeded {len(DEMO_WORKERS)} workers")


async def seed_users(repository: Repository, password_hash: str) -> None:
    created = 0
    for name, email, role, credits in DEMO_USERS:
        account = await repository.create_account(
            email=email, password=password_hash, name=name, email_verified=True
        )
        if account is None:
            continue
        await repository.get_or_create_profile(
            user_id=account.id, name=name, email=email, role=role, credits=credits
        )
        created += 1
    logger.info(f"Seeded {created} demo users")


async def seed_demo_data(repository: Repository) -> None:
    await seed_workers(repository)
    await seed_users(repository, hash_password(settings.DEMO_PASSWORD))
