from typing import AsyncGenerator

from fastapi import Request

from app.config.config import settings
from app.database.database import get_db
from app.repositories.base import Repository
from app.repositories.sql import SqlRepository
from app.schemas.status_schema import StorageBackend


async def get_repository(request: Request) -> AsyncGenerator[Repository, None]:
    """
    Resolve the repository for the configured backend.

    The memory store lives on ``app.state`` (created in the lifespan); the
    database backend gets a fresh session per request from the retrying
    ``get_db`` dependency.
    """
    if settings.BACKEND == StorageBackend.MEMORY.value:
        yield request.app.state.repository
        return

    async for session in get_db():
        yield SqlRepository(session)

