from uuid import UUID

from fastapi import HTTPException, status

from app.repositories.base import Repository
from app.schemas.status_schema import WorkerSortField
from app.schemas.worker_schemas import WorkerSchema


async def get_workers(
    repository: Repository,
    area: str | None = None,
    sort_by: WorkerSortField | None = None,
) -> list[WorkerSchema]:
    """
    List the collector directory.

    Args:
        area: Case-insensitive area filter
        sort_by: Material price to rank by, highest first

    Returns:
        Workers ordered by name unless a price ranking is requested
    """
    workers = await repository.list_workers()
    if area:
        workers = [w for w in workers if w.area.lower() == area.lower()]
    if sort_by:
        workers = sorted(workers, key=lambda w: getattr(w, sort_by.value), reverse=True)
    return workers


async def get_worker(repository: Repository, worker_id: UUID) -> WorkerSchema:
    worker = await repository.get_worker(worker_id)
    if not worker:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Worker not found"
        )
    return worker
