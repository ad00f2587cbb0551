from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.repositories.base import Repository
from app.repositories.dependencies import get_repository
from app.schemas.status_schema import WorkerSortField
from app.schemas.worker_schemas import WorkerSchema
from app.services import worker_service

router = APIRouter(prefix="/api/workers", tags=["Workers"])


@router.get("", status_code=status.HTTP_200_OK)
async def get_workers(
    area: str | None = Query(None, description="Only workers serving this area"),
    sort_by: WorkerSortField | None = Query(None, description="Rank by material price"),
    repository: Repository = Depends(get_repository),
) -> list[WorkerSchema]:
    """
    Collection workers and their per-material prices
    """
    return await worker_service.get_workers(
        repository=repository, area=area, sort_by=sort_by
    )


@router.get("/{worker_id}", status_code=status.HTTP_200_OK)
async def get_worker(
    worker_id: UUID,
    repository: Repository = Depends(get_repository),
) -> WorkerSchema:
    return await worker_service.get_worker(repository=repository, worker_id=worker_id)
