from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.auth.auth import get_current_admin_user, get_current_user
from app.repositories.base import Repository
from app.repositories.dependencies import get_repository
from app.schemas.complaint_schemas import (
    AssignWorkerSchema,
    ComplaintCreate,
    ComplaintSchema,
    ComplaintStatusUpdate,
)
from app.schemas.user_schemas import ProfileSchema
from app.services import complaint_service

router = APIRouter(prefix="/api/complaints", tags=["Complaints"])


@router.get("", status_code=status.HTTP_200_OK)
async def get_complaints(
    repository: Repository = Depends(get_repository),
    current_user: ProfileSchema = Depends(get_current_user),
) -> list[ComplaintSchema]:
    """
    Admins get every complaint, citizens their own, newest first
    """
    return await complaint_service.get_complaints(
        repository=repository, current_user=current_user
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_complaint(
    complaint_data: ComplaintCreate,
    repository: Repository = Depends(get_repository),
    current_user: ProfileSchema = Depends(get_current_user),
) -> ComplaintSchema:
    """
    Report a waste issue
    """
    return await complaint_service.create_complaint(
        repository=repository, current_user=current_user, complaint_data=complaint_data
    )


@router.get("/{complaint_id}", status_code=status.HTTP_200_OK)
async def get_complaint(
    complaint_id: UUID,
    repository: Repository = Depends(get_repository),
    current_user: ProfileSchema = Depends(get_current_user),
) -> ComplaintSchema:
    return await complaint_service.get_complaint(
        repository=repository, complaint_id=complaint_id, current_user=current_user
    )


@router.put("/{complaint_id}/assign", status_code=status.HTTP_200_OK)
async def assign_worker(
    complaint_id: UUID,
    assign_data: AssignWorkerSchema,
    repository: Repository = Depends(get_repository),
    current_user: ProfileSchema = Depends(get_current_admin_user),
) -> ComplaintSchema:
    """
    Assign a worker to a pending complaint (admin only)
    """
    return await complaint_service.assign_worker(
        repository=repository, complaint_id=complaint_id, assign_data=assign_data
    )


@router.put("/{complaint_id}/status", status_code=status.HTTP_200_OK)
async def update_complaint_status(
    complaint_id: UUID,
    status_data: ComplaintStatusUpdate,
    repository: Repository = Depends(get_repository),
    current_user: ProfileSchema = Depends(get_current_admin_user),
) -> ComplaintSchema:
    """
    Move a complaint forward, e.g. mark an assigned complaint completed (admin only)
    """
    return await complaint_service.update_complaint_status(
        repository=repository, complaint_id=complaint_id, status_data=status_data
    )
