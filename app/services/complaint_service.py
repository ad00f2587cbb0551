from uuid import UUID

from fastapi import HTTPException, status

from app.repositories.base import Repository
from app.schemas.complaint_schemas import (
    AssignWorkerSchema,
    ComplaintCreate,
    ComplaintSchema,
    ComplaintStatusUpdate,
)
from app.schemas.status_schema import COMPLAINT_TRANSITIONS, ComplaintStatus, UserRole
from app.schemas.user_schemas import ProfileSchema
from app.utils.logger_config import setup_logger
from app.utils.utils import save_image

logger = setup_logger()


async def _get_complaint_or_404(repository: Repository, complaint_id: UUID) -> ComplaintSchema:
    complaint = await repository.get_complaint(complaint_id)
    if not complaint:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Complaint not found"
        )
    return complaint


async def create_complaint(
    repository: Repository, current_user: ProfileSchema, complaint_data: ComplaintCreate
) -> ComplaintSchema:
    """
    File a new complaint for the signed-in user.

    Args:
        repository: Storage backend
        current_user: The reporting citizen
        complaint_data: Name, location, description and optional photo

    Returns:
        The stored complaint, always in pending status
    """
    image_url = save_image(complaint_data.photo)

    complaint = await repository.create_complaint(
        user_id=current_user.user_id,
        name=complaint_data.name,
        location=complaint_data.location,
        description=complaint_data.description,
        image_url=image_url,
    )
    logger.info(f"New complaint submitted: {complaint.id}")
    return complaint


async def get_complaints(
    repository: Repository, current_user: ProfileSchema
) -> list[ComplaintSchema]:
    """Admins see every complaint, citizens only their own"""
    if current_user.role == UserRole.ADMIN:
        return await repository.list_complaints()
    return await repository.list_complaints(user_id=current_user.user_id)


async def get_complaint(
    repository: Repository, complaint_id: UUID, current_user: ProfileSchema
) -> ComplaintSchema:
    complaint = await _get_complaint_or_404(repository, complaint_id)
    if current_user.role != UserRole.ADMIN and complaint.user_id != current_user.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to view this complaint",
        )
    return complaint


async def assign_worker(
    repository: Repository, complaint_id: UUID, assign_data: AssignWorkerSchema
) -> ComplaintSchema:
    """
    Assign a worker to a pending complaint.

    The worker's current name and phone are copied onto the complaint so the
    record stays readable without a join.
    """
    complaint = await _get_complaint_or_404(repository, complaint_id)

    worker = await repository.get_worker(assign_data.worker_id)
    if not worker:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Worker not found"
        )

    if complaint.status != ComplaintStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Only pending complaints can be assigned (current: {complaint.status.value})",
        )

    updated = await repository.update_complaint(
        complaint_id,
        expected_status=ComplaintStatus.PENDING,
        status=ComplaintStatus.ASSIGNED,
        assigned_worker_id=worker.id,
        assigned_worker_name=worker.name,
        assigned_worker_phone=worker.phone,
    )
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Complaint was assigned by another request",
        )
    logger.info(f"Complaint {complaint_id} assigned to worker {worker.name}")
    return updated


async def update_complaint_status(
    repository: Repository, complaint_id: UUID, status_data: ComplaintStatusUpdate
) -> ComplaintSchema:
    complaint = await _get_complaint_or_404(repository, complaint_id)
    new_status = status_data.status

    if new_status == ComplaintStatus.ASSIGNED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Assigning a complaint requires a worker; use the assign endpoint",
        )

    if new_status not in COMPLAINT_TRANSITIONS[complaint.status]:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot move complaint from {complaint.status.value} to {new_status.value}",
        )

    updated = await repository.update_complaint(
        complaint_id, expected_status=complaint.status, status=new_status
    )
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Complaint status changed by another request",
        )
    logger.info(f"Complaint {complaint_id} marked as {new_status.value}")
    return updated
