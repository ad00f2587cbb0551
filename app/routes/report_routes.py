from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.auth.auth import get_current_admin_user, get_current_user
from app.repositories.base import Repository
from app.repositories.dependencies import get_repository
from app.schemas.report_schemas import ReportCreate, ReportSchema, ReportStatusUpdate
from app.schemas.user_schemas import ProfileSchema
from app.services import report_service

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.get("", status_code=status.HTTP_200_OK)
async def get_reports(
    repository: Repository = Depends(get_repository),
    current_user: ProfileSchema = Depends(get_current_user),
) -> list[ReportSchema]:
    """
    Get misconduct reports (all for admins, own for citizens)
    """
    return await report_service.get_reports(
        repository=repository, current_user=current_user
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_report(
    report_data: ReportCreate,
    repository: Repository = Depends(get_repository),
    current_user: ProfileSchema = Depends(get_current_user),
) -> ReportSchema:
    """
    Report the worker assigned to one of your complaints
    """
    return await report_service.create_report(
        repository=repository, current_user=current_user, report_data=report_data
    )


@router.put("/{report_id}/status", status_code=status.HTTP_200_OK)
async def update_report_status(
    report_id: UUID,
    status_data: ReportStatusUpdate,
    repository: Repository = Depends(get_repository),
    current_user: ProfileSchema = Depends(get_current_admin_user),
) -> ReportSchema:
    """
    Update the status of a report (admin only)
    """
    return await report_service.update_report_status(
        repository=repository, report_id=report_id, status_data=status_data
    )
