from uuid import UUID

from fastapi import HTTPException, status

from app.repositories.base import Repository
from app.schemas.report_schemas import ReportCreate, ReportSchema, ReportStatusUpdate
from app.schemas.status_schema import REPORT_TRANSITIONS, ComplaintStatus, UserRole
from app.schemas.user_schemas import ProfileSchema
from app.utils.logger_config import setup_logger

logger = setup_logger()


async def create_report(
    repository: Repository, current_user: ProfileSchema, report_data: ReportCreate
) -> ReportSchema:
    """
    File a misconduct report against the worker on one of the user's complaints.
    The complaint must currently be assigned.
    """
    complaint = await repository.get_complaint(report_data.complaint_id)
    if not complaint:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Complaint not found"
        )

    if complaint.user_id != current_user.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only report workers on your own complaints",
        )

    if complaint.status != ComplaintStatus.ASSIGNED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Reports can only be filed while a worker is assigned",
        )

    report = await repository.create_report(
        user_id=current_user.user_id,
        complaint_id=complaint.id,
        description=report_data.description,
    )
    logger.info(f"New report submitted: {report.id}")
    return report


async def get_reports(
    repository: Repository, current_user: ProfileSchema
) -> list[ReportSchema]:
    if current_user.role == UserRole.ADMIN:
        return await repository.list_reports()
    return await repository.list_reports(user_id=current_user.user_id)


async def update_report_status(
    repository: Repository, report_id: UUID, status_data: ReportStatusUpdate
) -> ReportSchema:
    """Advance a report. Never touches the complaint it refers to."""
    report = await repository.get_report(report_id)
    if not report:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Report not found"
        )

    new_status = status_data.status
    if new_status not in REPORT_TRANSITIONS[report.status]:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot move report from {report.status.value} to {new_status.value}",
        )

    updated = await repository.update_report(report_id, status=new_status)
    logger.info(f"Report {report_id} marked as {new_status.value}")
    return updated
