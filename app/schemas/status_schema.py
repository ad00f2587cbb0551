from enum import Enum


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class ComplaintStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    COMPLETED = "completed"


class ReportStatus(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    RESOLVED = "resolved"


class StorageBackend(str, Enum):
    MEMORY = "memory"
    DATABASE = "database"


class WorkerSortField(str, Enum):
    PRICE_STEEL = "price_steel"
    PRICE_PLASTIC = "price_plastic"
    PRICE_PAPER = "price_paper"


# Allowed forward moves. Anything not listed is rejected.
COMPLAINT_TRANSITIONS: dict[ComplaintStatus, set[ComplaintStatus]] = {
    ComplaintStatus.PENDING: {ComplaintStatus.ASSIGNED},
    ComplaintStatus.ASSIGNED: {ComplaintStatus.COMPLETED},
    ComplaintStatus.COMPLETED: set(),
}

REPORT_TRANSITIONS: dict[ReportStatus, set[ReportStatus]] = {
    ReportStatus.PENDING: {ReportStatus.REVIEWED, ReportStatus.RESOLVED},
    ReportStatus.REVIEWED: {ReportStatus.RESOLVED},
    ReportStatus.RESOLVED: set(),
}
