# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas:
# - storage.py: Bulk results and folder lifecycle results
# - logs.py: Operator and operation log entries
# - account.py: User account schemas
# - report.py: Printable report data
#
# These models define the "contract" between API and clients.
# =============================================================================

from .storage import (
    BulkResult,
    FailedItem,
    FolderStage,
    FolderSummary,
    MarkDoneResult,
)
from .logs import LogColumn, OperationLogEntry, Operator
from .account import AccountCreate, AccountResponse, AccountUpdate
from .report import Report, ReportSection, ReportType

__all__ = [
    # Storage
    "BulkResult",
    "FailedItem",
    "FolderStage",
    "FolderSummary",
    "MarkDoneResult",
    # Logs
    "LogColumn",
    "OperationLogEntry",
    "Operator",
    # Accounts
    "AccountCreate",
    "AccountResponse",
    "AccountUpdate",
    # Reports
    "Report",
    "ReportSection",
    "ReportType",
]
