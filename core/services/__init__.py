# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .upload_service import UploadService
from .folder_service import FolderService
from .log_service import OperationLogService
from .account_service import AccountService
from .report_service import ReportService

__all__ = [
    "UploadService",
    "FolderService",
    "OperationLogService",
    "AccountService",
    "ReportService",
]
