# =============================================================================
# core/services/report_service.py - Report Data Collection
# =============================================================================
# Gathers the rows for each printable report as plain data (core.models.report).
# Rendering is done separately by lib/pdf_report.py.
# =============================================================================

import logging
from datetime import datetime
from typing import Any, Callable

from app.config import Settings
from app.exceptions import ValidationError
from core.models.report import Report, ReportSection, ReportType
from core.models.storage import FolderStage
from core.services.account_service import AccountService
from core.services.folder_service import FolderService
from core.services.log_service import OperationLogService
from lib.supabase_client import SupabaseClient
from lib.utils import display_timestamp, now_in_zone

logger = logging.getLogger(__name__)

REPORT_TITLES = {
    ReportType.RECEIVED: "Received Files Report",
    ReportType.EXTRACTED: "Extracted Files Report",
    ReportType.COMPLETED: "Completed Files Report",
    ReportType.ACCOUNTS: "User Accounts Report",
    ReportType.ALL: "All Data Report",
}


def parse_report_type(value: str | None) -> ReportType:
    """
    Raises:
        ValidationError: If value is missing or not a known report type
    """
    try:
        return ReportType((value or "").strip().lower())
    except ValueError:
        raise ValidationError(
            f"Unknown report type: {value!r}",
            suggestion=f"Use one of: {', '.join(t.value for t in ReportType)}",
            details={"reportType": value},
        )


def _format_size(size: Any) -> str:
    if not isinstance(size, (int, float)):
        return "-"
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024


class ReportService:
    """
    Service building Report objects from buckets and tables.
    """

    def __init__(
        self,
        supabase: SupabaseClient,
        settings: Settings,
        clock: Callable[[], datetime] | None = None,
    ):
        self.received = supabase.bucket(settings.SUPABASE_BUCKET)
        self.folders = FolderService(supabase, settings)
        self.accounts = AccountService(supabase, settings)
        self.logs = OperationLogService(supabase, settings)
        self.clock = clock or (lambda: now_in_zone(settings.TIMEZONE))

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def received_section(self) -> ReportSection:
        rows = []
        for entry in self.received.list(""):
            if entry.get("id") is None:
                continue
            metadata = entry.get("metadata") or {}
            rows.append([
                entry.get("name", ""),
                _format_size(metadata.get("size")),
                display_timestamp(entry.get("updated_at") or entry.get("created_at")),
            ])
        return ReportSection(
            title="Received Files",
            columns=["File", "Size", "Last Updated"],
            rows=rows,
        )

    def folder_section(self, stage: FolderStage) -> ReportSection:
        label = "Extracted" if stage is FolderStage.EXTRACTED else "Completed"
        rows = [
            [folder.name, display_timestamp(folder.timestamp)]
            for folder in self.folders.list_folders(stage)
        ]
        return ReportSection(
            title=f"{label} Files",
            columns=["Folder", f"Date {label}"],
            rows=rows,
        )

    def accounts_section(self) -> ReportSection:
        rows = [
            [
                account.full_name or "-",
                account.username or "-",
                account.email or "-",
                account.contact_number or "-",
                account.gender or "-",
            ]
            for account in self.accounts.list_accounts()
        ]
        return ReportSection(
            title="User Accounts",
            columns=["Full Name", "Username", "Email", "Contact", "Gender"],
            rows=rows,
        )

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    def build(self, report_type: ReportType) -> Report:
        """
        Collect the sections for a report type.

        Raises:
            StoreOperationError: If any underlying listing fails
        """
        builders = {
            ReportType.RECEIVED: [self.received_section],
            ReportType.EXTRACTED: [lambda: self.folder_section(FolderStage.EXTRACTED)],
            ReportType.COMPLETED: [lambda: self.folder_section(FolderStage.COMPLETED)],
            ReportType.ACCOUNTS: [self.accounts_section],
        }
        builders[ReportType.ALL] = [
            build
            for kind in (ReportType.RECEIVED, ReportType.EXTRACTED, ReportType.COMPLETED, ReportType.ACCOUNTS)
            for build in builders[kind]
        ]

        now = self.clock()
        report = Report(
            title=REPORT_TITLES[report_type],
            generated_at=now.strftime("%Y-%m-%d %H:%M:%S"),
            sections=[build() for build in builders[report_type]],
            filename=f"{report_type.value}-report-{now.strftime('%Y%m%d-%H%M%S')}.pdf",
        )
        logger.info(f"Built {report_type.value} report with {len(report.sections)} sections")
        return report

    def build_log_report(self, column: str | None = None, query: str | None = None) -> Report:
        """
        Report of the operation log, filtered like GET /logpage.
        """
        logs = self.logs.list_logs(column=column, query=query)
        title = "Operation Logs"
        if column and query:
            title += f" ({column} contains \"{query}\")"

        now = self.clock()
        return Report(
            title=title,
            generated_at=now.strftime("%Y-%m-%d %H:%M:%S"),
            sections=[
                ReportSection(
                    title="Operation Logs",
                    columns=["User", "Role", "Action", "Date/Time"],
                    rows=[
                        [
                            str(log.get("username") or ""),
                            str(log.get("role") or ""),
                            str(log.get("action") or ""),
                            display_timestamp(log.get("created_at")),
                        ]
                        for log in logs
                    ],
                )
            ],
            filename=f"operation-logs-{now.strftime('%Y%m%d-%H%M%S')}.pdf",
        )
