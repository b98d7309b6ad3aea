# =============================================================================
# core/services/log_service.py - Operation Log
# =============================================================================
# Append-only record of who did what, stored in the operation_logs table.
# Writing a log entry is best-effort: a failed insert is logged and never
# fails the request that triggered it.
# =============================================================================

import logging
from datetime import datetime
from typing import Any, Callable

from app.config import Settings
from app.exceptions import StoreOperationError, ValidationError
from core.models.logs import LogColumn, OperationLogEntry, Operator
from lib.supabase_client import SupabaseClient
from lib.utils import local_timestamp, now_in_zone

logger = logging.getLogger(__name__)

LOG_TABLE = "operation_logs"


class OperationLogService:
    """
    Service for writing and reading operation log entries.
    """

    def __init__(
        self,
        supabase: SupabaseClient,
        settings: Settings,
        clock: Callable[[], datetime] | None = None,
    ):
        self.supabase = supabase
        self.clock = clock or (lambda: now_in_zone(settings.TIMEZONE))

    def log_action(self, operator: Operator, action: str) -> OperationLogEntry | None:
        """
        Record an action. Never raises.

        Args:
            operator: Who performed the action
            action: Human-readable description

        Returns:
            The entry written, or None if the insert failed
        """
        entry = OperationLogEntry(
            username=operator.username,
            role=operator.role,
            action=action,
            created_at=local_timestamp(self.clock()),
        )

        try:
            self.supabase.table(LOG_TABLE).insert([entry.model_dump()]).execute()
        except Exception as e:
            logger.error(f"Log error: {e}")
            return None

        logger.debug(f"Logged action for {operator.username}: {action}")
        return entry

    def list_logs(
        self,
        column: str | None = None,
        query: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch log entries, newest first, optionally filtered.

        The filter is a case-insensitive substring match on one column.

        Args:
            column: One of username, role, action, created_at
            query: Text to look for; blank means no filtering

        Raises:
            ValidationError: If column is not a filterable column
            StoreOperationError: If the query fails
        """
        if column:
            try:
                column = LogColumn(column).value
            except ValueError:
                raise ValidationError(
                    f"Cannot filter logs by column: {column}",
                    suggestion=f"Use one of: {', '.join(c.value for c in LogColumn)}",
                    details={"column": column},
                )

        try:
            response = (
                self.supabase.table(LOG_TABLE)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch operation logs: {e}")
            raise StoreOperationError("query", str(e), path=LOG_TABLE)

        logs = response.data or []

        needle = (query or "").strip().lower()
        if column and needle:
            logs = [row for row in logs if needle in str(row.get(column) or "").lower()]

        return logs
