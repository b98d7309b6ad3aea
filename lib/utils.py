# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import mimetypes
from datetime import datetime
from zoneinfo import ZoneInfo


# =============================================================================
# Time Utilities
# =============================================================================

def now_in_zone(tz_name: str) -> datetime:
    """
    Current wall-clock time in a fixed IANA time zone.

    Args:
        tz_name: Zone name such as "Asia/Manila"

    Returns:
        Timezone-aware datetime

    Example:
        now_in_zone("Asia/Manila").isoformat()  # "2024-01-15T18:30:00.123+08:00"
    """
    return datetime.now(ZoneInfo(tz_name))


def local_timestamp(moment: datetime) -> str:
    """
    Format a datetime as local wall-clock "YYYY-MM-DDTHH:MM:SS" (no offset).

    This is the format stored in operation_logs.created_at.
    """
    return moment.strftime("%Y-%m-%dT%H:%M:%S")


def display_timestamp(value: str | None) -> str:
    """
    Render a stored ISO timestamp for reports. Returns "N/A" when missing.
    """
    if not value:
        return "N/A"
    try:
        return datetime.fromisoformat(value).strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return value


# =============================================================================
# Content Types
# =============================================================================

def guess_content_type(path: str) -> str:
    """Content type from a file name, defaulting to application/octet-stream."""
    content_type, _ = mimetypes.guess_type(path)
    return content_type or "application/octet-stream"
