# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - upload.py: Zip upload/extraction and the received-files listing
# - extracted.py: Extracted folders and the "mark done" transition
# - done.py: Completed folders (listing, deletion)
# - reports.py: PDF reports and operation log endpoints
# - accounts.py: User account management
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import upload
from . import extracted
from . import done
from . import reports
from . import accounts

__all__ = [
    "health",
    "upload",
    "extracted",
    "done",
    "reports",
    "accounts",
]
