# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - archive.py: Zip reading and entry path sanitizing
# - supabase_client.py: Typed Supabase wrapper (buckets and tables)
# - pdf_report.py: PDF rendering of plain report data
# - utils.py: Time zone and content type helpers
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.archive import ArchiveEntry, ZipArchive, sanitize_entry_path
from lib.supabase_client import BucketStore, SupabaseClient, SupabaseClientError

__all__ = [
    # Archive
    "ArchiveEntry",
    "ZipArchive",
    "sanitize_entry_path",
    # Supabase
    "BucketStore",
    "SupabaseClient",
    "SupabaseClientError",
]
