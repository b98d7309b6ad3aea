# =============================================================================
# core/services/upload_service.py - Zip Upload Pipeline
# =============================================================================
# Drives archive extraction into the extracted bucket:
#   parse archive -> skip directories -> sanitize path -> read bytes -> upsert
#
# A corrupt archive aborts before anything is stored. Individual upload
# failures are collected in the BulkResult and never stop the remaining
# entries (best-effort extraction).
# =============================================================================

import logging

from app.config import Settings
from app.exceptions import StoreOperationError
from core.models.storage import BulkResult, FailedItem
from lib.archive import ZipArchive, sanitize_entry_path
from lib.supabase_client import SupabaseClient
from lib.utils import guess_content_type

logger = logging.getLogger(__name__)


class UploadService:
    """
    Service for storing uploaded archives and their extracted contents.
    """

    def __init__(self, supabase: SupabaseClient, settings: Settings):
        self.received = supabase.bucket(settings.SUPABASE_BUCKET)
        self.extracted = supabase.bucket(settings.EXTRACTED_BUCKET)

    def archive_original(self, filename: str, content: bytes) -> str | None:
        """
        Keep a copy of the uploaded zip in the received bucket.

        Best-effort: a failure is logged and None is returned.

        Args:
            filename: Original upload filename
            content: Archive bytes

        Returns:
            Storage key of the stored archive, or None if storing failed
        """
        key = sanitize_entry_path(filename)
        if key is None:
            logger.warning(f"Not archiving upload with unusable filename: {filename!r}")
            return None

        try:
            return self.received.upload(key, content, content_type="application/zip")
        except StoreOperationError as e:
            logger.warning(f"Failed to archive original upload {key}: {e.message}")
            return None

    def extract(self, content: bytes) -> BulkResult:
        """
        Extract every file entry of a zip archive into the extracted bucket.

        Args:
            content: Archive bytes

        Returns:
            BulkResult with stored keys, failed keys and skipped raw paths

        Raises:
            CorruptArchiveError: If the archive cannot be parsed (nothing is stored)
        """
        result = BulkResult()

        with ZipArchive.from_bytes(content) as archive:
            logger.info(f"Extracting archive with {len(archive)} entries")

            for entry in archive.entries():
                if entry.is_dir:
                    continue

                key = sanitize_entry_path(entry.path)
                if key is None:
                    logger.debug(f"Skipping entry with empty sanitized path: {entry.path!r}")
                    result.skipped.append(entry.path)
                    continue

                data = entry.read()

                try:
                    self.extracted.upload(key, data, content_type=guess_content_type(key))
                except StoreOperationError as e:
                    logger.error(f"Failed to store extracted entry {key}: {e.message}")
                    result.failed.append(FailedItem(key=key, error=e.details.get("error", e.message)))
                    continue

                result.succeeded.append(key)

        logger.info(
            f"Extraction finished: {len(result.succeeded)} stored, "
            f"{len(result.failed)} failed, {len(result.skipped)} skipped"
        )
        return result
