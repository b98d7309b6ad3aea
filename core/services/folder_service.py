# =============================================================================
# core/services/folder_service.py - Folder Lifecycle
# =============================================================================
# A folder is every object sharing the same first key segment. Folders move
# through two buckets:
#
#   extracted --mark_done--> completed --delete--> (gone)
#
# mark_done is copy-then-delete in four phases (list, copy, stamp, remove)
# and is NOT atomic. A crash between phases can leave the folder in both
# buckets, or leave an orphaned source folder when the final removal fails.
# Nothing here rolls a partial move back.
# =============================================================================

import json
import logging
from datetime import datetime
from typing import Any, Callable

from app.config import Settings
from app.exceptions import (
    FolderNotFoundError,
    StoreOperationError,
    ValidationError,
)
from core.models.storage import (
    FailedItem,
    FolderStage,
    FolderSummary,
    MarkDoneResult,
)
from lib.supabase_client import BucketStore, SupabaseClient
from lib.utils import guess_content_type, now_in_zone

logger = logging.getLogger(__name__)

# Bookkeeping objects that are never shown in file listings
HIDDEN_FILES = {
    FolderStage.EXTRACTED.metadata_file,
    FolderStage.COMPLETED.metadata_file,
    ".emptyFolderPlaceholder",
}


def validate_folder_name(folder: str) -> str:
    """
    Reject folder names that are not a single plain key segment.

    Raises:
        ValidationError: For empty, ".", ".." or names containing separators
    """
    name = (folder or "").strip()
    if name in ("", ".", "..") or "/" in name or "\\" in name:
        raise ValidationError(
            f"Invalid folder name: {folder!r}",
            suggestion="Use the folder name exactly as listed, without slashes",
            details={"folder": folder},
        )
    return name


class FolderService:
    """
    Service for folder listings and lifecycle transitions.

    `clock` returns the current time; it defaults to wall-clock time in the
    configured zone.
    """

    def __init__(
        self,
        supabase: SupabaseClient,
        settings: Settings,
        clock: Callable[[], datetime] | None = None,
    ):
        self.buckets = {
            FolderStage.EXTRACTED: supabase.bucket(settings.EXTRACTED_BUCKET),
            FolderStage.COMPLETED: supabase.bucket(settings.COMPLETED_BUCKET),
        }
        self.clock = clock or (lambda: now_in_zone(settings.TIMEZONE))

    def bucket(self, stage: FolderStage) -> BucketStore:
        return self.buckets[stage]

    # -------------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------------

    def list_folders(self, stage: FolderStage) -> list[FolderSummary]:
        """
        List top-level folders of a stage with their metadata timestamp.

        A missing or unreadable metadata file gives a null timestamp.

        Raises:
            StoreOperationError: If the bucket listing fails
        """
        store = self.bucket(stage)
        folders = [entry["name"] for entry in store.list("") if entry.get("id") is None]

        return [
            FolderSummary(name=name, timestamp=self._read_timestamp(store, stage, name))
            for name in folders
        ]

    def _read_timestamp(self, store: BucketStore, stage: FolderStage, folder: str) -> str | None:
        try:
            raw = store.download(f"{folder}/{stage.metadata_file}")
        except StoreOperationError:
            return None

        try:
            value = json.loads(raw).get(stage.timestamp_key)
        except (ValueError, AttributeError):
            logger.warning(f"Unreadable metadata for {store.name}/{folder}")
            return None

        if value is not None and not isinstance(value, str):
            logger.warning(f"Ignoring non-string {stage.timestamp_key} for {store.name}/{folder}: {value!r}")
            return None
        return value

    def list_files(self, stage: FolderStage, folder: str) -> list[dict[str, Any]]:
        """
        List every object inside a folder, annotated with its public URL.

        Returns:
            Dicts with the store's raw fields plus:
            - name: key relative to the folder (e.g. "sub/b.txt")
            - path: full storage key
            - publicUrl: resolvable URL, or None for private buckets

        Raises:
            ValidationError: If the folder name is invalid
            StoreOperationError: If the listing fails
        """
        folder = validate_folder_name(folder)
        store = self.bucket(stage)

        files = []
        for obj in store.walk(folder):
            relative = obj["path"][len(folder) + 1:]
            if relative.rsplit("/", 1)[-1] in HIDDEN_FILES:
                continue
            files.append({
                **obj,
                "name": relative,
                "publicUrl": store.public_url(obj["path"]),
            })
        return files

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def mark_done(self, folder: str) -> MarkDoneResult:
        """
        Move a folder from the extracted bucket to the completed bucket.

        Phases:
        1. List every object under the folder in the extracted bucket
        2. Copy each object (download + upsert) to the same key in completed
        3. Write <folder>/.completed.json with the completion time
        4. Remove the copied sources from extracted in one batch

        An object whose copy fails stays in the extracted bucket and is
        reported in `failed`. An already-empty folder copies nothing and
        writes no metadata.

        Raises:
            ValidationError: If the folder name is invalid
            StoreOperationError: If listing, the metadata write or the final
                removal fails
        """
        folder = validate_folder_name(folder)
        source = self.bucket(FolderStage.EXTRACTED)
        target = self.bucket(FolderStage.COMPLETED)

        # Phase 1: list
        objects = source.walk(folder)
        if not objects:
            logger.info(f"Nothing to move for folder {folder}")
            return MarkDoneResult(folder=folder)

        # Phase 2: copy
        result = MarkDoneResult(folder=folder)
        for obj in objects:
            path = obj["path"]
            try:
                data = source.download(path)
                target.upload(path, data, content_type=guess_content_type(path))
            except StoreOperationError as e:
                logger.error(f"Failed to copy {path} to {target.name}: {e.message}")
                result.failed.append(FailedItem(key=path, error=e.details.get("error", e.message)))
                continue
            result.moved.append(path)

        if not result.moved:
            logger.warning(f"No objects of folder {folder} could be copied")
            return result

        # Phase 3: stamp
        completed_at = self.clock().isoformat(timespec="seconds")
        target.upload(
            f"{folder}/{FolderStage.COMPLETED.metadata_file}",
            json.dumps({FolderStage.COMPLETED.timestamp_key: completed_at}).encode("utf-8"),
            content_type="application/json",
        )
        result.completed_at = completed_at

        # Phase 4: remove sources
        source.remove(result.moved)

        logger.info(
            f"Folder {folder} marked done: {len(result.moved)} moved, "
            f"{len(result.failed)} failed"
        )
        return result

    def delete_completed(self, folder: str) -> int:
        """
        Delete a completed folder with one batch removal.

        Returns:
            Number of objects removed

        Raises:
            ValidationError: If the folder name is invalid
            FolderNotFoundError: If the folder has no objects (nothing removed)
            StoreOperationError: If listing or removal fails
        """
        folder = validate_folder_name(folder)
        store = self.bucket(FolderStage.COMPLETED)

        paths = [obj["path"] for obj in store.walk(folder)]
        if not paths:
            raise FolderNotFoundError(folder, store.name)

        removed = store.remove(paths)
        logger.info(f"Deleted completed folder {folder} ({removed} objects)")
        return removed
