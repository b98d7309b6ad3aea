# =============================================================================
# core/models/storage.py - Extraction and Folder Lifecycle Schemas
# =============================================================================
# These models define the results of the storage pipelines:
# - BulkResult: per-item outcome of a bulk store operation
# - FolderStage: which lifecycle bucket a folder lives in
# - FolderSummary: one folder in a bucket overview
# - MarkDoneResult: outcome of moving a folder to the completed bucket
#
# Folder lifecycle:
#   extracted -> completed -> deleted   (linear, no way back)
# =============================================================================

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FailedItem(BaseModel):
    """One object that could not be stored, with the reason."""

    key: str = Field(..., description="Storage key that failed")
    error: str = Field(..., description="Underlying store error message")


class BulkResult(BaseModel):
    """
    Aggregated outcome of a bulk store operation.

    Failures never abort the whole operation; they are collected here so
    callers can report them instead of silently dropping them.

    Example:
        {
            "succeeded": ["a.txt", "dir/b.txt"],
            "failed": [{"key": "big.bin", "error": "Payload too large"}],
            "skipped": ["../"]
        }
    """

    succeeded: list[str] = Field(default_factory=list)
    failed: list[FailedItem] = Field(default_factory=list)

    # Raw entry paths dropped before reaching the store (nothing left after
    # sanitizing)
    skipped: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class FolderStage(str, Enum):
    """
    Lifecycle bucket a folder lives in.

    Each stage owns one metadata file name stamped with its timestamp.
    """
    EXTRACTED = "extracted"
    COMPLETED = "completed"

    @property
    def metadata_file(self) -> str:
        return f".{self.value}.json"

    @property
    def timestamp_key(self) -> str:
        return f"{self.value}At"


class FolderSummary(BaseModel):
    """
    One folder in a bucket overview.

    Example:
        {"name": "batch-01", "completedAt": "2024-01-15T18:30:00+08:00"}
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Folder name (first key segment)")
    timestamp: str | None = Field(
        default=None,
        description="Stage timestamp from the folder's metadata file"
    )


class MarkDoneResult(BaseModel):
    """
    Outcome of moving a folder from the extracted to the completed bucket.

    An empty `moved` list with no completion time means the extracted folder
    was already empty and nothing was written.
    """

    model_config = ConfigDict(populate_by_name=True)

    folder: str
    completed_at: str | None = Field(default=None, serialization_alias="completedAt")
    moved: list[str] = Field(default_factory=list)
    failed: list[FailedItem] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed
