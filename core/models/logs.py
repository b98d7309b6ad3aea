# =============================================================================
# core/models/logs.py - Operation Log Schemas
# =============================================================================
# - Operator: who performed an action (read from the bearer token, if any)
# - OperationLogEntry: one append-only row of the operation_logs table
# - LogColumn: columns the log listing can be filtered on
# =============================================================================

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Operator(BaseModel):
    """
    The person behind a request.

    Defaults describe an anonymous caller.
    """

    model_config = ConfigDict(frozen=True)

    username: str = Field(default="Unknown User")
    role: str = Field(default="N/A")


class OperationLogEntry(BaseModel):
    """
    One row of the operation_logs table.

    Example:
        {
            "username": "Maria Santos",
            "role": "admin",
            "action": "Uploaded archive batch-01.zip (12 files)",
            "created_at": "2024-01-15T18:30:00"
        }
    """

    username: str
    role: str
    action: str = Field(..., min_length=1)

    # Local wall-clock time in the configured zone, no offset
    created_at: str


class LogColumn(str, Enum):
    """Columns the operation log can be filtered on."""
    USERNAME = "username"
    ROLE = "role"
    ACTION = "action"
    CREATED_AT = "created_at"
