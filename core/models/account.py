# =============================================================================
# core/models/account.py - User Account Schemas
# =============================================================================
# These models define the API contract for the accounts table:
# - AccountCreate: fields required to create an account
# - AccountUpdate: editable fields (blank password keeps the current one)
# - AccountResponse: what clients get back (never the password hash)
# =============================================================================

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class AccountCreate(BaseModel):
    """
    Schema for creating a user account.

    Example:
        {
            "full_name": "Maria Santos",
            "username": "msantos",
            "password": "correct horse battery staple",
            "email": "maria@example.com"
        }
    """

    full_name: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)
    address: str | None = None
    email: str | None = None
    contact_number: str | None = None
    gender: str | None = None


class AccountUpdate(BaseModel):
    """
    Schema for editing a user account.

    A missing or blank password leaves the stored hash untouched.
    """

    full_name: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=1, max_length=100)
    password: str | None = None
    address: str | None = None
    email: str | None = None
    contact_number: str | None = None
    gender: str | None = None

    @property
    def changes_password(self) -> bool:
        return bool(self.password and self.password.strip())


class AccountResponse(BaseModel):
    """Account data returned to clients."""

    id: Any
    full_name: str | None = None
    username: str | None = None
    address: str | None = None
    email: str | None = None
    contact_number: str | None = None
    gender: str | None = None
    profile_path: str | None = None
    profile_url: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "AccountResponse":
        """Build from a users row, dropping the password hash."""
        return cls(**{k: v for k, v in row.items() if k in cls.model_fields})
