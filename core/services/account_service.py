# =============================================================================
# core/services/account_service.py - User Accounts
# =============================================================================
# CRUD for the users table. Passwords are stored as bcrypt hashes; profile
# photos live in the user bucket under profiles/.
# =============================================================================

import logging
import time
from typing import Any

import bcrypt

from app.config import Settings
from app.exceptions import AccountNotFoundError, StoreOperationError
from core.models.account import AccountCreate, AccountResponse, AccountUpdate
from lib.archive import sanitize_entry_path
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

USERS_TABLE = "users"


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash."""
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


class ProfilePhoto:
    """An uploaded profile image."""

    def __init__(self, filename: str, content: bytes, content_type: str | None = None):
        self.filename = filename
        self.content = content
        self.content_type = content_type or "application/octet-stream"


class AccountService:
    """
    Service for user account management.
    """

    def __init__(self, supabase: SupabaseClient, settings: Settings):
        self.supabase = supabase
        self.photos = supabase.bucket(settings.USER_BUCKET)

    def _execute(self, operation: str, query) -> list[dict[str, Any]]:
        try:
            response = query.execute()
        except Exception as e:
            logger.error(f"Users {operation} failed: {e}")
            raise StoreOperationError(operation, str(e), path=USERS_TABLE)
        return response.data or []

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_accounts(self) -> list[AccountResponse]:
        """All accounts, newest first."""
        rows = self._execute(
            "query",
            self.supabase.table(USERS_TABLE).select("*").order("created_at", desc=True),
        )
        return [AccountResponse.from_db_row(row) for row in rows]

    def _fetch_row(self, user_id: str) -> dict[str, Any]:
        rows = self._execute(
            "query",
            self.supabase.table(USERS_TABLE).select("*").eq("id", user_id).limit(1),
        )
        if not rows:
            raise AccountNotFoundError(user_id)
        return rows[0]

    def get_account(self, user_id: str) -> AccountResponse:
        """
        Raises:
            AccountNotFoundError: If no account has this id
        """
        return AccountResponse.from_db_row(self._fetch_row(user_id))

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _store_photo(self, username: str, photo: ProfilePhoto) -> tuple[str, str | None]:
        basename = (sanitize_entry_path(photo.filename) or "photo").rsplit("/", 1)[-1]
        path = f"profiles/{username}_{int(time.time() * 1000)}_{basename}"
        self.photos.upload(path, photo.content, content_type=photo.content_type)
        return path, self.photos.public_url(path)

    def _discard_photo(self, path: str | None) -> None:
        if not path:
            return
        try:
            self.photos.remove([path])
        except StoreOperationError as e:
            logger.warning(f"Could not remove old profile photo {path}: {e.message}")

    def create_account(
        self,
        account: AccountCreate,
        photo: ProfilePhoto | None = None,
    ) -> AccountResponse:
        """
        Create an account, uploading the profile photo first if given.

        Raises:
            StoreOperationError: If the photo upload or insert fails
        """
        profile_path, profile_url = None, None
        if photo is not None:
            profile_path, profile_url = self._store_photo(account.username, photo)

        data = account.model_dump()
        data["password"] = hash_password(account.password)
        data["profile_path"] = profile_path
        data["profile_url"] = profile_url

        rows = self._execute("insert", self.supabase.table(USERS_TABLE).insert([data]))
        logger.info(f"Created account: {account.username}")

        if rows:
            return AccountResponse.from_db_row(rows[0])
        return AccountResponse.from_db_row({"id": None, **data})

    def update_account(
        self,
        user_id: str,
        changes: AccountUpdate,
        photo: ProfilePhoto | None = None,
    ) -> AccountResponse:
        """
        Update an account. A new photo replaces the old one.

        Raises:
            AccountNotFoundError: If no account has this id
            StoreOperationError: If the photo upload or update fails
        """
        existing = self._fetch_row(user_id)

        profile_path = existing.get("profile_path")
        profile_url = existing.get("profile_url")

        if photo is not None:
            self._discard_photo(profile_path)
            profile_path, profile_url = self._store_photo(changes.username, photo)

        updates = changes.model_dump(exclude={"password"})
        updates["profile_path"] = profile_path
        updates["profile_url"] = profile_url
        if changes.changes_password:
            updates["password"] = hash_password(changes.password)

        rows = self._execute(
            "update",
            self.supabase.table(USERS_TABLE).update(updates).eq("id", user_id),
        )
        logger.info(f"Updated account: {user_id}")

        if rows:
            return AccountResponse.from_db_row(rows[0])
        return AccountResponse.from_db_row({**existing, **updates})

    def delete_account(self, user_id: str) -> AccountResponse:
        """
        Delete an account and, best-effort, its profile photo.

        Raises:
            AccountNotFoundError: If no account has this id
            StoreOperationError: If the delete fails
        """
        existing = self._fetch_row(user_id)
        self._discard_photo(existing.get("profile_path"))

        self._execute("delete", self.supabase.table(USERS_TABLE).delete().eq("id", user_id))
        logger.info(f"Deleted account: {user_id}")
        return AccountResponse.from_db_row(existing)
