# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper around one configured Supabase client.
# It exposes:
# - BucketStore: upload / download / list / walk / remove / public URLs for
#   the objects of one storage bucket
# - table(): PostgREST query builders for the operation log and accounts
#
# One SupabaseClient is built during application startup and passed to
# services explicitly (see app/dependencies.py). Nothing here is a global.
#
# Usage:
#   client = SupabaseClient.from_settings(settings)
#   extracted = client.bucket(settings.EXTRACTED_BUCKET)
#   extracted.upload("folder/a.txt", b"hello")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import Settings
from app.exceptions import StoreOperationError

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error while constructing the Supabase client.

    Raised at startup only; request-time failures surface as
    StoreOperationError instead.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class BucketStore:
    """
    Object operations scoped to a single storage bucket.

    Every method performs exactly one kind of remote call and wraps any
    failure in StoreOperationError. Callers decide whether a failure is fatal.

    Supabase Storage has no real directories: list() returns the immediate
    children of a prefix, where "folders" are placeholder entries with a
    null id. walk() flattens those into the full set of object keys.
    """

    def __init__(
        self,
        client: Client,
        name: str,
        public: bool = False,
        page_limit: int = 1000,
    ):
        self._client = client
        self.name = name
        self.public = public
        self.page_limit = page_limit

    def _api(self):
        return self._client.storage.from_(self.name)

    def upload(
        self,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = True,
    ) -> str:
        """
        Upload bytes to `path`, overwriting an existing object when upsert is set.

        Returns:
            The storage key written

        Raises:
            StoreOperationError: If the upload fails
        """
        try:
            self._api().upload(
                path=path,
                file=data,
                file_options={
                    "content-type": content_type,
                    "upsert": "true" if upsert else "false",
                },
            )
        except Exception as e:
            logger.error(f"Upload to {self.name}/{path} failed: {e}")
            raise StoreOperationError("upload", str(e), bucket=self.name, path=path)

        logger.debug(f"Uploaded {len(data)} bytes to {self.name}/{path}")
        return path

    def download(self, path: str) -> bytes:
        """
        Download an object's bytes.

        Raises:
            StoreOperationError: If the download fails
        """
        try:
            return self._api().download(path)
        except Exception as e:
            logger.error(f"Download of {self.name}/{path} failed: {e}")
            raise StoreOperationError("download", str(e), bucket=self.name, path=path)

    def list(self, prefix: str = "") -> list[dict[str, Any]]:
        """
        List the immediate children of `prefix`, following pagination.

        Returns:
            Raw entry dicts as returned by Supabase (name, id, metadata, ...)

        Raises:
            StoreOperationError: If any page request fails
        """
        prefix = prefix.strip("/")
        entries: list[dict[str, Any]] = []
        offset = 0

        while True:
            try:
                page = self._api().list(
                    prefix,
                    {
                        "limit": self.page_limit,
                        "offset": offset,
                        "sortBy": {"column": "name", "order": "asc"},
                    },
                )
            except Exception as e:
                logger.error(f"Listing {self.name}/{prefix} failed: {e}")
                raise StoreOperationError("list", str(e), bucket=self.name, path=prefix or None)

            page = page or []
            entries.extend(page)
            if len(page) < self.page_limit:
                break
            offset += self.page_limit

        return entries

    def walk(self, prefix: str) -> list[dict[str, Any]]:
        """
        Recursively list every object below `prefix`.

        Each returned dict is the raw Supabase entry plus a `path` key holding
        the object's full storage key.
        """
        prefix = prefix.strip("/")
        objects: list[dict[str, Any]] = []

        for entry in self.list(prefix):
            name = entry.get("name")
            if not name:
                continue
            path = f"{prefix}/{name}" if prefix else name
            if entry.get("id") is None:
                objects.extend(self.walk(path))
            else:
                objects.append({**entry, "path": path})

        return objects

    def remove(self, paths: list[str]) -> int:
        """
        Remove a batch of objects with a single request.

        Returns:
            Number of keys requested for removal

        Raises:
            StoreOperationError: If the removal request fails
        """
        if not paths:
            return 0
        try:
            self._api().remove(paths)
        except Exception as e:
            logger.error(f"Removing {len(paths)} objects from {self.name} failed: {e}")
            raise StoreOperationError("remove", str(e), bucket=self.name)

        logger.info(f"Removed {len(paths)} objects from {self.name}")
        return len(paths)

    def public_url(self, path: str) -> str | None:
        """
        Public URL for `path`, or None when the bucket is private.
        """
        if not self.public:
            return None
        try:
            return self._api().get_public_url(path) or None
        except Exception as e:
            logger.warning(f"Failed to get public URL for {self.name}/{path}: {e}")
            return None


class SupabaseClient:
    """
    Configuration-bound wrapper around one supabase-py Client.

    Built once at startup; bucket visibility and page size come from the
    settings it was created with.

    Example:
        client = SupabaseClient.from_settings(settings)
        files = client.bucket("Receive_Files").list("")
        logs = client.table("operation_logs").select("*").execute().data
    """

    def __init__(self, client: Client, settings: Settings):
        self._client = client
        self.settings = settings

    @classmethod
    def from_settings(cls, settings: Settings) -> SupabaseClient:
        """
        Create the Supabase client using the service_role key.

        The service_role key bypasses Row Level Security (RLS), which is
        appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        try:
            client = create_client(
                settings.SUPABASE_URL,
                settings.SUPABASE_SERVICE_ROLE_KEY
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase client: {e}",
                code="CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY in your .env file"
            )

        logger.info("Supabase client initialized successfully")
        return cls(client, settings)

    @property
    def raw(self) -> Client:
        """The underlying supabase-py client."""
        return self._client

    def bucket(self, name: str) -> BucketStore:
        """Object store for the named bucket."""
        return BucketStore(
            self._client,
            name,
            public=name in self.settings.public_buckets,
            page_limit=self.settings.LIST_PAGE_LIMIT,
        )

    def table(self, name: str):
        """PostgREST query builder for the named table."""
        return self._client.table(name)
