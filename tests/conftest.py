# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - An in-memory stand-in for the supabase-py client (storage + tables)
# - Zip archive builders
# - A TestClient wired to the fake through dependency overrides
# =============================================================================

from __future__ import annotations

import io
import os
import struct
import zipfile
from datetime import datetime
from types import SimpleNamespace
from typing import Any

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from app.config import get_settings
from lib.supabase_client import SupabaseClient

PUBLIC_URL_BASE = "https://test-project.supabase.co/storage/v1/object/public"
FIXED_NOW = "2024-01-15T10:00:00+00:00"


# =============================================================================
# Fake Supabase Storage
# =============================================================================

class FakeBucketApi:
    """Mimics supabase-py's per-bucket storage API over a dict of key -> bytes."""

    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    @property
    def objects(self) -> dict[str, bytes]:
        return self.storage.buckets.setdefault(self.name, {})

    def upload(self, path: str, file: bytes, file_options: dict | None = None):
        self.storage.calls.append(("upload", self.name, path))
        if (self.name, path) in self.storage.fail_uploads:
            raise Exception(f"Upload rejected: {path}")
        upsert = (file_options or {}).get("upsert") == "true"
        if path in self.objects and not upsert:
            raise Exception("The resource already exists")
        self.objects[path] = bytes(file)
        return {"path": path}

    def download(self, path: str) -> bytes:
        self.storage.calls.append(("download", self.name, path))
        if (self.name, path) in self.storage.fail_downloads or path not in self.objects:
            raise Exception(f"Object not found: {path}")
        return self.objects[path]

    def list(self, path: str | None = None, options: dict | None = None) -> list[dict[str, Any]]:
        self.storage.calls.append(("list", self.name, path or ""))
        if self.name in self.storage.fail_lists:
            raise Exception("list failed")

        prefix = f"{path.strip('/')}/" if path else ""
        files: dict[str, dict[str, Any]] = {}
        folders: set[str] = set()
        for key, data in self.objects.items():
            if not key.startswith(prefix):
                continue
            head, sep, _ = key[len(prefix):].partition("/")
            if sep:
                folders.add(head)
            else:
                files[head] = {
                    "name": head,
                    "id": f"id-{key}",
                    "updated_at": FIXED_NOW,
                    "created_at": FIXED_NOW,
                    "last_accessed_at": FIXED_NOW,
                    "metadata": {"size": len(data), "mimetype": "application/octet-stream"},
                }

        entries = [{"name": f, "id": None, "metadata": None} for f in folders]
        entries += list(files.values())
        entries.sort(key=lambda e: e["name"])

        options = options or {}
        offset = options.get("offset", 0)
        limit = options.get("limit", 100)
        return entries[offset:offset + limit]

    def remove(self, paths: list[str]):
        self.storage.calls.append(("remove", self.name, tuple(paths)))
        if self.name in self.storage.fail_removes:
            raise Exception("remove failed")
        removed = []
        for path in paths:
            if self.objects.pop(path, None) is not None:
                removed.append({"name": path})
        return removed

    def get_public_url(self, path: str) -> str:
        return f"{PUBLIC_URL_BASE}/{self.name}/{path}"


class FakeStorage:
    def __init__(self):
        self.buckets: dict[str, dict[str, bytes]] = {}
        self.calls: list[tuple] = []
        self.fail_uploads: set[tuple[str, str]] = set()
        self.fail_downloads: set[tuple[str, str]] = set()
        self.fail_lists: set[str] = set()
        self.fail_removes: set[str] = set()

    def from_(self, name: str) -> FakeBucketApi:
        return FakeBucketApi(self, name)

    def list_buckets(self):
        return [SimpleNamespace(name=name) for name in self.buckets]

    def calls_of(self, kind: str, bucket: str | None = None) -> list[tuple]:
        return [c for c in self.calls if c[0] == kind and (bucket is None or c[1] == bucket)]


# =============================================================================
# Fake PostgREST Tables
# =============================================================================

class FakeQuery:
    """Chainable query builder supporting the calls the services make."""

    def __init__(self, db: "FakeClient", table: str):
        self.db = db
        self.table = table
        self.action = "select"
        self.payload: Any = None
        self.filters: list[tuple[str, Any]] = []
        self.order_by: tuple[str, bool] | None = None
        self.max_rows: int | None = None

    def select(self, *columns):
        self.action = "select"
        return self

    def insert(self, rows):
        self.action = "insert"
        self.payload = rows if isinstance(rows, list) else [rows]
        return self

    def update(self, values):
        self.action = "update"
        self.payload = values
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.max_rows = count
        return self

    def _matches(self, row):
        return all(str(row.get(c)) == str(v) for c, v in self.filters)

    def execute(self):
        if self.table in self.db.fail_tables:
            raise Exception(f"relation {self.table} unavailable")

        rows = self.db.tables.setdefault(self.table, [])

        if self.action == "insert":
            inserted = []
            for row in self.payload:
                self.db.next_id += 1
                stored = {"id": self.db.next_id, "created_at": FIXED_NOW, **row}
                rows.append(stored)
                inserted.append(dict(stored))
            return SimpleNamespace(data=inserted)

        matching = [row for row in rows if self._matches(row)]

        if self.action == "update":
            for row in matching:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(row) for row in matching])

        if self.action == "delete":
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=[dict(row) for row in matching])

        result = [dict(row) for row in matching]
        if self.order_by:
            column, desc = self.order_by
            result.sort(key=lambda r: str(r.get(column) or ""), reverse=desc)
        if self.max_rows is not None:
            result = result[:self.max_rows]
        return SimpleNamespace(data=result)


class FakeClient:
    """Stand-in for supabase.Client: .storage and .table()."""

    def __init__(self):
        self.storage = FakeStorage()
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.fail_tables: set[str] = set()
        self.next_id = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def settings():
    """Application settings loaded from the test environment."""
    return get_settings()


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def supabase(fake_client, settings):
    """SupabaseClient wrapper bound to the in-memory fake."""
    return SupabaseClient(fake_client, settings)


@pytest.fixture
def fixed_clock():
    """Clock returning a fixed Manila wall-clock time."""
    from zoneinfo import ZoneInfo

    moment = datetime(2024, 1, 15, 18, 30, 0, tzinfo=ZoneInfo("Asia/Manila"))
    return lambda: moment


def build_zip(entries: dict[str, bytes | str | None], compression=zipfile.ZIP_DEFLATED) -> bytes:
    """
    Build a zip archive in memory.

    A value of None creates a directory entry for that name.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression) as zf:
        for name, content in entries.items():
            if content is None:
                zf.writestr(zipfile.ZipInfo(name), b"", compress_type=zipfile.ZIP_STORED)
            else:
                zf.writestr(zipfile.ZipInfo(name), content, compress_type=compression)
    return buffer.getvalue()


def mark_encrypted(data: bytes) -> bytes:
    """Set the "encrypted" flag bit on the first member's headers."""
    patched = bytearray(data)
    patched[6] |= 0x01
    central = patched.find(b"PK\x01\x02")
    patched[central + 8] |= 0x01
    return bytes(patched)


def break_payload(data: bytes, skip: int = 0) -> bytes:
    """Overwrite the start of the first member's compressed data with 0xFF."""
    name_len, extra_len = struct.unpack("<HH", data[26:30])
    start = 30 + name_len + extra_len + skip
    patched = bytearray(data)
    patched[start:start + 4] = b"\xff\xff\xff\xff"
    return bytes(patched)


@pytest.fixture
def make_zip():
    return build_zip


@pytest.fixture
def sample_zip_bytes():
    """Archive with a root file, a nested file, a directory and a traversal name."""
    return build_zip({
        "a.txt": "alpha",
        "dir/": None,
        "dir/b.txt": "bravo",
        "../../evil.txt": "evil",
    })


@pytest.fixture
def api_client(supabase, settings):
    """TestClient whose handlers use the fake Supabase client."""
    from app.dependencies import get_supabase_client
    from app.main import app

    app.dependency_overrides[get_supabase_client] = lambda: supabase
    app.dependency_overrides[get_settings] = lambda: settings
    # Not entered as a context manager: the lifespan would build a real client
    yield TestClient(app)
    app.dependency_overrides.clear()
