# =============================================================================
# tests/test_upload_service.py - Upload Pipeline Tests
# =============================================================================
# Tests for core/services/upload_service.py against the in-memory store.
#
# Run with: pytest tests/test_upload_service.py -v
# =============================================================================

import zipfile

import pytest

from app.exceptions import CorruptArchiveError
from core.services.upload_service import UploadService
from tests.conftest import break_payload, mark_encrypted


@pytest.fixture
def uploads(supabase, settings):
    return UploadService(supabase, settings)


class TestExtract:
    """Tests for UploadService.extract()."""

    def test_stores_sanitized_keys(self, uploads, fake_client, settings, sample_zip_bytes):
        result = uploads.extract(sample_zip_bytes)

        assert result.succeeded == ["a.txt", "dir/b.txt", "evil.txt"]
        assert result.failed == []
        assert result.skipped == []

        stored = fake_client.storage.buckets[settings.EXTRACTED_BUCKET]
        assert stored == {
            "a.txt": b"alpha",
            "dir/b.txt": b"bravo",
            "evil.txt": b"evil",
        }

    def test_one_key_per_file_entry(self, uploads, make_zip):
        entries = {f"batch/file-{i}.txt": f"content {i}" for i in range(25)}
        entries["batch/"] = None

        result = uploads.extract(make_zip(entries))

        assert len(result.succeeded) == 25
        assert len(set(result.succeeded)) == 25

    def test_directory_entries_are_not_uploaded(self, uploads, fake_client, make_zip):
        uploads.extract(make_zip({"only/": None, "only/nested/": None}))
        assert fake_client.storage.calls_of("upload") == []

    def test_unusable_names_are_skipped(self, uploads, make_zip):
        result = uploads.extract(make_zip({"../..": "x", "keep.txt": "y"}))

        assert result.succeeded == ["keep.txt"]
        assert result.skipped == ["../.."]

    def test_upload_overwrites_existing_key(self, uploads, fake_client, settings, make_zip):
        uploads.extract(make_zip({"a.txt": "first"}))
        uploads.extract(make_zip({"a.txt": "second"}))

        assert fake_client.storage.buckets[settings.EXTRACTED_BUCKET]["a.txt"] == b"second"

    def test_partial_failures_are_reported(self, uploads, fake_client, settings, make_zip):
        fake_client.storage.fail_uploads.add((settings.EXTRACTED_BUCKET, "b.txt"))

        result = uploads.extract(make_zip({"a.txt": "1", "b.txt": "2", "c.txt": "3"}))

        assert result.succeeded == ["a.txt", "c.txt"]
        assert [item.key for item in result.failed] == ["b.txt"]
        assert "Upload rejected" in result.failed[0].error
        assert not result.ok

    def test_corrupt_archive_stores_nothing(self, uploads, fake_client):
        with pytest.raises(CorruptArchiveError):
            uploads.extract(b"definitely not a zip")
        assert fake_client.storage.calls_of("upload") == []

    def test_encrypted_archive_stores_nothing(self, uploads, fake_client, make_zip):
        data = mark_encrypted(make_zip({"batch/secret.txt": "classified", "batch/b.txt": "b"}))

        with pytest.raises(CorruptArchiveError):
            uploads.extract(data)
        assert fake_client.storage.calls_of("upload") == []

    def test_broken_bzip2_archive_stores_nothing(self, uploads, fake_client, make_zip):
        data = break_payload(make_zip({"batch/a.txt": "alpha " * 100}, compression=zipfile.ZIP_BZIP2))

        with pytest.raises(CorruptArchiveError):
            uploads.extract(data)
        assert fake_client.storage.calls_of("upload") == []


class TestArchiveOriginal:
    """Tests for UploadService.archive_original()."""

    def test_stores_copy_in_received_bucket(self, uploads, fake_client, settings):
        key = uploads.archive_original("batch-01.zip", b"PK...")

        assert key == "batch-01.zip"
        assert fake_client.storage.buckets[settings.SUPABASE_BUCKET]["batch-01.zip"] == b"PK..."

    def test_failure_returns_none(self, uploads, fake_client, settings):
        fake_client.storage.fail_uploads.add((settings.SUPABASE_BUCKET, "batch-01.zip"))
        assert uploads.archive_original("batch-01.zip", b"PK...") is None

    def test_unusable_filename_returns_none(self, uploads, fake_client):
        assert uploads.archive_original("../", b"PK...") is None
        assert fake_client.storage.calls_of("upload") == []
