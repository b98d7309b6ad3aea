# =============================================================================
# tests/test_archive.py - Zip Archive and Path Sanitizing Tests
# =============================================================================
# Unit tests for lib/archive.py:
# - sanitize_entry_path() never yields traversal or empty segments
# - ZipArchive rejects corrupt buffers before handing out any entry
# - Entries are read lazily and iterate once
#
# Run with: pytest tests/test_archive.py -v
# =============================================================================

import io
import zipfile

import pytest

from app.exceptions import CorruptArchiveError
from lib.archive import ArchiveEntry, ZipArchive, sanitize_entry_path
from tests.conftest import break_payload, build_zip, mark_encrypted


# =============================================================================
# sanitize_entry_path
# =============================================================================

class TestSanitizeEntryPath:
    """Tests for turning raw entry names into storage keys."""

    @pytest.mark.parametrize("raw, expected", [
        ("a.txt", "a.txt"),
        ("dir/b.txt", "dir/b.txt"),
        ("../../evil.txt", "evil.txt"),
        ("dir\\sub\\c.txt", "dir/sub/c.txt"),
        ("/abs/path.txt", "abs/path.txt"),
        ("dir//double.txt", "dir/double.txt"),
        ("dir/../x.txt", "dir/x.txt"),
        ("./here.txt", "./here.txt"),
    ])
    def test_normalizes_paths(self, raw, expected):
        assert sanitize_entry_path(raw) == expected

    @pytest.mark.parametrize("raw", ["", "/", "../", "..\\..\\", "//"])
    def test_empty_result_means_skip(self, raw):
        assert sanitize_entry_path(raw) is None

    @pytest.mark.parametrize("raw", [
        "../../etc/passwd",
        "a/../../b/../c",
        "..\\windows\\system32",
        "x//y///z",
    ])
    def test_output_has_no_traversal_or_empty_segments(self, raw):
        key = sanitize_entry_path(raw)
        assert key is not None
        assert not key.startswith("/")
        assert "\\" not in key
        segments = key.split("/")
        assert ".." not in segments
        assert "" not in segments

    def test_is_idempotent(self):
        once = sanitize_entry_path("..\\a//b/../c.txt")
        assert sanitize_entry_path(once) == once


# =============================================================================
# ZipArchive
# =============================================================================

class TestZipArchive:
    """Tests for archive validation and entry iteration."""

    def test_entries_in_archive_order(self, sample_zip_bytes):
        with ZipArchive.from_bytes(sample_zip_bytes) as archive:
            assert len(archive) == 4
            entries = list(archive.entries())

        assert [e.path for e in entries] == ["a.txt", "dir/", "dir/b.txt", "../../evil.txt"]
        assert [e.is_dir for e in entries] == [False, True, False, False]

    def test_read_returns_decompressed_bytes(self):
        data = build_zip({"notes/readme.md": "# hello"})
        with ZipArchive.from_bytes(data) as archive:
            entry = next(archive.entries())
            assert entry.size == len(b"# hello")
            assert entry.read() == b"# hello"

    def test_entries_iterate_only_once(self, sample_zip_bytes):
        with ZipArchive.from_bytes(sample_zip_bytes) as archive:
            list(archive.entries())
            with pytest.raises(RuntimeError):
                list(archive.entries())

    def test_empty_archive_has_no_entries(self):
        with ZipArchive.from_bytes(build_zip({})) as archive:
            assert list(archive.entries()) == []

    @pytest.mark.parametrize("data", [b"", b"not a zip", b"PK\x03\x04garbage"])
    def test_rejects_non_zip_buffers(self, data):
        with pytest.raises(CorruptArchiveError) as exc_info:
            ZipArchive.from_bytes(data)
        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "CORRUPT_ARCHIVE"

    def test_rejects_truncated_archive(self, sample_zip_bytes):
        with pytest.raises(CorruptArchiveError):
            ZipArchive.from_bytes(sample_zip_bytes[: len(sample_zip_bytes) // 2])

    def test_rejects_checksum_mismatch(self):
        data = build_zip({"ok.txt": "hello world"}, compression=zipfile.ZIP_STORED)
        tampered = data.replace(b"hello world", b"hellO world")

        with pytest.raises(CorruptArchiveError) as exc_info:
            ZipArchive.from_bytes(tampered)
        assert exc_info.value.details["entry"] == "ok.txt"


# =============================================================================
# Unreadable Members
# =============================================================================

PAYLOAD = "line of text that compresses well\n" * 200


class TestUnreadableMembers:
    """Members that parse but cannot be decompressed reject the whole archive."""

    def test_deflate_payload_is_really_compressed(self):
        data = build_zip({"batch/notes.txt": PAYLOAD})
        with ZipArchive.from_bytes(data) as archive:
            entry = next(archive.entries())
            assert entry._info.compress_type == zipfile.ZIP_DEFLATED
            assert entry._info.compress_size < entry.size
            assert entry.read() == PAYLOAD.encode()

    def test_encrypted_member(self):
        data = mark_encrypted(build_zip({"batch/secret.txt": PAYLOAD}))

        with pytest.raises(CorruptArchiveError) as exc_info:
            ZipArchive.from_bytes(data)
        assert "encrypted" in exc_info.value.message

    @pytest.mark.parametrize("compression, skip", [
        (zipfile.ZIP_DEFLATED, 0),
        (zipfile.ZIP_BZIP2, 0),
        (zipfile.ZIP_LZMA, 4),
    ])
    def test_broken_compressed_stream(self, compression, skip):
        data = break_payload(build_zip({"batch/data.txt": PAYLOAD}, compression=compression), skip)

        with pytest.raises(CorruptArchiveError) as exc_info:
            ZipArchive.from_bytes(data)
        assert exc_info.value.status_code == 400

    def test_entry_read_wraps_decompression_errors(self):
        data = break_payload(build_zip({"batch/data.txt": PAYLOAD}))
        raw = zipfile.ZipFile(io.BytesIO(data))
        info = raw.infolist()[0]
        entry = ArchiveEntry(path=info.filename, is_dir=False, size=info.file_size, _archive=raw, _info=info)

        with pytest.raises(CorruptArchiveError) as exc_info:
            entry.read()
        assert exc_info.value.details["entry"] == "batch/data.txt"
