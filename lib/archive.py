# =============================================================================
# lib/archive.py - Zip Archive Reading and Entry Path Sanitizing
# =============================================================================
# Turns an in-memory zip upload into a sequence of entries whose paths are
# safe to use as storage keys.
#
# - sanitize_entry_path(): raw entry name -> storage key, or None to skip
# - ZipArchive: validated archive with a one-shot, lazy entry iterator
#
# The whole archive is checked (central directory + every CRC) before any
# entry is handed out, so a corrupt upload fails as a single error and
# nothing is stored.
#
# Usage:
#   with ZipArchive.from_bytes(content) as archive:
#       for entry in archive.entries():
#           key = sanitize_entry_path(entry.path)
# =============================================================================

from __future__ import annotations

import io
import lzma
import zipfile
import zlib
from dataclasses import dataclass, field
from typing import Iterator

from app.exceptions import CorruptArchiveError

# Everything zipfile and its codecs raise for an unreadable member
READ_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    lzma.LZMAError,
    EOFError,
    OSError,
    RuntimeError,
    ValueError,
)


def sanitize_entry_path(raw_path: str) -> str | None:
    """
    Normalize a raw archive entry name into a relative storage key.

    Backslashes become forward slashes, then empty and ".." segments are
    dropped. "." segments are kept as-is.

    Returns:
        The storage key, or None when nothing is left (directory markers,
        pure traversal names). None means "skip", not an error.

    Example:
        sanitize_entry_path("../../evil.txt")   # "evil.txt"
        sanitize_entry_path("dir\\b.txt")       # "dir/b.txt"
        sanitize_entry_path("../")              # None
    """
    if not raw_path:
        return None
    segments = raw_path.replace("\\", "/").split("/")
    kept = [segment for segment in segments if segment and segment != ".."]
    return "/".join(kept) or None


@dataclass(frozen=True)
class ArchiveEntry:
    """One member of a zip archive. Bytes are decompressed on read()."""

    path: str
    is_dir: bool
    size: int
    _archive: zipfile.ZipFile = field(repr=False, compare=False)
    _info: zipfile.ZipInfo = field(repr=False, compare=False)

    def read(self) -> bytes:
        """
        Decompress and return the entry's bytes.

        Raises:
            CorruptArchiveError: On checksum, size or decompression errors
        """
        try:
            return self._archive.read(self._info)
        except READ_ERRORS as e:
            raise CorruptArchiveError(str(e), entry=self.path)


class ZipArchive:
    """
    A validated zip archive held in memory.

    Build with ZipArchive.from_bytes(); entries() may be consumed once.
    """

    def __init__(self, archive: zipfile.ZipFile):
        self._archive = archive
        self._consumed = False

    @classmethod
    def from_bytes(cls, data: bytes) -> ZipArchive:
        """
        Open and fully verify a zip archive.

        Raises:
            CorruptArchiveError: If the buffer is not a zip archive or any
                member is encrypted, undecompressable or fails its CRC check
        """
        buffer = io.BytesIO(data or b"")
        if not zipfile.is_zipfile(buffer):
            raise CorruptArchiveError("not a zip archive")

        try:
            archive = zipfile.ZipFile(buffer)
        except READ_ERRORS as e:
            raise CorruptArchiveError(str(e))

        try:
            bad_member = archive.testzip()
        except READ_ERRORS as e:
            archive.close()
            raise CorruptArchiveError(str(e))

        if bad_member is not None:
            archive.close()
            raise CorruptArchiveError("checksum mismatch", entry=bad_member)

        return cls(archive)

    def __enter__(self) -> ZipArchive:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._archive.close()

    def __len__(self) -> int:
        return len(self._archive.infolist())

    def entries(self) -> Iterator[ArchiveEntry]:
        """
        Yield every member in archive order, directories included.

        Raises:
            RuntimeError: If the entries have already been iterated
        """
        if self._consumed:
            raise RuntimeError("Archive entries can only be iterated once")
        self._consumed = True

        for info in self._archive.infolist():
            yield ArchiveEntry(
                path=info.filename,
                is_dir=info.is_dir(),
                size=info.file_size,
                _archive=self._archive,
                _info=info,
            )
