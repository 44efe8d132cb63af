"""Adapter between :mod:`tarfile` and the indexer.

Decompression and tar decoding are delegated to the standard library;
this module only turns a tar stream into a sequence of
:class:`ArchiveEntry` values and normalizes decoder failures into
:class:`TFSConstructionError`.
"""

from __future__ import annotations

import bz2
import gzip
import lzma
import tarfile
import zlib
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import IO

from ._exceptions import TFSConstructionError

# ValueError covers a source stream that was closed before decoding.
_DECODE_ERRORS = (
    tarfile.TarError, OSError, EOFError, ValueError, zlib.error, lzma.LZMAError
)

KIND_FILE = "file"
KIND_DIR = "dir"
KIND_OTHER = "other"


@dataclass(frozen=True)
class ArchiveEntry:
    name: str
    kind: str
    size: int
    data: bytes
    modified_at: float
    mode: int


def _entry_kind(member: tarfile.TarInfo) -> str:
    if member.isreg():
        return KIND_FILE
    if member.isdir():
        return KIND_DIR
    return KIND_OTHER


def iter_archive_entries(fileobj: IO[bytes]) -> Iterator[ArchiveEntry]:
    """Yield the members of an uncompressed tar stream in archive order.

    Regular file contents are read fully into memory. Members of any
    other kind are yielded with empty data and are never read.
    """
    try:
        with tarfile.open(fileobj=fileobj, mode="r|") as tar:
            for member in tar:
                kind = _entry_kind(member)
                data = b""
                if kind == KIND_FILE:
                    extracted = tar.extractfile(member)
                    if extracted is not None:
                        data = extracted.read()
                yield ArchiveEntry(
                    name=member.name,
                    kind=kind,
                    size=member.size,
                    data=data,
                    modified_at=float(member.mtime),
                    mode=member.mode,
                )
    except _DECODE_ERRORS as exc:
        raise TFSConstructionError(f"Failed to decode tar archive: {exc}") from exc


# ---------------------------------------------------------------------------
#  Decompressor openers
# ---------------------------------------------------------------------------


def open_plain(path: str) -> IO[bytes]:
    return open(path, "rb")


def open_gzip(path: str) -> IO[bytes]:
    return gzip.open(path, "rb")


def open_bzip2(path: str) -> IO[bytes]:
    return bz2.open(path, "rb")


def open_xz(path: str) -> IO[bytes]:
    return lzma.open(path, "rb")


_SUFFIX_OPENERS: tuple[tuple[tuple[str, ...], Callable[[str], IO[bytes]]], ...] = (
    ((".tar.gz", ".tgz"), open_gzip),
    ((".tar.bz2", ".tbz2", ".tbz"), open_bzip2),
    ((".tar.xz", ".txz"), open_xz),
)


def detect_compression(path: str) -> Callable[[str], IO[bytes]]:
    """Pick a decompressor from the filename suffix, defaulting to plain tar."""
    lowered = str(path).lower()
    for suffixes, opener in _SUFFIX_OPENERS:
        if lowered.endswith(suffixes):
            return opener
    return open_plain
