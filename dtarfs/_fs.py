from __future__ import annotations

import fnmatch
import io
import logging
import os
from collections.abc import Callable, Iterator
from typing import IO

from ._archive import (
    detect_compression,
    iter_archive_entries,
    open_bzip2,
    open_gzip,
    open_plain,
    open_xz,
)
from ._exceptions import TFSConstructionError, TFSInvalidPathError
from ._handle import TarDirHandle, TarFileHandle
from ._index import ROOT, FileRecord, FileSystemIndex, build_index
from ._limits import TFSLimits
from ._path import resolve_path
from ._typing import TFSStatResult, TFSStats

logger = logging.getLogger(__name__)

PathLike = str | os.PathLike


# ---------------------------------------------------------------------------
#  TarFileSystem
# ---------------------------------------------------------------------------


class TarFileSystem:
    """Read-only filesystem over the contents of a tar archive.

    Instances are built by the ``from_*`` factories, which read the whole
    archive into an immutable :class:`FileSystemIndex`. Every method may be
    called concurrently from any number of threads.
    """

    def __init__(self, index: FileSystemIndex) -> None:
        self._index = index

    # -- construction --

    @classmethod
    def from_fileobj(
        cls, fileobj: IO[bytes], limits: TFSLimits | None = None
    ) -> TarFileSystem:
        """Build from a binary stream that is already in (uncompressed) tar format."""
        try:
            index = build_index(iter_archive_entries(fileobj), limits)
        except TFSConstructionError as exc:
            logger.warning("Failed to build tar filesystem: %s", exc)
            raise
        return cls(index)

    @classmethod
    def from_bytes(cls, data: bytes, limits: TFSLimits | None = None) -> TarFileSystem:
        return cls.from_fileobj(io.BytesIO(data), limits)

    @classmethod
    def _from_opener(
        cls,
        opener: Callable[[str], IO[bytes]],
        path: PathLike,
        limits: TFSLimits | None,
    ) -> TarFileSystem:
        try:
            stream = opener(os.fspath(path))
        except OSError as exc:
            logger.warning("Failed to open archive %r: %s", os.fspath(path), exc)
            raise TFSConstructionError(
                f"Cannot open archive '{os.fspath(path)}': {exc}"
            ) from exc
        with stream:
            return cls.from_fileobj(stream, limits)

    @classmethod
    def from_file(cls, path: PathLike, limits: TFSLimits | None = None) -> TarFileSystem:
        return cls._from_opener(open_plain, path, limits)

    @classmethod
    def from_gzip_file(
        cls, path: PathLike, limits: TFSLimits | None = None
    ) -> TarFileSystem:
        return cls._from_opener(open_gzip, path, limits)

    @classmethod
    def from_bzip2_file(
        cls, path: PathLike, limits: TFSLimits | None = None
    ) -> TarFileSystem:
        return cls._from_opener(open_bzip2, path, limits)

    @classmethod
    def from_xz_file(cls, path: PathLike, limits: TFSLimits | None = None) -> TarFileSystem:
        return cls._from_opener(open_xz, path, limits)

    @classmethod
    def from_path(cls, path: PathLike, limits: TFSLimits | None = None) -> TarFileSystem:
        """Build from a file, choosing the decompressor by filename suffix."""
        return cls._from_opener(detect_compression(os.fspath(path)), path, limits)

    # -- lookup helpers --

    @property
    def index(self) -> FileSystemIndex:
        return self._index

    def _lookup(self, path: str) -> FileRecord:
        npath = resolve_path(path)
        record = self._index.get(npath)
        if record is None:
            raise FileNotFoundError(f"No such file or directory: '{path}'")
        return record

    def _lookup_dir(self, path: str) -> FileRecord:
        record = self._lookup(path)
        if not record.is_dir:
            raise NotADirectoryError(f"Not a directory: '{path}'")
        return record

    def _lookup_file(self, path: str) -> FileRecord:
        record = self._lookup(path)
        if record.is_dir:
            raise IsADirectoryError(f"Is a directory: '{path}'")
        return record

    # -- public API --

    def open(self, path: str) -> TarFileHandle | TarDirHandle:
        record = self._lookup(path)
        if record.is_dir:
            return TarDirHandle(record, self._index.descendants(record.path))
        return TarFileHandle(record)

    def exists(self, path: str) -> bool:
        try:
            npath = resolve_path(path)
        except (TFSInvalidPathError, TypeError):
            return False
        return npath in self._index

    def is_dir(self, path: str) -> bool:
        try:
            npath = resolve_path(path)
        except (TFSInvalidPathError, TypeError):
            return False
        record = self._index.get(npath)
        return record is not None and record.is_dir

    def is_file(self, path: str) -> bool:
        try:
            npath = resolve_path(path)
        except (TFSInvalidPathError, TypeError):
            return False
        record = self._index.get(npath)
        return record is not None and not record.is_dir

    def stat(self, path: str) -> TFSStatResult:
        return self._lookup(path).stat()

    def get_size(self, path: str) -> int:
        return self._lookup_file(path).size

    def listdir(self, path: str) -> list[str]:
        record = self._lookup_dir(path)
        return [child.name for child in self._index.children(record.path)]

    def stats(self) -> TFSStats:
        return TFSStats(
            total_bytes=self._index.total_size,
            file_count=self._index.file_count,
            dir_count=self._index.dir_count,
        )

    def export_as_bytesio(self, path: str, max_size: int | None = None) -> io.BytesIO:
        """Export file contents as an independent BytesIO object."""
        record = self._lookup_file(path)
        if max_size is not None and record.size > max_size:
            raise ValueError(f"File size {record.size} exceeds max_size={max_size}.")
        return io.BytesIO(record.data)

    def export_tree(self, prefix: str = "/") -> dict[str, bytes]:
        return dict(self.iter_export_tree(prefix=prefix))

    def iter_export_tree(self, prefix: str = "/") -> Iterator[tuple[str, bytes]]:
        nprefix = resolve_path(prefix)
        record = self._index.get(nprefix)
        if record is None:
            return
        if not record.is_dir:
            yield record.path, record.data
            return
        for child in self._index.descendants(nprefix):
            if not child.is_dir:
                yield child.path, child.data

    def walk(self, path: str = "/") -> Iterator[tuple[str, list[str], list[str]]]:
        """Recursively walk the directory tree (top-down), like :func:`os.walk`."""
        record = self._lookup_dir(path)
        yield from self._walk_dir(record.path)

    def _walk_dir(self, dir_path: str) -> Iterator[tuple[str, list[str], list[str]]]:
        dirnames: list[str] = []
        filenames: list[str] = []
        child_dirs: list[str] = []
        for child in self._index.children(dir_path):
            if child.is_dir:
                dirnames.append(child.name)
                child_dirs.append(child.path)
            else:
                filenames.append(child.name)
        yield dir_path, dirnames, filenames
        for child_path in child_dirs:
            yield from self._walk_dir(child_path)

    def glob(self, pattern: str) -> list[str]:
        """Return a sorted list of paths matching *pattern*.

        Supports `*` (single segment), `**` (any number of segments), `?`, `[seq]`.
        """
        if not pattern.startswith("/"):
            pattern = "/" + pattern
        parts = [p for p in pattern.split("/") if p]
        if not parts:
            return []
        results = [
            npath
            for npath in self._index
            if npath != ROOT and _glob_match(npath.split("/")[1:], parts)
        ]
        return sorted(results)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.exists(path)

    def __len__(self) -> int:
        return len(self._index)


def _glob_match(segments: list[str], parts: list[str]) -> bool:
    if not parts:
        return not segments
    part = parts[0]
    if part == "**":
        # Zero or more segments.
        return any(
            _glob_match(segments[i:], parts[1:]) for i in range(len(segments) + 1)
        )
    if not segments:
        return False
    return fnmatch.fnmatchcase(segments[0], part) and _glob_match(
        segments[1:], parts[1:]
    )
