from __future__ import annotations

import logging
import posixpath
import stat as stat_module
import types
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from ._archive import KIND_DIR, KIND_OTHER, ArchiveEntry
from ._limits import LimitTracker, TFSLimits
from ._path import normalize_path
from ._typing import TFSStatResult

logger = logging.getLogger(__name__)

ROOT = "/"
ROOT_MODE = 0o755

# ---------------------------------------------------------------------------
#  Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileRecord:
    path: str
    data: bytes
    is_dir: bool
    size: int
    modified_at: float
    mode: int

    @property
    def name(self) -> str:
        return posixpath.basename(self.path) or ROOT

    def stat(self) -> TFSStatResult:
        file_type = stat_module.S_IFDIR if self.is_dir else stat_module.S_IFREG
        return TFSStatResult(
            name=self.name,
            path=self.path,
            size=self.size,
            modified_at=self.modified_at,
            mode=file_type | stat_module.S_IMODE(self.mode),
            is_dir=self.is_dir,
        )


def _root_record() -> FileRecord:
    return FileRecord(
        path=ROOT, data=b"", is_dir=True, size=0, modified_at=0.0, mode=ROOT_MODE
    )


def _is_descendant(path: str, dir_path: str) -> bool:
    # Segment-aware: "/foo" never matches "/foobar".
    if dir_path == ROOT:
        return path != ROOT
    return path.startswith(dir_path + "/")


# ---------------------------------------------------------------------------
#  FileSystemIndex
# ---------------------------------------------------------------------------


class FileSystemIndex(Mapping[str, FileRecord]):
    """Immutable mapping from normalized path to :class:`FileRecord`.

    Lookups never mutate anything, so one index may be shared by any
    number of threads without locking.
    """

    __slots__ = ("_records", "_total_size")

    def __init__(self, records: Mapping[str, FileRecord]) -> None:
        frozen = dict(records)
        frozen.setdefault(ROOT, _root_record())
        self._records: Mapping[str, FileRecord] = types.MappingProxyType(frozen)
        self._total_size: int = sum(r.size for r in frozen.values() if not r.is_dir)

    def __getitem__(self, npath: str) -> FileRecord:
        return self._records[npath]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, npath: object) -> bool:
        return npath in self._records

    def descendants(self, npath: str) -> list[FileRecord]:
        """Return every record below *npath*, direct or indirect, sorted by path.

        The result is a new list on every call and may be empty.
        """
        return sorted(
            (r for p, r in self._records.items() if _is_descendant(p, npath)),
            key=lambda r: r.path,
        )

    def children(self, npath: str) -> list[FileRecord]:
        """Return the direct children of *npath*, sorted by path."""
        prefix_len = 1 if npath == ROOT else len(npath) + 1
        return [
            r for r in self.descendants(npath) if "/" not in r.path[prefix_len:]
        ]

    @property
    def total_size(self) -> int:
        return self._total_size

    @property
    def file_count(self) -> int:
        return sum(1 for r in self._records.values() if not r.is_dir)

    @property
    def dir_count(self) -> int:
        return sum(1 for r in self._records.values() if r.is_dir)


# ---------------------------------------------------------------------------
#  Indexer
# ---------------------------------------------------------------------------


def build_index(
    entries: Iterable[ArchiveEntry], limits: TFSLimits | None = None
) -> FileSystemIndex:
    """Consume *entries* completely and return the resulting index.

    Any exception raised by *entries* (or by a limit check) propagates and
    the partially built mapping is discarded.
    """
    tracker = LimitTracker(limits)
    records: dict[str, FileRecord] = {}
    for entry in entries:
        npath = normalize_path(entry.name)
        if npath == ROOT:
            logger.debug("Skipping root entry %r", entry.name)
            continue
        if entry.kind == KIND_OTHER:
            logger.debug("Skipping unsupported entry %r", entry.name)
            continue
        is_dir = entry.kind == KIND_DIR
        data = b"" if is_dir else bytes(entry.data)
        previous = records.get(npath)
        tracker.admit(len(data), None if previous is None else previous.size)
        if previous is not None:
            logger.info("Duplicate entry %r replaces earlier %s", npath,
                        "directory" if previous.is_dir else "file")
        records[npath] = FileRecord(
            path=npath,
            data=data,
            is_dir=is_dir,
            size=len(data),
            modified_at=entry.modified_at,
            mode=entry.mode,
        )
    index = FileSystemIndex(records)
    logger.info(
        "Indexed %d records (%d bytes of file data)", len(records), tracker.total
    )
    return index
