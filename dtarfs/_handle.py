from __future__ import annotations

import io
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ._typing import TFSStatResult

if TYPE_CHECKING:
    from ._index import FileRecord


class TarHandle(ABC):
    """Per-open view of one record.

    A handle owns only its own cursor; the record and its bytes belong to
    the index and are never modified through a handle.
    """

    def __init__(self, record: FileRecord) -> None:
        self._record = record
        self._is_closed: bool = False

    def _assert_open(self) -> None:
        if self._is_closed:
            raise ValueError("I/O operation on closed file.")

    @property
    def path(self) -> str:
        return self._record.path

    @property
    def name(self) -> str:
        return self._record.name

    @property
    def is_dir(self) -> bool:
        return self._record.is_dir

    @property
    def closed(self) -> bool:
        return self._is_closed

    def stat(self) -> TFSStatResult:
        self._assert_open()
        return self._record.stat()

    @abstractmethod
    def read(self, size: int = -1) -> bytes: ...

    @abstractmethod
    def readinto(self, buffer: bytearray | memoryview) -> int: ...

    @abstractmethod
    def seek(self, offset: int, whence: int = 0) -> int: ...

    @abstractmethod
    def tell(self) -> int: ...

    @abstractmethod
    def readdir(self, count: int = -1) -> list[TFSStatResult]: ...

    @abstractmethod
    def readable(self) -> bool: ...

    @abstractmethod
    def seekable(self) -> bool: ...

    def writable(self) -> bool:
        self._assert_open()
        return False

    def close(self) -> None:
        self._is_closed = True

    def __enter__(self) -> TarHandle:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._is_closed else "open"
        return f"<{type(self).__name__} path={self.path!r} {state}>"


class TarFileHandle(TarHandle):
    def __init__(self, record: FileRecord) -> None:
        super().__init__(record)
        self._view = memoryview(record.data)
        self._cursor: int = 0

    def read(self, size: int = -1) -> bytes:
        self._assert_open()
        total = len(self._view)
        if self._cursor >= total:
            return b""
        end = total if size is None or size < 0 else min(total, self._cursor + size)
        data = self._view[self._cursor:end].tobytes()
        self._cursor = end
        return data

    def readinto(self, buffer: bytearray | memoryview) -> int:
        self._assert_open()
        total = len(self._view)
        if self._cursor >= total:
            return 0
        target = memoryview(buffer).cast("B")
        n = min(len(target), total - self._cursor)
        target[:n] = self._view[self._cursor:self._cursor + n]
        self._cursor += n
        return n

    def seek(self, offset: int, whence: int = 0) -> int:
        self._assert_open()
        if whence == io.SEEK_SET:
            new_pos = offset
        elif whence == io.SEEK_CUR:
            new_pos = self._cursor + offset
        elif whence == io.SEEK_END:
            new_pos = len(self._view) + offset
        else:
            raise ValueError(f"Invalid whence value: {whence}. Must be 0, 1, or 2.")
        if new_pos < 0:
            raise ValueError(f"Resulting cursor position {new_pos} is negative.")
        self._cursor = new_pos
        return self._cursor

    def tell(self) -> int:
        self._assert_open()
        return self._cursor

    def readdir(self, count: int = -1) -> list[TFSStatResult]:
        self._assert_open()
        raise FileNotFoundError(f"Not a directory: '{self.path}'")

    def readable(self) -> bool:
        self._assert_open()
        return True

    def seekable(self) -> bool:
        self._assert_open()
        return True

    def close(self) -> None:
        if self._is_closed:
            return
        super().close()
        self._view.release()


class TarDirHandle(TarHandle):
    def __init__(self, record: FileRecord, entries: list[FileRecord]) -> None:
        super().__init__(record)
        # Snapshot taken at open time; owned by this handle alone.
        self._entries: tuple[TFSStatResult, ...] = tuple(e.stat() for e in entries)
        self._position: int = 0

    def readdir(self, count: int = -1) -> list[TFSStatResult]:
        """Return the next *count* entries, or all remaining ones if ``count <= 0``.

        Once the listing is exhausted every call returns an empty list.
        """
        self._assert_open()
        start = self._position
        end = len(self._entries) if count <= 0 else min(len(self._entries), start + count)
        self._position = end
        return list(self._entries[start:end])

    def read(self, size: int = -1) -> bytes:
        self._assert_open()
        raise IsADirectoryError(f"Is a directory: '{self.path}'")

    def readinto(self, buffer: bytearray | memoryview) -> int:
        self._assert_open()
        raise IsADirectoryError(f"Is a directory: '{self.path}'")

    def seek(self, offset: int, whence: int = 0) -> int:
        self._assert_open()
        raise IsADirectoryError(f"Is a directory: '{self.path}'")

    def tell(self) -> int:
        self._assert_open()
        raise IsADirectoryError(f"Is a directory: '{self.path}'")

    def readable(self) -> bool:
        self._assert_open()
        return False

    def seekable(self) -> bool:
        self._assert_open()
        return False
