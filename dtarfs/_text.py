"""Text view over an archive member.

Archive members are immutable byte strings, so decoding is left to
:class:`io.TextIOWrapper`; the only glue needed is a raw stream that
pulls bytes from a :class:`TarFileHandle` cursor.
"""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._handle import TarHandle


class _MemberRawIO(io.RawIOBase):
    """Unbuffered raw stream reading through a handle's cursor.

    Closing it leaves the handle open; the handle belongs to whoever
    called ``TarFileSystem.open()``.
    """

    def __init__(self, handle: TarHandle) -> None:
        super().__init__()
        self._handle = handle

    def readable(self) -> bool:
        return self._handle.readable()

    def seekable(self) -> bool:
        return self._handle.seekable()

    def readinto(self, buffer) -> int:  # type: ignore[no-untyped-def]
        return self._handle.readinto(buffer)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self._handle.seek(offset, whence)

    def tell(self) -> int:
        return self._handle.tell()


class TFSTextHandle(io.TextIOWrapper):
    """Decode an open archive member as text.

    Line endings are returned untranslated by default (``newline=""``), so
    ``\\n``, ``\\r\\n`` and bare ``\\r`` all end a line and survive as-is.
    Pass ``newline=None`` for universal-newline translation.

    Reads are buffered: after text reads, the wrapped handle's cursor may
    sit past the last character returned.

    >>> with tfs.open("/docs/readme.txt") as f:
    ...     for line in TFSTextHandle(f):
    ...         print(line, end="")
    """

    def __init__(
        self,
        handle: TarHandle,
        encoding: str = "utf-8",
        errors: str = "strict",
        newline: str | None = "",
    ) -> None:
        if handle.is_dir:
            raise IsADirectoryError(f"Is a directory: '{handle.path}'")
        super().__init__(
            io.BufferedReader(_MemberRawIO(handle)),
            encoding=encoding,
            errors=errors,
            newline=newline,
        )
        self._handle = handle

    @property
    def handle(self) -> TarHandle:
        return self._handle
