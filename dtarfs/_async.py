"""Async wrapper around TarFileSystem.

Construction and every handle operation are delegated to
:func:`asyncio.to_thread`, so decoding a large archive never blocks the
event loop.
"""

from __future__ import annotations

import asyncio
import io
import os
from typing import IO

from ._fs import TarFileSystem
from ._handle import TarDirHandle, TarFileHandle
from ._limits import TFSLimits
from ._typing import TFSStatResult, TFSStats


class AsyncTarHandle:
    """Async wrapper for a single open file or directory handle."""

    def __init__(self, _sync_handle: TarFileHandle | TarDirHandle) -> None:
        self._h = _sync_handle

    @property
    def path(self) -> str:
        return self._h.path

    @property
    def is_dir(self) -> bool:
        return self._h.is_dir

    @property
    def closed(self) -> bool:
        return self._h.closed

    async def read(self, size: int = -1) -> bytes:
        return await asyncio.to_thread(self._h.read, size)

    async def readinto(self, buffer: bytearray | memoryview) -> int:
        return await asyncio.to_thread(self._h.readinto, buffer)

    async def seek(self, offset: int, whence: int = 0) -> int:
        return await asyncio.to_thread(self._h.seek, offset, whence)

    async def tell(self) -> int:
        return await asyncio.to_thread(self._h.tell)

    async def readdir(self, count: int = -1) -> list[TFSStatResult]:
        return await asyncio.to_thread(self._h.readdir, count)

    async def stat(self) -> TFSStatResult:
        return await asyncio.to_thread(self._h.stat)

    async def close(self) -> None:
        await asyncio.to_thread(self._h.close)

    async def __aenter__(self) -> AsyncTarHandle:
        return self

    async def __aexit__(self, *args) -> None:  # type: ignore[no-untyped-def]
        await self.close()


class AsyncTarFileSystem:
    """Thin async facade over :class:`TarFileSystem`."""

    def __init__(self, sync_fs: TarFileSystem) -> None:
        self._sync = sync_fs

    @property
    def sync(self) -> TarFileSystem:
        return self._sync

    @classmethod
    async def from_fileobj(
        cls, fileobj: IO[bytes], limits: TFSLimits | None = None
    ) -> AsyncTarFileSystem:
        return cls(await asyncio.to_thread(TarFileSystem.from_fileobj, fileobj, limits))

    @classmethod
    async def from_bytes(
        cls, data: bytes, limits: TFSLimits | None = None
    ) -> AsyncTarFileSystem:
        return cls(await asyncio.to_thread(TarFileSystem.from_bytes, data, limits))

    @classmethod
    async def from_file(
        cls, path: str | os.PathLike, limits: TFSLimits | None = None
    ) -> AsyncTarFileSystem:
        return cls(await asyncio.to_thread(TarFileSystem.from_file, path, limits))

    @classmethod
    async def from_gzip_file(
        cls, path: str | os.PathLike, limits: TFSLimits | None = None
    ) -> AsyncTarFileSystem:
        return cls(await asyncio.to_thread(TarFileSystem.from_gzip_file, path, limits))

    @classmethod
    async def from_bzip2_file(
        cls, path: str | os.PathLike, limits: TFSLimits | None = None
    ) -> AsyncTarFileSystem:
        return cls(await asyncio.to_thread(TarFileSystem.from_bzip2_file, path, limits))

    @classmethod
    async def from_xz_file(
        cls, path: str | os.PathLike, limits: TFSLimits | None = None
    ) -> AsyncTarFileSystem:
        return cls(await asyncio.to_thread(TarFileSystem.from_xz_file, path, limits))

    @classmethod
    async def from_path(
        cls, path: str | os.PathLike, limits: TFSLimits | None = None
    ) -> AsyncTarFileSystem:
        return cls(await asyncio.to_thread(TarFileSystem.from_path, path, limits))

    async def open(self, path: str) -> AsyncTarHandle:
        h = await asyncio.to_thread(self._sync.open, path)
        return AsyncTarHandle(h)

    async def exists(self, path: str) -> bool:
        return await asyncio.to_thread(self._sync.exists, path)

    async def is_dir(self, path: str) -> bool:
        return await asyncio.to_thread(self._sync.is_dir, path)

    async def is_file(self, path: str) -> bool:
        return await asyncio.to_thread(self._sync.is_file, path)

    async def stat(self, path: str) -> TFSStatResult:
        return await asyncio.to_thread(self._sync.stat, path)

    async def stats(self) -> TFSStats:
        return await asyncio.to_thread(self._sync.stats)

    async def get_size(self, path: str) -> int:
        return await asyncio.to_thread(self._sync.get_size, path)

    async def listdir(self, path: str) -> list[str]:
        return await asyncio.to_thread(self._sync.listdir, path)

    async def export_as_bytesio(
        self, path: str, max_size: int | None = None
    ) -> io.BytesIO:
        return await asyncio.to_thread(self._sync.export_as_bytesio, path, max_size)

    async def export_tree(self, prefix: str = "/") -> dict[str, bytes]:
        return await asyncio.to_thread(self._sync.export_tree, prefix)

    async def walk(self, path: str = "/") -> list[tuple[str, list[str], list[str]]]:
        return await asyncio.to_thread(lambda: list(self._sync.walk(path)))

    async def glob(self, pattern: str) -> list[str]:
        return await asyncio.to_thread(self._sync.glob, pattern)
