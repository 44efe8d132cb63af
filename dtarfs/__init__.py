from typing import TYPE_CHECKING

from ._exceptions import TFSConstructionError, TFSInvalidPathError, TFSLimitExceededError
from ._fs import TarFileSystem
from ._handle import TarDirHandle, TarFileHandle, TarHandle
from ._index import FileRecord, FileSystemIndex
from ._limits import TFSLimits
from ._text import TFSTextHandle
from ._typing import TFSStatResult, TFSStats

if TYPE_CHECKING:
    from ._async import AsyncTarFileSystem, AsyncTarHandle


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name in ("AsyncTarFileSystem", "AsyncTarHandle"):
        from ._async import AsyncTarFileSystem, AsyncTarHandle

        globals()["AsyncTarFileSystem"] = AsyncTarFileSystem
        globals()["AsyncTarHandle"] = AsyncTarHandle
        return globals()[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "TarFileSystem",
    "TarHandle",
    "TarFileHandle",
    "TarDirHandle",
    "FileRecord",
    "FileSystemIndex",
    "TFSConstructionError",
    "TFSInvalidPathError",
    "TFSLimitExceededError",
    "TFSLimits",
    "TFSStats",
    "TFSStatResult",
    "TFSTextHandle",
    "AsyncTarFileSystem",
    "AsyncTarHandle",
]
__version__ = "0.1.0"
