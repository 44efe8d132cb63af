import os
import posixpath

from ._exceptions import TFSInvalidPathError

_FORBIDDEN_SEPARATORS = {
    sep for sep in (os.sep, os.altsep) if sep is not None and sep != "/"
}


def normalize_path(path: str) -> str:
    # Joining onto the root absorbs any leading ".." segments.
    normalized = posixpath.normpath("/" + path)
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def resolve_path(path: str) -> str:
    if not isinstance(path, str):
        raise TypeError(f"path must be str, not {type(path).__name__}")
    if "\x00" in path or any(sep in path for sep in _FORBIDDEN_SEPARATORS):
        raise TFSInvalidPathError(path)
    return normalize_path(path)
