"""pytest fixture plugin.

Usage::

    # conftest.py
    pytest_plugins = ["dtarfs._pytest_plugin"]

This makes the ``make_tar`` and ``tarfs_factory`` fixtures available::

    def test_something(tarfs_factory):
        tfs = tarfs_factory({"docs/": None, "docs/a.txt": b"hello"})
        with tfs.open("/docs/a.txt") as f:
            assert f.read() == b"hello"
"""

from __future__ import annotations

import io
import tarfile
from collections.abc import Iterable, Mapping

import pytest

from ._fs import TarFileSystem

FIXTURE_MTIME = 1_700_000_000

Entries = Mapping[str, bytes | None] | Iterable[tuple[str, bytes | None]]


def build_tar(entries: Entries, compression: str = "") -> bytes:
    """Serialize *entries* into tar bytes.

    A ``None`` value creates a directory member; bytes create a regular file.
    *compression* is ``""``, ``"gz"``, ``"bz2"`` or ``"xz"``.
    """
    items = entries.items() if isinstance(entries, Mapping) else entries
    buf = io.BytesIO()
    mode = f"w:{compression}" if compression else "w"
    with tarfile.open(fileobj=buf, mode=mode) as tar:
        for name, data in items:
            info = tarfile.TarInfo(name=name)
            info.mtime = FIXTURE_MTIME
            if data is None:
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
            else:
                info.size = len(data)
                info.mode = 0o644
                tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


@pytest.fixture
def make_tar():
    """Factory fixture returning tar bytes built by :func:`build_tar`."""
    return build_tar


@pytest.fixture
def tarfs_factory():
    """Factory fixture returning a :class:`TarFileSystem` built from entries.

    Provides an independent filesystem per call.
    """
    def factory(entries: Entries) -> TarFileSystem:
        return TarFileSystem.from_bytes(build_tar(entries))

    return factory
