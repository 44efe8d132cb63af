import pytest
from dtarfs import TarFileSystem
from dtarfs._pytest_plugin import build_tar, make_tar, tarfs_factory  # noqa: F401


@pytest.fixture
def tfs() -> TarFileSystem:
    """Filesystem with a small nested tree (docs, src, empty dir)."""
    return TarFileSystem.from_bytes(build_tar({
        "docs/": None,
        "docs/index.html": b"<h1>index</h1>",
        "docs/guide/": None,
        "docs/guide/intro.md": b"# Intro\n",
        "src/": None,
        "src/main.py": b"print('hi')\n",
        "empty/": None,
        "top.txt": b"top",
    }))
