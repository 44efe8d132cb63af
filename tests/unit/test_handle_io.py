"""Handle-level behavior: cursors, seek rules, directory snapshots, close.

Facade contracts (lookup, path validation) live in
integration/test_open_exists.py.
"""

import io

import pytest
from dtarfs._handle import TarDirHandle, TarFileHandle
from dtarfs._index import FileRecord


def _file_record(data: bytes) -> FileRecord:
    return FileRecord(path="/f.bin", data=data, is_dir=False, size=len(data), modified_at=1.0, mode=0o644)


def _dir_record(path: str = "/d") -> FileRecord:
    return FileRecord(path=path, data=b"", is_dir=True, size=0, modified_at=2.0, mode=0o755)


def test_read_all():
    h = TarFileHandle(_file_record(b"hello world"))
    assert h.read() == b"hello world"
    assert h.read() == b""


def test_read_partial():
    h = TarFileHandle(_file_record(b"hello world"))
    assert h.read(5) == b"hello"
    assert h.read(6) == b" world"
    assert h.read(1) == b""


def test_seek_set():
    h = TarFileHandle(_file_record(b"hello world"))
    assert h.seek(6) == 6
    assert h.read() == b"world"


def test_seek_cur():
    h = TarFileHandle(_file_record(b"hello world"))
    h.read(2)
    assert h.seek(3, io.SEEK_CUR) == 5
    assert h.read(1) == b" "


def test_seek_end():
    h = TarFileHandle(_file_record(b"hello world"))
    assert h.seek(-5, io.SEEK_END) == 6
    assert h.read() == b"world"


def test_seek_past_end_reads_empty():
    h = TarFileHandle(_file_record(b"abc"))
    assert h.seek(10) == 10
    assert h.read() == b""
    assert h.tell() == 10


def test_seek_negative_raises():
    h = TarFileHandle(_file_record(b"abc"))
    with pytest.raises(ValueError, match="negative"):
        h.seek(-1)
    with pytest.raises(ValueError):
        h.seek(-4, io.SEEK_END)


def test_seek_invalid_whence():
    h = TarFileHandle(_file_record(b"abc"))
    with pytest.raises(ValueError, match="whence"):
        h.seek(0, 3)


def test_readinto():
    h = TarFileHandle(_file_record(b"abcdef"))
    buf = bytearray(4)
    assert h.readinto(buf) == 4
    assert bytes(buf) == b"abcd"
    assert h.readinto(buf) == 2
    assert bytes(buf[:2]) == b"ef"
    assert h.readinto(buf) == 0


def test_independent_cursors_over_same_record():
    record = _file_record(b"0123456789")
    a = TarFileHandle(record)
    b = TarFileHandle(record)
    a.seek(5)
    assert b.read(2) == b"01"
    assert a.read(2) == b"56"


def test_file_stat():
    h = TarFileHandle(_file_record(b"abc"))
    s = h.stat()
    assert s["size"] == 3
    assert s["is_dir"] is False
    assert s["name"] == "f.bin"
    assert s["modified_at"] == 1.0
    assert s["mode"] & 0o777 == 0o644


def test_file_readdir_is_not_found():
    h = TarFileHandle(_file_record(b"abc"))
    with pytest.raises(FileNotFoundError):
        h.readdir()


def test_file_capabilities():
    h = TarFileHandle(_file_record(b"abc"))
    assert h.readable() is True
    assert h.seekable() is True
    assert h.writable() is False


def test_closed_file_handle_rejects_io():
    h = TarFileHandle(_file_record(b"abc"))
    h.close()
    assert h.closed
    with pytest.raises(ValueError, match="closed"):
        h.read()
    with pytest.raises(ValueError):
        h.seek(0)
    with pytest.raises(ValueError):
        h.stat()


def test_close_is_idempotent():
    h = TarFileHandle(_file_record(b"abc"))
    h.close()
    h.close()


def test_close_leaves_record_untouched():
    record = _file_record(b"abc")
    with TarFileHandle(record) as h:
        h.read()
    assert record.data == b"abc"
    assert TarFileHandle(record).read() == b"abc"


# ---------------------------------------------------------------------------
# directory handle
# ---------------------------------------------------------------------------


def _children():
    return [
        FileRecord(path=f"/d/{n}", data=b"x", is_dir=False, size=1, modified_at=0.0, mode=0o644)
        for n in ("a", "b", "c")
    ]


def test_readdir_all():
    h = TarDirHandle(_dir_record(), _children())
    assert [e["name"] for e in h.readdir()] == ["a", "b", "c"]
    assert h.readdir() == []


def test_readdir_bounded_is_resumable():
    h = TarDirHandle(_dir_record(), _children())
    assert [e["name"] for e in h.readdir(2)] == ["a", "b"]
    assert [e["name"] for e in h.readdir(2)] == ["c"]
    assert h.readdir(2) == []
    assert h.readdir() == []


def test_readdir_zero_means_all_remaining():
    h = TarDirHandle(_dir_record(), _children())
    h.readdir(1)
    assert [e["name"] for e in h.readdir(0)] == ["b", "c"]


def test_empty_directory_listing():
    h = TarDirHandle(_dir_record(), [])
    assert h.readdir() == []
    assert h.readdir(5) == []


def test_snapshot_is_owned_by_handle():
    entries = _children()
    h = TarDirHandle(_dir_record(), entries)
    entries.clear()
    assert len(h.readdir()) == 3


def test_dir_stat():
    h = TarDirHandle(_dir_record(), [])
    s = h.stat()
    assert s["is_dir"] is True
    assert s["name"] == "d"
    assert s["size"] == 0


def test_root_name():
    h = TarDirHandle(_dir_record("/"), [])
    assert h.name == "/"


@pytest.mark.parametrize("op", [lambda h: h.read(), lambda h: h.seek(0), lambda h: h.tell(), lambda h: h.readinto(bytearray(1))])
def test_dir_io_raises(op):
    h = TarDirHandle(_dir_record(), [])
    with pytest.raises(IsADirectoryError):
        op(h)


def test_dir_capabilities():
    h = TarDirHandle(_dir_record(), [])
    assert h.readable() is False
    assert h.seekable() is False


def test_closed_dir_handle_rejects_readdir():
    with TarDirHandle(_dir_record(), _children()) as h:
        pass
    with pytest.raises(ValueError, match="closed"):
        h.readdir()
