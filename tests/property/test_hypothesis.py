"""Property-based tests using Hypothesis."""
import hypothesis.strategies as st
from hypothesis import given, settings

from dtarfs import TarFileSystem
from dtarfs._path import normalize_path
from dtarfs._pytest_plugin import build_tar

_segment = st.text(alphabet="abcdefghijklmnopqrstuvwxyz_-", min_size=1, max_size=8)


@given(data=st.binary(max_size=2000))
@settings(max_examples=50)
def test_ingest_read_roundtrip(data):
    """Bytes read back equal the bytes ingested; stat size equals their length."""
    fs = TarFileSystem.from_bytes(build_tar({"f.bin": data}))
    with fs.open("/f.bin") as f:
        assert f.read() == data
        assert f.stat()["size"] == len(data)


@given(path=st.text(alphabet="/abcdefghijklmnopqrstuvwxyz._-", max_size=50))
@settings(max_examples=100)
def test_normalize_path_idempotent(path):
    normalized = normalize_path(path)
    assert normalized.startswith("/")
    assert not normalized.startswith("//")
    assert normalize_path(normalized) == normalized


@given(
    name=st.lists(_segment, min_size=1, max_size=4).map("/".join),
    prefix=st.sampled_from(["", "/", "./", "././", "../", "../../", "/./"]),
)
@settings(max_examples=50)
def test_access_variants_are_equivalent(name, prefix):
    fs = TarFileSystem.from_bytes(build_tar({name: b"payload"}))
    with fs.open(prefix + name) as f:
        assert f.read() == b"payload"


@given(
    names=st.sets(_segment, min_size=1, max_size=6),
    extra=st.text(alphabet="0123456789", min_size=1, max_size=4),
)
@settings(max_examples=50)
def test_listing_never_leaks_prefix_siblings(names, extra):
    """A directory lists only entries below it, never `<dir><suffix>` siblings."""
    entries = {}
    for n in names:
        entries[f"{n}/"] = None
        entries[f"{n}/inner"] = b"i"
        entries[f"{n}{extra}"] = b"s"
    fs = TarFileSystem.from_bytes(build_tar(entries))
    for n in names:
        with fs.open(n) as d:
            listed = [e["path"] for e in d.readdir()]
        assert all(p.startswith(f"/{n}/") for p in listed)
        assert f"/{n}/inner" in listed


@given(
    files=st.dictionaries(
        keys=_segment.map(lambda s: f"/{s}.bin"),
        values=st.binary(max_size=100),
        min_size=1,
        max_size=5,
    )
)
@settings(max_examples=30)
def test_export_tree_roundtrip(files):
    fs = TarFileSystem.from_bytes(build_tar(files))
    exported = fs.export_tree()
    for path, data in files.items():
        assert exported[path] == data


@given(count=st.integers(min_value=1, max_value=5))
@settings(max_examples=10)
def test_bounded_readdir_yields_everything_once(count):
    fs = TarFileSystem.from_bytes(build_tar({"d/": None, **{f"d/f{i}": b"" for i in range(7)}}))
    seen = []
    with fs.open("/d") as d:
        while batch := d.readdir(count):
            assert len(batch) <= count
            seen.extend(e["name"] for e in batch)
    assert seen == [f"f{i}" for i in range(7)]
