"""Parametric benchmark sweep: vary entry count and compare construction, open and listing cost."""
from __future__ import annotations

import gc
import gzip
import io
import random
import tarfile
import time
import tracemalloc
from typing import Callable

from dtarfs import TarFileSystem


def _measure(fn: Callable[[], None]) -> tuple[float, float]:
    """Run fn once, return (elapsed_sec, peak_kib)."""
    gc.collect()
    tracemalloc.start()
    t0 = time.perf_counter()
    fn()
    elapsed = time.perf_counter() - t0
    _, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()
    gc.collect()
    return elapsed, peak / 1024.0


def _fmt(v: float) -> str:
    return f"{v:.1f}"


def _make_archive(count: int, fsize: int, compression: str = "") -> bytes:
    buf = io.BytesIO()
    payload = b"m" * fsize
    mode = f"w:{compression}" if compression else "w"
    with tarfile.open(fileobj=buf, mode=mode) as tar:
        for d in range(max(1, count // 100)):
            info = tarfile.TarInfo(f"d{d:04d}")
            info.type = tarfile.DIRTYPE
            tar.addfile(info)
        for i in range(count):
            info = tarfile.TarInfo(f"d{(i // 100):04d}/f{i:06d}.bin")
            info.size = fsize
            tar.addfile(info, io.BytesIO(payload))
    return buf.getvalue()


# ---------------------------------------------------------------------------
#  Cases
# ---------------------------------------------------------------------------


def _build(data: bytes) -> None:
    TarFileSystem.from_bytes(data)


def _build_gz(data: bytes) -> None:
    with gzip.GzipFile(fileobj=io.BytesIO(data)) as stream:
        TarFileSystem.from_fileobj(stream)


def _random_reads(fs: TarFileSystem, count: int, fsize: int) -> None:
    gen = random.Random(42)
    reads = count // 2
    total = 0
    for _ in range(reads):
        idx = gen.randint(0, count - 1)
        with fs.open(f"../d{(idx // 100):04d}/f{idx:06d}.bin") as f:
            total += len(f.read())
    assert total == reads * fsize


def _listings(fs: TarFileSystem, count: int) -> None:
    dirs = max(1, count // 100)
    for d in range(dirs):
        with fs.open(f"/d{d:04d}") as h:
            assert len(h.readdir()) == min(100, count - d * 100)


def run_sweep() -> str:
    counts = [100, 1_000, 10_000]
    fsize = 1024
    lines: list[str] = []
    lines.append(f"{fsize}B files, N entries")
    lines.append("")
    lines.append("| N | build ms | build KiB | build .tgz ms | N/2 random opens ms | open every dir ms |")
    lines.append("|---:|---:|---:|---:|---:|---:|")

    for count in counts:
        print(f"  entries {count} ...", end=" ", flush=True)
        plain = _make_archive(count, fsize)
        gz = _make_archive(count, fsize, "gz")

        t1, m1 = _measure(lambda: _build(plain))
        t2, _ = _measure(lambda: _build_gz(gz))
        fs = TarFileSystem.from_bytes(plain)
        t3, _ = _measure(lambda: _random_reads(fs, count, fsize))
        t4, _ = _measure(lambda: _listings(fs, count))

        lines.append(
            f"| {count} | {_fmt(t1*1000)} | {_fmt(m1)} | {_fmt(t2*1000)} "
            f"| {_fmt(t3*1000)} | {_fmt(t4*1000)} |"
        )
        print(f"done (build={t1*1000:.0f}ms)")

    lines.append("")
    return "\n".join(lines)


if __name__ == "__main__":
    print("=== Parametric Benchmark Sweep ===\n")
    result = run_sweep()
    print("\n" + result)

    from datetime import datetime
    from pathlib import Path
    out_dir = Path("benchmarks") / "results"
    out_dir.mkdir(parents=True, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_path = out_dir / f"parametric_sweep_{ts}.md"
    out_path.write_text(f"# Parametric Benchmark Sweep\n\n{result}", encoding="utf-8")
    print(f"\nSaved: {out_path}")
