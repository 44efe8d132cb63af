"""Resource limits applied while an archive is indexed.

Every limit defaults to ``None`` (unbounded): archives are held fully in
memory and are otherwise bounded only by what the process can allocate.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from ._exceptions import TFSLimitExceededError


def _env_limit(name: str) -> int | None:
    """Read a non-negative integer env var, returning None on missing/invalid."""
    value = os.environ.get(name)
    if value is None:
        return None
    try:
        parsed = int(value)
    except ValueError:
        return None
    return parsed if parsed >= 0 else None


@dataclass(frozen=True)
class TFSLimits:
    max_entries: int | None = None
    max_file_size: int | None = None
    max_total_size: int | None = None

    @classmethod
    def from_env(cls) -> TFSLimits:
        return cls(
            max_entries=_env_limit("DTARFS_MAX_ENTRIES"),
            max_file_size=_env_limit("DTARFS_MAX_FILE_SIZE"),
            max_total_size=_env_limit("DTARFS_MAX_TOTAL_SIZE"),
        )


class LimitTracker:
    """Running totals for one construction; not shared between threads."""

    def __init__(self, limits: TFSLimits | None) -> None:
        self._limits: TFSLimits = limits if limits is not None else TFSLimits()
        self._entries: int = 0
        self._total: int = 0

    def admit(self, size: int, replaced_size: int | None) -> None:
        """Account for a record of *size* bytes, optionally replacing one of *replaced_size*."""
        limits = self._limits
        if limits.max_file_size is not None and size > limits.max_file_size:
            raise TFSLimitExceededError("max_file_size", limits.max_file_size, size)
        entries = self._entries + (0 if replaced_size is not None else 1)
        if limits.max_entries is not None and entries > limits.max_entries:
            raise TFSLimitExceededError("max_entries", limits.max_entries, entries)
        total = self._total + size - (replaced_size or 0)
        if limits.max_total_size is not None and total > limits.max_total_size:
            raise TFSLimitExceededError("max_total_size", limits.max_total_size, total)
        self._entries = entries
        self._total = total

    @property
    def total(self) -> int:
        return self._total
