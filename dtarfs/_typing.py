from typing import TypedDict


class TFSStats(TypedDict):
    total_bytes: int
    file_count: int
    dir_count: int


class TFSStatResult(TypedDict):
    name: str
    path: str
    size: int
    modified_at: float
    mode: int
    is_dir: bool
