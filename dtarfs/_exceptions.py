class TFSConstructionError(OSError):
    """Raised when an archive cannot be decoded into a filesystem. Subclass of OSError."""


class TFSLimitExceededError(TFSConstructionError):
    """Raised when an archive exceeds a configured resource limit. Subclass of TFSConstructionError."""
    def __init__(self, limit_name: str, limit: int, actual: int) -> None:
        self.limit_name = limit_name
        self.limit = limit
        self.actual = actual
        super().__init__(
            f"TFS limit exceeded: {limit_name} is {limit}, archive requires {actual}."
        )


class TFSInvalidPathError(ValueError):
    """Raised when a path contains a NUL byte or a disallowed separator."""
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Invalid character in file path: {path!r}")
