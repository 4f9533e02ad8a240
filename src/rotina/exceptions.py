from pathlib import Path


class RotinaError(Exception):
    """Base class for errors raised by rotina."""


class NestedRepoExistsError(RotinaError):
    """Raised when initialising a data directory below an existing one."""

    def __init__(self, existing_root: Path):
        self.existing_root = existing_root
        super().__init__(
            f"A .rotina directory already exists at {existing_root}. "
            "Use --force to create a nested one anyway.")


class StreamClosed(RotinaError):
    """Raised when reading from a stream that has been closed."""
