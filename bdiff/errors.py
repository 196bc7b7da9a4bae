"""
Exceptions raised by the comparison engine.

The CLI catches these at the top level and turns them into a message on
stderr plus a failure exit status.
"""

from typing import Optional


class BdiffError(Exception):
    """Base class for all bdiff errors."""


class BdiffIOError(BdiffError):
    """An input file could not be opened or closed."""

    def __init__(self, operation: str, filename: Optional[str], strerror: str):
        self.operation = operation
        self.filename = filename
        self.strerror = strerror
        if filename:
            super().__init__(f"{operation}: {filename}: {strerror}")
        else:
            super().__init__(f"{operation}: {strerror}")

    @classmethod
    def from_os_error(cls, operation: str, exc: OSError,
                      filename: Optional[str] = None) -> "BdiffIOError":
        """Wrap an OSError, keeping the system error description."""
        name = exc.filename if exc.filename is not None else filename
        return cls(operation, None if name is None else str(name),
                   exc.strerror or str(exc))
