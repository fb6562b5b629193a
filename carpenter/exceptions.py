"""Exceptions raised by the table-assembly core.

Presenter, callback and driver failures are never wrapped: they propagate
to the caller unchanged. Only lookups that the core itself performs get a
dedicated type here.
"""

from typing import Optional


class CarpenterError(Exception):
    """Base class for every error raised by Carpenter itself."""


class CarpenterCollectionError(CarpenterError, LookupError):
    """No table builder is registered under the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No table was found with the name '{name}'")


class TableLocationNotFound(CarpenterError, FileNotFoundError):
    """The configured bulk-registration file does not exist."""

    def __init__(self, path: Optional[str]):
        self.path = path
        super().__init__(f"No file found for the path '{path}'")


class DriverNotFoundError(CarpenterError, ValueError):
    """A manager was asked for a driver it cannot build."""

    def __init__(self, kind: str, key: str, available: Optional[list[str]] = None):
        self.kind = kind
        self.key = key
        message = f"Unknown {kind} driver: '{key}'"
        if available:
            message += f". Available: {sorted(available)}"
        super().__init__(message)


class BuilderResolutionError(CarpenterError):
    """A ``Class@method`` builder reference could not be resolved."""


class TableAlreadyBuilt(CarpenterError):
    """Structure of a table was changed after its rows were materialised."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Table '{name}' has already been built; "
            f"its structure can no longer be changed"
        )
