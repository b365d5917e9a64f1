from __future__ import annotations

from pathlib import Path
from collections.abc import Sequence


class ExpansionError(Exception):
    """Base class for every failure raised while expanding includes."""

    def __init__(self, message: str, path: Path):
        super().__init__(message)
        self.path = path


class PathNotFoundError(ExpansionError):
    """Raised when an include target cannot be stat'ed."""

    def __init__(self, path: Path, cause: OSError):
        super().__init__(f"include path not found {path}: {cause}", path)


class FileAccessError(ExpansionError):
    """Raised when a file cannot be opened for reading."""

    def __init__(self, path: Path, cause: Exception):
        super().__init__(f"failed to open file {path}: {cause}", path)


class ReadError(ExpansionError):
    """Raised when reading or decoding a file fails part way through."""

    def __init__(self, path: Path, cause: Exception):
        super().__init__(f"error reading file {path}: {cause}", path)


class IncludeResolutionError(ExpansionError):
    """Raised when the target of an `#include:` directive fails to expand."""

    def __init__(self, target: str, path: Path, cause: Exception):
        super().__init__(
            f"error processing include '{target}' in file {path}: {cause}", path
        )
        self.target = target


class DirectoryWalkError(ExpansionError):
    """Raised when walking or expanding an included directory fails."""

    def __init__(self, path: Path, cause: Exception):
        super().__init__(
            f"failed to process file in directory {path}: {cause}", path
        )


class CycleDetectedError(ExpansionError):
    """Raised when a file is reached again through its own include chain."""

    def __init__(self, path: Path, chain: Sequence[Path]):
        self.chain = tuple(chain)
        cycle = " -> ".join(str(p) for p in (*self.chain, path))
        super().__init__(f"include cycle detected: {cycle}", path)
