"""Recursive `#include:` expansion for line-oriented text templates."""

from .errors import (
    CycleDetectedError,
    DirectoryWalkError,
    ExpansionError,
    FileAccessError,
    IncludeResolutionError,
    PathNotFoundError,
    ReadError,
)
from .expander import ExpansionContext, expand, marker_path, resolve_include

__all__ = [
    "CycleDetectedError",
    "DirectoryWalkError",
    "ExpansionContext",
    "ExpansionError",
    "FileAccessError",
    "IncludeResolutionError",
    "PathNotFoundError",
    "ReadError",
    "expand",
    "marker_path",
    "resolve_include",
]
