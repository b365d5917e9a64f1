"""
Recursive expansion of `#include:` directives.

A directive is any line whose stripped text starts with ``#include:``. The
rest of the line names a file or directory relative to the file holding the
directive. Its expanded content replaces the line, with the directive's
leading whitespace prefixed to every line, and each included file is framed
by ``# START <path>`` / ``# END <path>`` markers relative to the root
directory.
"""
from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from pathlib import Path, PurePath
from typing import Final, TextIO

from .errors import (
    CycleDetectedError,
    DirectoryWalkError,
    ExpansionError,
    FileAccessError,
    IncludeResolutionError,
    PathNotFoundError,
    ReadError,
)

logger = logging.getLogger(__name__)

DIRECTIVE_PREFIX: Final = "#include:"
DEFAULT_ENCODING: Final = "utf-8"


@dataclass(frozen=True)
class ExpansionContext:
    """State threaded through every recursive call of a single run.

    ``root_directory`` never changes and is only used to build marker paths.
    ``ancestry`` holds the absolute paths of the files currently being
    expanded, outermost first.
    """

    root_directory: Path
    is_root: bool = True
    encoding: str = DEFAULT_ENCODING
    diagnostics: logging.Logger = field(default=logger, repr=False, compare=False)
    ancestry: tuple[Path, ...] = ()

    def descend(self, abs_path: Path) -> ExpansionContext:
        """Context for the includes found inside *abs_path*."""
        return replace(self, is_root=False, ancestry=(*self.ancestry, abs_path))

    def nested(self) -> ExpansionContext:
        """Context for expanding an include target."""
        return replace(self, is_root=False)


def marker_path(file_path: Path, root_directory: Path) -> str:
    """Return *file_path* relative to *root_directory* using forward slashes.

    Falls back to *file_path* as given when no relative path exists, e.g.
    across Windows drives.
    """
    try:
        relative = os.path.relpath(os.path.abspath(file_path), os.path.abspath(root_directory))
    except ValueError:
        relative = str(file_path)
    return PurePath(relative).as_posix()


def _read_lines(handle: TextIO, file_path: Path) -> Iterator[str]:
    try:
        for line in handle:
            yield line.removesuffix("\n").removesuffix("\r")
    except (OSError, UnicodeDecodeError) as e:
        raise ReadError(file_path, e) from e


def _indent_block(content: str, indentation: str) -> str:
    # one trailing newline belongs to the nested expansion, not to the block
    content = content.removesuffix("\n")
    if not content:
        return ""
    return "".join(f"{indentation}{line}\n" for line in content.split("\n"))


def expand(file_path: Path, context: ExpansionContext) -> str:
    """
    Read *file_path* and return its content with every directive expanded.

    Args:
        file_path: File to expand.
        context: Run state; ``context.is_root`` controls the START/END markers.

    Returns:
        The expanded text, always ending with a newline unless the file is an
        empty root document.

    Raises:
        CycleDetectedError: If *file_path* is already being expanded further up.
        FileAccessError: If the file cannot be opened.
        ReadError: If reading fails part way through.
        IncludeResolutionError: If a directive's target fails to expand.
    """
    abs_path = Path(os.path.abspath(file_path))
    if abs_path in context.ancestry:
        raise CycleDetectedError(abs_path, context.ancestry)

    relative_path = marker_path(file_path, context.root_directory)
    child_context = context.descend(abs_path)
    output: list[str] = []

    if not context.is_root:
        output.append(f"# START {relative_path}\n")

    try:
        # only \n ends a line; a lone \r stays part of it
        handle = file_path.open("r", encoding=context.encoding, newline="\n")
    except (OSError, LookupError) as e:
        raise FileAccessError(file_path, e) from e
    with handle:
        for line in _read_lines(handle, file_path):
            stripped = line.strip()
            if not stripped.startswith(DIRECTIVE_PREFIX):
                output.append(f"{line}\n")
                continue

            target = stripped.removeprefix(DIRECTIVE_PREFIX).strip()
            if not target:
                context.diagnostics.warning(
                    "Found empty #include directive in %s. Skipping.", file_path
                )
                continue

            indentation = line[: line.index("#")]
            include_path = Path(os.path.normpath(file_path.parent / target))
            context.diagnostics.debug("Including %s from %s", include_path, file_path)

            try:
                included = resolve_include(include_path, child_context)
            except ExpansionError as e:
                raise IncludeResolutionError(target, file_path, e) from e

            output.append(_indent_block(included, indentation))
            output.append("\n")

    result = "".join(output)
    if not context.is_root:
        result = result.rstrip("\n") + f"\n# END {relative_path}\n"
    return result


def _walk_files(directory: Path) -> list[Path]:
    """List every non-directory entry below *directory* in lexical order."""

    def on_error(error: OSError) -> None:
        raise DirectoryWalkError(directory, error) from error

    files: list[Path] = []
    for dirpath, _dirnames, filenames in directory.walk(on_error=on_error):
        files.extend(dirpath / name for name in filenames)
    return sorted(files, key=lambda p: p.relative_to(directory).parts)


def resolve_include(target_path: Path, context: ExpansionContext) -> str:
    """
    Expand an include target, which may be a single file or a directory.

    Directories are walked recursively and every file found is expanded in
    lexical path order; the results are concatenated. The first failure aborts
    the walk.

    Raises:
        PathNotFoundError: If *target_path* cannot be stat'ed.
        DirectoryWalkError: If listing the directory or expanding one of its
            files fails.
    """
    try:
        mode = target_path.stat().st_mode
    except OSError as e:
        raise PathNotFoundError(target_path, e) from e

    nested = context.nested()
    if not stat.S_ISDIR(mode):
        return expand(target_path, nested)

    parts: list[str] = []
    for entry in _walk_files(target_path):
        try:
            parts.append(expand(entry, nested))
        except ExpansionError as e:
            raise DirectoryWalkError(entry, e) from e
    return "".join(parts)
