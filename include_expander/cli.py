"""
Expand a root template and every file or directory it `#include:`s.

Usage
-----
    include-expander DIR [-t TEMPLATE] [-o OUTPUT] [-e ENV_FILE] [-v]

Where
    DIR        Directory holding the root template
    TEMPLATE   Root template file name inside DIR
               (defaults to $EXPANDER_TEMPLATE, then cloud-init.tmpl.yaml)
    OUTPUT     Write the result here instead of standard output

Example
-------
    $ include-expander ./cloud -o cloud-init.yaml -v
    INFO: Expanded cloud/cloud-init.tmpl.yaml -> cloud-init.yaml
"""
from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from .config import load_settings
from .errors import ExpansionError
from .expander import ExpansionContext, expand

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="include-expander",
        description="Expand #include: directives in a root template recursively.",
    )
    parser.add_argument(
        "directory",
        type=Path,
        help="Directory containing the root template",
    )
    parser.add_argument(
        "-t",
        "--template",
        help="Root template file name inside DIRECTORY "
        "(default: $EXPANDER_TEMPLATE or cloud-init.tmpl.yaml)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write the expanded document to this file (default: stdout)",
    )
    parser.add_argument(
        "-e",
        "--env-file",
        type=Path,
        help="Read settings from this .env file (default: nearest .env from the working directory)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (repeatable)",
    )
    return parser.parse_args(argv)


def configure_logging(verbosity: int) -> None:
    """Configure stderr logging level based on *verbosity* count."""
    level = logging.WARNING  # 0 flags
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(format="%(levelname)s: %(message)s", level=level)


def write_output(content: str, output: Path | None) -> None:
    """Write *content* to *output*, or to stdout when no file is given."""
    if output is None:
        sys.stdout.write(content)
        sys.stdout.flush()
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as fp:
        fp.write(content)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging(args.verbose)
    try:
        settings = load_settings(args.env_file)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    root_dir: Path = args.directory
    if not root_dir.exists():
        logger.error("Cannot access directory '%s'", root_dir)
        sys.exit(1)
    if not root_dir.is_dir():
        logger.error("The provided path '%s' is not a directory.", root_dir)
        sys.exit(1)

    template_name = args.template or settings.template
    template_path = root_dir / template_name
    if not template_path.is_file():
        logger.error("'%s' not found in directory '%s'", template_name, root_dir)
        sys.exit(1)

    context = ExpansionContext(root_directory=root_dir, encoding=settings.encoding)
    try:
        content = expand(template_path, context)
    except ExpansionError as e:
        logger.error("Failed to expand %s: %s", template_path, e)
        sys.exit(1)

    try:
        write_output(content, args.output)
    except OSError as e:
        logger.error("Failed to write output to %s: %s", args.output, e)
        sys.exit(1)
    logger.info("Expanded %s -> %s", template_path, args.output or "stdout")


if __name__ == "__main__":
    main()
