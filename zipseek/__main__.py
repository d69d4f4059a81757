"""
Copyright 2025 DNAi inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

from __future__ import annotations

"""
Command-line interface for zipseek.

Extracts one entry from an archive into an existing directory:

    python -m zipseek archive.zip docs/readme.txt output_dir

or, with the console script installed:

    zipseek-extract archive.zip docs/readme.txt output_dir

Exit status is 0 on success (and when called with too few arguments, after
printing usage), 1 when extraction fails and 2 when an input path is missing.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .errors import ErrorKind, ZipError
from .reader import UnZip

_SUGGESTIONS = {
    ErrorKind.PROTOCOL: "Archives with a trailing comment are not supported.",
    ErrorKind.UNSUPPORTED: "Only unencrypted, deflate-compressed entries can be extracted.",
    ErrorKind.NOT_FOUND: "Entry names are case-sensitive and use '/' as separator.",
}


def _print_error(message: str, exit_code: int = 1, suggestion: Optional[str] = None) -> None:
    """Print an error message to stderr and exit with the given code."""
    sys.stderr.write(f"zipseek: {message}\n")
    if suggestion:
        sys.stderr.write(f"zipseek: Suggestion: {suggestion}\n")
    sys.exit(exit_code)


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _cmd_extract(archive: Path, entry: str, destination: Path) -> None:
    """Extract *entry* from *archive* into *destination* and print the written path."""
    if not archive.exists():
        _print_error(f"{archive} does not exist", exit_code=2)
    if not destination.is_dir():
        _print_error(f"Directory {destination} does not exist", exit_code=2)

    try:
        with UnZip(archive, destination) as z:
            path = z.extract(entry)
    except ZipError as e:
        _print_error(str(e), exit_code=1, suggestion=_SUGGESTIONS.get(e.kind))

    print(path)


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="zipseek",
        description="Extract a single entry from a ZIP/ZIP64 archive without reading the rest.",
    )
    # Optional so that too few arguments can print usage instead of failing.
    parser.add_argument("archive", nargs="?", type=Path, help="Path to the ZIP/ZIP64 archive")
    parser.add_argument("entry", nargs="?", type=str, help="Name of the entry inside the archive")
    parser.add_argument(
        "destination", nargs="?", type=Path, help="Existing directory to write the entry under"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-v for info, -vv for every record visited)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """
    Entry point for the zipseek CLI.

    This function is invoked when running:

        python -m zipseek ...

    or via the ``zipseek-extract`` console script.
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.archive is None or args.entry is None or args.destination is None:
        parser.print_usage(sys.stderr)
        return

    _configure_logging(args.verbose)

    try:
        _cmd_extract(args.archive, args.entry, args.destination)
    except KeyboardInterrupt:
        _print_error("Interrupted by user", exit_code=130)


if __name__ == "__main__":
    main()
