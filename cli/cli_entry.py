"""
cli_entry.py - CLI Entry Point

Copies the files of a directory under names built from their modification
time. Originals are never touched.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from core import (
    RunConfig, NamingOptions, SelectionMode, Position, WordSeparator,
    RunOutcome, RunReport, StructuralError, DEFAULT_TARGET,
    scan_directory, list_extensions, run_pipeline,
)

from .cli_interactive import select_extensions


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser"""
    parser = argparse.ArgumentParser(
        prog="createdat",
        description="Rename images with the date they were created",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Copy every image of the current directory into ./renamed
  createdat

  # Rename all files, date first, with a custom text
  createdat -af holiday

  # Only .jpg and .png files, date without time
  createdat -d -e jpg png

  # Preview names with a custom date format
  createdat -p --format '%a %b %e %Y'
"""
    )

    parser.add_argument("name", nargs="?", help="Optional custom text for renamed files")

    parser.add_argument("-a", "--all", action="store_true", help="Rename all files, not just images")
    parser.add_argument("-e", "--extension", nargs="*", metavar="EXT",
                        help="Choose which files to rename based on file extension "
                             "(asks when no extension is given)")

    name_group = parser.add_mutually_exclusive_group()
    name_group.add_argument("-n", "--no-name", action="store_true", help="Remove original filename")
    name_group.add_argument("-k", "--keep-name", action="store_true", help="Keep original filename (default)")

    parser.add_argument("-f", "--front", action="store_true", help="Put date in front of filename")
    parser.add_argument("-s", "--suffix", action="store_true", help="Put custom text after the date")

    time_group = parser.add_mutually_exclusive_group()
    time_group.add_argument("-t", "--twelve", action="store_true", help="Use 12-hour time format instead of 24-hour")
    time_group.add_argument("-d", "--date", action="store_true", help="Date without time")

    parser.add_argument("--space", action="store_true", help="Use a space instead of an underscore between date and time")
    parser.add_argument("--format", metavar="FORMAT",
                        help="Set custom date format to use ('%%a %%b %%e %%Y' = \"Wed Jul 17 2024\")")

    parser.add_argument("-S", "--source", metavar="PATH", help="Set the source folder (default: current folder)")
    parser.add_argument("-T", "--target", metavar="PATH", help=f"Set the target folder (default: {DEFAULT_TARGET})")

    parser.add_argument("-p", "--preview", action="store_true", help="Preview the names of renamed files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")

    return parser


def build_config(args: argparse.Namespace, extensions: Optional[List[str]] = None) -> RunConfig:
    """
    Build the run configuration from parsed arguments

    Args:
        args: Parsed arguments
        extensions: Extensions chosen interactively (overrides args.extension)

    Returns:
        RunConfig
    """
    naming = NamingOptions(
        include_original_name=args.keep_name,
        omit_original_name=args.no_name,
        original_name_position=Position.SUFFIX if args.front else Position.PREFIX,
        user_text=args.name,
        user_text_position=Position.SUFFIX if args.suffix else Position.PREFIX,
        date_only=args.date,
        twelve_hour_clock=args.twelve,
        word_separator=WordSeparator.SPACE if args.space else WordSeparator.UNDERSCORE,
        custom_format=args.format,
    )

    if extensions is None:
        extensions = args.extension or []
        for ext in extensions:
            if ext.strip() in ("", "."):
                raise ValueError(f"Invalid extension: {ext!r}")

    if args.extension is not None:
        selection = SelectionMode.EXTENSIONS
    elif args.all:
        selection = SelectionMode.ALL
    else:
        selection = SelectionMode.IMAGES

    source = Path(args.source.strip()) if args.source else Path.cwd()
    target = Path(args.target.strip()) if args.target else Path(DEFAULT_TARGET)

    return RunConfig(
        source=source,
        target=target,
        selection=selection,
        extensions=frozenset(extensions or ()),
        naming=naming,
        preview=args.preview,
    )


def print_report(report: RunReport) -> int:
    """Print the outcome of a run and return the exit code"""
    if report.outcome is RunOutcome.PREVIEW:
        for item in report.preview:
            print(item.dst)
        if report.counts.duplicate > 0:
            print(f"WARNING {report.summary()}", file=sys.stderr)
        return 0

    for src, error in report.failed:
        print(f"ERROR Skipped {src}: {error}", file=sys.stderr)

    if report.outcome is RunOutcome.DUPLICATES:
        print(f"WARNING {report.summary()}", file=sys.stderr)
        return 1

    if report.outcome is RunOutcome.COMPLETED:
        print(report.summary())
    else:
        print(report.summary(), file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    source = Path(args.source.strip()) if args.source else Path.cwd()

    try:
        entries = scan_directory(source)

        extensions = None
        if args.extension is not None and not args.extension:
            extensions = select_extensions(list_extensions(entries))
            if not extensions:
                print("No files selected", file=sys.stderr)
                return 0

        config = build_config(args, extensions)
        report = run_pipeline(config, entries=entries)
    except StructuralError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        parser.error(str(e))

    return print_report(report)


if __name__ == "__main__":
    sys.exit(main())
