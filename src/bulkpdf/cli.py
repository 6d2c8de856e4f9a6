#!/usr/bin/env python3
"""
BulkPdf CLI — bulk PDF assembly from the terminal.

Usage:
    python -m bulkpdf.cli <command> [options] FILES...

Commands:
    merge       Merge all files (PDFs and images) into one PDF
    split       Save every page of every PDF as its own file
    rotate      Rotate one page of every PDF by another 90 degrees
    remove      Remove one page from every PDF
    info        List the files with sizes and page counts

Examples:
    # Merge in the given order
    bulkpdf-cli merge a.pdf b.pdf photo.jpg -o out/

    # Merge with the list reordered (1-based positions)
    bulkpdf-cli merge a.pdf b.pdf c.pdf --order 3,1,2 -o out/

    # Split, five pages at a time with no pause
    bulkpdf-cli split a.pdf b.pdf -o pages/ --batch-size 5 --batch-delay 0

    # Rotate / remove page 2 in every file
    bulkpdf-cli rotate a.pdf b.pdf --page 2 -o out/
    bulkpdf-cli remove a.pdf b.pdf --page 2 -o out/
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from bulkpdf.config import (
    APP_DESCRIPTION,
    APP_NAME,
    APP_VERSION,
    LOG_FORMAT,
    LOG_LEVEL,
    OrchestratorConfig,
)
from bulkpdf.constants import DEFAULT_BATCH_DELAY_SECONDS, DEFAULT_BATCH_SIZE
from bulkpdf.utils.exceptions import BulkPdfError, LoadError
from bulkpdf.utils.i18n import _

# ---------------------------------------------------------------------------
# Order parser
# ---------------------------------------------------------------------------


def _parse_order(text: str) -> list[int]:
    """Parse a 1-based position list such as "3,1,2" into 0-based indices.

    Args:
        text: Comma separated positions.

    Returns:
        List of 0-based indices, in the given order.
    """
    order: list[int] = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            position = int(part)
        except ValueError:
            raise ValueError(
                f"Invalid position '{part}'. Use 1-based positions like '3,1,2'."
            ) from None
        order.append(position - 1)
    return order


# ---------------------------------------------------------------------------
# Argument parser construction
# ---------------------------------------------------------------------------


def _add_common_arguments(p: argparse.ArgumentParser, with_output: bool = True) -> None:
    p.add_argument("inputs", nargs="+", type=Path, help=_("Input files (in order)"))
    if with_output:
        p.add_argument("-o", "--output", type=Path, required=True, help=_("Output directory"))
    p.add_argument(
        "--order",
        type=str,
        default=None,
        help=_("Reorder the inputs before running (e.g. '3,1,2')"),
    )
    p.add_argument(
        "--no-images",
        action="store_true",
        help=_("Only accept PDF files; images are skipped"),
    )
    p.add_argument(
        "--ignore-encryption",
        action="store_true",
        help=_("Try to open encrypted PDFs that need no password"),
    )


def _add_page_argument(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--page",
        type=str,
        required=True,
        help=_("Page number (1-based), applied to every file"),
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with subcommands."""
    p = argparse.ArgumentParser(
        prog="bulkpdf-cli",
        description=f"{APP_NAME} — {APP_DESCRIPTION}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("-v", "--verbose", action="store_true", help=_("Verbose logging (DEBUG)"))
    p.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")

    sub = p.add_subparsers(dest="command", help=_("Available commands"))

    # --- merge ---
    merge_p = sub.add_parser("merge", help=_("Merge all files into one PDF"))
    _add_common_arguments(merge_p)

    # --- split ---
    split_p = sub.add_parser("split", help=_("Save every page as its own PDF"))
    _add_common_arguments(split_p)
    split_p.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_BATCH_SIZE,
        metavar="N",
        help=_("Pages written before each pause (default: %(default)s)"),
    )
    split_p.add_argument(
        "--batch-delay",
        type=float,
        default=DEFAULT_BATCH_DELAY_SECONDS,
        metavar="SECONDS",
        help=_("Pause between batches (default: %(default)s)"),
    )

    # --- rotate ---
    rotate_p = sub.add_parser("rotate", help=_("Rotate one page of every PDF by 90 degrees"))
    _add_common_arguments(rotate_p)
    _add_page_argument(rotate_p)

    # --- remove ---
    remove_p = sub.add_parser("remove", help=_("Remove one page from every PDF"))
    _add_common_arguments(remove_p)
    _add_page_argument(remove_p)

    # --- info ---
    info_p = sub.add_parser("info", help=_("List files with sizes and page counts"))
    _add_common_arguments(info_p, with_output=False)

    return p


# ---------------------------------------------------------------------------
# Workbench setup
# ---------------------------------------------------------------------------


def _build_config(args) -> OrchestratorConfig:
    return OrchestratorConfig(
        batch_size=getattr(args, "batch_size", DEFAULT_BATCH_SIZE),
        batch_delay=getattr(args, "batch_delay", DEFAULT_BATCH_DELAY_SECONDS),
        accept_images=not args.no_images,
        ignore_encryption=args.ignore_encryption,
    )


def _build_workbench(args, sink, logger):
    """Create a workbench, load the inputs and apply --order."""
    from bulkpdf.services.file_registry import RawFile
    from bulkpdf.services.workbench import Workbench

    workbench = Workbench(sink, _build_config(args))
    result = workbench.add_files(RawFile.from_path(p) for p in args.inputs)
    print(result.status_message)
    for name in result.skipped_names:
        logger.warning("Skipped unsupported file: %s", name)

    if args.order:
        workbench.reorder(_parse_order(args.order))
    return workbench


def _print_outcome(workbench, result) -> int:
    status = workbench.status
    if result is None:
        text = status.text if status else _("Operation failed")
        print(f"Error: {text}", file=sys.stderr)
        return 1
    print(result.message)
    return 0


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _run_operation(args, logger) -> int:
    """Handle merge, split, rotate and remove."""
    from bulkpdf.services.download import DirectorySink

    sink = DirectorySink(args.output)
    workbench = _build_workbench(args, sink, logger)

    if args.command == "merge":
        coro = workbench.merge()
    elif args.command == "split":
        coro = workbench.split()
    elif args.command == "rotate":
        coro = workbench.rotate(args.page)
    else:
        coro = workbench.remove(args.page)

    result = asyncio.run(coro)
    for path in sink.written:
        print(f"  → {path}")
    return _print_outcome(workbench, result)


def _cmd_info(args, logger) -> int:
    """Handle the 'info' command."""
    from bulkpdf.services.download import MemorySink
    from bulkpdf.services.pdf_codec import load_document

    workbench = _build_workbench(args, MemorySink(), logger)
    for line, input_file in zip(workbench.registry.listing(), workbench.registry):
        if not input_file.is_pdf:
            print(f"{line}  [{input_file.mime_type}]")
            continue
        try:
            with load_document(
                input_file.read_bytes(),
                ignore_encryption=args.ignore_encryption,
                name=input_file.name,
            ) as doc:
                print(f"{line}  {doc.page_count()} pages")
        except LoadError as e:
            print(f"{line}  error: {e.reason}")
    return 0


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Configure logging
    level = logging.DEBUG if args.verbose else LOG_LEVEL
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )
    logger = logging.getLogger("bulkpdf.cli")

    for p in args.inputs:
        if not p.is_file():
            print(f"Error: {p} not found", file=sys.stderr)
            return 1

    handler = _cmd_info if args.command == "info" else _run_operation
    try:
        return handler(args, logger)
    except (BulkPdfError, ValueError) as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
