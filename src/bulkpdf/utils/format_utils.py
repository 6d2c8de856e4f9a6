"""
BulkPdf - Format Utilities Module

This module provides shared utility functions for formatting values
shown in the file list and status messages.
"""

import re

from bulkpdf.constants import BYTES_PER_KB

_PDF_SUFFIX = re.compile(r"\.pdf$", re.IGNORECASE)


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB")
    """
    if size_bytes <= 0:
        return "0 B"

    units = ["B", "KB", "MB", "GB", "TB"]

    size = float(size_bytes)
    unit_index = 0

    while size >= BYTES_PER_KB and unit_index < len(units) - 1:
        size /= BYTES_PER_KB
        unit_index += 1

    # Format with appropriate precision
    if unit_index == 0:  # Bytes - no decimals
        return f"{int(size)} {units[unit_index]}"
    elif size >= 100:  # Large values - no decimals
        return f"{int(size)} {units[unit_index]}"
    elif size >= 10:  # Medium values - 1 decimal
        return f"{size:.1f} {units[unit_index]}"
    else:  # Small values - 2 decimals
        return f"{size:.2f} {units[unit_index]}"


def format_elapsed_time(seconds: float) -> str:
    """Format elapsed time in human-readable format.

    Args:
        seconds: Elapsed time in seconds

    Returns:
        Formatted time string (e.g., "2m 30s" or "45s")
    """
    seconds = max(0, int(seconds))

    if seconds < 60:
        return f"{seconds}s"

    minutes, remaining_seconds = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m {remaining_seconds}s"

    hours, remaining_minutes = divmod(minutes, 60)
    return f"{hours}h {remaining_minutes}m {remaining_seconds}s"


def output_basename(file_name: str) -> str:
    """Strip a trailing ``.pdf`` (any case) from a file name.

    Only the final suffix is removed, so ``report.PDF`` becomes ``report``
    and ``scan.pdf.pdf`` becomes ``scan.pdf``.
    """
    return _PDF_SUFFIX.sub("", file_name)
