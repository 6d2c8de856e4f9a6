"""
BulkPdf - Utils Package

Utility modules for the application.
"""

from bulkpdf.utils.format_utils import format_elapsed_time, format_file_size, output_basename
from bulkpdf.utils.i18n import _

__all__ = [
    "_",
    "format_file_size",
    "format_elapsed_time",
    "output_basename",
]
