"""
BulkPdf - Python package for bulk PDF assembly

Load many PDF (and image) files, put them in order, and merge them,
split them into single pages, or rotate/remove one page across all of them.
"""

__version__ = "1.0.0"
__author__ = "BulkPdf Team"
__license__ = "GPL-3.0"


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the application.

    Returns:
        The application exit code.
    """
    from bulkpdf.cli import main as cli_main

    return cli_main(argv)


__all__ = ["main", "__version__", "__author__", "__license__"]
