#!/usr/bin/env python3
"""
BulkPdf - Entry point for python -m bulkpdf

This module allows the package to be run as a module:
    python -m bulkpdf
"""

import sys

from bulkpdf import main

if __name__ == "__main__":
    sys.exit(main())
