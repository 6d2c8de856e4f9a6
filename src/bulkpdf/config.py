#!/usr/bin/env python3
"""
BulkPdf - Configuration Module

This module contains the application constants and the runtime settings
used by the operation orchestrator.
"""

import logging
from dataclasses import dataclass
from typing import Final

from bulkpdf.constants import (
    DEFAULT_BATCH_DELAY_SECONDS,
    DEFAULT_BATCH_SIZE,
    IMAGE_PAGE_HEIGHT,
    IMAGE_PAGE_WIDTH,
    MIN_MERGE_FILES,
)
from bulkpdf.utils.exceptions import ConfigurationError
from bulkpdf.utils.i18n import _

# ============================================================================
# Application Constants
# ============================================================================

APP_NAME: Final[str] = "BulkPdf"
APP_VERSION: Final[str] = "1.0.0"
APP_DESCRIPTION: Final[str] = _("Merge, split, rotate and remove pages across many PDF files")


# ============================================================================
# File Types
# ============================================================================

PDF_MIME_TYPE: Final[str] = "application/pdf"
IMAGE_MIME_PREFIX: Final[str] = "image/"


# ============================================================================
# Output Naming
# ============================================================================

MERGED_FILENAME: Final[str] = "merged.pdf"
MERGED_DOCUMENT_FILENAME: Final[str] = "merged_document.pdf"
SPLIT_NAME_TEMPLATE: Final[str] = "{base}_page_{page}.pdf"
ROTATED_NAME_TEMPLATE: Final[str] = "{base}_rotated.pdf"
REMOVED_NAME_TEMPLATE: Final[str] = "{base}_removed.pdf"


# ============================================================================
# Logging Configuration
# ============================================================================

LOG_LEVEL: int = logging.INFO
LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# ============================================================================
# Orchestrator Settings
# ============================================================================


@dataclass
class OrchestratorConfig:
    """Runtime settings for bulk operations.

    Attributes:
        batch_size: Number of split outputs emitted before yielding
        batch_delay: Pause in seconds between split batches
        accept_images: Accept image/* uploads and embed them when merging
        image_page_size: (width, height) of the page an image is drawn onto
        min_merge_files: Minimum number of files a merge requires
        ignore_encryption: Try to open encrypted PDFs instead of refusing them
    """

    batch_size: int = DEFAULT_BATCH_SIZE
    batch_delay: float = DEFAULT_BATCH_DELAY_SECONDS
    accept_images: bool = True
    image_page_size: tuple[int, int] = (IMAGE_PAGE_WIDTH, IMAGE_PAGE_HEIGHT)
    min_merge_files: int = MIN_MERGE_FILES
    ignore_encryption: bool = False

    def validate(self) -> "OrchestratorConfig":
        """Check the settings and return self.

        Raises:
            ConfigurationError: If a value is out of its allowed range.
        """
        if self.batch_size < 1:
            raise ConfigurationError("batch_size", "must be at least 1")
        if self.batch_delay < 0:
            raise ConfigurationError("batch_delay", "must not be negative")
        if self.min_merge_files < 1:
            raise ConfigurationError("min_merge_files", "must be at least 1")
        width, height = self.image_page_size
        if width <= 0 or height <= 0:
            raise ConfigurationError("image_page_size", "width and height must be positive")
        return self

    @property
    def merged_filename(self) -> str:
        """Name of the merge output; the image-aware mode uses a distinct name."""
        return MERGED_DOCUMENT_FILENAME if self.accept_images else MERGED_FILENAME
