"""
BulkPdf - Numeric Constants

Simple numeric constants with ZERO internal imports to avoid circular dependencies.
For application-level constants (strings, paths), use config.py.
"""

from typing import Final

# ============================================================================
# Size Constants
# ============================================================================

BYTES_PER_KB: Final[int] = 1024

# ============================================================================
# Split Batching
# ============================================================================

DEFAULT_BATCH_SIZE: Final[int] = 5
DEFAULT_BATCH_DELAY_SECONDS: Final[float] = 0.5

# ============================================================================
# Merge
# ============================================================================

MIN_MERGE_FILES: Final[int] = 2

# Images are stretched onto a fixed square page (no aspect ratio preservation)
IMAGE_PAGE_WIDTH: Final[int] = 600
IMAGE_PAGE_HEIGHT: Final[int] = 600

# ============================================================================
# Page Rotation
# ============================================================================

ROTATION_STEP_DEGREES: Final[int] = 90
FULL_TURN_DEGREES: Final[int] = 360
