"""Shared constants for slice decoding and ordering.

Tag numbers follow DICOM PS3.6. Intensity bounds and the display window
match the CT/CBCT defaults used by the slice viewer.
"""

from __future__ import annotations

from typing import Final

from pydicom.tag import BaseTag, Tag

# =============================================================================
# Image Tags
# =============================================================================

PIXEL_DATA: Final[BaseTag] = Tag(0x7FE0, 0x0010)
ROWS: Final[BaseTag] = Tag(0x0028, 0x0010)
COLUMNS: Final[BaseTag] = Tag(0x0028, 0x0011)

#: Elements a slice must carry to be decoded at all
REQUIRED_TAGS: Final[tuple[BaseTag, ...]] = (PIXEL_DATA, ROWS, COLUMNS)

# =============================================================================
# Positional and Calibration Tags
# =============================================================================

IMAGE_POSITION_PATIENT: Final[BaseTag] = Tag(0x0020, 0x0032)
SLICE_LOCATION: Final[BaseTag] = Tag(0x0020, 0x1041)
INSTANCE_NUMBER: Final[BaseTag] = Tag(0x0020, 0x0013)
RESCALE_SLOPE: Final[BaseTag] = Tag(0x0028, 0x1053)
RESCALE_INTERCEPT: Final[BaseTag] = Tag(0x0028, 0x1052)

#: Multi-valued string separator (PS3.5 6.4)
VALUE_DELIMITER: Final[str] = "\\"

# =============================================================================
# Intensity Normalization
# =============================================================================

HU_MIN: Final[float] = -1000.0  # air
HU_MAX: Final[float] = 3000.0  # dense bone / metal

DEFAULT_RESCALE_SLOPE: Final[float] = 1.0
DEFAULT_RESCALE_INTERCEPT: Final[float] = 0.0

#: Bytes per stored sample (signed 16-bit)
SAMPLE_WIDTH: Final[int] = 2

MAX_DIMENSION: Final[int] = 0xFFFF

#: Undefined length marker used by encapsulated (compressed) pixel data
UNDEFINED_LENGTH: Final[int] = 0xFFFFFFFF

# =============================================================================
# Display Defaults
# =============================================================================

DEFAULT_WINDOW_WIDTH: Final[float] = 3000.0
DEFAULT_WINDOW_CENTER: Final[float] = 500.0

# =============================================================================
# File Selection
# =============================================================================

DICOM_SUFFIXES: Final[tuple[str, ...]] = (".dcm",)

# =============================================================================
# Rejection Codes
# =============================================================================

INVALID_DICOM_FORMAT: Final[str] = "INVALID_DICOM_FORMAT"
MISSING_REQUIRED_ELEMENTS: Final[str] = "MISSING_REQUIRED_ELEMENTS"
INVALID_DIMENSIONS: Final[str] = "INVALID_DIMENSIONS"
ENCAPSULATED_PIXEL_DATA: Final[str] = "ENCAPSULATED_PIXEL_DATA"
PIXEL_DATA_INVALID: Final[str] = "PIXEL_DATA_INVALID"
PIXEL_COUNT_MISMATCH: Final[str] = "PIXEL_COUNT_MISMATCH"
FILE_TOO_LARGE: Final[str] = "FILE_TOO_LARGE"
