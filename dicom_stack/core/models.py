"""Slice records passed between the decoder, the sequencer and callers.

A decode either yields a ``DecodedSlice`` or a ``Rejected`` record; the two
together form ``DecodeResult``. Optional metadata is ``None`` when the
source element is missing or unparsable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import numpy as np


@dataclass(frozen=True)
class RawSliceInput:
    """Undecoded slice bytes plus the name used for diagnostics and ordering."""

    data: bytes = field(repr=False)
    source_name: str

    @classmethod
    def from_path(cls, path: Path | str) -> RawSliceInput:
        path = Path(path)
        return cls(data=path.read_bytes(), source_name=path.name)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class DecodedSlice:
    """A validated slice with calibration metadata and normalized pixels.

    Attributes:
        source_name: Name of the input the slice was decoded from
        rows: Number of pixel rows, tag (0028,0010)
        columns: Number of pixel columns, tag (0028,0011)
        normalized_pixels: Read-only float32 samples in row-major order,
            clamped to the Hounsfield range
        image_position_z: Z component of Image Position (Patient)
        slice_location: Slice Location value
        instance_number: Instance Number value
        rescale_slope: Rescale Slope applied to stored values
        rescale_intercept: Rescale Intercept applied to stored values

    """

    source_name: str
    rows: int
    columns: int
    normalized_pixels: np.ndarray = field(repr=False, compare=False)
    image_position_z: float | None = None
    slice_location: float | None = None
    instance_number: int | None = None
    rescale_slope: float = 1.0
    rescale_intercept: float = 0.0

    def __post_init__(self) -> None:
        if self.normalized_pixels.size != self.rows * self.columns:
            raise ValueError(
                f"{self.source_name}: {self.normalized_pixels.size} samples "
                f"for a {self.rows}x{self.columns} frame"
            )
        # Records are shared with viewer threads; keep the buffer immutable.
        self.normalized_pixels.flags.writeable = False

    @property
    def pixel_count(self) -> int:
        return self.rows * self.columns

    @property
    def frame(self) -> np.ndarray:
        """Normalized pixels as a ``(rows, columns)`` view."""
        return self.normalized_pixels.reshape(self.rows, self.columns)


@dataclass(frozen=True)
class Rejected:
    """An input that could not be decoded into a slice."""

    source_name: str
    reason: str
    error_code: str | None = None


DecodeResult = DecodedSlice | Rejected
