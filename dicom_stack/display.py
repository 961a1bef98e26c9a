"""Display windowing for decoded slices.

Maps clamped Hounsfield frames to 8-bit grey levels for a viewer. The
window is a presentation setting and is never applied by the decoder.
Unless given explicitly, width and center come from the ``display``
section of the application settings.
"""

from collections.abc import Iterable, Iterator

import numpy as np

from dicom_stack.core.config import get_settings
from dicom_stack.core.models import DecodedSlice


def _resolve_window(
    width: float | None, center: float | None
) -> tuple[float, float]:
    display = get_settings().display
    if width is None:
        width = display.window_width
    if center is None:
        center = display.window_center
    return width, center


def window_bounds(
    width: float | None = None, center: float | None = None
) -> tuple[float, float]:
    """Return the (lower, upper) HU range covered by a window."""
    width, center = _resolve_window(width, center)
    if width <= 0:
        raise ValueError(f"window width must be positive, got {width}")
    return center - width / 2, center + width / 2


def apply_window(
    pixels: np.ndarray,
    width: float | None = None,
    center: float | None = None,
) -> np.ndarray:
    """Linearly map the window range onto 0-255.

    Values below the window become 0, values above it 255. The output has
    the same shape as the input.
    """
    vmin, vmax = window_bounds(width, center)
    arr = np.clip(pixels.astype(np.float64), vmin, vmax)
    return np.round((arr - vmin) / (vmax - vmin) * 255).astype(np.uint8)


def render_frames(
    slices: Iterable[DecodedSlice],
    width: float | None = None,
    center: float | None = None,
) -> Iterator[np.ndarray]:
    """Yield windowed ``(rows, columns)`` frames in sequence order."""
    width, center = _resolve_window(width, center)
    for item in slices:
        yield apply_window(item.frame, width, center)
