"""Slice ordering for volume playback.

Slices are ordered by a cascade of tiers. Each tier looks at one optional
field; a slice that has the field sorts before one that does not, two
slices that both have it compare by value, and a tie (or absence on both
sides) falls through to the next tier:

    1. image_position_z
    2. slice_location
    3. instance_number
    4. source_name in natural order ("slice2" < "slice10")

Python's sort is stable, so slices that compare equal keep their input
order and re-ordering an ordered sequence leaves it unchanged.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from functools import cmp_to_key

from dicom_stack.utils.logger import get_logger

from .models import DecodedSlice, DecodeResult, Rejected

logger = get_logger(__name__)

#: Metadata tiers, strongest first
SORT_TIERS: tuple[str, ...] = ("image_position_z", "slice_location", "instance_number")

_DIGITS = re.compile(r"(\d+)")


@dataclass(frozen=True)
class SequenceResult:
    """Ordered slices plus the number of inputs that were rejected."""

    slices: tuple[DecodedSlice, ...]
    rejected_count: int

    def __len__(self) -> int:
        return len(self.slices)

    @property
    def total(self) -> int:
        return len(self.slices) + self.rejected_count


def natural_key(name: str) -> tuple[tuple[int | str, ...], str]:
    """Sort key comparing digit runs numerically and text case-insensitively.

    ``re.split`` with a capturing group always alternates text and digits,
    so positions in two keys hold the same type. The raw name breaks ties
    between names that differ only in case or zero padding.
    """
    parts = _DIGITS.split(name)
    key = tuple(int(p) if i % 2 else p.casefold() for i, p in enumerate(parts))
    return key, name


def _compare_values(a, b) -> int:
    return (a > b) - (a < b)


def _compare_tier(a: DecodedSlice, b: DecodedSlice, field: str) -> int:
    """Compare one optional field; 0 means tie or absent on both sides."""
    a_value = getattr(a, field)
    b_value = getattr(b, field)
    if a_value is None and b_value is None:
        return 0
    if a_value is None:
        return 1
    if b_value is None:
        return -1
    return _compare_values(a_value, b_value)


def compare_slices(a: DecodedSlice, b: DecodedSlice) -> int:
    """Three-way comparison implementing the tier cascade.

    Returns:
        Negative if ``a`` sorts first, positive if ``b`` does, 0 if equal

    """
    for field in SORT_TIERS:
        result = _compare_tier(a, b, field)
        if result:
            return result
    return _compare_values(natural_key(a.source_name), natural_key(b.source_name))


def order(results: Iterable[DecodeResult]) -> SequenceResult:
    """Order decoded slices and count rejected inputs.

    Args:
        results: Decoder output for one batch, valid and rejected alike

    Returns:
        SequenceResult with slices in playback order

    """
    valid: list[DecodedSlice] = []
    rejected = 0
    for result in results:
        if isinstance(result, Rejected):
            rejected += 1
        else:
            valid.append(result)

    ordered = sorted(valid, key=cmp_to_key(compare_slices))

    logger.debug("slices_ordered", ordered=len(ordered), rejected=rejected)
    return SequenceResult(slices=tuple(ordered), rejected_count=rejected)
