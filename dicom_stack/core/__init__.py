"""Core slice ingestion functionality.

This module contains the slice decoder, the slice sequencer and the batch
pipeline that joins them.
"""

from .decoder import SliceDecoder, decode, normalize_samples
from .exceptions import (
    DicomStackError,
    ParsingError,
    ResourceExhaustedError,
    ValidationError,
)
from .models import DecodedSlice, DecodeResult, RawSliceInput, Rejected
from .pipeline import BatchResult, collect_inputs, decode_batch, load_series
from .sequencer import SequenceResult, compare_slices, natural_key, order

__all__ = [
    "BatchResult",
    "DecodeResult",
    "DecodedSlice",
    "DicomStackError",
    "ParsingError",
    "RawSliceInput",
    "Rejected",
    "ResourceExhaustedError",
    "SequenceResult",
    "SliceDecoder",
    "ValidationError",
    "collect_inputs",
    "compare_slices",
    "decode",
    "decode_batch",
    "load_series",
    "natural_key",
    "normalize_samples",
    "order",
]
