"""
DICOM Stack - DICOM slice ingestion and ordering.

This package decodes single-frame CT/CBCT slices, normalizes their pixel
intensities to Hounsfield units and orders a batch of slices for playback
as a volume.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from dicom_stack.core.decoder import SliceDecoder, decode
from dicom_stack.core.models import DecodedSlice, RawSliceInput, Rejected
from dicom_stack.core.pipeline import BatchResult, collect_inputs, load_series
from dicom_stack.core.sequencer import SequenceResult, order

__all__ = [
    "__version__",
    "__license__",
    "BatchResult",
    "DecodedSlice",
    "RawSliceInput",
    "Rejected",
    "SequenceResult",
    "SliceDecoder",
    "collect_inputs",
    "decode",
    "load_series",
    "order",
]
