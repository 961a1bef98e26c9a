"""Slice decoding: bytes in, a normalized ``DecodedSlice`` or a rejection out.

The decoder parses one DICOM data set, checks that the image elements are
present and well-formed, reads positional and calibration metadata and
converts stored 16-bit samples into clamped Hounsfield values.

Decoding never raises for malformed input. Structural problems are raised
internally as ``ParsingError``/``ValidationError`` and returned to the
caller as a ``Rejected`` record so a batch can tally them. Only systemic
failures such as ``MemoryError`` propagate.
"""

import math
from io import BytesIO

import numpy as np
import pydicom
from pydicom.dataset import Dataset
from pydicom.multival import MultiValue
from pydicom.tag import BaseTag

from dicom_stack.utils.logger import get_logger

from . import constants as c
from .exceptions import (
    DicomStackError,
    ParsingError,
    ResourceExhaustedError,
    ValidationError,
)
from .models import DecodedSlice, DecodeResult, RawSliceInput, Rejected

logger = get_logger(__name__)


def _parse_float(text: str | None) -> float | None:
    if text is None:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _parse_int(text: str | None) -> int | None:
    if text is None:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def _element_text(dataset: Dataset, tag: BaseTag) -> str | None:
    """Return the raw string value of an element, or None if unusable.

    Values are read before VR conversion so a malformed number only affects
    the element it lives in.
    """
    try:
        element = dataset.get_item(tag)
    except Exception as e:
        logger.debug("element_unreadable", tag=str(tag), error=str(e))
        return None
    if element is None or element.value is None:
        return None

    value = element.value
    if isinstance(value, (bytes, bytearray)):
        text = bytes(value).decode("latin-1")
    elif isinstance(value, str):
        text = value
    elif isinstance(value, (list, tuple, MultiValue)):
        text = c.VALUE_DELIMITER.join(str(v) for v in value)
    else:
        text = str(value)

    text = text.strip(" \x00")
    return text or None


class SliceDecoder:
    """Stateless decoder for single-frame 16-bit DICOM slices.

    Attributes:
        max_file_size: Inputs larger than this many bytes are rejected

    """

    # Maximum input size (100MB)
    MAX_FILE_SIZE = 100 * 1024 * 1024

    def __init__(self, max_file_size: int | None = None) -> None:
        self.max_file_size = max_file_size or self.MAX_FILE_SIZE

    def decode(self, data: bytes, source_name: str) -> DecodeResult:
        """Decode one slice.

        Args:
            data: Raw bytes of a DICOM file or preamble-less data set
            source_name: Display name used for diagnostics and ordering

        Returns:
            A ``DecodedSlice`` on success, otherwise a ``Rejected`` record

        """
        try:
            return self._decode(data, source_name)
        except MemoryError:
            raise
        except DicomStackError as e:
            return self._reject(source_name, e.message, e.error_code)
        except Exception as e:
            # pydicom surfaces malformed values from several layers
            return self._reject(source_name, str(e), c.INVALID_DICOM_FORMAT)

    def decode_input(self, raw: RawSliceInput) -> DecodeResult:
        return self.decode(raw.data, raw.source_name)

    def _decode(self, data: bytes, source_name: str) -> DecodedSlice:
        if len(data) > self.max_file_size:
            raise ResourceExhaustedError(
                f"Input size {len(data)} exceeds maximum {self.max_file_size}",
                error_code=c.FILE_TOO_LARGE,
                context={"size": len(data), "max_size": self.max_file_size},
            )

        dataset = self._parse(data)
        self._check_required(dataset)
        rows, columns = self._read_dimensions(dataset)

        slope = _parse_float(_element_text(dataset, c.RESCALE_SLOPE))
        intercept = _parse_float(_element_text(dataset, c.RESCALE_INTERCEPT))
        if slope is None:
            slope = c.DEFAULT_RESCALE_SLOPE
        if intercept is None:
            intercept = c.DEFAULT_RESCALE_INTERCEPT

        stored = self._read_samples(dataset, rows * columns)

        return DecodedSlice(
            source_name=source_name,
            rows=rows,
            columns=columns,
            normalized_pixels=normalize_samples(stored, slope, intercept),
            image_position_z=self._read_position_z(dataset),
            slice_location=_parse_float(_element_text(dataset, c.SLICE_LOCATION)),
            instance_number=_parse_int(_element_text(dataset, c.INSTANCE_NUMBER)),
            rescale_slope=slope,
            rescale_intercept=intercept,
        )

    def _parse(self, data: bytes) -> Dataset:
        try:
            # force=True accepts data sets written without preamble/meta
            return pydicom.dcmread(BytesIO(data), force=True)
        except MemoryError:
            raise
        except Exception as e:
            raise ParsingError(
                f"Invalid DICOM file format: {e}",
                error_code=c.INVALID_DICOM_FORMAT,
            ) from e

    def _check_required(self, dataset: Dataset) -> None:
        missing = [str(tag) for tag in c.REQUIRED_TAGS if tag not in dataset]
        if missing:
            raise ValidationError(
                f"Missing required DICOM elements: {missing}",
                error_code=c.MISSING_REQUIRED_ELEMENTS,
                context={"missing_elements": missing},
            )

    def _read_dimensions(self, dataset: Dataset) -> tuple[int, int]:
        dims = []
        for tag in (c.ROWS, c.COLUMNS):
            try:
                value = dataset[tag].value
            except Exception as e:
                raise ValidationError(
                    f"Unreadable image dimension {tag}: {e}",
                    error_code=c.INVALID_DIMENSIONS,
                ) from e
            if (
                not isinstance(value, int)
                or isinstance(value, bool)
                or not 0 < value <= c.MAX_DIMENSION
            ):
                raise ValidationError(
                    f"Invalid image dimension {tag}: {value!r}",
                    error_code=c.INVALID_DIMENSIONS,
                    context={"tag": str(tag), "value": repr(value)},
                )
            dims.append(value)
        return dims[0], dims[1]

    def _read_position_z(self, dataset: Dataset) -> float | None:
        text = _element_text(dataset, c.IMAGE_POSITION_PATIENT)
        if text is None:
            return None
        parts = [_parse_float(p.strip()) for p in text.split(c.VALUE_DELIMITER)]
        if len(parts) != 3 or any(p is None for p in parts):
            return None
        return parts[2]

    def _read_samples(self, dataset: Dataset, expected: int) -> np.ndarray:
        """Read native pixel data as signed 16-bit samples in stored byte order."""
        element = dataset.get_item(c.PIXEL_DATA)
        if element is None:
            raise ValidationError(
                "Pixel data element is empty", error_code=c.MISSING_REQUIRED_ELEMENTS
            )

        if getattr(element, "is_undefined_length", False) or (
            getattr(element, "length", 0) == c.UNDEFINED_LENGTH
        ):
            raise ValidationError(
                "Encapsulated pixel data is not supported",
                error_code=c.ENCAPSULATED_PIXEL_DATA,
            )

        raw = element.value
        if not isinstance(raw, (bytes, bytearray)) or not raw:
            raise ValidationError(
                "Pixel data holds no samples", error_code=c.PIXEL_DATA_INVALID
            )
        if len(raw) % c.SAMPLE_WIDTH:
            raise ValidationError(
                f"Pixel data length {len(raw)} is not a whole number of samples",
                error_code=c.PIXEL_DATA_INVALID,
            )

        count = len(raw) // c.SAMPLE_WIDTH
        if count != expected:
            raise ValidationError(
                f"Pixel data holds {count} samples, frame needs {expected}",
                error_code=c.PIXEL_COUNT_MISMATCH,
                context={"samples": count, "expected": expected},
            )

        little_endian = getattr(element, "is_little_endian", None)
        if little_endian is None:
            little_endian = dataset.original_encoding[1]
        dtype = np.dtype("<i2" if little_endian in (True, None) else ">i2")
        return np.frombuffer(bytes(raw), dtype=dtype)

    def _reject(
        self, source_name: str, reason: str, error_code: str | None
    ) -> Rejected:
        logger.warning(
            "slice_rejected",
            source_name=source_name,
            reason=reason,
            error_code=error_code,
        )
        return Rejected(source_name=source_name, reason=reason, error_code=error_code)


def normalize_samples(
    stored: np.ndarray, slope: float = 1.0, intercept: float = 0.0
) -> np.ndarray:
    """Convert stored values to Hounsfield units clamped to [HU_MIN, HU_MAX].

    The linear transform runs in float64; the result is float32.
    """
    with np.errstate(over="ignore", invalid="ignore"):
        hu = stored.astype(np.float64) * slope + intercept
    return np.clip(hu, c.HU_MIN, c.HU_MAX).astype(np.float32)


_default_decoder = SliceDecoder()


def decode(data: bytes, source_name: str) -> DecodeResult:
    """Decode one slice with the default size limit."""
    return _default_decoder.decode(data, source_name)
