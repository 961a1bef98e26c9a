"""
Pytest configuration and shared fixtures for DICOM-Stack tests.
"""

from io import BytesIO
from pathlib import Path

import numpy as np
import pytest
import structlog
from pydicom.dataset import Dataset, FileDataset, FileMetaDataset
from pydicom.uid import (
    CTImageStorage,
    ExplicitVRBigEndian,
    ExplicitVRLittleEndian,
    generate_uid,
)
from pydicom.valuerep import format_number_as_ds

from dicom_stack.core.constants import (
    INSTANCE_NUMBER,
    RESCALE_INTERCEPT,
    RESCALE_SLOPE,
    SLICE_LOCATION,
)

_UNSET = object()


def build_slice_dataset(
    pixels=None,
    *,
    position=None,
    slice_location=None,
    instance_number=None,
    slope=None,
    intercept=None,
    rows=_UNSET,
    columns=_UNSET,
    include_pixels: bool = True,
    big_endian: bool = False,
) -> FileDataset:
    """Create a single-frame CT slice data set.

    Numeric metadata passed as ``str`` is stored verbatim with an LO VR so
    tests can embed values that are not valid DS/IS strings.
    """
    if pixels is None:
        pixels = np.arange(4, dtype=np.int16).reshape(2, 2)
    pixels = np.asarray(pixels, dtype=np.int16)

    file_meta = FileMetaDataset()
    file_meta.MediaStorageSOPClassUID = CTImageStorage
    file_meta.MediaStorageSOPInstanceUID = generate_uid()
    file_meta.TransferSyntaxUID = (
        ExplicitVRBigEndian if big_endian else ExplicitVRLittleEndian
    )
    file_meta.ImplementationClassUID = generate_uid()

    ds = FileDataset(
        "slice.dcm",
        {},
        file_meta=file_meta,
        preamble=b"\x00" * 128,
        is_implicit_VR=False,
        is_little_endian=not big_endian,
    )
    ds.SOPClassUID = CTImageStorage
    ds.SOPInstanceUID = file_meta.MediaStorageSOPInstanceUID
    ds.Modality = "CT"
    ds.PatientName = "Test^Patient"
    ds.PatientID = "TEST123"

    if rows is not _UNSET:
        if rows is not None:
            ds.Rows = rows
    else:
        ds.Rows = pixels.shape[0]
    if columns is not _UNSET:
        if columns is not None:
            ds.Columns = columns
    else:
        ds.Columns = pixels.shape[1]

    ds.SamplesPerPixel = 1
    ds.PhotometricInterpretation = "MONOCHROME2"
    ds.BitsAllocated = 16
    ds.BitsStored = 16
    ds.HighBit = 15
    ds.PixelRepresentation = 1

    if position is not None:
        if isinstance(position, str):
            ds.add_new(0x00200032, "LO", position)
        else:
            ds.ImagePositionPatient = [str(v) for v in position]
    _add_number(ds, SLICE_LOCATION, "DS", slice_location)
    _add_number(ds, INSTANCE_NUMBER, "IS", instance_number)
    _add_number(ds, RESCALE_SLOPE, "DS", slope)
    _add_number(ds, RESCALE_INTERCEPT, "DS", intercept)

    if include_pixels:
        dtype = ">i2" if big_endian else "<i2"
        ds.PixelData = pixels.astype(dtype).tobytes()

    return ds


def _add_number(ds: Dataset, tag, vr: str, value) -> None:
    if value is None:
        return
    if isinstance(value, str):
        ds.add_new(tag, "LO", value)
    elif isinstance(value, float):
        ds.add_new(tag, vr, format_number_as_ds(value))
    else:
        ds.add_new(tag, vr, str(value))


def dataset_to_bytes(ds: FileDataset) -> bytes:
    buffer = BytesIO()
    ds.save_as(buffer, enforce_file_format=True)
    return buffer.getvalue()


def make_slice_bytes(pixels=None, **kwargs) -> bytes:
    """Encode a slice built by ``build_slice_dataset`` as a DICOM file."""
    return dataset_to_bytes(build_slice_dataset(pixels, **kwargs))


@pytest.fixture
def slice_bytes():
    """Factory fixture returning encoded slice bytes."""
    return make_slice_bytes


@pytest.fixture
def series_dir(tmp_path: Path) -> Path:
    """Directory with three valid slices (shuffled names) and one broken file."""
    for z, name in ((10.0, "b_slice.dcm"), (0.0, "c_slice.dcm"), (5.0, "a_slice.dcm")):
        (tmp_path / name).write_bytes(make_slice_bytes(position=(0, 0, z)))
    (tmp_path / "broken.dcm").write_bytes(b"This is not a DICOM file")
    (tmp_path / "notes.txt").write_text("not a slice")
    return tmp_path


@pytest.fixture(autouse=True)
def reset_structlog():
    """Reset structlog configuration after each test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def capture_logs():
    """Capture structlog events emitted during a test.

    Yields:
        List that will contain captured event dictionaries
    """
    with structlog.testing.capture_logs() as captured:
        yield captured

