"""Batch loading: read files, decode them concurrently, then order the batch.

Decoding is scatter/gather. One task per input runs on a thread pool and
the sequencer runs once all tasks have finished, so ordering always sees
the complete batch. Per-slice failures come back as ``Rejected`` records
and never cancel sibling tasks.

USAGE:
    inputs = collect_inputs([Path("scan/")])
    batch = load_series(inputs, max_workers=8)
    print(batch.summary())
"""

from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from dicom_stack.utils.logger import get_logger

from .constants import DICOM_SUFFIXES
from .decoder import SliceDecoder
from .models import DecodedSlice, DecodeResult, RawSliceInput, Rejected
from .sequencer import order

logger = get_logger(__name__)


@dataclass(frozen=True)
class BatchResult:
    """Outcome of loading one batch of slice files.

    Attributes:
        slices: Valid slices in playback order
        rejected: Rejection records in input order
        total: Number of inputs in the batch

    """

    slices: tuple[DecodedSlice, ...]
    rejected: tuple[Rejected, ...]
    total: int

    @property
    def loaded_count(self) -> int:
        return len(self.slices)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)

    def summary(self) -> str:
        """User-facing load message."""
        return (
            f"{self.loaded_count} files loaded, "
            f"{self.rejected_count} invalid/malformed files filtered"
        )


def has_dicom_suffix(path: Path, suffixes: Iterable[str] = DICOM_SUFFIXES) -> bool:
    return path.suffix.lower() in {s.lower() for s in suffixes}


def find_slice_files(
    paths: Iterable[Path | str],
    suffixes: Iterable[str] = DICOM_SUFFIXES,
    recursive: bool = False,
) -> list[Path]:
    """Expand directories and keep files with a DICOM suffix.

    Explicitly named files are subject to the same suffix filter as files
    found in directories. Results are sorted and de-duplicated.

    Raises:
        FileNotFoundError: If a given path does not exist

    """
    suffixes = tuple(suffixes)
    found: set[Path] = set()
    for path in map(Path, paths):
        if not path.exists():
            raise FileNotFoundError(f"No such file or directory: {path}")
        if path.is_dir():
            candidates = path.rglob("*") if recursive else path.iterdir()
            found.update(
                p for p in candidates if p.is_file() and has_dicom_suffix(p, suffixes)
            )
        elif has_dicom_suffix(path, suffixes):
            found.add(path)
        else:
            logger.info("file_skipped", path=str(path), reason="suffix")
    return sorted(found)


def collect_inputs(
    paths: Iterable[Path | str],
    suffixes: Iterable[str] = DICOM_SUFFIXES,
    recursive: bool = False,
) -> list[RawSliceInput]:
    """Read every selected slice file into memory."""
    return [
        RawSliceInput.from_path(path)
        for path in find_slice_files(paths, suffixes, recursive)
    ]


def decode_batch(
    inputs: Sequence[RawSliceInput],
    max_workers: int | None = None,
    decoder: SliceDecoder | None = None,
) -> list[DecodeResult]:
    """Decode inputs concurrently; results keep input order.

    Args:
        inputs: Slices to decode
        max_workers: Thread pool size (defaults to ``ThreadPoolExecutor``'s)
        decoder: Decoder to use, a default one if omitted

    Returns:
        One ``DecodedSlice`` or ``Rejected`` per input

    """
    decoder = decoder or SliceDecoder()
    if not inputs:
        return []
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        # map() is the join point and yields in submission order
        return list(executor.map(decoder.decode_input, inputs))


def load_series(
    inputs: Sequence[RawSliceInput],
    max_workers: int | None = None,
    decoder: SliceDecoder | None = None,
) -> BatchResult:
    """Decode a batch and order the valid slices for playback."""
    results = decode_batch(inputs, max_workers=max_workers, decoder=decoder)
    sequence = order(results)
    rejected = tuple(r for r in results if isinstance(r, Rejected))

    batch = BatchResult(slices=sequence.slices, rejected=rejected, total=len(inputs))
    logger.info(
        "batch_loaded",
        total=batch.total,
        loaded=batch.loaded_count,
        rejected=batch.rejected_count,
    )
    return batch
