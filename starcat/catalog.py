"""Read a whole binary star catalog from disk or memory."""
from dataclasses import dataclass, field
from pathlib import Path
import logging

from starcat.decoder import ByteOrder
from starcat.errors import (
    CatalogNotFoundError,
    EmptyCatalogError,
    InvalidHeaderError,
    NoMagnitudesError,
    RecordDecodeError,
    TruncatedCatalogError,
)
from starcat.header import HEADER_SIZE, Epoch, Header, parse_header
from starcat.record import RecordLayout, StarRecord, parse_record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadOptions:
    byte_order: ByteOrder | None = None     # None: detect from the header
    epoch: Epoch | None = None              # None: accept either epoch
    magnitude_index: int | None = None      # None: last magnitude column
    max_magnitude: float | None = None      # None: keep every magnitude


@dataclass
class Catalog:
    header: Header
    magnitude_index: int
    stars: list[StarRecord] = field(default_factory=list)
    skipped: int = 0   # records that failed to decode


def read_bytes(path: str | Path) -> bytes:
    """Read the whole catalog file in one go."""
    try:
        with open(path, "rb") as f:
            return f.read()
    except FileNotFoundError as e:
        raise CatalogNotFoundError("failed to open file") from e


def check_header(data: bytes, options: ReadOptions | None = None) -> Header:
    """Parse the header and check it against the size of `data`.

    Raises:
        EmptyCatalogError: `data` is empty.
        MissingHeaderError: `data` is shorter than the header.
        TruncatedCatalogError: `data` is shorter than the declared records.
        NoMagnitudesError: header declares no magnitude columns.
        InvalidHeaderError, EpochMismatchError: see parse_header.
    """
    options = options or ReadOptions()
    if not data:
        raise EmptyCatalogError("empty")

    header = parse_header(data, epoch=options.epoch, byte_order=options.byte_order)
    if len(data) < header.data_size:
        raise TruncatedCatalogError(
            header.star_count, header.bytes_per_record, len(data), header.data_size
        )
    if header.magnitude_count < 1:
        raise NoMagnitudesError(
            f"expected at least one magnitude per star, found: {header.magnitude_count}"
        )
    if header.bytes_per_record <= 0:
        raise InvalidHeaderError(
            f"invalid header, bytes per star: {header.bytes_per_record}"
        )
    return header


def resolve_magnitude_index(header: Header, requested: int | None = None) -> int:
    """Column holding the apparent magnitude.

    Defaults to the last column; a request beyond the last column falls back
    to it, and negative requests to the first.
    """
    last = header.magnitude_count - 1
    if requested is None:
        return last
    return max(0, min(requested, last))


def keep_star(star: StarRecord, max_magnitude: float | None = None) -> bool:
    """False for sentinel records and stars fainter than `max_magnitude`."""
    if max_magnitude is not None and star.magnitude > max_magnitude:
        return False
    return not star.is_sentinel


def decode_records(layout: RecordLayout, data: bytes) -> tuple[list[StarRecord], int]:
    """Decode every declared record. Returns (records, number skipped)."""
    stride = layout.header.bytes_per_record
    view = memoryview(data)
    records = []
    skipped = 0
    for i in range(layout.header.star_count):
        start = HEADER_SIZE + i * stride
        try:
            records.append(parse_record(layout, view[start:start + stride], index=i))
        except RecordDecodeError as e:
            logger.debug(f"Skipping record: {e}")
            skipped += 1
    return records, skipped


def load_catalog(data: bytes, options: ReadOptions | None = None, source: str = "<bytes>") -> Catalog:
    """Decode and filter a catalog already held in memory."""
    options = options or ReadOptions()
    header = check_header(data, options)
    magnitude_index = resolve_magnitude_index(header, options.magnitude_index)
    layout = RecordLayout.for_header(header, magnitude_index)

    records, skipped = decode_records(layout, data)
    if skipped:
        logger.warning(f"{source}: skipped {skipped} of {header.star_count} records that failed to decode")

    stars = [s for s in records if keep_star(s, options.max_magnitude)]
    logger.info(
        f"Loaded {len(stars)} of {header.star_count} stars from {source} "
        f"({header.epoch.value}, {header.byte_order.label})"
    )
    return Catalog(header=header, magnitude_index=magnitude_index, stars=stars, skipped=skipped)


def read_catalog(path: str | Path, options: ReadOptions | None = None) -> Catalog:
    """Read, decode and filter the catalog file at `path`.

    Raises:
        CatalogNotFoundError: `path` does not exist.
        CatalogError: any file or header level problem, see check_header.
    """
    return load_catalog(read_bytes(path), options, source=str(path))


def read_header(path: str | Path, options: ReadOptions | None = None) -> Header:
    """Header of the catalog at `path`, checked but without decoding records."""
    return check_header(read_bytes(path), options)
