"""Decode the 28-byte catalog header.

Layout (seven signed 32-bit integers):

    offset  field
    0       reserved
    4       star count, negative for J2000 coordinates
    8       star id kind, negative means no id and |value| name bytes
    12      proper motion kind
    16      reserved
    20      magnitude count, negative for J2000 coordinates
    24      bytes per star record
"""
from dataclasses import dataclass
from enum import Enum, IntEnum

import numpy as np

from starcat.decoder import ByteOrder, ScalarKind, decode
from starcat.errors import EpochMismatchError, InvalidHeaderError, MissingHeaderError

HEADER_SIZE = 28

# Catalogs never carry more magnitude columns than this. Byte order detection
# depends on it: the wrong order turns a small count into a huge one.
MAX_MAGNITUDES = 10

HEADER_FIELDS = (
    "reserved0",
    "star_count",
    "star_id",
    "proper_motion",
    "reserved1",
    "magnitude_count",
    "bytes_per_record",
)
MAGNITUDE_COUNT_OFFSET = HEADER_FIELDS.index("magnitude_count") * 4


class Epoch(Enum):
    J2000 = "J2000"
    B1950 = "B1950"


class StarIdKind(IntEnum):
    UNKNOWN = -1
    NONE = 0
    CATALOG = 1
    GSC = 2
    TYCHO = 3
    INTEGER = 4


class ProperMotionKind(IntEnum):
    UNKNOWN = -1
    NONE = 0
    PROPER_MOTION = 1
    RADIAL_VELOCITY = 2


@dataclass(frozen=True)
class Header:
    star_count: int
    star_id: StarIdKind
    star_name_length: int
    proper_motion: ProperMotionKind
    magnitude_count: int
    bytes_per_record: int
    epoch: Epoch
    byte_order: ByteOrder

    @property
    def has_names(self) -> bool:
        return self.star_name_length > 0

    @property
    def data_size(self) -> int:
        """Bytes needed for the header plus every declared record."""
        return HEADER_SIZE + self.star_count * self.bytes_per_record


def _header_dtype(byte_order: ByteOrder) -> np.dtype:
    return np.dtype([(name, f"{byte_order.value}i4") for name in HEADER_FIELDS])


def _magnitude_count(data: bytes, byte_order: ByteOrder) -> int:
    return decode(data, MAGNITUDE_COUNT_OFFSET, ScalarKind.INT32, byte_order)


def _kind(kinds, raw: int):
    """Enum member for `raw`, UNKNOWN for ordinals the format does not define."""
    if raw < 0:
        return kinds.UNKNOWN
    try:
        return kinds(raw)
    except ValueError:
        return kinds.UNKNOWN


def detect_byte_order(data: bytes) -> ByteOrder:
    """Pick the byte order under which the magnitude count is plausible.

    Little-endian wins when both readings are plausible.
    """
    for byte_order in (ByteOrder.LITTLE, ByteOrder.BIG):
        if abs(_magnitude_count(data, byte_order)) <= MAX_MAGNITUDES:
            return byte_order
    raise InvalidHeaderError("invalid header")


def _check_byte_order(data: bytes, byte_order: ByteOrder) -> None:
    if abs(_magnitude_count(data, byte_order)) > MAX_MAGNITUDES:
        raise InvalidHeaderError(
            f"invalid header, maybe try {byte_order.opposite.label}?"
        )


def parse_header(
    data: bytes,
    epoch: Epoch | None = None,
    byte_order: ByteOrder | None = None,
) -> Header:
    """Decode the header at the start of `data`.

    Args:
        data: at least the first HEADER_SIZE bytes of a catalog.
        epoch: epoch the caller expects; None accepts either.
        byte_order: forced byte order; None detects it.

    Raises:
        MissingHeaderError: fewer than HEADER_SIZE bytes.
        InvalidHeaderError: implausible magnitude count.
        EpochMismatchError: header epoch differs from `epoch`.
    """
    if len(data) < HEADER_SIZE:
        raise MissingHeaderError("no header")

    if byte_order is None:
        byte_order = detect_byte_order(data)
    else:
        _check_byte_order(data, byte_order)

    raw = np.frombuffer(data, dtype=_header_dtype(byte_order), count=1)[0]
    star_count = int(raw["star_count"])
    star_id = int(raw["star_id"])
    proper_motion = int(raw["proper_motion"])
    magnitude_count = int(raw["magnitude_count"])

    found = Epoch.J2000 if star_count < 0 or magnitude_count < 0 else Epoch.B1950
    if epoch is not None and epoch is not found:
        raise EpochMismatchError(
            f"expected {epoch.value} epoch but found {found.value} epoch"
        )

    star_id_kind = StarIdKind.NONE if star_id < 0 else _kind(StarIdKind, star_id)
    proper_motion_kind = _kind(ProperMotionKind, proper_motion)

    return Header(
        star_count=abs(star_count),
        star_id=star_id_kind,
        star_name_length=-star_id if star_id < 0 else 0,
        proper_motion=proper_motion_kind,
        magnitude_count=abs(magnitude_count),
        bytes_per_record=int(raw["bytes_per_record"]),
        epoch=found,
        byte_order=byte_order,
    )
