"""Decode individual star records.

The fields present in a record, and their widths, follow from the header.
RecordLayout works that out once per catalog as a numpy structured dtype;
parse_record then decodes any number of records against it.
"""
from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np

from starcat.decoder import ByteOrder, ScalarKind, dtype_for
from starcat.errors import InvalidHeaderError, RecordDecodeError
from starcat.header import Header, ProperMotionKind, StarIdKind

MAGNITUDE_SCALE = np.float32(100.0)

_FLOAT_IDS = (StarIdKind.CATALOG, StarIdKind.GSC, StarIdKind.TYCHO)


class ProperMotion(NamedTuple):
    right_ascension: float  # radians per year
    declination: float      # radians per year


@dataclass(frozen=True)
class StarRecord:
    right_ascension: float  # radians
    declination: float      # radians
    magnitude: float
    spectral_type: str
    name: str = ""
    identifier: float = 0.0
    proper_motion: ProperMotion | None = None
    radial_velocity: float | None = None  # km/s
    index: int = 0

    @property
    def is_sentinel(self) -> bool:
        """All-zero position and magnitude marks an unused catalog slot."""
        return self.magnitude == 0.0 and self.right_ascension == 0.0 and self.declination == 0.0


def _record_fields(header: Header) -> list[tuple]:
    order = header.byte_order

    def scalar(name: str, kind: ScalarKind) -> tuple:
        return (name, dtype_for(kind, order))

    fields = []
    if header.star_id in _FLOAT_IDS:
        fields.append(scalar("identifier", ScalarKind.FLOAT32))
    elif header.star_id is StarIdKind.INTEGER:
        fields.append(scalar("identifier", ScalarKind.INT32))
    fields.append(scalar("right_ascension", ScalarKind.FLOAT64))
    fields.append(scalar("declination", ScalarKind.FLOAT64))
    fields.append(("spectral_type", "V2"))
    fields.append(("magnitudes", dtype_for(ScalarKind.INT16, order), (header.magnitude_count,)))
    if header.proper_motion is ProperMotionKind.PROPER_MOTION:
        fields.append(scalar("ra_rate", ScalarKind.FLOAT32))
        fields.append(scalar("dec_rate", ScalarKind.FLOAT32))
    elif header.proper_motion is ProperMotionKind.RADIAL_VELOCITY:
        fields.append(scalar("radial_velocity", ScalarKind.FLOAT64))
    if header.star_name_length > 0:
        fields.append(("name", f"V{header.star_name_length}"))
    return fields


@dataclass(frozen=True)
class RecordLayout:
    """Field table shared by every record of one catalog."""

    header: Header
    magnitude_index: int
    dtype: np.dtype = field(init=False, repr=False)

    def __post_init__(self):
        if not 0 <= self.magnitude_index < self.header.magnitude_count:
            raise ValueError(
                f"magnitude index {self.magnitude_index} outside "
                f"0..{self.header.magnitude_count - 1}"
            )
        if self.header.star_id is StarIdKind.UNKNOWN:
            raise InvalidHeaderError("invalid header: unknown star id kind")
        if self.header.proper_motion is ProperMotionKind.UNKNOWN:
            raise InvalidHeaderError("invalid header: unknown proper motion kind")
        try:
            dtype = np.dtype(_record_fields(self.header))
        except (TypeError, ValueError) as e:
            raise InvalidHeaderError(f"invalid header, record layout: {e}") from e
        object.__setattr__(self, "dtype", dtype)

    @classmethod
    def for_header(cls, header: Header, magnitude_index: int | None = None) -> "RecordLayout":
        if magnitude_index is None:
            magnitude_index = header.magnitude_count - 1
        return cls(header, magnitude_index)

    @property
    def width(self) -> int:
        """Bytes actually decoded per record; at most the header stride."""
        return self.dtype.itemsize

    @property
    def byte_order(self) -> ByteOrder:
        return self.header.byte_order


def _text(raw: np.void) -> str:
    return raw.tobytes().decode("latin-1")


def parse_record(layout: RecordLayout, data: bytes, index: int = 0) -> StarRecord:
    """Decode one record from the start of `data`.

    Raises:
        RecordDecodeError: `data` is shorter than the fields the layout needs.
    """
    if len(data) < layout.width:
        raise RecordDecodeError(
            f"record {index}: need {layout.width} bytes, got {len(data)}"
        )
    row = np.frombuffer(data, dtype=layout.dtype, count=1)[0]
    names = layout.dtype.names

    proper_motion = None
    if "ra_rate" in names:
        proper_motion = ProperMotion(float(row["ra_rate"]), float(row["dec_rate"]))

    name = ""
    if "name" in names:
        name = row["name"].tobytes().split(b"\0", 1)[0].decode("latin-1")

    magnitude = np.float32(row["magnitudes"][layout.magnitude_index]) / MAGNITUDE_SCALE
    return StarRecord(
        right_ascension=float(row["right_ascension"]),
        declination=float(row["declination"]),
        magnitude=float(magnitude),
        spectral_type=_text(row["spectral_type"]),
        name=name,
        identifier=float(row["identifier"]) if "identifier" in names else 0.0,
        proper_motion=proper_motion,
        radial_velocity=float(row["radial_velocity"]) if "radial_velocity" in names else None,
        index=index,
    )
