import struct

import pytest


def pack_header(
    star_count=2,
    star_id=-5,
    proper_motion=0,
    magnitude_count=1,
    bytes_per_record=28,
    order="<",
):
    """28-byte catalog header; pass negative counts for J2000."""
    return struct.pack(f"{order}7i", 0, star_count, star_id, proper_motion, 0,
                       magnitude_count, bytes_per_record)


def pack_record(
    ra,
    dec,
    magnitudes=(450,),
    spectral=b"A0",
    identifier=None,
    integer_id=False,
    proper_motion=None,
    radial_velocity=None,
    name=b"",
    order="<",
    size=None,
):
    """One star record laid out the way the header flags describe it."""
    parts = []
    if identifier is not None:
        parts.append(struct.pack(f"{order}{'i' if integer_id else 'f'}", identifier))
    parts.append(struct.pack(f"{order}dd", ra, dec))
    parts.append(spectral)
    parts.append(struct.pack(f"{order}{len(magnitudes)}h", *magnitudes))
    if proper_motion is not None:
        parts.append(struct.pack(f"{order}ff", *proper_motion))
    if radial_velocity is not None:
        parts.append(struct.pack(f"{order}d", radial_velocity))
    parts.append(name)
    record = b"".join(parts)
    if size is not None:
        record = record.ljust(size, b"\0")
    return record


@pytest.fixture
def header_bytes():
    return pack_header


@pytest.fixture
def record_bytes():
    return pack_record


@pytest.fixture
def two_star_catalog():
    """J2000, no ids, 5-byte names, one magnitude, 28-byte records."""
    return (
        pack_header(star_count=-2, star_id=-5, proper_motion=0, magnitude_count=1,
                    bytes_per_record=28)
        + pack_record(1.0, 0.5, spectral=b"B3", name=b"Star1", size=28)
        + pack_record(2.0, -0.25, spectral=b"K1", name=b"Star2", size=28)
    )


@pytest.fixture
def catalog_file(tmp_path, two_star_catalog):
    path = tmp_path / "bsc5"
    path.write_bytes(two_star_catalog)
    return path
