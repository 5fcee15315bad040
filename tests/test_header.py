import pytest

from conftest import pack_header
from starcat.decoder import ByteOrder
from starcat.errors import EpochMismatchError, InvalidHeaderError, MissingHeaderError
from starcat.header import (
    HEADER_SIZE,
    Epoch,
    ProperMotionKind,
    StarIdKind,
    detect_byte_order,
    parse_header,
)


def test_two_star_header(two_star_catalog):
    header = parse_header(two_star_catalog)
    assert header.star_count == 2
    assert header.star_id is StarIdKind.NONE
    assert header.star_name_length == 5
    assert header.has_names
    assert header.proper_motion is ProperMotionKind.NONE
    assert header.magnitude_count == 1
    assert header.bytes_per_record == 28
    assert header.epoch is Epoch.J2000
    assert header.byte_order is ByteOrder.LITTLE
    assert header.data_size == HEADER_SIZE + 2 * 28


@pytest.mark.parametrize("magnitudes", range(1, 11))
@pytest.mark.parametrize("sign", [1, -1])
def test_detects_little_endian(magnitudes, sign):
    data = pack_header(star_count=9110, star_id=1, proper_motion=1,
                       magnitude_count=sign * magnitudes, bytes_per_record=32, order="<")
    header = parse_header(data)
    assert header.byte_order is ByteOrder.LITTLE
    assert header == parse_header(data, byte_order=ByteOrder.LITTLE)
    assert header.magnitude_count == magnitudes


@pytest.mark.parametrize("magnitudes", range(1, 11))
def test_detects_big_endian(magnitudes):
    data = pack_header(star_count=9110, star_id=1, proper_motion=1,
                       magnitude_count=magnitudes, bytes_per_record=32, order=">")
    header = parse_header(data)
    assert header.byte_order is ByteOrder.BIG
    assert header == parse_header(data, byte_order=ByteOrder.BIG)
    assert header.star_count == 9110
    assert header.bytes_per_record == 32


def test_implausible_in_both_orders():
    data = pack_header(magnitude_count=0x01000100, order="<")
    with pytest.raises(InvalidHeaderError):
        detect_byte_order(data)
    with pytest.raises(InvalidHeaderError):
        parse_header(data)


def test_forced_big_on_little_endian_file():
    # magnitude count 1 is 01 00 00 00, read big-endian as 16777216
    data = pack_header(magnitude_count=1, order="<")
    assert data[20:24] == b"\x01\x00\x00\x00"
    with pytest.raises(InvalidHeaderError, match="little-endian"):
        parse_header(data, byte_order=ByteOrder.BIG)


def test_forced_little_on_big_endian_file():
    data = pack_header(magnitude_count=3, order=">")
    with pytest.raises(InvalidHeaderError, match="big-endian"):
        parse_header(data, byte_order=ByteOrder.LITTLE)


@pytest.mark.parametrize("star_count, magnitude_count, epoch", [
    (5, 1, Epoch.B1950),
    (-5, 1, Epoch.J2000),
    (5, -1, Epoch.J2000),
    (-5, -1, Epoch.J2000),
])
def test_epoch_and_star_count(star_count, magnitude_count, epoch):
    header = parse_header(pack_header(star_count=star_count, magnitude_count=magnitude_count))
    assert header.epoch is epoch
    assert header.star_count == abs(star_count)
    assert header.magnitude_count == abs(magnitude_count)


def test_asserted_epoch():
    j2000 = pack_header(star_count=-5)
    b1950 = pack_header(star_count=5)
    assert parse_header(j2000, epoch=Epoch.J2000).epoch is Epoch.J2000
    assert parse_header(b1950, epoch=Epoch.B1950).epoch is Epoch.B1950
    with pytest.raises(EpochMismatchError, match="expected B1950 epoch but found J2000"):
        parse_header(j2000, epoch=Epoch.B1950)
    with pytest.raises(EpochMismatchError, match="expected J2000 epoch but found B1950"):
        parse_header(b1950, epoch=Epoch.J2000)


@pytest.mark.parametrize("raw, kind", [
    (0, StarIdKind.NONE),
    (1, StarIdKind.CATALOG),
    (2, StarIdKind.GSC),
    (3, StarIdKind.TYCHO),
    (4, StarIdKind.INTEGER),
])
def test_star_id_kinds(raw, kind):
    header = parse_header(pack_header(star_id=raw))
    assert header.star_id is kind
    assert header.star_name_length == 0
    assert not header.has_names


def test_proper_motion_kinds():
    assert parse_header(pack_header(proper_motion=2)).proper_motion is ProperMotionKind.RADIAL_VELOCITY


def test_unknown_kinds_still_parse():
    header = parse_header(pack_header(star_id=7, proper_motion=3))
    assert header.star_id is StarIdKind.UNKNOWN
    assert header.proper_motion is ProperMotionKind.UNKNOWN
    assert header.star_name_length == 0
    assert parse_header(pack_header(proper_motion=-2)).proper_motion is ProperMotionKind.UNKNOWN


def test_short_header():
    with pytest.raises(MissingHeaderError):
        parse_header(pack_header()[:HEADER_SIZE - 1])
