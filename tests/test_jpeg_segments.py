import pytest

from photagg.metadata_io.jpeg_segments import (
    XMP_SIGNATURE,
    MarkerSegment,
    build_xmp_segment,
    find_xmp_insert_offset,
    find_xmp_packet,
    insert_xmp,
    iter_app_segments,
)

SOI = b"\xff\xd8"
EOI = b"\xff\xd9"
XML = "<x:xmpmeta/>"


def app_segment(marker: int, total_len: int) -> bytes:
    """APPn segment whose total size (marker included) is total_len bytes."""
    declared = total_len - 2
    return bytes((0xFF, marker)) + declared.to_bytes(2, "big") + b"\x00" * (declared - 2)


def test_minimal_jpeg_inserts_at_offset_2():
    data = SOI + EOI
    out = insert_xmp(data, XML)
    assert find_xmp_insert_offset(data) == 2
    assert out[2:4] == b"\xff\xe1"
    assert out[:2] == SOI
    assert out.endswith(EOI)


def test_after_20_byte_app0_inserts_at_22():
    app0 = app_segment(0xE0, 20)
    assert len(app0) == 20
    data = SOI + app0 + b"\xff\xdb\x00\x04\x00\x00" + EOI
    out = insert_xmp(data, XML)
    assert find_xmp_insert_offset(data) == 22
    assert out[:22] == data[:22]
    assert out[22:24] == b"\xff\xe1"


def test_skips_consecutive_app0_and_app1():
    data = SOI + app_segment(0xE0, 18) + app_segment(0xE1, 40) + b"\xff\xdb\x00\x04\x00\x00" + EOI
    segs = list(iter_app_segments(data))
    assert segs == [MarkerSegment(0xE0, 2, 18), MarkerSegment(0xE1, 20, 40)]
    assert find_xmp_insert_offset(data) == 60


def test_stops_at_other_marker_or_non_marker_byte():
    # APP2 right after SOI: insert early
    data = SOI + app_segment(0xE2, 10) + app_segment(0xE0, 18) + EOI
    assert find_xmp_insert_offset(data) == 2
    # garbage right after SOI
    assert find_xmp_insert_offset(SOI + b"\x00\x01\x02\x03") == 2


def test_truncated_segment_stops_scan():
    data = SOI + app_segment(0xE0, 18) + b"\xff\xe1\x10\x00" + b"\x00" * 4
    assert find_xmp_insert_offset(data) == 20


def test_segment_layout_and_length_field():
    seg = build_xmp_segment(XML)
    payload = XMP_SIGNATURE + XML.encode("utf-8")
    assert seg[:2] == b"\xff\xe1"
    assert int.from_bytes(seg[2:4], "big") == 2 + len(payload)
    assert seg[4:] == payload


def test_non_ascii_xml_length_counts_bytes():
    xml = "<t>日本語</t>"
    seg = build_xmp_segment(xml)
    assert int.from_bytes(seg[2:4], "big") == 2 + len(XMP_SIGNATURE) + len(xml.encode("utf-8"))


def test_oversized_packet_rejected():
    with pytest.raises(ValueError):
        build_xmp_segment("x" * 70000)


def test_insert_requires_soi():
    with pytest.raises(ValueError):
        insert_xmp(b"\x89PNG\r\n\x1a\n", XML)


def test_insert_preserves_prefix_and_suffix():
    data = SOI + app_segment(0xE0, 20) + b"\xff\xdb\x00\x04\xaa\xbb" + EOI
    out = insert_xmp(data, XML)
    seg = build_xmp_segment(XML)
    assert out == data[:22] + seg + data[22:]


def test_find_xmp_packet_after_insert():
    data = SOI + app_segment(0xE0, 20) + EOI
    assert find_xmp_packet(data) is None
    out = insert_xmp(data, XML)
    assert find_xmp_packet(out) == XML
