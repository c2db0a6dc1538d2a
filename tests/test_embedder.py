import base64
import io

import piexif
import pytest
from PIL import Image

from photagg.metadata_io.embedder import embed_metadata, embed_metadata_base64, final_keywords
from photagg.metadata_io.encoders import decode_ucs2, to_ucs2, to_user_comment
from photagg.metadata_io.exif_block import (
    TAG_XP_SUBJECT,
    PiexifCodec,
    build_exif_block,
    empty_exif_block,
    load_exif_codec,
)
from photagg.metadata_io.jpeg_segments import find_xmp_packet, iter_app_segments
from photagg.metadata_io.reader import read_embedded_metadata


class ExplodingCodec:
    def dump(self, block):
        raise RuntimeError("codec exploded")

    def insert(self, exif_bytes, jpeg):
        raise AssertionError("not reached")


class RecordingCodec:
    def __init__(self):
        self.blocks = []

    def dump(self, block):
        self.blocks.append(block)
        return piexif.dump(block)

    def insert(self, exif_bytes, jpeg):
        return PiexifCodec().insert(exif_bytes, jpeg)


def test_final_keywords_appends_category():
    assert final_keywords(["a", "b"], "Food") == ["a", "b", "Food"]
    assert final_keywords(["a"], None) == ["a"]
    assert final_keywords(["a"], "") == ["a"]


def test_empty_block_has_empty_groups():
    block = empty_exif_block()
    assert block["0th"] == {} and block["Exif"] == {} and block["GPS"] == {} and block["1st"] == {}
    assert block["thumbnail"] is None


def test_build_exif_block_fields():
    block = build_exif_block("Title", "Desc", ["k1", "k2", "Nature"], "Photagg AI")
    zeroth = block["0th"]
    assert zeroth[piexif.ImageIFD.ImageDescription] == b"Desc"
    assert zeroth[piexif.ImageIFD.XPTitle] == to_ucs2("Title")
    assert zeroth[piexif.ImageIFD.XPComment] == to_ucs2("Desc")
    assert zeroth[piexif.ImageIFD.XPKeywords] == to_ucs2("k1;k2;Nature")
    assert zeroth[TAG_XP_SUBJECT] == to_ucs2("Desc")
    assert TAG_XP_SUBJECT == 0x9C9F
    assert zeroth[piexif.ImageIFD.Software] == "Photagg AI"
    assert block["Exif"][piexif.ExifIFD.UserComment] == to_user_comment("Desc")
    assert block["GPS"] == {} and block["1st"] == {}


def test_embed_roundtrip_exif_and_xmp(jpeg_bytes, sample_metadata):
    m = sample_metadata
    out = embed_metadata(jpeg_bytes, m.title, m.description, m.keywords, m.category)
    assert out != jpeg_bytes

    exif = piexif.load(out)
    assert decode_ucs2(exif["0th"][piexif.ImageIFD.XPTitle]) == m.title
    assert decode_ucs2(exif["0th"][piexif.ImageIFD.XPKeywords]) == "car;red;vintage;street;Travel"
    assert exif["0th"][piexif.ImageIFD.Software] == b"Photagg AI"

    xml = find_xmp_packet(out)
    assert xml is not None and "<photoshop:Category>Travel</photoshop:Category>" in xml
    assert "<rdf:li>Travel</rdf:li>" in xml
    assert "&quot;quiet&quot;" in xml

    # still decodable
    with Image.open(io.BytesIO(out)) as img:
        img.load()
        assert img.size == (16, 12)


def test_xmp_segment_follows_exif_segment(jpeg_bytes):
    out = embed_metadata(jpeg_bytes, "t", "d", ["k"])
    segs = list(iter_app_segments(out))
    exif_seg = next(s for s in segs if out[s.offset + 4:s.offset + 10] == b"Exif\x00\x00")
    xmp_seg = next(s for s in segs if out[s.offset + 4:].startswith(b"http://ns.adobe.com/xap/1.0/\x00"))
    assert xmp_seg.offset >= exif_seg.end


def test_reader_reports_embedded_fields(jpeg_bytes, sample_metadata):
    m = sample_metadata
    out = embed_metadata(jpeg_bytes, m.title, m.description, m.keywords, m.category)
    rec = read_embedded_metadata(out)
    assert rec["IFD0:XPTitle"] == m.title
    assert rec["IFD0:XPComment"] == m.description
    assert rec["IFD0:XPSubject"] == m.description
    assert rec["IFD0:ImageDescription"] == m.description
    assert rec["ExifIFD:UserComment"] == m.description
    assert rec["XMP-dc:title"] == m.title
    assert rec["XMP-dc:subject"] == "car; red; vintage; street; Travel"
    assert rec["XMP-photoshop:Category"] == "Travel"


def test_non_jpeg_type_is_byte_identical(png_bytes):
    out = embed_metadata(png_bytes, "t", "d", ["k"], "Food", mime_type="image/png")
    assert out is png_bytes


def test_jpeg_bytes_with_non_jpeg_declared_type_untouched(jpeg_bytes):
    out = embed_metadata(jpeg_bytes, "t", "d", ["k"], mime_type="image/webp")
    assert out == jpeg_bytes


def test_image_jpg_alias_is_embedded(jpeg_bytes):
    out = embed_metadata(jpeg_bytes, "t", "d", ["k"], mime_type="image/jpg")
    assert find_xmp_packet(out) is not None


def test_missing_codec_is_noop(jpeg_bytes):
    assert embed_metadata(jpeg_bytes, "t", "d", ["k"], codec=None) is jpeg_bytes


def test_codec_failure_returns_original(jpeg_bytes):
    assert embed_metadata(jpeg_bytes, "t", "d", ["k"], codec=ExplodingCodec()) is jpeg_bytes


def test_malformed_container_returns_original():
    garbage = b"\xff\xd8\x00\x01garbage"
    assert embed_metadata(garbage, "t", "d", ["k"]) is garbage
    not_jpeg = b"definitely not an image"
    assert embed_metadata(not_jpeg, "t", "d", ["k"]) is not_jpeg


def test_non_latin_description_survives(jpeg_bytes):
    out = embed_metadata(jpeg_bytes, "東京タワー", "夜の東京タワー", ["東京"], "Travel")
    rec = read_embedded_metadata(out)
    assert rec["IFD0:XPTitle"] == "東京タワー"
    assert rec["IFD0:ImageDescription"] == "夜の東京タワー"
    assert rec["XMP-dc:description"] == "夜の東京タワー"


def test_codec_receives_category_in_keywords(jpeg_bytes):
    codec = RecordingCodec()
    embed_metadata(jpeg_bytes, "t", "d", ["a"], "Animals", codec=codec)
    (block,) = codec.blocks
    assert decode_ucs2(block["0th"][piexif.ImageIFD.XPKeywords]) == "a;Animals"


def test_load_exif_codec_returns_piexif_codec():
    assert isinstance(load_exif_codec(), PiexifCodec)


def test_base64_transport(jpeg_bytes):
    payload = "data:image/jpeg;base64," + base64.b64encode(jpeg_bytes).decode()
    out = embed_metadata_base64(payload, "t", "d", ["k"])
    raw = base64.b64decode(out)
    assert find_xmp_packet(raw) is not None


def test_base64_failure_strips_prefix(jpeg_bytes):
    clean = base64.b64encode(jpeg_bytes).decode()
    out = embed_metadata_base64("data:image/jpeg;base64," + clean, "t", "d", ["k"], codec=None)
    assert out == clean
    assert embed_metadata_base64("%%%not-base64", "t", "d", []) == "%%%not-base64"


@pytest.mark.parametrize("mime", ["IMAGE/JPEG", " image/jpeg "])
def test_mime_type_match_is_case_insensitive(jpeg_bytes, mime):
    out = embed_metadata(jpeg_bytes, "t", "d", [], mime_type=mime)
    assert find_xmp_packet(out) is not None
