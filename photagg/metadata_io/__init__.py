# -*- coding: utf-8 -*-
"""
metadata_io：JPEG 元数据嵌入（EXIF 经 piexif + 手工拼接 XMP APP1 段）与回读。
"""
from __future__ import annotations

from photagg.metadata_io.embedder import (
    AUTO_CODEC,
    DEFAULT_SOFTWARE,
    embed_item,
    embed_metadata,
    embed_metadata_base64,
    final_keywords,
)
from photagg.metadata_io.encoders import decode_ucs2, escape_xml, to_ucs2, to_user_comment
from photagg.metadata_io.exif_block import (
    ExifCodec,
    PiexifCodec,
    build_exif_block,
    empty_exif_block,
    load_exif_codec,
)
from photagg.metadata_io.jpeg_segments import (
    MarkerSegment,
    build_xmp_segment,
    find_xmp_insert_offset,
    find_xmp_packet,
    insert_xmp,
    iter_app_segments,
)
from photagg.metadata_io.reader import parse_xmp_packet, read_embedded_metadata
from photagg.metadata_io.xmp_packet import build_xmp_packet

__all__ = [
    "AUTO_CODEC",
    "DEFAULT_SOFTWARE",
    "embed_item",
    "embed_metadata",
    "embed_metadata_base64",
    "final_keywords",
    "decode_ucs2",
    "escape_xml",
    "to_ucs2",
    "to_user_comment",
    "ExifCodec",
    "PiexifCodec",
    "build_exif_block",
    "empty_exif_block",
    "load_exif_codec",
    "MarkerSegment",
    "build_xmp_segment",
    "find_xmp_insert_offset",
    "find_xmp_packet",
    "insert_xmp",
    "iter_app_segments",
    "parse_xmp_packet",
    "read_embedded_metadata",
    "build_xmp_packet",
]
