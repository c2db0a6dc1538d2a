# -*- coding: utf-8 -*-
"""
JPEG 标记段扫描与 XMP APP1 段拼接。

只在字节序列上操作（bytes / bytearray），不经过任何文本解码。
插入点：SOI 之后，跳过紧随其后的 APP0(JFIF) / APP1(Exif、已有 XMP) 段。
"""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

SOI = b"\xff\xd8"
MARKER_PREFIX = 0xFF
APP0 = 0xE0
APP1 = 0xE1
XMP_SIGNATURE = b"http://ns.adobe.com/xap/1.0/\x00"
MAX_SEGMENT_LENGTH = 0xFFFF

_SKIPPABLE_MARKERS = (APP0, APP1)


@dataclass(frozen=True)
class MarkerSegment:
    """容器内的一个标记段：[offset, offset + length)，length 含 2 字节标记本身。"""

    marker: int
    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


def _require_soi(data: bytes) -> None:
    if data[:2] != SOI:
        raise ValueError("not a JPEG stream (missing SOI marker)")


def iter_app_segments(data: bytes) -> Iterator[MarkerSegment]:
    """
    从偏移 2 开始依次产出 SOI 后连续的 APP0 / APP1 段。
    遇到其他标记、非标记字节或长度字段不完整时停止；段长度越界时同样停止，不产出该段。
    """
    _require_soi(data)
    offset = 2
    size = len(data)
    while offset + 4 <= size:
        if data[offset] != MARKER_PREFIX or data[offset + 1] not in _SKIPPABLE_MARKERS:
            break
        declared = (data[offset + 2] << 8) | data[offset + 3]
        seg_len = 2 + declared
        if declared < 2 or offset + seg_len > size:
            break
        yield MarkerSegment(marker=data[offset + 1], offset=offset, length=seg_len)
        offset += seg_len


def find_xmp_insert_offset(data: bytes) -> int:
    """返回 XMP 段的插入偏移；扫描一开始就停下时为 2（紧跟 SOI）。"""
    offset = 2
    for seg in iter_app_segments(data):
        offset = seg.end
    return offset


def build_xmp_segment(xmp_xml: str) -> bytes:
    """FF E1 + 大端 2 字节长度（2 + 负载长度）+ 负载（签名 + UTF-8 XML）。"""
    payload = XMP_SIGNATURE + xmp_xml.encode("utf-8")
    length = 2 + len(payload)
    if length > MAX_SEGMENT_LENGTH:
        raise ValueError(f"XMP packet too large for one APP1 segment ({length} bytes)")
    return bytes((MARKER_PREFIX, APP1)) + length.to_bytes(2, "big") + payload


def insert_xmp(data: bytes, xmp_xml: str) -> bytes:
    """在计算出的偏移处拼入 XMP 段，返回新的字节序列；原数据不修改。"""
    data = bytes(data)
    segment = build_xmp_segment(xmp_xml)
    offset = find_xmp_insert_offset(data)
    return data[:offset] + segment + data[offset:]


def find_xmp_packet(data: bytes) -> str | None:
    """在 SOI 后的 APP1 段中查找 XMP 负载，返回 XML 文本；找不到返回 None。"""
    if data[:2] != SOI:
        return None
    for seg in iter_app_segments(data):
        if seg.marker != APP1:
            continue
        body = data[seg.offset + 4:seg.end]
        if body.startswith(XMP_SIGNATURE):
            return body[len(XMP_SIGNATURE):].decode("utf-8", errors="replace")
    return None
