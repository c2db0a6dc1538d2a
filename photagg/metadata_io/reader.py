# -*- coding: utf-8 -*-
"""
读取已嵌入的元数据：EXIF 经 piexif 解码，XMP 从 APP1 段中取出后用 ElementTree 解析。
输出为 exiftool -G1 风格的平坦字典（如 "IFD0:XPTitle"、"XMP-dc:title"），便于核对导出结果。
"""
from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any

from photagg.log import get_logger
from photagg.metadata_io.encoders import USER_COMMENT_ASCII_PREFIX, decode_ucs2
from photagg.metadata_io.exif_block import (
    TAG_IMAGE_DESCRIPTION,
    TAG_SOFTWARE,
    TAG_USER_COMMENT,
    TAG_XP_COMMENT,
    TAG_XP_KEYWORDS,
    TAG_XP_SUBJECT,
    TAG_XP_TITLE,
    load_exif_codec,
)
from photagg.metadata_io.jpeg_segments import find_xmp_packet

_log = get_logger("reader")

_NS_PREFIXES: dict[str, str] = {
    "http://www.w3.org/1999/02/22-rdf-syntax-ns#": "rdf",
    "http://purl.org/dc/elements/1.1/": "dc",
    "http://ns.adobe.com/xap/1.0/": "xmp",
    "http://ns.adobe.com/photoshop/1.0/": "photoshop",
    "http://ns.adobe.com/exif/1.0/": "exif",
    "http://ns.adobe.com/tiff/1.0/": "tiff",
    "http://iptc.org/std/Iptc4xmpCore/1.0/xmlns/": "Iptc4xmpCore",
    "http://ns.adobe.com/lightroom/1.0/": "lr",
}

_RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"

_XP_TAGS = {
    TAG_XP_TITLE: "IFD0:XPTitle",
    TAG_XP_COMMENT: "IFD0:XPComment",
    TAG_XP_KEYWORDS: "IFD0:XPKeywords",
    TAG_XP_SUBJECT: "IFD0:XPSubject",
}


def _ns_to_prefix(ns_url: str) -> str:
    """将命名空间 URL 转为短前缀，优先用已知映射。"""
    if ns_url in _NS_PREFIXES:
        return _NS_PREFIXES[ns_url]
    stripped = ns_url.rstrip("/").rstrip("#")
    for part in reversed(stripped.split("/")):
        part = part.strip()
        if part and not part.startswith("http") and len(part) <= 30:
            return part
    return "xmp"


def _extract_text_value(element) -> str | None:
    """rdf:Alt / rdf:Seq / rdf:Bag 容器按 "; " 拼接各 rdf:li，否则取直接文本。"""
    for container_tag in ("Alt", "Seq", "Bag"):
        container = element.find(f"{{{_RDF_NS}}}{container_tag}")
        if container is not None:
            texts = [(li.text or "").strip() for li in container.findall(f"{{{_RDF_NS}}}li")]
            texts = [t for t in texts if t]
            return "; ".join(texts) if texts else None
    if element.text and element.text.strip():
        return element.text.strip()
    return None


def parse_xmp_packet(xml_text: str) -> list[tuple[str, str, str]]:
    """
    解析 XMP 文本，返回 [(group, tag_name, value), ...]，group 形如 "XMP-dc"。
    XML 不合法时返回空列表。
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError:
        return []

    results: list[tuple[str, str, str]] = []
    for desc in root.iter(f"{{{_RDF_NS}}}Description"):
        for attr_key, attr_val in desc.attrib.items():
            if not attr_key.startswith("{"):
                continue
            ns_url, local = attr_key[1:].split("}", 1)
            if ns_url == _RDF_NS or not (attr_val or "").strip():
                continue
            results.append((f"XMP-{_ns_to_prefix(ns_url)}", local, attr_val.strip()))
        for child in desc:
            if not child.tag.startswith("{"):
                continue
            ns_url, local = child.tag[1:].split("}", 1)
            if ns_url == _RDF_NS:
                continue
            value = _extract_text_value(child)
            if value:
                results.append((f"XMP-{_ns_to_prefix(ns_url)}", local, value))
    return results


def _as_bytes(value) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, int):
        return bytes((value,))
    if isinstance(value, (tuple, list)):
        return bytes(value)
    return str(value).encode("utf-8")


def _exif_to_flat(block: dict) -> dict[str, Any]:
    rec: dict[str, Any] = {}
    zeroth = block.get("0th") or {}
    exif = block.get("Exif") or {}
    for tag_id, key in _XP_TAGS.items():
        if tag_id in zeroth:
            rec[key] = decode_ucs2(zeroth[tag_id])
    if TAG_IMAGE_DESCRIPTION in zeroth:
        rec["IFD0:ImageDescription"] = _as_bytes(zeroth[TAG_IMAGE_DESCRIPTION]).decode("utf-8", errors="replace")
    if TAG_SOFTWARE in zeroth:
        rec["IFD0:Software"] = _as_bytes(zeroth[TAG_SOFTWARE]).decode("utf-8", errors="replace")
    if TAG_USER_COMMENT in exif:
        raw = _as_bytes(exif[TAG_USER_COMMENT])
        if raw.startswith(USER_COMMENT_ASCII_PREFIX):
            raw = raw[len(USER_COMMENT_ASCII_PREFIX):]
        rec["ExifIFD:UserComment"] = raw.decode("latin-1")
    return rec


def read_embedded_metadata(data: bytes, codec=None) -> dict[str, Any]:
    """
    读取 JPEG 字节中的 EXIF + XMP 元数据。
    codec 为空时自动探测 piexif；不可用或 EXIF 解码失败时只返回 XMP 部分。
    """
    rec: dict[str, Any] = {}
    codec = codec if codec is not None else load_exif_codec()
    if codec is not None and hasattr(codec, "load"):
        try:
            rec.update(_exif_to_flat(codec.load(data)))
        except Exception:
            _log.debug("EXIF decode failed, reading XMP only")
    xml_text = find_xmp_packet(data)
    if xml_text:
        for group, name, value in parse_xmp_packet(xml_text):
            rec[f"{group}:{name}"] = value
    return rec
