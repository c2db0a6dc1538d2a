# -*- coding: utf-8 -*-
"""
元数据嵌入：先由 EXIF 编解码器写入 EXIF 段，再在其后拼入 XMP 段。

嵌入始终是尽力而为：非 JPEG、编解码器缺失、容器损坏、编解码器异常，
一律原样返回输入字节并记录日志，绝不向导出流程抛出异常。
"""
from __future__ import annotations

import base64
import binascii

from photagg.log import get_logger
from photagg.metadata_io.exif_block import ExifCodec, build_exif_block, load_exif_codec
from photagg.metadata_io.jpeg_segments import insert_xmp
from photagg.metadata_io.xmp_packet import build_xmp_packet
from photagg.models import PhotoItem, is_jpeg_mime

DEFAULT_SOFTWARE = "Photagg AI"

_log = get_logger("embedder")

# 未显式传入 codec 时按需探测 piexif；显式传 None 表示编解码器不可用
AUTO_CODEC = object()


def final_keywords(keywords: list[str], category: str | None) -> list[str]:
    """嵌入用关键词：有分类时追加到末尾。"""
    out = list(keywords or [])
    if category:
        out.append(category)
    return out


def embed_metadata(
    data: bytes,
    title: str,
    description: str,
    keywords: list[str],
    category: str | None = None,
    *,
    mime_type: str = "image/jpeg",
    codec: ExifCodec | None | object = AUTO_CODEC,
    software: str = DEFAULT_SOFTWARE,
) -> bytes:
    """返回嵌入了 EXIF + XMP 的新字节；任何失败都返回原始 data。"""
    if not is_jpeg_mime(mime_type):
        return data
    if codec is AUTO_CODEC:
        codec = load_exif_codec()
    if codec is None:
        _log.warning("EXIF codec unavailable, metadata not embedded")
        return data

    try:
        keywords_out = final_keywords(keywords, category)
        block = build_exif_block(title, description, keywords_out, software)
        exif_bytes = codec.dump(block)
        with_exif = codec.insert(exif_bytes, data)
        xmp_xml = build_xmp_packet(title, description, keywords_out, category)
        return insert_xmp(with_exif, xmp_xml)
    except Exception:
        _log.exception("embedding metadata failed, keeping original bytes")
        return data


def embed_item(item: PhotoItem, *, codec=AUTO_CODEC, software: str = DEFAULT_SOFTWARE) -> bytes:
    """重新读取条目原始字节；仅声明类型为 JPEG 且已有元数据时嵌入。"""
    data = item.read_bytes()
    meta = item.data
    if meta is None or not item.is_jpeg:
        return data
    return embed_metadata(
        data,
        meta.title,
        meta.description,
        meta.keywords,
        meta.category,
        mime_type=item.mime_type,
        codec=codec,
        software=software,
    )


def _strip_data_url(payload: str) -> str:
    return payload.split(",", 1)[1] if "," in payload else payload


def embed_metadata_base64(
    payload: str,
    title: str,
    description: str,
    keywords: list[str],
    category: str | None = None,
    **kwargs,
) -> str:
    """
    base64 传输形式的嵌入。payload 可带 "data:image/jpeg;base64," 前缀；
    返回不带前缀的 base64，失败时返回去掉前缀的原始 base64。
    """
    clean = _strip_data_url(payload)
    try:
        raw = base64.b64decode(clean, validate=True)
    except (binascii.Error, ValueError):
        _log.exception("invalid base64 payload, metadata not embedded")
        return clean
    embedded = embed_metadata(raw, title, description, keywords, category, **kwargs)
    if embedded is raw:
        return clean
    return base64.b64encode(embedded).decode("ascii")
