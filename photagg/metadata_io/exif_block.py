# -*- coding: utf-8 -*-
"""
EXIF 块构造与外部 EXIF 编解码器（piexif）的注入。

piexif 在运行时是可选依赖：load_exif_codec() 在其不可用时返回 None，
由调用方据此降级为不嵌入，而不是在导入阶段失败。
"""
from __future__ import annotations

import importlib
import io
from typing import Any, Protocol

from photagg.metadata_io.encoders import to_ucs2, to_user_comment

# 0th IFD
TAG_IMAGE_DESCRIPTION = 270
TAG_SOFTWARE = 305
TAG_XP_TITLE = 40091
TAG_XP_COMMENT = 40092
TAG_XP_KEYWORDS = 40094
TAG_XP_SUBJECT = 40095  # 0x9C9F
# Exif IFD
TAG_USER_COMMENT = 37510

IFD_NAMES = ("0th", "Exif", "GPS", "1st")

ExifBlock = dict[str, Any]


class ExifCodec(Protocol):
    """EXIF 块 <-> 字节，以及把 EXIF 字节写入 JPEG 容器。"""

    def dump(self, block: ExifBlock) -> bytes:
        ...

    def insert(self, exif_bytes: bytes, jpeg: bytes) -> bytes:
        ...


class PiexifCodec:
    """基于 piexif 的实现：insert 会替换已有 Exif 段（或 JFIF 段），否则插在 SOI 之后。"""

    def __init__(self, piexif_module=None) -> None:
        self._piexif = piexif_module if piexif_module is not None else importlib.import_module("piexif")

    def dump(self, block: ExifBlock) -> bytes:
        return self._piexif.dump(block)

    def insert(self, exif_bytes: bytes, jpeg: bytes) -> bytes:
        out = io.BytesIO()
        self._piexif.insert(exif_bytes, bytes(jpeg), out)
        return out.getvalue()

    def load(self, jpeg: bytes) -> ExifBlock:
        return self._piexif.load(bytes(jpeg))


def load_exif_codec() -> PiexifCodec | None:
    """piexif 可导入时返回 PiexifCodec，否则返回 None。"""
    try:
        return PiexifCodec()
    except ImportError:
        return None


def empty_exif_block() -> ExifBlock:
    """未设置的 IFD 一律为空 dict（不是 None），thumbnail 为 None。"""
    block: ExifBlock = {name: {} for name in IFD_NAMES}
    block["thumbnail"] = None
    return block


def build_exif_block(
    title: str,
    description: str,
    keywords: list[str],
    software: str,
) -> ExifBlock:
    """
    keywords 应已包含分类（由调用方追加）。
    ImageDescription 以 UTF-8 字节写入：piexif 对 str 的 ASCII 字段按 latin-1 编码，非拉丁字符会直接失败。
    """
    block = empty_exif_block()
    block["0th"] = {
        TAG_IMAGE_DESCRIPTION: (description or "").encode("utf-8"),
        TAG_XP_TITLE: to_ucs2(title),
        TAG_XP_COMMENT: to_ucs2(description),
        TAG_XP_KEYWORDS: to_ucs2(";".join(keywords or [])),
        TAG_XP_SUBJECT: to_ucs2(description),
        TAG_SOFTWARE: software,
    }
    block["Exif"] = {
        TAG_USER_COMMENT: to_user_comment(description),
    }
    return block
