# -*- coding: utf-8 -*-
"""
元数据字段的字节编码：Windows XP* 标签（UCS-2 LE + 双零结尾）、
EXIF UserComment（ASCII 前缀）与 XMP 文本的 XML 转义。
"""
from __future__ import annotations

from xml.sax.saxutils import escape

USER_COMMENT_ASCII_PREFIX = b"ASCII\x00\x00\x00"

_XML_EXTRA_ENTITIES = {"'": "&apos;", '"': "&quot;"}


def to_ucs2(text: str) -> bytes:
    """
    按 UTF-16 码元逐个输出小端两字节，末尾追加 b"\\x00\\x00"。
    BMP 以外的字符拆成两个代理码元分别写入，不做合并；孤立代理项原样写入。
    """
    return (text or "").encode("utf-16-le", errors="surrogatepass") + b"\x00\x00"


def decode_ucs2(value) -> str:
    """to_ucs2 的逆过程。piexif 读出的 BYTE 标签可能是 int 元组，这里一并接受。"""
    if value is None:
        return ""
    if isinstance(value, int):
        value = (value,)
    raw = bytes(value)
    if len(raw) % 2:
        raw = raw[:-1]
    return raw.decode("utf-16-le", errors="surrogatepass").rstrip("\x00")


def to_user_comment(text: str) -> bytes:
    """
    "ASCII\\0\\0\\0" 前缀 + 每个字符码点的低 8 位。
    非 ASCII 字符会被截断（已知的有损行为，保持与既有导出文件兼容）。
    """
    return USER_COMMENT_ASCII_PREFIX + bytes(ord(c) & 0xFF for c in (text or ""))


def escape_xml(text: str) -> str:
    """替换 < > & ' " 为 XML 命名实体，其他字符不变。"""
    return escape(text or "", _XML_EXTRA_ENTITIES)
