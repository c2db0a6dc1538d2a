# -*- coding: utf-8 -*-
"""
导出文件名：保留原名，或由标题生成；有分类时追加 "(分类)" 后缀。
"""
from __future__ import annotations

import re

from photagg.models import PhotoItem

DEFAULT_EXTENSION = "jpg"
TITLE_BASE_MAX_LEN = 50

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def _split_extension(name: str) -> tuple[str, str]:
    """返回 (不含扩展名的部分, 扩展名)；扩展名大小写保持原样。"""
    idx = name.rfind(".")
    if idx == -1:
        return name, ""
    return name[:idx], name[idx + 1:]


def title_to_base(title: str) -> str:
    """非 [A-Za-z0-9] 的字符替换为 "_"，转小写，截取前 50 个字符。"""
    return _NON_ALNUM.sub("_", title or "").lower()[:TITLE_BASE_MAX_LEN]


def construct_filename(
    original_name: str,
    title: str,
    category: str | None,
    keep_original: bool,
) -> str:
    stem, ext = _split_extension(original_name)
    ext = ext or DEFAULT_EXTENSION
    base = stem if keep_original else title_to_base(title)
    suffix = f"({category})" if category else ""
    return f"{base}{suffix}.{ext}"


def photo_filename(item: PhotoItem, keep_original: bool) -> str:
    """条目尚无元数据时直接使用原文件名。"""
    if item.data is None:
        return item.file_name
    return construct_filename(item.file_name, item.data.title, item.data.category, keep_original)
