# -*- coding: utf-8 -*-
"""
CSV 清单导出：Filename, Title, Description, Category, Keywords。
表头不加引号；数据行所有字段加双引号，字段内的双引号加倍；关键词以 "; " 连接。
"""
from __future__ import annotations

import csv
import io
import os
from collections.abc import Iterable
from datetime import date

from photagg.models import PhotoItem

CSV_HEADERS = ["Filename", "Title", "Description", "Category", "Keywords"]
KEYWORD_SEPARATOR = "; "


def _row(item: PhotoItem) -> list[str]:
    meta = item.data
    return [
        item.file_name,
        meta.title or "",
        meta.description or "",
        meta.category or "",
        KEYWORD_SEPARATOR.join(meta.keywords or []),
    ]


def render_csv_manifest(items: Iterable[PhotoItem]) -> str:
    """只包含已完成的条目；没有已完成条目时返回空字符串。"""
    rows = [_row(item) for item in items if item.is_completed]
    if not rows:
        return ""
    buf = io.StringIO()
    buf.write(",".join(CSV_HEADERS) + "\n")
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return buf.getvalue()


def default_csv_name(today: date | None = None) -> str:
    return f"instatag_export_{(today or date.today()).isoformat()}.csv"


def write_csv_manifest(items: Iterable[PhotoItem], out_path: str | os.PathLike) -> str | None:
    """写出 CSV；out_path 为目录时使用默认文件名。没有可导出条目时不写文件，返回 None。"""
    content = render_csv_manifest(items)
    if not content:
        return None
    path = os.fspath(out_path)
    if os.path.isdir(path):
        path = os.path.join(path, default_csv_name())
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
    return path
