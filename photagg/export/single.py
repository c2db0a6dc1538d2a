# -*- coding: utf-8 -*-
"""
单张导出：嵌入元数据后写到输出目录。
"""
from __future__ import annotations

import os
from pathlib import Path

from photagg.export.filename import photo_filename
from photagg.log import get_logger
from photagg.metadata_io.embedder import AUTO_CODEC, DEFAULT_SOFTWARE, embed_item
from photagg.models import PhotoItem

_log = get_logger("export")


def export_single(
    item: PhotoItem,
    out_dir: str | os.PathLike,
    keep_original: bool,
    *,
    codec=AUTO_CODEC,
    software: str = DEFAULT_SOFTWARE,
) -> Path | None:
    """条目没有元数据时不导出，返回 None。"""
    if item.data is None:
        return None
    data = embed_item(item, codec=codec, software=software)
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    path = out / photo_filename(item, keep_original)
    path.write_bytes(data)
    _log.info("exported %s -> %s", item.file_name, path)
    return path
