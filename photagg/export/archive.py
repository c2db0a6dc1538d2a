# -*- coding: utf-8 -*-
"""
批量打包导出：逐个条目读取原始字节 → （JPEG 时）嵌入元数据 → 写入压缩包的固定目录。

条目严格按顺序处理，同一时刻只持有一张图片的字节，以限制整批的峰值内存。
单张嵌入失败只会退回原始字节；打包库不可用则整批失败，不产出半成品。
"""
from __future__ import annotations

import io
import os
import warnings
import zipfile
from collections.abc import Callable, Iterable
from datetime import date
from typing import Protocol

from photagg.errors import ArchiveUnavailableError
from photagg.export.filename import photo_filename
from photagg.log import get_logger
from photagg.metadata_io.embedder import AUTO_CODEC, DEFAULT_SOFTWARE, embed_item
from photagg.models import PhotoItem

DEFAULT_ARCHIVE_FOLDER = "photagg_photos"

_log = get_logger("archive")


class ArchiveWriter(Protocol):
    def add(self, name: str, data: bytes) -> None:
        ...

    def finish(self) -> bytes:
        ...


class ZipArchiveWriter:
    """zipfile 实现：条目写入 folder/ 下；同名条目不去重（后写入的与先写入的并存）。"""

    def __init__(self, folder: str = DEFAULT_ARCHIVE_FOLDER) -> None:
        self._folder = folder.strip("/")
        self._buf = io.BytesIO()
        self._zip = zipfile.ZipFile(self._buf, mode="w", compression=zipfile.ZIP_DEFLATED)

    def add(self, name: str, data: bytes) -> None:
        arcname = f"{self._folder}/{name}" if self._folder else name
        with warnings.catch_warnings():
            warnings.filterwarnings("ignore", message="Duplicate name", category=UserWarning)
            self._zip.writestr(arcname, data)

    def finish(self) -> bytes:
        self._zip.close()
        return self._buf.getvalue()


WriterFactory = Callable[[str], ArchiveWriter]


def build_archive(
    items: Iterable[PhotoItem],
    keep_original: bool,
    *,
    writer_factory: WriterFactory | None = ZipArchiveWriter,
    folder: str = DEFAULT_ARCHIVE_FOLDER,
    codec=AUTO_CODEC,
    software: str = DEFAULT_SOFTWARE,
) -> bytes:
    """
    返回压缩包字节。只处理已完成（有元数据）的条目，顺序与 items 一致。
    writer_factory 为 None 表示打包库不可用，抛出 ArchiveUnavailableError。
    """
    if writer_factory is None:
        raise ArchiveUnavailableError("archive library not available")
    writer = writer_factory(folder)
    count = 0
    for item in items:
        if not item.is_completed:
            continue
        data = embed_item(item, codec=codec, software=software)
        name = photo_filename(item, keep_original)
        writer.add(name, data)
        count += 1
        _log.debug("archived %s as %s (%d bytes)", item.file_name, name, len(data))
    _log.info("archive built with %d entries", count)
    return writer.finish()


def default_archive_name(today: date | None = None) -> str:
    return f"instatag_photos_{(today or date.today()).isoformat()}.zip"


def write_archive(
    items: Iterable[PhotoItem],
    out_dir: str | os.PathLike,
    keep_original: bool,
    **kwargs,
) -> str:
    """写出压缩包文件，返回其路径。"""
    blob = build_archive(items, keep_original, **kwargs)
    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(os.fspath(out_dir), default_archive_name())
    with open(path, "wb") as f:
        f.write(blob)
    return path
