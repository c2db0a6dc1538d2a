# -*- coding: utf-8 -*-
"""
export：导出文件名、单张导出、批量压缩包与 CSV 清单。
"""
from __future__ import annotations

from photagg.export.archive import (
    DEFAULT_ARCHIVE_FOLDER,
    ArchiveWriter,
    ZipArchiveWriter,
    build_archive,
    default_archive_name,
    write_archive,
)
from photagg.export.csv_manifest import (
    CSV_HEADERS,
    default_csv_name,
    render_csv_manifest,
    write_csv_manifest,
)
from photagg.export.filename import construct_filename, photo_filename, title_to_base
from photagg.export.single import export_single

__all__ = [
    "DEFAULT_ARCHIVE_FOLDER",
    "ArchiveWriter",
    "ZipArchiveWriter",
    "build_archive",
    "default_archive_name",
    "write_archive",
    "CSV_HEADERS",
    "default_csv_name",
    "render_csv_manifest",
    "write_csv_manifest",
    "construct_filename",
    "photo_filename",
    "title_to_base",
    "export_single",
]
