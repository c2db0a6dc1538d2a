# -*- coding: utf-8 -*-
"""
photagg：AI 生成图库照片元数据，并把元数据嵌入 JPEG（EXIF + XMP）后导出。

用法:
    from photagg import PhotoSession, embed_metadata, build_archive
    from photagg.generation import GeminiMetadataGenerator
"""

from photagg.errors import ArchiveUnavailableError, GenerationError, IntakeError, PhotaggError
from photagg.export import (
    build_archive,
    construct_filename,
    export_single,
    render_csv_manifest,
    write_archive,
    write_csv_manifest,
)
from photagg.metadata_io import embed_metadata, load_exif_codec, read_embedded_metadata
from photagg.models import CATEGORIES, PhotoItem, PhotoMetadata, ProcessingStatus, QualityAnalysis
from photagg.session import PhotoSession

__version__ = "0.1.0"

__all__ = [
    "ArchiveUnavailableError",
    "GenerationError",
    "IntakeError",
    "PhotaggError",
    "build_archive",
    "construct_filename",
    "export_single",
    "render_csv_manifest",
    "write_archive",
    "write_csv_manifest",
    "embed_metadata",
    "load_exif_codec",
    "read_embedded_metadata",
    "CATEGORIES",
    "PhotoItem",
    "PhotoMetadata",
    "ProcessingStatus",
    "QualityAnalysis",
    "PhotoSession",
]

try:
    from photagg.imaging import upscale_image
    __all__.append("upscale_image")
except ModuleNotFoundError as exc:
    if not str(getattr(exc, "name", "")).startswith("PIL"):
        raise
