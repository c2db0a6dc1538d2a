# -*- coding: utf-8 -*-
"""
照片条目与生成元数据的数据模型。
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

JPEG_MIME_TYPES = ("image/jpeg", "image/jpg")

CATEGORIES: list[str] = [
    "Backgrounds",
    "Textures",
    "Patterns",
    "Nature",
    "People",
    "Business",
    "Technology",
    "Food",
    "Interiors",
    "Architecture",
    "Abstract",
    "Animals",
    "Travel",
    "Illustrations",
]


class ProcessingStatus(str, Enum):
    IDLE = "IDLE"
    UPLOADING = "UPLOADING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"


@dataclass
class QualityAnalysis:
    """AI 生成瑕疵审查结果。score 取值 1~10，issues 形如 "Anatomy: Extra finger"。"""

    score: float
    issues: list[str] = field(default_factory=list)


@dataclass
class PhotoMetadata:
    title: str
    description: str
    keywords: list[str] = field(default_factory=list)
    category: str = ""
    quality_analysis: QualityAnalysis | None = None

    def to_dict(self) -> dict:
        out = {
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "keywords": list(self.keywords),
        }
        if self.quality_analysis is not None:
            out["qualityAnalysis"] = {
                "score": self.quality_analysis.score,
                "issues": list(self.quality_analysis.issues),
            }
        return out


def _new_id() -> str:
    return uuid.uuid4().hex[:7]


@dataclass
class PhotoItem:
    """
    一张待处理照片。原始字节不常驻内存，导出时通过 read_bytes() 重新读取。
    mime_type 为声明类型（由扩展名推断），嵌入与否只看它，不解析文件头。
    """

    path: Path
    mime_type: str
    file_name: str = ""
    id: str = field(default_factory=_new_id)
    status: ProcessingStatus = ProcessingStatus.IDLE
    data: PhotoMetadata | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        if not self.file_name:
            self.file_name = self.path.name

    @property
    def is_jpeg(self) -> bool:
        return is_jpeg_mime(self.mime_type)

    @property
    def is_completed(self) -> bool:
        return self.status == ProcessingStatus.COMPLETED and self.data is not None

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


def is_jpeg_mime(mime_type: str | None) -> bool:
    return (mime_type or "").strip().lower() in JPEG_MIME_TYPES


def dedupe_keywords(keywords) -> list[str]:
    """去除首尾空白、空串与非字符串项，按首次出现顺序去重。"""
    out: list[str] = []
    for k in keywords or []:
        if not isinstance(k, str):
            continue
        k = k.strip()
        if k and k not in out:
            out.append(k)
    return out
