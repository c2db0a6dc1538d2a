# -*- coding: utf-8 -*-
"""
一批照片的应用状态：条目列表、分类列表、导入校验、生成调用与用户编辑。

嵌入 / 打包函数不读取这里的任何状态，调用方显式传入条目与选项。
"""
from __future__ import annotations

import mimetypes
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from photagg.errors import IntakeError, PhotaggError
from photagg.log import get_logger
from photagg.models import CATEGORIES, PhotoItem, PhotoMetadata, ProcessingStatus, dedupe_keywords

MAX_BATCH_SIZE = 50
MAX_FILE_SIZE_BYTES = 40 * 1024 * 1024

_log = get_logger("session")

_EDITABLE_FIELDS = ("title", "description", "keywords", "category")


def guess_mime_type(path: str | os.PathLike) -> str:
    """按扩展名推断声明类型（不读取文件头）；无法识别时为 application/octet-stream。"""
    mime, _ = mimetypes.guess_type(os.fspath(path))
    return mime or "application/octet-stream"


@dataclass
class IntakeResult:
    added: list[PhotoItem] = field(default_factory=list)
    skipped_type: list[str] = field(default_factory=list)
    skipped_size: list[str] = field(default_factory=list)
    skipped_missing: list[str] = field(default_factory=list)


class PhotoSession:
    def __init__(
        self,
        max_batch_size: int = MAX_BATCH_SIZE,
        max_file_size: int = MAX_FILE_SIZE_BYTES,
        categories: Iterable[str] | None = None,
    ) -> None:
        self.items: list[PhotoItem] = []
        self.categories: list[str] = list(categories if categories is not None else CATEGORIES)
        self.max_batch_size = max_batch_size
        self.max_file_size = max_file_size

    # ── 导入 ──────────────────────────────────────────────────────────

    def add_files(self, paths: Iterable[str | os.PathLike]) -> IntakeResult:
        """
        导入文件：总数超过批次上限时整体拒绝（IntakeError）；
        非 image/* 类型、无法读取与超过单张大小上限的文件跳过并计入结果。新条目排在最前。
        """
        paths = [Path(p) for p in paths]
        if len(self.items) + len(paths) > self.max_batch_size:
            raise IntakeError(
                f"Limit exceeded. You can only upload up to {self.max_batch_size} photos in total. "
                f"You currently have {len(self.items)}."
            )
        result = IntakeResult()
        for path in paths:
            mime = guess_mime_type(path)
            if not mime.startswith("image/"):
                result.skipped_type.append(str(path))
                continue
            try:
                size = path.stat().st_size
            except OSError:
                result.skipped_missing.append(str(path))
                continue
            if size > self.max_file_size:
                result.skipped_size.append(str(path))
                continue
            result.added.append(PhotoItem(path=path, mime_type=mime))
        if result.skipped_size:
            _log.warning("%d file(s) skipped for exceeding the size limit", len(result.skipped_size))
        self.items[:0] = result.added
        return result

    def get(self, item_id: str) -> PhotoItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise KeyError(item_id)

    def remove(self, item_id: str) -> None:
        self.items = [p for p in self.items if p.id != item_id]

    def clear(self) -> None:
        self.items.clear()

    # ── 生成 ──────────────────────────────────────────────────────────

    def process(self, item_id: str, generator) -> PhotoItem:
        """调用生成模型；失败时条目标记为 ERROR 并记录信息，不影响其他条目。"""
        item = self.get(item_id)
        item.status = ProcessingStatus.PROCESSING
        item.error = None
        try:
            item.data = generator.generate(item.read_bytes(), item.mime_type)
            item.status = ProcessingStatus.COMPLETED
        except PhotaggError as e:
            _log.error("processing %s failed: %s", item.file_name, e)
            item.status = ProcessingStatus.ERROR
            item.error = str(e) or "Failed to generate metadata"
        except Exception as e:
            _log.exception("processing %s failed", item.file_name)
            item.status = ProcessingStatus.ERROR
            item.error = str(e) or "Failed to generate metadata"
        return item

    def retry(self, item_id: str, generator) -> PhotoItem:
        return self.process(item_id, generator)

    def process_pending(self, generator) -> list[PhotoItem]:
        """依次处理所有 IDLE 条目。"""
        pending = [p for p in self.items if p.status == ProcessingStatus.IDLE]
        return [self.process(p.id, generator) for p in pending]

    # ── 编辑 ──────────────────────────────────────────────────────────

    def update(self, item_id: str, **updates) -> PhotoMetadata | None:
        """合并编辑到已有元数据；条目尚无元数据时忽略。"""
        unknown = set(updates) - set(_EDITABLE_FIELDS)
        if unknown:
            raise TypeError(f"unsupported fields: {sorted(unknown)}")
        item = self.get(item_id)
        if item.data is None:
            return None
        for key, value in updates.items():
            if key == "keywords":
                value = dedupe_keywords(value)
            setattr(item.data, key, value)
        return item.data

    def add_keyword(self, item_id: str, keyword: str) -> bool:
        """去除首尾空白后追加；空串或重复时不添加，返回 False。"""
        item = self.get(item_id)
        keyword = (keyword or "").strip()
        if item.data is None or not keyword or keyword in item.data.keywords:
            return False
        item.data.keywords.append(keyword)
        return True

    def remove_keyword(self, item_id: str, keyword: str) -> None:
        item = self.get(item_id)
        if item.data is not None:
            item.data.keywords = [k for k in item.data.keywords if k != keyword]

    def set_category(self, item_id: str, category: str) -> None:
        self.update(item_id, category=category)

    def add_category(self, name: str) -> bool:
        name = (name or "").strip()
        if not name or name in self.categories:
            return False
        self.categories.append(name)
        return True

    def remove_category(self, name: str) -> None:
        """只从可选列表中删除；已使用该分类的条目保持不变。"""
        self.categories = [c for c in self.categories if c != name]

    # ── 统计 ──────────────────────────────────────────────────────────

    def completed(self) -> list[PhotoItem]:
        return [p for p in self.items if p.is_completed]

    @property
    def processing_count(self) -> int:
        return sum(1 for p in self.items if p.status == ProcessingStatus.PROCESSING)

    @property
    def completed_count(self) -> int:
        return sum(1 for p in self.items if p.status == ProcessingStatus.COMPLETED)
