# -*- coding: utf-8 -*-
"""
generation：调用生成模型获取标题 / 描述 / 关键词 / 分类 / 质量审查。
"""
from __future__ import annotations

from photagg.generation.gemini import GeminiMetadataGenerator, MetadataGenerator
from photagg.generation.schema import (
    AUDIT_PROMPT,
    RESPONSE_SCHEMA,
    metadata_from_dict,
    parse_photo_metadata,
)

__all__ = [
    "GeminiMetadataGenerator",
    "MetadataGenerator",
    "AUDIT_PROMPT",
    "RESPONSE_SCHEMA",
    "metadata_from_dict",
    "parse_photo_metadata",
]
