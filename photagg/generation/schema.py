# -*- coding: utf-8 -*-
"""
生成模型的响应结构与解析。任何为空或结构不合法的响应都视为该条目失败（GenerationError）。
"""
from __future__ import annotations

import json
from typing import Any

from photagg.errors import GenerationError
from photagg.models import CATEGORIES, PhotoMetadata, QualityAnalysis, dedupe_keywords

AUDIT_CATEGORIES = ("Anatomy", "Text", "Lighting", "Physics", "Context", "Textures")

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "title": {
            "type": "STRING",
            "description": "A concise, catchy title for the image, suitable for stock photography.",
        },
        "description": {
            "type": "STRING",
            "description": "A detailed description of the image visual content, action, and mood (1-2 sentences).",
        },
        "category": {
            "type": "STRING",
            "description": "Classify the image into exactly ONE of these categories: "
            + ", ".join(CATEGORIES) + ".",
        },
        "keywords": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "A list of 25-30 relevant keywords and tags for SEO and discoverability.",
        },
        "qualityAnalysis": {
            "type": "OBJECT",
            "properties": {
                "score": {
                    "type": "NUMBER",
                    "description": "A quality score from 1 (terrible/obvious AI errors) to 10 "
                    "(perfect realism/no errors). Penalize heavily for anatomical or physics errors.",
                },
                "issues": {
                    "type": "ARRAY",
                    "items": {"type": "STRING"},
                    "description": "A list of specific flaws found based on the audit criteria ("
                    + ", ".join(AUDIT_CATEGORIES)
                    + "). Format strings as 'Category: Issue found' (e.g., 'Anatomy: Extra finger on "
                    "left hand'). Return empty list if perfect.",
                },
            },
            "required": ["score", "issues"],
        },
    },
    "required": ["title", "description", "category", "keywords", "qualityAnalysis"],
}

AUDIT_PROMPT = """
Analyze this image for stock photography usage and perform a RIGOROUS technical audit for AI-generation artifacts.

1. Generate Metadata: Title, Description, Category, Keywords.

2. Quality Audit: Scrutinize the image for the following specific errors. If found, list them in the 'issues' array:
   - Anatomical Inaccuracies: Extra/missing fingers, warped hands, misaligned eyes/teeth, irregular limbs.
   - Garbled Text: Nonsensical characters, gibberish signs, misspellings in visible text.
   - Lighting/Shadows: Inconsistent light sources, missing shadows, illogical highlighting.
   - Physics/Perspective: Floating objects, gravity violations, warped perspective, melting backgrounds.
   - Context/Logic: Illogical situations (e.g., rain indoors), objects blending into each other.
   - Textures: Repetitive hair/skin patterns, overly smooth 'plastic' skin, distorted fabrics.
   - Inconsistent Details: Asymmetrical architecture, mismatched clothing details, weird blending.

If the image looks real and high quality, give a high score (8-10). If it has these specific artifacts, lower the score significantly (1-6) and list every issue found.
"""


def _require_str(obj: dict, key: str) -> str:
    value = obj.get(key)
    if not isinstance(value, str) or not value.strip():
        raise GenerationError(f"response field '{key}' missing or empty")
    return value.strip()


def _parse_quality(raw: Any) -> QualityAnalysis | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise GenerationError("response field 'qualityAnalysis' is not an object")
    score = raw.get("score")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise GenerationError("response field 'qualityAnalysis.score' is not a number")
    issues = raw.get("issues") or []
    if not isinstance(issues, list):
        raise GenerationError("response field 'qualityAnalysis.issues' is not a list")
    score = min(10.0, max(1.0, float(score)))
    return QualityAnalysis(score=score, issues=[str(i) for i in issues if str(i).strip()])


def metadata_from_dict(obj: Any) -> PhotoMetadata:
    if not isinstance(obj, dict):
        raise GenerationError("response is not a JSON object")
    keywords = obj.get("keywords")
    if not isinstance(keywords, list):
        raise GenerationError("response field 'keywords' is not a list")
    category = obj.get("category")
    return PhotoMetadata(
        title=_require_str(obj, "title"),
        description=_require_str(obj, "description"),
        keywords=dedupe_keywords(keywords),
        category=category.strip() if isinstance(category, str) else "",
        quality_analysis=_parse_quality(obj.get("qualityAnalysis")),
    )


def parse_photo_metadata(text: str | None) -> PhotoMetadata:
    """解析模型返回的 JSON 文本。"""
    if not text or not text.strip():
        raise GenerationError("empty response from model")
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as e:
        raise GenerationError(f"response is not valid JSON: {e}") from e
    return metadata_from_dict(obj)
