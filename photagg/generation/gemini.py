# -*- coding: utf-8 -*-
"""
Gemini generateContent REST 调用：图片以内联 base64 提交，要求按 RESPONSE_SCHEMA 返回 JSON。
"""
from __future__ import annotations

import base64
from typing import Any, Protocol

import httpx

from photagg.errors import GenerationError
from photagg.generation.schema import AUDIT_PROMPT, RESPONSE_SCHEMA, parse_photo_metadata
from photagg.log import get_logger
from photagg.models import PhotoMetadata

API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash"

_log = get_logger("gemini")


class MetadataGenerator(Protocol):
    def generate(self, data: bytes, mime_type: str) -> PhotoMetadata:
        ...


def _response_text(body: Any) -> str | None:
    """拼接第一个候选结果中所有 text 部分。"""
    if not isinstance(body, dict):
        return None
    candidates = body.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return None
    content = candidates[0].get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list):
        return None
    texts = [p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)]
    return "".join(texts) or None


class GeminiMetadataGenerator:
    """一次请求对应一张图片；超时、HTTP 错误与解析错误统一转换为 GenerationError。"""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.2,
        timeout: float = 120.0,
        client: httpx.Client | None = None,
    ) -> None:
        if not api_key:
            raise GenerationError("Gemini API key is not configured")
        self._api_key = api_key
        self._model = model
        self._temperature = temperature
        self._client = client or httpx.Client(timeout=timeout)

    def build_request_body(self, data: bytes, mime_type: str) -> dict[str, Any]:
        return {
            "contents": [
                {
                    "parts": [
                        {
                            "inline_data": {
                                "mime_type": mime_type,
                                "data": base64.b64encode(data).decode("ascii"),
                            }
                        },
                        {"text": AUDIT_PROMPT},
                    ]
                }
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
                "temperature": self._temperature,
            },
        }

    def generate(self, data: bytes, mime_type: str) -> PhotoMetadata:
        url = f"{API_BASE}/models/{self._model}:generateContent"
        try:
            resp = self._client.post(
                url,
                headers={"x-goog-api-key": self._api_key},
                json=self.build_request_body(data, mime_type),
            )
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as e:
            _log.error("Gemini API error: HTTP %s", e.response.status_code)
            raise GenerationError(f"Gemini API returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            _log.error("Gemini request failed: %s", e)
            raise GenerationError(f"Gemini request failed: {e}") from e
        except ValueError as e:
            raise GenerationError("Gemini response is not JSON") from e
        text = _response_text(body)
        if not text:
            raise GenerationError("No response from Gemini.")
        return parse_photo_metadata(text)

    def close(self) -> None:
        self._client.close()
