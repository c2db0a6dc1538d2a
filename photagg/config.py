# -*- coding: utf-8 -*-
"""
photagg 配置：从用户配置目录下的 photagg.json 读取/写入。
文件只需包含要覆盖的键，缺省键使用 DEFAULT_CONFIG。跨平台：Windows / macOS / Linux。
"""
from __future__ import annotations

import json
import os
import sys
from typing import Any

CONFIG_FILENAME = "photagg.json"

DEFAULT_CONFIG: dict[str, Any] = {
    "keep_original_filenames": False,
    "software": "Photagg AI",
    "archive_folder": "photagg_photos",
    "gemini_model": "gemini-2.5-flash",
    "gemini_temperature": 0.2,
    "request_timeout": 120.0,
    "max_batch_size": 50,
    "max_file_size_mb": 40,
}

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")


def _user_config_dir() -> str:
    if sys.platform == "win32":
        base = (
            os.environ.get("APPDATA")
            or os.environ.get("LOCALAPPDATA")
            or os.path.join(os.path.expanduser("~"), "AppData", "Roaming")
        )
        return os.path.join(base, "Photagg")
    if sys.platform == "darwin":
        return os.path.join(os.path.expanduser("~"), "Library", "Application Support", "Photagg")
    return os.path.join(
        os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config"),
        "photagg",
    )


def get_config_path(config_dir: str | None = None) -> str:
    """返回 photagg.json 的完整路径。config_dir 为空时使用用户配置目录。"""
    override = os.environ.get("PHOTAGG_CONFIG", "").strip()
    if override and not config_dir:
        return override
    return os.path.join(config_dir or _user_config_dir(), CONFIG_FILENAME)


def _load_raw_cfg(path: str) -> dict:
    """读取 JSON 配置文件，返回顶层字典；文件缺失或损坏时返回空字典。"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, json.JSONDecodeError):
        return {}


def load_config(config_path: str | None = None) -> dict[str, Any]:
    """读取配置：DEFAULT_CONFIG 为底，文件中的已知键覆盖；类型不符的值被忽略。"""
    path = config_path or get_config_path()
    merged = dict(DEFAULT_CONFIG)
    for key, value in _load_raw_cfg(path).items():
        if key not in DEFAULT_CONFIG:
            continue
        default = DEFAULT_CONFIG[key]
        if isinstance(default, bool):
            if isinstance(value, bool):
                merged[key] = value
        elif isinstance(default, (int, float)):
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                merged[key] = type(default)(value)
        elif isinstance(value, str) and value.strip():
            merged[key] = value.strip()
    return merged


def save_config_value(key: str, value: Any, config_path: str | None = None) -> None:
    """将单个配置键写入配置文件（先读全量再合并后写回）。"""
    if key not in DEFAULT_CONFIG:
        raise KeyError(f"unknown config key: {key}")
    path = config_path or get_config_path()
    data = _load_raw_cfg(path)
    data[key] = value
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def get_api_key() -> str | None:
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return None
