# -*- coding: utf-8 -*-
"""
放大图片：按倍数或指定宽度（等比）缩放，缩放算法交给 Pillow。
"""
from __future__ import annotations

import os
from pathlib import Path

from PIL import Image

JPEG_QUALITY = 92


def target_size(width: int, height: int, scale: float, custom_width: float | None = None) -> tuple[int, int]:
    if custom_width:
        new_w = round(custom_width)
        return new_w, round(height / width * custom_width)
    return round(width * scale), round(height * scale)


def upscale_image(
    path: str | os.PathLike,
    scale: float,
    custom_width: float | None = None,
    out_path: str | os.PathLike | None = None,
) -> Path:
    """
    缩放后按原格式保存（JPEG 质量 92），默认覆盖原文件。返回输出路径。
    缩放不保留原有元数据，嵌入应在缩放之后进行。
    """
    src = Path(path)
    dst = Path(out_path) if out_path else src
    with Image.open(src) as img:
        fmt = img.format or "JPEG"
        size = target_size(img.width, img.height, scale, custom_width)
        if size[0] <= 0 or size[1] <= 0:
            raise ValueError(f"invalid target size {size}")
        resized = img.resize(size, Image.Resampling.LANCZOS)
    save_kwargs = {"quality": JPEG_QUALITY} if fmt.upper() in ("JPEG", "WEBP") else {}
    if fmt.upper() == "JPEG" and resized.mode not in ("RGB", "L", "CMYK"):
        resized = resized.convert("RGB")
    resized.save(dst, format=fmt, **save_kwargs)
    return dst
