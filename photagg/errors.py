# -*- coding: utf-8 -*-
"""
photagg 异常类型。嵌入失败不抛异常（原样返回字节），这里只定义需要上抛给调用方的错误。
"""
from __future__ import annotations


class PhotaggError(Exception):
    """photagg 所有可上抛错误的基类。"""


class GenerationError(PhotaggError):
    """生成模型调用失败，或返回内容为空 / 结构不合法。"""


class ArchiveUnavailableError(PhotaggError):
    """打包库不可用，整批导出中止。"""


class IntakeError(PhotaggError):
    """上传数量超过批次上限。"""
