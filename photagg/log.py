# -*- coding: utf-8 -*-
"""photagg.log – minimal logging for diagnostics (file + stderr).

Usage::
    from photagg.log import get_logger
    log = get_logger("embedder")
    log.info("embedding %s", file_name)
    log.debug("detail: %s", value)
"""
from __future__ import annotations

import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, TextIO

APP_NAME = "Photagg"


def _default_log_file() -> str | None:
    """打包后的应用默认落盘日志，开发态只写 stderr。"""
    override = os.environ.get("PHOTAGG_LOG_FILE", "").strip()
    if override:
        return override
    if not getattr(sys, "frozen", False):
        return None

    if sys.platform == "win32":
        base = (
            os.environ.get("LOCALAPPDATA")
            or os.environ.get("APPDATA")
            or str(Path.home() / "AppData" / "Local")
        )
        log_dir = Path(base) / APP_NAME / "logs"
    elif sys.platform == "darwin":
        log_dir = Path.home() / "Library" / "Logs" / APP_NAME
    else:
        log_dir = Path(os.environ.get("XDG_STATE_HOME") or (Path.home() / ".local" / "state")) / APP_NAME

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None
    return str(log_dir / "photagg.log")


LOG_FILE: str | None = _default_log_file()
LOG_LEVEL: str = os.environ.get("PHOTAGG_LOG_LEVEL", "INFO").upper()  # DEBUG | INFO | WARNING | ERROR

_LEVEL_ORDER = {"DEBUG": 0, "INFO": 1, "WARNING": 2, "ERROR": 3}


def _level_ok(level: str) -> bool:
    return _LEVEL_ORDER.get(level.upper(), 0) >= _LEVEL_ORDER.get(LOG_LEVEL.upper(), 0)


def _format(level: str, name: str, msg: str, *args: Any) -> str:
    parts = [datetime.now().strftime("%Y-%m-%d %H:%M:%S"), level, name, msg % args if args else msg]
    return " ".join(str(p) for p in parts)


class _Logger:
    def __init__(self, name: str) -> None:
        self._name = name
        self._file: TextIO | None = None
        if LOG_FILE:
            try:
                self._file = open(LOG_FILE, "a", encoding="utf-8")  # noqa: SIM115
            except OSError:
                pass

    def _write(self, level: str, msg: str, *args: Any) -> None:
        if not _level_ok(level):
            return
        line = _format(level, self._name, msg, *args) + "\n"
        if self._file:
            try:
                self._file.write(line)
                self._file.flush()
            except OSError:
                pass
        err = sys.stderr
        if err is None or not hasattr(err, "write"):
            return
        try:
            err.write(line)
            err.flush()
        except OSError:
            pass

    def debug(self, msg: str, *args: Any) -> None:
        self._write("DEBUG", msg, *args)

    def info(self, msg: str, *args: Any) -> None:
        self._write("INFO", msg, *args)

    def warning(self, msg: str, *args: Any) -> None:
        self._write("WARNING", msg, *args)

    def error(self, msg: str, *args: Any) -> None:
        self._write("ERROR", msg, *args)

    def exception(self, msg: str, *args: Any) -> None:
        """ERROR 级别，附带当前正在处理的异常类型与信息。"""
        exc = sys.exc_info()[1]
        text = msg % args if args else msg
        if exc is not None:
            text = f"{text} [{type(exc).__name__}: {exc}]"
        self._write("ERROR", "%s", text)


_LOGGERS: dict[str, _Logger] = {}


def get_logger(name: str) -> _Logger:
    """同名 logger 复用同一实例，避免重复打开日志文件。"""
    logger = _LOGGERS.get(name)
    if logger is None:
        logger = _Logger(name)
        _LOGGERS[name] = logger
    return logger
