"""Logging setup for the interactive editor.

The editor chat owns stdout, so log records never go there: they land in a
rotating file by default, or on stderr when ``LOG_OUTPUT`` asks for a
console. Settings come from the environment (``LOG_LEVEL``, ``LOG_OUTPUT``,
``LOG_FILE_PATH``, ``LOG_FORMAT``) and are read at call time so a ``.env``
loaded in ``main()`` takes effect.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Literal, Optional

LogOutput = Literal["stderr", "file", "both"]
LogFormat = Literal["text", "json"]

DEFAULT_LOG_FILE = "logs/newsbloggen.log"
_TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(filename)s:%(lineno)d | %(message)s"

# Chatty third-party loggers capped at WARNING unless the root is stricter
_NOISY_LOGGERS = ("urllib3", "charset_normalizer")

# Marks handlers installed here so reconfiguring leaves foreign ones alone
_OWNED = "_newsbloggen_handler"


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record; messages are escaped properly."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "name": record.name,
            "file": f"{record.filename}:{record.lineno}",
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _resolve_output(output: Optional[str]) -> str:
    value = (output or os.environ.get("LOG_OUTPUT") or "file").lower()
    if value == "stdout":
        # stdout is reserved for the conversation
        value = "stderr"
    if value not in ("stderr", "file", "both"):
        raise ValueError(f"Unsupported LOG_OUTPUT '{value}'. Use stderr, file or both.")
    return value


def _build_handlers(output: str, file_path: str) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if output in ("stderr", "both"):
        handlers.append(logging.StreamHandler(sys.stderr))
    if output in ("file", "both"):
        log_dir = os.path.dirname(file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(RotatingFileHandler(file_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"))
    return handlers


def configure_logging(
    level: str | int | None = None,
    output: LogOutput | str | None = None,
    file_path: str | None = None,
    log_format: LogFormat | str | None = None,
) -> None:
    """Install the application's log handlers on the root logger.

    Parameters
    ----------
    level:
        Logging level name or number; falls back to ``LOG_LEVEL`` then INFO.
    output:
        ``"file"`` (default), ``"stderr"`` or ``"both"``. ``"stdout"`` is
        accepted and redirected to stderr.
    file_path:
        Log file for the file output; falls back to ``LOG_FILE_PATH``.
    log_format:
        ``"text"`` (default) or ``"json"`` lines.
    """
    if level is None:
        level = os.environ.get("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = level.upper()
    log_format = (log_format or os.environ.get("LOG_FORMAT") or "text").lower()
    file_path = file_path or os.environ.get("LOG_FILE_PATH") or DEFAULT_LOG_FILE

    formatter = JsonLineFormatter() if log_format == "json" else logging.Formatter(_TEXT_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in [h for h in root.handlers if getattr(h, _OWNED, False)]:
        root.removeHandler(handler)
        handler.close()

    for handler in _build_handlers(_resolve_output(output), file_path):
        handler.setFormatter(formatter)
        setattr(handler, _OWNED, True)
        root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
