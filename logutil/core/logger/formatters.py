"""
Formatters: JSON lines, logfmt-style text, and a plain console layout.

All three stamp records with local time in the fixed layout
"YYYY/MM/DD HH:MM:SS.mmm" and render structured fields attached through
logutil.core.logger.fields.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from logutil.core.logger.levels import level_name

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"
MSEC_FORMAT = "%s.%03d"


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Structured fields attached to a record (empty dict when none)."""
    fields = getattr(record, "fields", None)
    return dict(fields) if isinstance(fields, dict) else {}


class JsonFormatter(logging.Formatter):
    """
    Format log records as one JSON object per line (JSON Lines).

    Fields are merged at the top level next to time/level/logger/msg; a field
    whose name clashes with one of those keys is written as "fields.<name>".
    """

    default_time_format = TIMESTAMP_FORMAT
    default_msec_format = MSEC_FORMAT

    def __init__(
        self,
        *,
        datefmt: Optional[str] = None,
        timestamp_key: str = "time",
        level_key: str = "level",
        logger_key: str = "logger",
        message_key: str = "msg",
        include_caller: bool = False,
    ) -> None:
        super().__init__(datefmt=datefmt)
        self.timestamp_key = timestamp_key
        self.level_key = level_key
        self.logger_key = logger_key
        self.message_key = message_key
        self.include_caller = include_caller

    def format(self, record: logging.LogRecord) -> str:
        log_dict: dict[str, Any] = {
            self.timestamp_key: self.formatTime(record, self.datefmt),
            self.level_key: level_name(record.levelno),
            self.logger_key: record.name,
            self.message_key: record.getMessage(),
        }
        if self.include_caller:
            log_dict["pathname"] = record.pathname
            log_dict["lineno"] = record.lineno
        for key, value in record_fields(record).items():
            if key in log_dict:
                key = f"fields.{key}"
            log_dict[key] = value
        if record.exc_info:
            log_dict["error"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_dict["stack"] = self.formatStack(record.stack_info)
        return json.dumps(log_dict, default=str, ensure_ascii=False)


def _logfmt_value(value: Any) -> str:
    text = value if isinstance(value, str) else str(value)
    if text == "" or any(ch in text for ch in ' ="\\\n\t'):
        return json.dumps(text, ensure_ascii=False)
    return text


class TextFormatter(logging.Formatter):
    """Key=value text lines: time="..." level=info msg="..." name=jack."""

    default_time_format = TIMESTAMP_FORMAT
    default_msec_format = MSEC_FORMAT

    def __init__(self, *, datefmt: Optional[str] = None) -> None:
        super().__init__(datefmt=datefmt)

    def format(self, record: logging.LogRecord) -> str:
        pairs: list[tuple[str, Any]] = [
            ("time", self.formatTime(record, self.datefmt)),
            ("level", level_name(record.levelno)),
            ("logger", record.name),
            ("msg", record.getMessage()),
        ]
        pairs.extend(sorted(record_fields(record).items()))
        if record.exc_info:
            pairs.append(("error", self.formatException(record.exc_info)))
        return " ".join(f"{key}={_logfmt_value(value)}" for key, value in pairs)


class ConsoleFormatter(logging.Formatter):
    """Human-readable format for terminals, fields appended after the message."""

    default_time_format = TIMESTAMP_FORMAT
    default_msec_format = MSEC_FORMAT

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
    ) -> None:
        if fmt is None:
            fmt = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        super().__init__(fmt=fmt, datefmt=datefmt)

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        fields = record_fields(record)
        if fields:
            line += " " + " ".join(
                f"{key}={_logfmt_value(value)}" for key, value in sorted(fields.items())
            )
        return line


def resolve_formatter(name: str) -> logging.Formatter:
    """
    Map a format name to a formatter instance, case-insensitively.

    "json" -> JsonFormatter, "console" -> ConsoleFormatter, anything else ->
    TextFormatter (a warning is logged for names other than "text").
    """
    key = (name or "").strip().lower()
    if key == "json":
        return JsonFormatter()
    if key == "console":
        return ConsoleFormatter()
    if key not in ("", "text"):
        logger.warning("Unknown log format %r, using text", name)
    return TextFormatter()
