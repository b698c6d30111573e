"""
logutil.config.log – logger configuration record (dataclass + loaders).

Env vars: LOG_FILENAME, LOG_MAX_SIZE, LOG_MAX_DAYS, LOG_MAX_BACKUPS, LOG_LEVEL,
LOG_FORMAT, LOG_ROTATE.
"""
from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from logutil.core.exceptions import ConfigurationError

DEFAULT_MAX_SIZE = 10  # MB
DEFAULT_MAX_DAYS = 90
DEFAULT_MAX_BACKUPS = 5
DEFAULT_LEVEL = "info"
DEFAULT_FORMAT = "text"

# Section names looked up when the config file holds more than the logger block
_SECTION_KEYS = ("log", "logging", "logger")


@dataclass(frozen=True)
class LogConfig:
    """
    Declarative logger configuration.

    Numeric fields left at 0 mean "unset" and are replaced by the defaults
    (10 MB, 90 days, 5 backups) when the config is translated. Level and
    format are matched case-insensitively; unknown values fall back to
    info / text.
    """

    filename: str = ""
    """Log file path. Empty writes to stderr."""

    max_size: int = 0
    """Size in MB after which the active file is rotated."""

    max_days: int = 0
    """Days a rotated file is kept."""

    max_backups: int = 0
    """Number of rotated files kept."""

    level: str = DEFAULT_LEVEL
    """fatal, error, warn, info or debug."""

    format: str = DEFAULT_FORMAT
    """json, console or text."""

    log_rotate: bool = True
    """Rotate the log file. False appends to a single file forever."""

    @classmethod
    def from_env(cls, **overrides: object) -> LogConfig:
        """
        Build config from environment variables.

        Env:
            LOG_FILENAME     – default "" (stderr)
            LOG_MAX_SIZE     – default 0 (→ 10 MB)
            LOG_MAX_DAYS     – default 0 (→ 90)
            LOG_MAX_BACKUPS  – default 0 (→ 5)
            LOG_LEVEL        – default info
            LOG_FORMAT       – default text
            LOG_ROTATE       – "1" / "true" / "yes" → True (default True)

        Overrides (keyword args) take precedence over env.
        """
        _env_int = {
            "max_size": "LOG_MAX_SIZE",
            "max_days": "LOG_MAX_DAYS",
            "max_backups": "LOG_MAX_BACKUPS",
        }

        def _int(attr: str) -> int:
            v = overrides.get(attr)
            if v is not None:
                return int(v)
            raw = os.environ.get(_env_int[attr], "").strip()
            try:
                return int(raw) if raw else 0
            except ValueError as exc:
                raise ConfigurationError(
                    f"{_env_int[attr]} must be an integer, got {raw!r}",
                    details={"variable": _env_int[attr]},
                    cause=exc,
                ) from exc

        def _str(attr: str, var: str, default: str) -> str:
            v = overrides.get(attr)
            if v is not None:
                return str(v)
            return os.environ.get(var, default)

        rotate = overrides.get("log_rotate")
        if rotate is None:
            raw = os.environ.get("LOG_ROTATE", "").strip().lower()
            rotate = raw in ("1", "true", "yes") if raw else True
        elif isinstance(rotate, str):
            rotate = rotate.lower() in ("1", "true", "yes")

        return cls(
            filename=_str("filename", "LOG_FILENAME", ""),
            max_size=_int("max_size"),
            max_days=_int("max_days"),
            max_backups=_int("max_backups"),
            level=_str("level", "LOG_LEVEL", DEFAULT_LEVEL),
            format=_str("format", "LOG_FORMAT", DEFAULT_FORMAT),
            log_rotate=bool(rotate),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LogConfig:
        """Validate a mapping in the file/wire shape and build a config."""
        from logutil.schemas.log_config import LogConfigSchema

        try:
            schema = LogConfigSchema.model_validate(dict(data))
        except ValidationError as exc:
            raise ConfigurationError(
                "Invalid log configuration",
                details={"errors": exc.errors(include_url=False)},
                cause=exc,
            ) from exc
        return schema.to_config()

    def with_overrides(self, **changes: Any) -> LogConfig:
        """Return a new config with the given fields replaced."""
        return replace(self, **changes)


def load_log_config(path: Union[str, Path], section: Optional[str] = None) -> LogConfig:
    """
    Load a LogConfig from a .json or .toml file.

    The logger block may be the whole document or a nested section
    ("log", "logging" or "logger", or the explicit `section`).

    Raises:
        ConfigurationError: unreadable file, unknown suffix or invalid fields.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            with path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        elif suffix == ".toml":
            with path.open("rb") as fh:
                data = tomllib.load(fh)
        else:
            raise ConfigurationError(
                f"Unsupported config file type: {suffix or path.name}",
                details={"path": str(path)},
            )
    except (OSError, ValueError) as exc:
        # json.JSONDecodeError and tomllib.TOMLDecodeError are ValueErrors
        raise ConfigurationError(
            f"Could not read log config {path}: {exc}",
            details={"path": str(path)},
            cause=exc,
        ) from exc

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Log config {path} must contain an object at the top level",
            details={"path": str(path)},
        )

    keys = (section,) if section else _SECTION_KEYS
    for key in keys:
        block = data.get(key)
        if isinstance(block, dict):
            return LogConfig.from_dict(block)
    if section:
        raise ConfigurationError(
            f"Section {section!r} not found in {path}",
            details={"path": str(path), "section": section},
        )
    return LogConfig.from_dict(data)
