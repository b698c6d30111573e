"""Pydantic schema for the logger config block in JSON/TOML files.

Shape follows logutil.config.log.LogConfig (filename, max_size, max_days, ...).
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from logutil.config.log import DEFAULT_FORMAT, DEFAULT_LEVEL, LogConfig


class LogConfigSchema(BaseModel):
    """Logger config as written in a config file. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    filename: str = Field("", description="Log file path; empty for stderr")
    max_size: int = Field(0, description="MB before rotation (0 → 10)")
    max_days: int = Field(0, description="Days rotated files are kept (0 → 90)")
    max_backups: int = Field(0, description="Rotated files kept (0 → 5)")
    level: str = Field(DEFAULT_LEVEL, description="fatal, error, warn, info, debug")
    format: str = Field(DEFAULT_FORMAT, description="json, console, text")
    log_rotate: bool = True

    def to_config(self) -> LogConfig:
        return LogConfig(
            filename=self.filename,
            max_size=self.max_size,
            max_days=self.max_days,
            max_backups=self.max_backups,
            level=self.level,
            format=self.format,
            log_rotate=self.log_rotate,
        )
