"""
logutil config: build from code, env or a JSON/TOML file.

Load from env: LogConfig.from_env(). Load from file: load_log_config(path).
"""
from logutil.config.log import (
    DEFAULT_FORMAT,
    DEFAULT_LEVEL,
    DEFAULT_MAX_BACKUPS,
    DEFAULT_MAX_DAYS,
    DEFAULT_MAX_SIZE,
    LogConfig,
    load_log_config,
)

__all__ = [
    "LogConfig",
    "load_log_config",
    "DEFAULT_MAX_SIZE",
    "DEFAULT_MAX_DAYS",
    "DEFAULT_MAX_BACKUPS",
    "DEFAULT_LEVEL",
    "DEFAULT_FORMAT",
]
