"""
logutil: configure the process logger from a small declarative record.

    from logutil import LogConfig, init_logger

    init_logger(LogConfig(filename="app.log", level="info", format="json"))
"""
from logutil.config import LogConfig, load_log_config
from logutil.core.exceptions import ConfigurationError, InvalidTargetError, LogUtilError
from logutil.core.logger import (
    LevelSignalController,
    LoggerHandle,
    default_handle,
    get_logger,
    init_logger,
    with_fields,
)

__all__ = [
    "LogConfig",
    "load_log_config",
    "init_logger",
    "get_logger",
    "default_handle",
    "with_fields",
    "LoggerHandle",
    "LevelSignalController",
    "LogUtilError",
    "ConfigurationError",
    "InvalidTargetError",
]
