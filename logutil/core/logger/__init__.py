"""
Process logger: rotating, compressed file (or stderr) with json/console/text
formatting and signal-driven level changes.

Usage:
    from logutil.core.logger import LogConfig, get_logger, init_logger, with_fields

    # Configure once at startup (from_env() if no config is given)
    init_logger(LogConfig(filename="/var/log/myapp/app.log", level="info", format="json"))

    # Or with SIGUSR1 (debug) / SIGUSR2 (error) level switching
    handle = init_logger(LogConfig.from_env(), level_signals=True)

    logger = get_logger(__name__)
    logger.info("Started")
    with_fields(logger, name="jack", sex="male").info("ok")

    # Stop the signal listener and close the file on shutdown
    handle.close()
"""
from logutil.config.log import LogConfig
from logutil.core.logger.fields import FieldsAdapter, with_fields
from logutil.core.logger.formatters import (
    ConsoleFormatter,
    JsonFormatter,
    TextFormatter,
    resolve_formatter,
)
from logutil.core.logger.handlers import (
    CompressingRotatingFileHandler,
    RotationPolicy,
    build_file_handler,
)
from logutil.core.logger.levels import level_name, resolve_level
from logutil.core.logger.setup import (
    LoggerHandle,
    LogSettings,
    default_handle,
    get_logger,
    init_logger,
    normalize,
    translate,
)
from logutil.core.logger.signals import (
    LOWER_VERBOSITY,
    RAISE_VERBOSITY,
    LevelSignalController,
    start_level_signals,
)

__all__ = [
    "LogConfig",
    "LogSettings",
    "LoggerHandle",
    "RotationPolicy",
    "JsonFormatter",
    "ConsoleFormatter",
    "TextFormatter",
    "CompressingRotatingFileHandler",
    "FieldsAdapter",
    "LevelSignalController",
    "RAISE_VERBOSITY",
    "LOWER_VERBOSITY",
    "init_logger",
    "get_logger",
    "default_handle",
    "translate",
    "normalize",
    "resolve_level",
    "resolve_formatter",
    "level_name",
    "with_fields",
    "build_file_handler",
    "start_level_signals",
]
