"""
Logger setup: translate a LogConfig into settings and install them on a handle.
"""
from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, replace
from typing import Optional

from logutil.config.log import (
    DEFAULT_MAX_BACKUPS,
    DEFAULT_MAX_DAYS,
    DEFAULT_MAX_SIZE,
    LogConfig,
)
from logutil.core.exceptions import ConfigurationError, InvalidTargetError
from logutil.core.logger.formatters import resolve_formatter
from logutil.core.logger.handlers import RotationPolicy, build_file_handler
from logutil.core.logger.levels import level_name, resolve_level
from logutil.core.logger.signals import LevelSignalController, start_level_signals

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogSettings:
    """Concrete logger settings resolved from a LogConfig."""

    level: int
    formatter: logging.Formatter
    filename: str = ""
    rotation: Optional[RotationPolicy] = None


def _or_default(value: int, default: int, name: str) -> int:
    if value > 0:
        return value
    if value < 0:
        logger.warning("%s=%d is not allowed, using %d", name, value, default)
    return default


def normalize(config: LogConfig) -> LogConfig:
    """Replace unset (zero or negative) numeric fields by their defaults."""
    return replace(
        config,
        max_size=_or_default(config.max_size, DEFAULT_MAX_SIZE, "max_size"),
        max_days=_or_default(config.max_days, DEFAULT_MAX_DAYS, "max_days"),
        max_backups=_or_default(config.max_backups, DEFAULT_MAX_BACKUPS, "max_backups"),
    )


def validate_target(filename: str) -> None:
    """Raise InvalidTargetError if `filename` is an existing directory."""
    if filename and os.path.isdir(filename):
        raise InvalidTargetError(
            f"Can't use directory as log file name: {filename}",
            details={"filename": filename},
        )


def translate(config: LogConfig) -> LogSettings:
    """
    Map a LogConfig to LogSettings without touching any logger.

    Raises:
        InvalidTargetError: config.filename is an existing directory.
    """
    validate_target(config.filename)
    config = normalize(config)
    rotation = None
    if config.filename and config.log_rotate:
        rotation = RotationPolicy(
            max_size_mb=config.max_size,
            max_days=config.max_days,
            max_backups=config.max_backups,
        )
    return LogSettings(
        level=resolve_level(config.level),
        formatter=resolve_formatter(config.format),
        filename=config.filename,
        rotation=rotation,
    )


class LoggerHandle:
    """
    Owner of one configured stdlib logger (the root logger by default).

    Pass the handle to components that need to reconfigure logging; code that
    only logs keeps using logging.getLogger(__name__).
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger if logger is not None else logging.getLogger()
        self.settings: Optional[LogSettings] = None
        self.signal_controller: Optional[LevelSignalController] = None
        self._lock = threading.Lock()

    @property
    def level(self) -> int:
        return self.logger.level

    def set_level(self, level: int) -> None:
        with self._lock:
            self.logger.setLevel(level)

    def install(self, settings: LogSettings) -> None:
        """Replace the logger's handlers and level with `settings`."""
        if settings.filename:
            try:
                handler: logging.Handler = build_file_handler(settings.filename, settings.rotation)
            except OSError as exc:
                raise ConfigurationError(
                    f"Could not open log file {settings.filename}: {exc}",
                    details={"filename": settings.filename},
                    cause=exc,
                ) from exc
        else:
            handler = logging.StreamHandler()
        handler.setFormatter(settings.formatter)

        with self._lock:
            self._drop_handlers()
            self.logger.addHandler(handler)
            self.logger.setLevel(settings.level)
            self.logger.propagate = False
            self.settings = settings

    def close(self) -> None:
        """Stop the signal controller and close every handler."""
        if self.signal_controller is not None:
            self.signal_controller.stop()
            self.signal_controller = None
        with self._lock:
            self._drop_handlers()
            self.settings = None

    def _drop_handlers(self) -> None:
        for old in list(self.logger.handlers):
            self.logger.removeHandler(old)
            old.close()


_default_handle: Optional[LoggerHandle] = None
_default_lock = threading.Lock()


def default_handle() -> LoggerHandle:
    """Process-wide handle around the root logger, created on first use."""
    global _default_handle
    with _default_lock:
        if _default_handle is None:
            _default_handle = LoggerHandle()
        return _default_handle


def init_logger(
    config: Optional[LogConfig] = None,
    *,
    handle: Optional[LoggerHandle] = None,
    level_signals: bool = False,
) -> LoggerHandle:
    """
    Configure a logger from `config` (LogConfig.from_env() if None).

    Validation runs before anything is installed, so a failing call leaves
    the previous configuration untouched. With `level_signals`, SIGUSR1 and
    SIGUSR2 switch the level to debug and error at runtime.

    Raises:
        InvalidTargetError: config.filename is an existing directory.
        ConfigurationError: the log file could not be opened.
    """
    if config is None:
        config = LogConfig.from_env()
    settings = translate(config)
    if handle is None:
        handle = default_handle()
    handle.install(settings)

    if level_signals:
        start_level_signals(handle)

    logger.debug(
        "Logger initialized: level=%s file=%s rotate=%s",
        level_name(settings.level),
        settings.filename or "<stderr>",
        settings.rotation is not None,
    )
    return handle


def get_logger(name: str, config: Optional[LogConfig] = None) -> logging.Logger:
    """
    Return a logger for the given name. If the default handle was never
    configured, calls init_logger(config or from_env()) first.
    """
    if default_handle().settings is None:
        init_logger(config)
    return logging.getLogger(name)
