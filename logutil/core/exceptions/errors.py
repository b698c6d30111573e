"""
Concrete exception types.
"""
from __future__ import annotations

from logutil.core.exceptions.base import LogUtilError


class ConfigurationError(LogUtilError):
    """Invalid or unreadable logger configuration."""

    default_code = "CONFIGURATION_ERROR"


class InvalidTargetError(ConfigurationError):
    """Configured log filename points at an existing directory."""

    default_code = "INVALID_TARGET"
