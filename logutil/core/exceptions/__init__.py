"""
logutil exception system.

Usage:
    from logutil.core.exceptions import InvalidTargetError, LogUtilError

    try:
        init_logger(LogConfig(filename="/var/log"))
    except InvalidTargetError as exc:
        print(exc.to_dict())
"""
from logutil.core.exceptions.base import LogUtilError
from logutil.core.exceptions.errors import ConfigurationError, InvalidTargetError

__all__ = [
    "LogUtilError",
    "ConfigurationError",
    "InvalidTargetError",
]
