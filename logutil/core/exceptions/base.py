"""
Root of the logutil error hierarchy.

Errors carry a stable `code` for log filters and dashboards, a `details`
mapping with the offending values, and the underlying exception, taken from
`cause=` or from `raise ... from exc`.
"""
from __future__ import annotations

import traceback
from typing import Any, Optional


class LogUtilError(Exception):
    """Base class for errors raised while setting up logging."""

    default_code: str = "ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details: dict[str, Any] = dict(details or {})
        self._cause = cause

    @property
    def cause(self) -> Optional[BaseException]:
        """Explicit cause, else the exception this one was raised from."""
        return self._cause if self._cause is not None else self.__cause__

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}[{self.code}]({self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view for structured log fields."""
        out: dict[str, Any] = {
            "type": type(self).__name__,
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            out["details"] = dict(self.details)
        cause = self.cause
        if cause is not None:
            out["cause"] = str(cause)
            out["cause_traceback"] = traceback.format_exception(cause)
        return out
