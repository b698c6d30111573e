"""
Structured key/value fields on log records.

    log = with_fields(get_logger(__name__), name="jack", sex="male")
    log.info("ok")
    log.with_fields(request_id="abc").warning("slow")
    log.info("per call", extra={"fields": {"attempt": 2}})
"""
from __future__ import annotations

import logging
from typing import Any, MutableMapping, Union


class FieldsAdapter(logging.LoggerAdapter):
    """LoggerAdapter that stores its fields on every record as `record.fields`."""

    def __init__(self, logger: logging.Logger, fields: dict[str, Any]) -> None:
        super().__init__(logger, {"fields": dict(fields)})

    @property
    def fields(self) -> dict[str, Any]:
        return dict(self.extra["fields"])

    def with_fields(self, **fields: Any) -> "FieldsAdapter":
        """Return a new adapter with these fields added on top of the current ones."""
        return FieldsAdapter(self.logger, {**self.extra["fields"], **fields})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        call_fields = extra.get("fields") or {}
        extra["fields"] = {**self.extra["fields"], **call_fields}
        kwargs["extra"] = extra
        return msg, kwargs


def with_fields(
    logger: Union[logging.Logger, FieldsAdapter], **fields: Any
) -> FieldsAdapter:
    """Wrap a logger (or extend an adapter) with structured fields."""
    if isinstance(logger, FieldsAdapter):
        return logger.with_fields(**fields)
    return FieldsAdapter(logger, fields)
