"""
File sinks: size-based rotation with timestamped, gzip-compressed backups.

A rotated file is renamed next to the active one as
`<stem>-<YYYY-MM-DDTHH-MM-SS.mmm><suffix>[.gz]`, e.g.
`app-2026-10-19T14-03-22.481.log.gz`. After every rotation, backups beyond
`max_backups` (oldest first) and backups older than `max_days` are removed.
"""
from __future__ import annotations

import gzip
import logging
import os
import re
import shutil
from contextlib import suppress
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

BACKUP_TIME_FORMAT = "%Y-%m-%dT%H-%M-%S"
COMPRESS_SUFFIX = ".gz"
_MB = 1024 * 1024


@dataclass(frozen=True)
class RotationPolicy:
    """Resolved rotation/retention limits for a file sink."""

    max_size_mb: int
    max_days: int
    max_backups: int
    local_time: bool = True
    compress: bool = True

    @property
    def max_bytes(self) -> int:
        return self.max_size_mb * _MB


class CompressingRotatingFileHandler(RotatingFileHandler):
    """
    RotatingFileHandler with timestamped backups, gzip compression and
    age-based retention.

    `max_backups` and `max_days` of 0 disable the respective limit.
    """

    def __init__(
        self,
        filename: str,
        *,
        max_bytes: int,
        max_backups: int = 0,
        max_days: int = 0,
        local_time: bool = True,
        compress: bool = True,
        encoding: Optional[str] = "utf-8",
        delay: bool = False,
    ) -> None:
        Path(filename).parent.mkdir(parents=True, exist_ok=True)
        super().__init__(
            filename,
            mode="a",
            maxBytes=max_bytes,
            backupCount=max_backups,
            encoding=encoding,
            delay=delay,
        )
        self.max_days = max_days
        self.local_time = local_time
        self.compress = compress
        self._last_rotation: Optional[datetime] = None
        base = Path(self.baseFilename)
        self._backup_re = re.compile(
            r"^"
            + re.escape(base.stem)
            + r"-(\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2})\.(\d{3})"
            + re.escape(base.suffix)
            + r"(" + re.escape(COMPRESS_SUFFIX) + r")?$"
        )
        # Limits may have shrunk since the last run
        self.remove_expired_backups()

    def _now(self) -> datetime:
        if self.local_time:
            return datetime.now()
        return datetime.now(timezone.utc).replace(tzinfo=None)

    def backup_filename(self, when: datetime) -> str:
        """Path of the backup for a rotation happening at `when`."""
        base = Path(self.baseFilename)
        stamp = f"{when.strftime(BACKUP_TIME_FORMAT)}.{when.microsecond // 1000:03d}"
        return str(base.with_name(f"{base.stem}-{stamp}{base.suffix}"))

    def _free_backup_filename(self) -> str:
        now = self._now()
        when = now.replace(microsecond=now.microsecond // 1000 * 1000)
        # Backup names must sort in rotation order, even within one millisecond
        if self._last_rotation is not None and when <= self._last_rotation:
            when = self._last_rotation + timedelta(milliseconds=1)
        name = self.backup_filename(when)
        while os.path.exists(name) or os.path.exists(name + COMPRESS_SUFFIX):
            when += timedelta(milliseconds=1)
            name = self.backup_filename(when)
        self._last_rotation = when
        return name

    def shouldRollover(self, record: logging.LogRecord) -> bool:
        if self.stream is None:
            self.stream = self._open()
        # An empty file is never rotated, however large the record
        if self.stream.tell() == 0:
            return False
        return bool(super().shouldRollover(record))

    def doRollover(self) -> None:
        if self.stream:
            self.stream.close()
            self.stream = None
        if os.path.exists(self.baseFilename):
            backup = self._free_backup_filename()
            os.replace(self.baseFilename, backup)
            if self.compress:
                compress_file(backup)
        self.remove_expired_backups()
        if not self.delay:
            self.stream = self._open()

    def list_backups(self) -> list[tuple[datetime, str]]:
        """Rotated files of this log as (rotation time, path), newest first."""
        directory = os.path.dirname(self.baseFilename)
        backups: list[tuple[datetime, str]] = []
        for entry in os.scandir(directory):
            if not entry.is_file():
                continue
            match = self._backup_re.match(entry.name)
            if match is None:
                continue
            try:
                when = datetime.strptime(match.group(1), BACKUP_TIME_FORMAT)
            except ValueError:
                continue
            when = when.replace(microsecond=int(match.group(2)) * 1000)
            backups.append((when, entry.path))
        backups.sort(reverse=True)
        return backups

    def remove_expired_backups(self) -> list[str]:
        """Delete backups over the count limit or past the retention horizon."""
        backups = self.list_backups()
        doomed: list[str] = []
        if self.backupCount > 0:
            doomed.extend(path for _, path in backups[self.backupCount:])
            backups = backups[: self.backupCount]
        if self.max_days > 0:
            cutoff = self._now() - timedelta(days=self.max_days)
            doomed.extend(path for when, path in backups if when < cutoff)
        for path in doomed:
            with suppress(FileNotFoundError):
                os.remove(path)
        return doomed


def compress_file(path: str) -> str:
    """Gzip `path` into `path.gz` and remove the original."""
    target = path + COMPRESS_SUFFIX
    with open(path, "rb") as src, gzip.open(target, "wb") as dst:
        shutil.copyfileobj(src, dst)
    os.remove(path)
    return target


def build_file_handler(
    filename: str,
    rotation: Optional[RotationPolicy],
) -> logging.FileHandler:
    """File handler for `filename`: rotating when a policy is given, plain append otherwise."""
    if rotation is None:
        Path(filename).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(filename, mode="a", encoding="utf-8")
    return CompressingRotatingFileHandler(
        filename,
        max_bytes=rotation.max_bytes,
        max_backups=rotation.max_backups,
        max_days=rotation.max_days,
        local_time=rotation.local_time,
        compress=rotation.compress,
    )
