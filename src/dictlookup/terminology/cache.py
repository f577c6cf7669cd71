from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Iterable

from .record import Record

logger = logging.getLogger(__name__)


class CacheInitError(RuntimeError):
    """The cache file could not be created."""


class CacheStoreError(RuntimeError):
    """Reading or rewriting the cache file failed."""


def compile_pattern(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error:
        logger.debug("'%s' is not a valid regular expression, matching it literally", pattern)
        return re.compile(re.escape(pattern), re.IGNORECASE)


class CacheStore:
    """Sorted, deduplicated flat file of ``left<TAB>right`` lines.

    There is no locking: two processes merging at the same time can lose
    one of the updates. Each rewrite replaces the file by rename, so a
    reader never sees a half-written store.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def ensure_exists(self) -> None:
        if self.path.is_file():
            return
        if self.path.exists():
            raise CacheInitError(f"Cache path {self.path} exists but is not a regular file")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch(exist_ok=True)
        except OSError as exc:
            raise CacheInitError(f"Cannot create cache file {self.path}: {exc}") from exc
        logger.debug("created empty cache file %s", self.path)

    def lines(self) -> list[str]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise CacheStoreError(f"Cannot read cache file {self.path}: {exc}") from exc
        return [line for line in raw.splitlines() if line]

    def query(self, pattern: str | re.Pattern[str]) -> list[str]:
        regex = compile_pattern(pattern)
        return [line for line in self.lines() if regex.search(line)]

    def merge(self, records: Iterable[Record]) -> int:
        existing = self.lines()
        merged = set(existing)
        merged.update(record.line for record in records if not record.is_blank)
        added = len(merged) - len(set(existing))
        self._write(sorted(merged))
        logger.debug("merged %d new lines into %s (%d total)", added, self.path, len(merged))
        return added

    def _write(self, lines: list[str]) -> None:
        content = "".join(f"{line}\n" for line in lines)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                handle.write(content)
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise CacheStoreError(f"Cannot write cache file {self.path}: {exc}") from exc
