"""
Interpretation Log

Append-only, size-rotated log of Interpretation Records.

Layout (base name "scribe_interpretation"):
    scribe_interpretation.jsonl      active segment, receives appends
    scribe_interpretation.1.jsonl    newest archive
    ...
    scribe_interpretation.N.jsonl    oldest archive, N <= max_segments

Each line is one JSON-serialized record and can be parsed on its own.
Rotation happens lazily: the next append after the active segment reaches
max_segment_bytes retires it before writing, so a record is never split
across segments.

One writer per log directory. Appends from several processes or threads
into the same directory are not supported.
"""

import json
import logging
import os
import re
from collections import deque
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from pydantic import ValidationError

from ..common.config import AuditLogConfig, ScribeConfig
from ..common.schemas import InterpretationRecord, utc_timestamp

logger = logging.getLogger("scribe.interpretation.audit_log")

SEGMENT_SUFFIX = ".jsonl"

LogEntry = Union[InterpretationRecord, Dict[str, Any]]


class InterpretationLog:
    """
    Writer (and reader) for one interpretation log stream.

    Construct once per log directory and share the instance with every
    call site that appends. Each append is synchronous: it returns after
    the line has been flushed and fsynced, or raises the OSError.
    """

    def __init__(self, config: Optional[AuditLogConfig] = None):
        """
        Initialize the log and ensure its directory exists.

        Args:
            config: Log options (default: AuditLogConfig())

        Raises:
            OSError: If the log directory cannot be created
        """
        self._config = config or AuditLogConfig()
        self._ensure_directory()
        self._active_path = self._segment_path(None)

    @classmethod
    def from_config(cls, config: ScribeConfig) -> "InterpretationLog":
        """Build from a loaded ScribeConfig"""
        return cls(config.audit_log)

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    @property
    def config(self) -> AuditLogConfig:
        return self._config

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def enable(self) -> None:
        self._config = replace(self._config, enabled=True)

    def disable(self) -> None:
        """Turn append into a silent no-op"""
        self._config = replace(self._config, enabled=False)

    def update_options(self, **changes: Any) -> AuditLogConfig:
        """
        Update log options and recompute the active segment path.

        Args:
            **changes: Any AuditLogConfig field (log_directory, base_name,
                enabled, max_segment_bytes, max_segments)

        Returns:
            The new configuration

        Raises:
            TypeError: On an unknown option name
            OSError: If a new log directory cannot be created
        """
        self._config = replace(self._config, **changes)
        self._ensure_directory()
        self._active_path = self._segment_path(None)
        logger.debug("Log options updated, active segment: %s", self._active_path)
        return self._config

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @property
    def log_directory(self) -> Path:
        return Path(self._config.log_directory).expanduser()

    @property
    def active_segment_path(self) -> Path:
        return self._active_path

    def archived_segment_path(self, index: int) -> Path:
        """Path of archive number `index` (1 is the newest)"""
        return self._segment_path(index)

    def archived_indices(self) -> List[int]:
        """Indices of archives present on disk, ascending"""
        pattern = re.compile(
            rf"^{re.escape(self._config.base_name)}\.(\d+){re.escape(SEGMENT_SUFFIX)}$"
        )
        indices = []
        if not self.log_directory.is_dir():
            return indices
        for path in self.log_directory.iterdir():
            match = pattern.match(path.name)
            if match and int(match.group(1)) > 0:
                indices.append(int(match.group(1)))
        return sorted(indices)

    def segment_paths(self) -> List[Path]:
        """Existing segments, oldest archive first and active segment last"""
        paths = [self._segment_path(i) for i in reversed(self.archived_indices())]
        if self._active_path.exists():
            paths.append(self._active_path)
        return paths

    def _segment_path(self, index: Optional[int]) -> Path:
        if index is None:
            name = f"{self._config.base_name}{SEGMENT_SUFFIX}"
        else:
            name = f"{self._config.base_name}.{index}{SEGMENT_SUFFIX}"
        return self.log_directory / name

    def _ensure_directory(self) -> None:
        try:
            self.log_directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Failed to create log directory %s: %s", self.log_directory, e)
            raise

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def append(self, record: LogEntry) -> None:
        """
        Append a record as one line to the active segment.

        No-op when logging is disabled. Rotates first if the active segment
        has reached max_segment_bytes. Fills in the timestamp if empty.

        Args:
            record: InterpretationRecord, or a plain dict of the same shape

        Raises:
            OSError: If rotation or the write fails. The record is not
                retried or buffered.
        """
        if not self._config.enabled:
            return

        line = self._serialize(record)

        if self.needs_rotation():
            self.rotate()

        try:
            with open(self._active_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            logger.error("Failed to append to %s: %s", self._active_path, e)
            raise

    def _serialize(self, record: LogEntry) -> str:
        if isinstance(record, InterpretationRecord):
            if not record.timestamp:
                record.timestamp = utc_timestamp()
            return record.to_log_line()

        if isinstance(record, dict):
            if not record.get("timestamp"):
                record["timestamp"] = utc_timestamp()
            return json.dumps(record, ensure_ascii=False, default=str)

        raise TypeError(f"Cannot log {type(record).__name__}, expected InterpretationRecord or dict")

    def needs_rotation(self) -> bool:
        """True if the active segment exists and has reached max_segment_bytes"""
        try:
            size = self._active_path.stat().st_size
        except FileNotFoundError:
            return False
        return size >= self._config.max_segment_bytes

    def rotate(self) -> None:
        """
        Retire the active segment to archive 1, shifting older archives up.

        Archive slots 1..max_segments form a bounded deque; pushing the
        active segment onto the front evicts whatever sat in the last slot,
        unless the slot before it is empty. Then the last archive stays where
        it is and the gap absorbs the shift.
        Renames run from the highest slot down so no archive is overwritten
        before it has moved. Archives numbered above max_segments (left
        over from a larger setting) are deleted.

        Raises:
            OSError: If a delete or rename fails
        """
        if not self._active_path.exists():
            return

        max_segments = self._config.max_segments
        slots = deque(
            (self._existing(self._segment_path(i)) for i in range(1, max_segments + 1)),
            maxlen=max_segments,
        )
        evicted = None
        if max_segments > 1 and slots[-2] is None:
            del slots[-2]
        else:
            evicted = slots[-1]
        slots.appendleft(self._active_path)

        try:
            if evicted is not None:
                evicted.unlink()
                logger.info("Evicted oldest log segment %s", evicted.name)

            for index in self.archived_indices():
                if index > max_segments:
                    stale = self._segment_path(index)
                    stale.unlink()
                    logger.info("Removed log segment %s beyond retention limit", stale.name)

            for index in range(len(slots), 0, -1):
                source = slots[index - 1]
                target = self._segment_path(index)
                if source is None or source == target:
                    continue
                source.replace(target)
        except OSError as e:
            logger.error("Log rotation failed in %s: %s", self.log_directory, e)
            raise

        logger.info("Rotated %s (limit %d bytes)", self._active_path.name, self._config.max_segment_bytes)

    @staticmethod
    def _existing(path: Path) -> Optional[Path]:
        return path if path.exists() else None

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def iter_records(self) -> Iterator[InterpretationRecord]:
        """
        Yield all records, oldest first.

        Lines that are blank or fail to parse are skipped with a warning.
        """
        for path in self.segment_paths():
            with open(path, encoding="utf-8", errors="replace") as f:
                for line_no, line in enumerate(f, 1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        yield InterpretationRecord.model_validate_json(line)
                    except ValidationError as e:
                        logger.warning(
                            "Skipping unreadable record %s:%d (%d errors)",
                            path.name, line_no, e.error_count(),
                        )

    def stats(self) -> Dict[str, int]:
        """Segment count, total bytes and record count"""
        paths = self.segment_paths()
        records = 0
        for path in paths:
            with open(path, encoding="utf-8", errors="replace") as f:
                records += sum(1 for line in f if line.strip())
        return {
            "segments": len(paths),
            "archived_segments": len(self.archived_indices()),
            "total_bytes": sum(p.stat().st_size for p in paths),
            "records": records,
        }
