"""
Structured logging system for better log analysis and debugging.
Provides JSON-formatted logs with context and metadata.
"""

import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any

from rich.markup import escape


class StructuredLogger:
    """
    Logger that emits each event both to the standard logger and, optionally,
    as one JSON object per line.

    Usage:
        logger = StructuredLogger("vibing_cli")
        logger.info("search_applied", page=1, track_count=10)
    """

    def __init__(
        self,
        name: str,
        log_dir: Path | None = None,
        enable_json: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            log_dir: Directory for JSON log files (None = disabled)
            enable_json: Enable JSON file logging
            enable_console: Enable console output
        """
        self.name = name
        self.log_dir = log_dir
        self.enable_json = enable_json and log_dir is not None
        self.enable_console = enable_console

        self._logger = logging.getLogger(name)

        self._json_file = None
        if self.enable_json:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            json_log_path = log_dir / f"vibing_cli_{timestamp}.jsonl"
            self._json_file = open(json_log_path, "a", encoding="utf-8")  # noqa: SIM115

        # Session context (added to all log entries)
        self._session_context: dict[str, Any] = {
            "session_id": f"{int(time.time())}_{id(self)}",
            "start_time": datetime.now().isoformat(),
        }

    def set_session_context(self, **kwargs) -> None:
        """Set session-level context that appears in all logs."""
        self._session_context.update(kwargs)

    def _format_message(self, event: str, **context) -> str:
        parts = [f"{event}:"]
        for key, value in context.items():
            parts.append(f"{key}={escape(str(value))}")
        return " ".join(parts)

    def _write_json(self, level: str, event: str, **context) -> None:
        if not self._json_file or self._json_file.closed:
            return

        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "event": event,
            **self._session_context,
            **context,
        }

        try:
            self._json_file.write(json.dumps(entry, default=str) + "\n")
            self._json_file.flush()
        except OSError as e:
            print(f"JSON logging failed: {e}", file=sys.stderr)

    def _log(self, level: int, event: str, **context) -> None:
        if self.enable_console:
            self._logger.log(level, self._format_message(event, **context))
        if self.enable_json:
            self._write_json(logging.getLevelName(level), event, **context)

    def debug(self, event: str, **context) -> None:
        self._log(logging.DEBUG, event, **context)

    def info(self, event: str, **context) -> None:
        self._log(logging.INFO, event, **context)

    def warning(self, event: str, **context) -> None:
        self._log(logging.WARNING, event, **context)

    def error(self, event: str, **context) -> None:
        self._log(logging.ERROR, event, **context)

    def close(self) -> None:
        """Close JSON log file."""
        if self._json_file and not self._json_file.closed:
            self._json_file.close()


class CatalogLogger:
    """Specialized logger for catalog events."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def search_applied(self, query: str, page: int, track_count: int):
        self.logger.debug(
            "search_applied", query=query, page=page, track_count=track_count
        )

    def search_discarded(self, query: str, page: int):
        self.logger.debug("search_discarded", query=query, page=page)

    def search_failed(self, query: str, page: int, error: Exception):
        self.logger.warning(
            "search_failed",
            query=query,
            page=page,
            error_type=type(error).__name__,
            error=str(error),
        )


class PlaybackLogger:
    """Specialized logger for playback, volume and download events."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def playback_started(self, track_id: int, volume: int):
        self.logger.debug("playback_started", track_id=track_id, volume=volume)

    def playback_stopped(self, track_id: int):
        self.logger.debug("playback_stopped", track_id=track_id)

    def volume_changed(self, requested: float, applied: int):
        self.logger.debug("volume_changed", requested=requested, applied=applied)

    def download_requested(self, track_id: int):
        self.logger.info("download_requested", track_id=track_id)

    def download_completed(self, track_id: int, path: Path, size_bytes: int):
        self.logger.info(
            "download_completed",
            track_id=track_id,
            path=str(path),
            size_mb=round(size_bytes / (1024 * 1024), 2),
        )


def create_structured_logger(
    log_dir: Path | None = None, enable_json: bool = False
) -> tuple[StructuredLogger, CatalogLogger, PlaybackLogger]:
    """
    Create all structured loggers.

    Returns:
        Tuple of (base_logger, catalog_logger, playback_logger)
    """
    base = StructuredLogger("vibing_cli.events", log_dir=log_dir, enable_json=enable_json)
    return base, CatalogLogger(base), PlaybackLogger(base)
