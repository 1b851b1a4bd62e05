"""Append-only log sink: console and/or file, thread-safe."""

import json
import logging
import os
import sys
import threading

from logdemo.models import Level, LogRecord

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
VALID_FORMATS = ("text", "json")

logger = logging.getLogger(__name__)


def format_text(record: LogRecord) -> str:
    ts = record.timestamp.strftime(TIMESTAMP_FORMAT)
    millis = record.timestamp.microsecond // 1000
    return f"{ts}.{millis:03d} {record.level.name:<5} {record.source} - {record.message}"


def format_json(record: LogRecord) -> str:
    return json.dumps({
        "timestamp": record.timestamp.isoformat(),
        "level": record.level.name,
        "logger": record.source,
        "message": record.message,
    })


def get_formatter(fmt: str):
    """Return the formatter function for the given format string."""
    formatters = {
        "text": format_text,
        "json": format_json,
    }
    return formatters[fmt]


class LogSink:
    """Writes one line per record to stdout and/or a file.

    Records below ``min_level`` are dropped. When ``max_bytes`` is set the
    file is rotated once it reaches that size, keeping ``backup_count``
    older files as ``<name>.1`` .. ``<name>.N``.
    """

    def __init__(
        self,
        output_file: str | None = None,
        console_enabled: bool = True,
        log_format: str = "text",
        min_level: Level = Level.DEBUG,
        max_bytes: int = 0,
        backup_count: int = 5,
        stream=None,
    ):
        self._output_file = output_file
        self._console_enabled = console_enabled
        self._formatter = get_formatter(log_format)
        self._min_level = min_level
        self._max_bytes = max_bytes
        self._backup_count = backup_count
        self._stream = stream
        self._lock = threading.Lock()
        self._file_handle = None
        if output_file:
            self._ensure_directory()
            self._open_file()

    def _ensure_directory(self):
        dir_path = os.path.dirname(self._output_file)
        if dir_path:
            os.makedirs(dir_path, exist_ok=True)

    def _open_file(self):
        self._file_handle = open(self._output_file, "a", encoding="utf-8")

    def _should_rotate(self) -> bool:
        if not self._max_bytes:
            return False
        try:
            return os.path.getsize(self._output_file) >= self._max_bytes
        except OSError:
            return False

    def _rotate(self):
        self._file_handle.close()
        try:
            for i in range(self._backup_count - 1, 0, -1):
                src = f"{self._output_file}.{i}"
                if os.path.exists(src):
                    os.replace(src, f"{self._output_file}.{i + 1}")
            if self._backup_count > 0:
                os.replace(self._output_file, f"{self._output_file}.1")
            else:
                os.remove(self._output_file)
        finally:
            self._open_file()

    def _write_file(self, line: str):
        self._file_handle.write(line + "\n")
        self._file_handle.flush()
        if self._should_rotate():
            try:
                self._rotate()
            except OSError as e:
                logger.warning("Rotation of %s failed, keeping current file: %s",
                               self._output_file, e)

    def append(self, record: LogRecord):
        """Write the record to the console, then the file.

        A file error still raises, but only after the console line is out.
        """
        if record.level < self._min_level:
            return
        line = self._formatter(record)
        with self._lock:
            if self._console_enabled:
                stream = self._stream or sys.stdout
                stream.write(line + "\n")
                stream.flush()
            if self._file_handle:
                self._write_file(line)

    @property
    def closed(self) -> bool:
        return self._file_handle is None

    def close(self):
        with self._lock:
            if self._file_handle:
                self._file_handle.close()
                self._file_handle = None


def create_sink(sink_config: dict) -> LogSink:
    """Build a LogSink from the ``sink`` section of the configuration."""
    return LogSink(
        output_file=sink_config.get("file") or None,
        console_enabled=sink_config.get("console", True),
        log_format=sink_config.get("format", "text"),
        min_level=Level.parse(sink_config.get("level", "DEBUG")),
        max_bytes=sink_config.get("max_bytes", 0),
        backup_count=sink_config.get("backup_count", 5),
    )
