"""Builds LogRecords and hands them to the sink."""

import logging
import threading
from datetime import datetime, timezone

from logdemo.models import Level, LogRecord

logger = logging.getLogger(__name__)


class EventEmitter:
    """Turns (level, source, template, args) into one record on the sink.

    Emission is best-effort: a failing sink or a bad template is reported
    on the diagnostic logger and never propagates to the caller.
    """

    def __init__(self, sink, time_func=None):
        self._sink = sink
        self._time_func = time_func or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()
        self._last_timestamp = None

    def _next_timestamp(self) -> datetime:
        with self._lock:
            now = self._time_func()
            if self._last_timestamp is not None and now < self._last_timestamp:
                now = self._last_timestamp
            self._last_timestamp = now
            return now

    def emit(self, level: Level, source: str, message: str, *args):
        try:
            text = message % args if args else message
            record = LogRecord(
                timestamp=self._next_timestamp(),
                level=level,
                message=text,
                source=source,
            )
            self._sink.append(record)
        except Exception as e:
            logger.warning("Dropped %s record from %s: %s", getattr(level, "name", level), source, e)

    def debug(self, source: str, message: str, *args):
        self.emit(Level.DEBUG, source, message, *args)

    def info(self, source: str, message: str, *args):
        self.emit(Level.INFO, source, message, *args)

    def warn(self, source: str, message: str, *args):
        self.emit(Level.WARN, source, message, *args)

    def error(self, source: str, message: str, *args):
        self.emit(Level.ERROR, source, message, *args)
