"""Log record and scenario value types."""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum


class Level(IntEnum):
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    @classmethod
    def parse(cls, text: str) -> "Level":
        """Parse a level name, accepting WARNING as an alias for WARN."""
        name = text.strip().upper()
        if name == "WARNING":
            name = "WARN"
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown log level: {text!r}") from None


@dataclass(frozen=True)
class LogRecord:
    timestamp: datetime
    level: Level
    message: str
    source: str


@dataclass(frozen=True)
class Scenario:
    level: Level
    headline: str
    detail: str


@dataclass(frozen=True)
class BusinessOperation:
    name: str
    duration_seconds: float
    succeeded: bool


@dataclass(frozen=True)
class ApiMetrics:
    total_requests: int
    successful_requests: int
    failed_requests: int
    avg_response_ms: float

    @property
    def degraded(self) -> bool:
        return self.avg_response_ms > 400
