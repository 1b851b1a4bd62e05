import random
import threading

import pytest

from logdemo.app import create_app
from logdemo.config import Config
from logdemo.emitter import EventEmitter


class RecordingSink:
    """In-memory sink that keeps every appended record."""

    def __init__(self):
        self.records = []
        self._lock = threading.Lock()

    def append(self, record):
        with self._lock:
            self.records.append(record)

    def messages(self, source=None):
        return [r.message for r in self.records if source is None or r.source == source]


class FixedRandom(random.Random):
    """Random source with pinned draws.

    ``randrange`` returns ``draw`` clamped into the requested range and
    ``random`` returns ``fraction``; ``choice`` stays seeded.
    """

    def __init__(self, draw=0, fraction=0.0):
        super().__init__(0)
        self.draw = draw
        self.fraction = fraction

    def randrange(self, start, stop=None, step=1):
        if stop is None:
            start, stop = 0, start
        return min(max(self.draw, start), stop - 1)

    def random(self):
        return self.fraction


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def emitter(sink):
    return EventEmitter(sink)


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def make_app(config, emitter):
    """Build a test app around the recording sink with an optional pinned rng."""
    def _make(rng=None, cancel_event=None):
        application = create_app(
            config, emitter=emitter, rng=rng or random.Random(42), cancel_event=cancel_event
        )
        application.config["TESTING"] = True
        return application
    return _make


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()
