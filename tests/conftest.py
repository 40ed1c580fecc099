from datetime import datetime, timedelta, timezone

import pytest


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class RecordingLogger:
    def __init__(self):
        self.infos = []
        self.errors = []

    def info(self, message):
        self.infos.append(message)

    def error(self, message):
        self.errors.append(message)


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 11, 6, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def logger():
    return RecordingLogger()
