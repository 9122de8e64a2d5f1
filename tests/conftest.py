"""Shared fixtures: sinks that record what the machine asked for."""

import pytest

from pomoterm.scheduler import SessionMachine


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def notify(self, title, body):
        self.sent.append((title, body))


class RecordingSound:
    def __init__(self):
        self.plays = 0

    def play(self):
        self.plays += 1


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def sound():
    return RecordingSound()


@pytest.fixture
def machine(notifier, sound):
    return SessionMachine(notifier=notifier, sound=sound)


@pytest.fixture
def clock():
    return FakeClock()
