"""
Shared test fixtures and utilities for the fluentspec test suite.
"""

import os

import pytest

from fluentspec.retry import RetryEngine
from fluentspec.settings import ENV_PREFIX, Settings


class RecordingDelay:
    """Delay function running its callback synchronously and counting calls."""

    def __init__(self):
        self.calls = 0

    def __call__(self, callback):
        self.calls += 1
        callback()


class Gauge:
    """Subject whose reading converges one step per read."""

    def __init__(self, readings):
        self._readings = list(readings)
        self.reads = 0

    @property
    def value(self):
        index = min(self.reads, len(self._readings) - 1)
        self.reads += 1
        return self._readings[index]

    def reading(self, offset=0):
        return self.value + offset


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Hide FLUENTSPEC_* variables of the invoking shell from every test."""
    for name in list(os.environ):
        if name.upper().startswith(ENV_PREFIX):
            monkeypatch.delenv(name)


@pytest.fixture
def delay():
    """Synchronous delay that records how often the retry engine waited."""
    return RecordingDelay()


@pytest.fixture
def settings(delay):
    """Settings with the recording delay and the default retry budget."""
    return Settings(delay=delay)


@pytest.fixture
def retry_engine(delay):
    return RetryEngine(max_retries=5, delay=delay)


@pytest.fixture
def gauge_factory():
    """Build a `Gauge` shared across retries of the same specification."""

    def factory(*readings):
        return Gauge(readings)

    return factory
