"""Shared fixtures for ctxlog tests."""

import io
import json

import pytest


@pytest.fixture
def buffer():
    """In-memory output sink for a logging engine."""
    return io.StringIO()


@pytest.fixture
def read_records(buffer):
    """Decode every JSON record written to ``buffer`` so far."""
    def _read():
        return [json.loads(line) for line in buffer.getvalue().splitlines() if line]
    return _read
