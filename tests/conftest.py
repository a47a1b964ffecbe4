from __future__ import annotations

import pytest

from tests.fakes import ManualClock, RecordingFallback


@pytest.fixture()
def fallback() -> RecordingFallback:
    return RecordingFallback()


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()
