"""Tests for the empty-frame watchdog."""

import pytest

from framestage.core import EmptyFrameOverflowError, IntegrityError
from framestage.producer import EmptyFrameWatchdog


class TestEmptyFrameWatchdog:
    def test_default_threshold(self):
        assert EmptyFrameWatchdog().threshold == 500

    def test_counts_and_resets(self):
        watchdog = EmptyFrameWatchdog()
        assert watchdog.update(True) == 1
        assert watchdog.update(True) == 2
        assert watchdog.update(False) == 0

    def test_fails_on_500th_empty_pull(self):
        watchdog = EmptyFrameWatchdog()
        for _ in range(499):
            watchdog.update(True)
        with pytest.raises(EmptyFrameOverflowError) as exc_info:
            watchdog.update(True)
        assert exc_info.value.count == 500
        assert "500" in str(exc_info.value)
        assert isinstance(exc_info.value, IntegrityError)

    def test_499_empty_then_success_resets(self):
        watchdog = EmptyFrameWatchdog()
        for _ in range(499):
            watchdog.update(True)
        assert watchdog.update(False) == 0
        assert watchdog.update(True) == 1

    def test_invalid_threshold(self):
        with pytest.raises(ValueError):
            EmptyFrameWatchdog(threshold=0)
