"""Seek / pause control shared between a UI thread and the producer."""

import logging
import threading
from typing import Optional

from framestage.sources.base import CaptureSource

logger = logging.getLogger(__name__)


class SeekState:
    """Pause flag plus a pending frame increment, safe to share across threads.

    A controller thread calls :meth:`seek` / :meth:`set_paused`; the
    producer calls :meth:`take_increment` once per poll, which returns the
    accumulated increment and resets it to zero in one step.  A seek that
    lands after the take is applied on the next poll.
    """

    def __init__(self, paused: bool = False, pending_increment: int = 0):
        self._lock = threading.Lock()
        self._paused = paused
        self._pending_increment = pending_increment

    @property
    def paused(self) -> bool:
        with self._lock:
            return self._paused

    @property
    def pending_increment(self) -> int:
        with self._lock:
            return self._pending_increment

    def set_paused(self, paused: bool) -> None:
        with self._lock:
            self._paused = paused

    def toggle_pause(self) -> bool:
        """Flip the pause flag and return the new value."""
        with self._lock:
            self._paused = not self._paused
            return self._paused

    def seek(self, frames: int) -> None:
        """Queue a relative jump of ``frames`` (negative = backwards)."""
        with self._lock:
            self._pending_increment += frames

    def take_increment(self) -> int:
        """Return the pending increment and reset it to 0."""
        with self._lock:
            increment = self._pending_increment
            self._pending_increment = 0
            return increment

    def __repr__(self) -> str:
        return f"SeekState(paused={self.paused}, pending_increment={self.pending_increment})"


class SeekController:
    """Turns the shared :class:`SeekState` into source position changes.

    While paused, one frame is subtracted from every poll's increment to
    cancel the source's natural advance, so the same frame is delivered
    again instead of the stream drifting forward.
    """

    def __init__(self, state: Optional[SeekState] = None):
        self.state = state

    def compute_increment(self) -> int:
        """Consume the pending increment and apply pause compensation."""
        if self.state is None:
            return 0
        # Pause is read fresh every poll, never cached.
        pause_offset = 1 if self.state.paused else 0
        return self.state.take_increment() - pause_offset

    def apply(self, source: CaptureSource) -> int:
        """Reposition ``source`` for the next pull.

        Returns:
            The increment applied (0 when nothing moved).
        """
        if self.state is None:
            return 0
        increment = self.compute_increment()
        if increment != 0 and source.source_type.is_seekable:
            position = source.get_position()
            source.set_position(position + increment)
            logger.debug("Seek %+d frames from %.0f", increment, position)
            return increment
        return 0
