"""Liveness guard against sources that only ever return empty frames."""

from framestage.core import EmptyFrameOverflowError


class EmptyFrameWatchdog:
    """Counts consecutive empty pulls and fails once a threshold is hit.

    A disconnected camera often keeps reporting itself open while handing
    back nothing; without this guard the producer would spin forever.
    """

    EMPTY_FRAME_THRESHOLD = 500

    def __init__(self, threshold: int = EMPTY_FRAME_THRESHOLD):
        if threshold < 1:
            raise ValueError(f"threshold must be >= 1, got {threshold}")
        self.threshold = threshold
        self.consecutive_empty_frames = 0

    def update(self, empty: bool) -> int:
        """Record one pull.

        Returns:
            The current consecutive-empty count.

        Raises:
            EmptyFrameOverflowError: When the count reaches the threshold.
        """
        self.consecutive_empty_frames = self.consecutive_empty_frames + 1 if empty else 0
        if self.consecutive_empty_frames >= self.threshold:
            raise EmptyFrameOverflowError(self.consecutive_empty_frames)
        return self.consecutive_empty_frames
