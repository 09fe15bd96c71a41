"""Exception hierarchy for framestage.

Integrity errors are fatal: a producer that raised one must not be polled
again expecting useful output.  Everything else that goes wrong inside a
capture source surfaces as a :class:`SourceError`.
"""


class FrameStageError(Exception):
    """Base class for all framestage errors."""


class IntegrityError(FrameStageError):
    """A frame or frame stream violates a pipeline invariant."""


class ChannelCountError(IntegrityError):
    """Primary frame has a channel count other than 1 or 3."""

    def __init__(self, channels: int):
        self.channels = channels
        super().__init__(
            f"Input images must be 3-channel BGR (got {channels} channels)."
        )


class EmptyFrameOverflowError(IntegrityError):
    """Too many consecutive empty pulls from the capture source."""

    def __init__(self, count: int):
        self.count = count
        super().__init__(f"Detected too many ({count}) empty frames in a row.")


class WindowError(FrameStageError, ValueError):
    """Invalid frame window (negative bounds or last < first)."""


class SourceError(FrameStageError, RuntimeError):
    """A capture source could not be opened, read, or positioned."""


class ConfigError(FrameStageError, ValueError):
    """A configuration cannot be turned into a source or producer."""
