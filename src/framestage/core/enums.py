"""Core enumerations for framestage."""

from enum import Enum, auto


class SourceType(Enum):
    """Kind of capture source feeding a producer."""
    LIVE_DEVICE = auto()  # webcam / IP stream, not seekable
    FILE = auto()
    IMAGE_DIRECTORY = auto()
    SYNCHRONIZED_RIG = auto()

    @property
    def is_seekable(self) -> bool:
        """Whether frame positioning is meaningful for this source kind."""
        return self is not SourceType.LIVE_DEVICE
