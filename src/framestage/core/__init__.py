"""Core types, enums, and errors for framestage."""

from .enums import SourceType

from .errors import (
    FrameStageError,
    IntegrityError,
    ChannelCountError,
    EmptyFrameOverflowError,
    WindowError,
    SourceError,
    ConfigError,
)

from .types import (
    FrameRecord,
    FrameBatch,
    ProducerWindow,
    CameraParameters,
    is_empty_image,
    channel_count,
)

__all__ = [
    # Enums
    "SourceType",
    # Errors
    "FrameStageError",
    "IntegrityError",
    "ChannelCountError",
    "EmptyFrameOverflowError",
    "WindowError",
    "SourceError",
    "ConfigError",
    # Types
    "FrameRecord",
    "FrameBatch",
    "ProducerWindow",
    "CameraParameters",
    "is_empty_image",
    "channel_count",
]
