"""Utilities for framestage."""

from .config import (
    FrameStageConfig,
    SourceConfig,
    ProducerConfig,
    LoggingConfig,
    load_config,
    parse_override,
)

__all__ = [
    "FrameStageConfig",
    "SourceConfig",
    "ProducerConfig",
    "LoggingConfig",
    "load_config",
    "parse_override",
]
