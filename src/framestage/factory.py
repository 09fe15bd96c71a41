"""Build capture sources and producers from configuration."""

import logging
from typing import Optional

from framestage.core import ConfigError
from framestage.producer import FrameProducer, SeekState
from framestage.sources import (
    CaptureSource,
    ImageDirectorySource,
    SynchronizedRigSource,
    VideoFileSource,
    WebcamSource,
    load_rig_calibration,
)
from framestage.utils.config import FrameStageConfig, SourceConfig

logger = logging.getLogger(__name__)


def _require_path(config: SourceConfig) -> str:
    if not config.path:
        raise ConfigError(f"Source type '{config.type}' requires 'path'")
    return config.path


def create_source(config: SourceConfig) -> CaptureSource:
    """Open the capture source described by ``config``."""
    if config.type == "webcam":
        return WebcamSource(
            device=config.device,
            width=config.width,
            height=config.height,
            fps=config.fps,
        )
    if config.type == "video":
        return VideoFileSource(_require_path(config))
    if config.type == "images":
        return ImageDirectorySource(_require_path(config))
    if config.type == "rig":
        if not config.children:
            raise ConfigError("Source type 'rig' requires at least one child")
        if any(child.type == "rig" for child in config.children):
            raise ConfigError("Rigs cannot be nested")
        calibrations = (
            load_rig_calibration(config.calibration_dir)
            if config.calibration_dir else None
        )
        children = []
        try:
            for child in config.children:
                children.append(create_source(child))
            return SynchronizedRigSource(children, calibrations)
        except Exception:
            for child in children:
                child.release()
            raise
    raise ConfigError(f"Unknown source type: {config.type}")


def create_producer(
    config: FrameStageConfig,
    seek_state: Optional[SeekState] = None,
) -> FrameProducer:
    """Open the configured source and wrap it in a :class:`FrameProducer`.

    When ``producer.enable_seek`` is set and no ``seek_state`` is passed,
    a fresh one is created; reach it through ``producer.seek_state``.
    """
    if seek_state is None and config.producer.enable_seek:
        seek_state = SeekState()

    source = create_source(config.source)
    try:
        return FrameProducer(
            source,
            frame_first=config.producer.frame_first,
            frame_last=config.producer.frame_last,
            seek_state=seek_state,
            empty_frame_threshold=config.producer.empty_frame_threshold,
        )
    except Exception:
        source.release()
        raise
