"""Multi-camera rig that delivers one frame per sensor per cycle."""

import logging
from typing import List, Optional, Sequence

import numpy as np

from framestage.core import CameraParameters, SourceType, SourceError, is_empty_image
from framestage.sources.base import CaptureSource

logger = logging.getLogger(__name__)


class SynchronizedRigSource(CaptureSource):
    """Groups several child sources into one synchronized rig.

    Every :meth:`get_frames` pulls exactly one frame from each child, in
    child order.  If any child comes back empty the whole cycle is empty,
    so a batch never mixes frames from different instants.  Frame name
    and position are taken from the first child.

    Args:
        sources: Child capture sources, sensor 0 first.
        calibrations: Optional per-sensor calibration, same order as
            ``sources``.  May be shorter than ``sources``.
    """

    def __init__(
        self,
        sources: Sequence[CaptureSource],
        calibrations: Optional[Sequence[CameraParameters]] = None,
    ):
        if not sources:
            raise SourceError("SynchronizedRigSource needs at least one child source")
        calibrations = list(calibrations or [])
        if len(calibrations) > len(sources):
            raise SourceError(
                f"{len(calibrations)} calibrations given for "
                f"{len(sources)} sensors"
            )

        self._sources = list(sources)
        self._calibrations = calibrations
        logger.info(
            "SynchronizedRigSource opened: %d sensors, %d calibrated",
            len(self._sources), len(self._calibrations),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return all(src.is_open for src in self._sources)

    def release(self) -> None:
        for src in self._sources:
            src.release()

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    def next_frame_name(self) -> str:
        return self._sources[0].next_frame_name()

    def get_frames(self) -> List[np.ndarray]:
        frames = []
        for index, src in enumerate(self._sources):
            pulled = src.get_frames()
            if not pulled or is_empty_image(pulled[0]):
                logger.debug("Sensor %d returned no frame; dropping cycle", index)
                return []
            frames.append(pulled[0])
        return frames

    # ------------------------------------------------------------------
    # Positioning
    # ------------------------------------------------------------------

    def get_position(self) -> float:
        return self._sources[0].get_position()

    def set_position(self, position: float) -> None:
        for src in self._sources:
            if src.source_type.is_seekable:
                src.set_position(position)

    @property
    def source_type(self) -> SourceType:
        return SourceType.SYNCHRONIZED_RIG

    @property
    def sensor_count(self) -> int:
        return len(self._sources)

    # ------------------------------------------------------------------
    # Calibration
    # ------------------------------------------------------------------

    def camera_matrices(self) -> List[np.ndarray]:
        return [c.camera_matrix for c in self._calibrations]

    def camera_extrinsics(self) -> List[np.ndarray]:
        return [c.extrinsics for c in self._calibrations]

    def camera_intrinsics(self) -> List[np.ndarray]:
        return [c.intrinsics for c in self._calibrations]
