"""Abstract base class for all framestage capture sources."""

from abc import ABC, abstractmethod
from typing import List

import numpy as np

from framestage.core import SourceType, SourceError


class CaptureSource(ABC):
    """Uniform interface a :class:`FrameProducer` pulls frames from.

    Concrete implementations exist for webcams / IP streams, video files,
    image directories, and synchronized multi-camera rigs.  A source is
    open from construction until :meth:`release`; every call to
    :meth:`get_frames` returns one buffer per sensor (BGR or grayscale
    uint8, the OpenCV convention), or an empty list when no data arrived
    this cycle.

    Usage::

        with VideoFileSource("video.mp4") as src:
            producer = FrameProducer(src, frame_first=10, frame_last=19)
            for batch in producer:
                process(batch[0].input_image)
    """

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """``True`` until the source is released or runs out of frames."""

    @abstractmethod
    def release(self) -> None:
        """Release the underlying device / file.  Safe to call twice."""

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    @abstractmethod
    def next_frame_name(self) -> str:
        """Name of the frame the next :meth:`get_frames` will return."""

    @abstractmethod
    def get_frames(self) -> List[np.ndarray]:
        """Pull one frame per sensor.

        Returns:
            Ordered list of pixel buffers, or ``[]`` when nothing was read.
        """

    # ------------------------------------------------------------------
    # Positioning
    # ------------------------------------------------------------------

    @abstractmethod
    def get_position(self) -> float:
        """Index of the next frame, in frame units."""

    @abstractmethod
    def set_position(self, position: float) -> None:
        """Seek to an absolute frame index."""

    @property
    @abstractmethod
    def source_type(self) -> SourceType:
        """Kind of source; decides whether seeking is meaningful."""

    # ------------------------------------------------------------------
    # Calibration (only synchronized rigs supply any)
    # ------------------------------------------------------------------

    def camera_matrices(self) -> List[np.ndarray]:
        return []

    def camera_extrinsics(self) -> List[np.ndarray]:
        return []

    def camera_intrinsics(self) -> List[np.ndarray]:
        return []

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> "CaptureSource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "open" if self.is_open else "released"
        return f"<{type(self).__name__} {self.source_type.name} {state}>"


class LiveSourceMixin:
    """Positioning for sources that cannot seek (webcams, streams)."""

    _frames_read: int = 0

    def get_position(self) -> float:
        return float(self._frames_read)

    def set_position(self, position: float) -> None:
        raise SourceError(
            f"{type(self).__name__} is a live device and cannot seek"
        )
