"""Core data types for framestage."""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .errors import WindowError


# ============================================================================
# Frame Types
# ============================================================================

@dataclass
class FrameRecord:
    """One sensor's contribution to a batch.

    Attributes:
        name: Frame identifier reported by the capture source.
        frame_number: Source position at pull time.  Not guaranteed to be
            contiguous across polls (seeking, dropped frames).
        input_image: Raw pixel buffer (BGR uint8 after normalization).
        output_image: Working buffer.  Starts out as the *same object* as
            ``input_image``; downstream stages copy before diverging.
        camera_matrix: 3x4 projection matrix (intrinsics @ extrinsics).
        camera_extrinsics: 3x4 ``[R | t]`` matrix.
        camera_intrinsics: 3x3 ``K`` matrix.
    """
    name: str = ""
    frame_number: int = 0
    input_image: Optional[np.ndarray] = None
    output_image: Optional[np.ndarray] = None
    camera_matrix: Optional[np.ndarray] = None
    camera_extrinsics: Optional[np.ndarray] = None
    camera_intrinsics: Optional[np.ndarray] = None

    @property
    def has_calibration(self) -> bool:
        """True when the source supplied calibration for this sensor."""
        return self.camera_matrix is not None

    @property
    def is_empty(self) -> bool:
        """True when there is no pixel data in ``input_image``."""
        return is_empty_image(self.input_image)


# One record per active sensor, all sharing name and frame_number.
FrameBatch = List[FrameRecord]


def is_empty_image(image: Optional[np.ndarray]) -> bool:
    """Return True for a missing or zero-sized pixel buffer."""
    return image is None or image.size == 0


def channel_count(image: np.ndarray) -> int:
    """Number of channels in an OpenCV-style image array."""
    if image.ndim == 2:
        return 1
    return image.shape[2]


# ============================================================================
# Producer Window
# ============================================================================

@dataclass(frozen=True)
class ProducerWindow:
    """First/last frame bounds for a producer.

    ``frame_last=None`` means unbounded.  Bounds are inclusive: a window of
    ``[10, 19]`` delivers ten batches.
    """
    frame_first: int = 0
    frame_last: Optional[int] = None

    def __post_init__(self):
        if self.frame_first < 0:
            raise WindowError(f"frame_first must be >= 0, got {self.frame_first}")
        if self.frame_last is not None:
            if self.frame_last < 0:
                raise WindowError(f"frame_last must be >= 0, got {self.frame_last}")
            if self.frame_last < self.frame_first:
                raise WindowError(
                    f"frame_last ({self.frame_last}) is before "
                    f"frame_first ({self.frame_first})"
                )

    @property
    def is_bounded(self) -> bool:
        return self.frame_last is not None

    @property
    def frames_to_process(self) -> Optional[int]:
        """``frame_last - frame_first`` for bounded windows, else None."""
        if self.frame_last is None:
            return None
        return self.frame_last - self.frame_first

    def is_exhausted(self, delivered: int) -> bool:
        """Whether ``delivered`` batches have used up the window."""
        frames = self.frames_to_process
        return frames is not None and delivered > frames


# ============================================================================
# Calibration
# ============================================================================

@dataclass
class CameraParameters:
    """Calibration for one sensor of a rig."""
    intrinsics: np.ndarray  # 3x3
    extrinsics: np.ndarray  # 3x4
    distortion: np.ndarray = field(default_factory=lambda: np.zeros(0))

    @property
    def camera_matrix(self) -> np.ndarray:
        """3x4 projection matrix ``K @ [R | t]``."""
        return self.intrinsics @ self.extrinsics
