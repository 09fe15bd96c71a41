"""Webcam / IP-stream capture source using OpenCV VideoCapture."""

import logging
from typing import List, Optional

import cv2
import numpy as np

from framestage.core import SourceType, SourceError
from framestage.sources.base import CaptureSource, LiveSourceMixin

logger = logging.getLogger(__name__)


class WebcamSource(LiveSourceMixin, CaptureSource):
    """Live capture source from a webcam, USB camera, or network stream.

    Args:
        device: Device index (default ``0``), a V4L2 device path such as
            ``"/dev/video0"``, or a stream URL (``rtsp://...``).
        width: Requested frame width (``None`` = camera default).
        height: Requested frame height (``None`` = camera default).
        fps: Requested capture FPS (``None`` = camera default).
    """

    def __init__(
        self,
        device: int | str = 0,
        width: Optional[int] = None,
        height: Optional[int] = None,
        fps: Optional[float] = None,
    ):
        self._device = device
        self._frames_read = 0

        self._cap: Optional[cv2.VideoCapture] = cv2.VideoCapture(device)
        if not self._cap.isOpened():
            self._cap = None
            raise SourceError(f"Could not open webcam device: {device}")

        # Apply requested settings
        if width is not None:
            self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        if height is not None:
            self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        if fps is not None:
            self._cap.set(cv2.CAP_PROP_FPS, fps)

        actual_w, actual_h = self.resolution
        logger.info(
            "WebcamSource opened: device=%s  %dx%d @ %.1f fps",
            self._device, actual_w, actual_h, self.fps,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info("WebcamSource released (device=%s)", self._device)

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    def next_frame_name(self) -> str:
        return f"{self._frames_read:012d}"

    def get_frames(self) -> List[np.ndarray]:
        if self._cap is None:
            return []
        ret, image = self._cap.read()
        if not ret or image is None:
            return []
        self._frames_read += 1
        return [image]

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def source_type(self) -> SourceType:
        return SourceType.LIVE_DEVICE

    @property
    def fps(self) -> float:
        if self._cap is not None:
            return self._cap.get(cv2.CAP_PROP_FPS) or 0.0
        return 0.0

    @property
    def resolution(self) -> tuple[int, int]:
        if self._cap is not None:
            w = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
            h = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
            return (w, h)
        return (0, 0)
