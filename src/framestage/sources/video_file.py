"""Pre-recorded video file capture source."""

import logging
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np

from framestage.core import SourceType, SourceError
from framestage.sources.base import CaptureSource

logger = logging.getLogger(__name__)


class VideoFileSource(CaptureSource):
    """Capture source backed by a video file on disk.

    The file is opened on construction.  Reading past the final frame
    releases the source, which is how a producer learns the file ended.

    Args:
        path: Path to the video file (mp4, avi, mkv, etc.).
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)
        if not self._path.exists():
            raise FileNotFoundError(f"Video file not found: {self._path}")

        self._cap: Optional[cv2.VideoCapture] = cv2.VideoCapture(str(self._path))
        if not self._cap.isOpened():
            self._cap = None
            raise SourceError(f"Could not open video: {self._path}")

        self._native_fps: float = self._cap.get(cv2.CAP_PROP_FPS) or 30.0
        self._total_frames = int(self._cap.get(cv2.CAP_PROP_FRAME_COUNT))
        self._width = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self._height = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))

        logger.info(
            "VideoFileSource opened: %s  %dx%d @ %.1f fps  %d frames (%.1fs)",
            self._path, self._width, self._height, self._native_fps,
            self._total_frames, self.duration,
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
            logger.info("VideoFileSource released: %s", self._path)

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    def next_frame_name(self) -> str:
        return f"{self._path.stem}_{int(self.get_position()):012d}"

    def get_frames(self) -> List[np.ndarray]:
        if self._cap is None:
            return []
        ret, image = self._cap.read()
        if ret and image is not None:
            return [image]
        # A failed read at the end of the file means we are done; anywhere
        # else it is a corrupted frame and the watchdog decides.
        if self.get_position() >= self._total_frames:
            logger.info("VideoFileSource reached end of file: %s", self._path)
            self.release()
        return []

    # ------------------------------------------------------------------
    # Positioning
    # ------------------------------------------------------------------

    def get_position(self) -> float:
        if self._cap is None:
            return 0.0
        return self._cap.get(cv2.CAP_PROP_POS_FRAMES)

    def set_position(self, position: float) -> None:
        if self._cap is None:
            raise SourceError(f"Video is released: {self._path}")
        # Clamp so seeking before the start does not wrap around.
        position = max(0.0, min(float(position), float(self._total_frames)))
        self._cap.set(cv2.CAP_PROP_POS_FRAMES, position)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def source_type(self) -> SourceType:
        return SourceType.FILE

    @property
    def total_frames(self) -> int:
        """Total number of frames in the video file."""
        return self._total_frames

    @property
    def duration(self) -> float:
        """Duration of the video in seconds."""
        if self._native_fps:
            return self._total_frames / self._native_fps
        return 0.0

    @property
    def fps(self) -> float:
        return self._native_fps

    @property
    def resolution(self) -> tuple[int, int]:
        return (self._width, self._height)
