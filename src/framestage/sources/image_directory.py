"""Capture source that walks a directory of still images."""

import logging
from pathlib import Path
from typing import List

import cv2
import numpy as np

from framestage.core import SourceType, SourceError
from framestage.sources.base import CaptureSource

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset(
    {".bmp", ".jpg", ".jpeg", ".png", ".tif", ".tiff", ".webp", ".ppm", ".pgm"}
)


def list_images(directory: Path) -> List[Path]:
    """Image files directly inside ``directory``, sorted by name."""
    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
    )


def to_uint8_bgr(image: np.ndarray) -> np.ndarray:
    """Reduce 16-bit images to 8 bits and drop an alpha channel.

    Grayscale stays single-channel; the producer converts it to BGR.
    """
    if image.dtype == np.uint16:
        image = cv2.convertScaleAbs(image, alpha=1.0 / 257.0)
    if image.ndim == 3 and image.shape[2] == 4:
        image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    return image


class ImageDirectorySource(CaptureSource):
    """Capture source that yields every image of a directory in name order.

    Images are read with ``IMREAD_UNCHANGED`` so grayscale files arrive
    single-channel and are normalized by the producer, not here.  16-bit
    images are scaled to 8 bits and alpha channels dropped.  Frame names
    are the file stems.  The source releases itself on the first pull
    past the last image.

    Args:
        directory: Directory containing the images.
    """

    def __init__(self, directory: str | Path):
        self._directory = Path(directory)
        if not self._directory.is_dir():
            raise FileNotFoundError(f"Image directory not found: {self._directory}")

        self._paths = list_images(self._directory)
        if not self._paths:
            raise SourceError(f"No images found in {self._directory}")

        self._index = 0
        self._open = True
        logger.info(
            "ImageDirectorySource opened: %s  %d images",
            self._directory, len(self._paths),
        )

    @property
    def is_open(self) -> bool:
        return self._open

    def release(self) -> None:
        if self._open:
            self._open = False
            logger.info("ImageDirectorySource released: %s", self._directory)

    def next_frame_name(self) -> str:
        if self._index < len(self._paths):
            return self._paths[self._index].stem
        return ""

    def get_frames(self) -> List[np.ndarray]:
        if not self._open:
            return []
        if self._index >= len(self._paths):
            # Only a pull past the last image ends the stream, so a paused
            # producer can keep re-reading the final frame.
            logger.info("ImageDirectorySource has no more images: %s", self._directory)
            self.release()
            return []
        path = self._paths[self._index]
        self._index += 1
        image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if image is None:
            logger.warning("Could not decode image: %s", path)
            return []
        return [to_uint8_bgr(image)]

    def get_position(self) -> float:
        return float(self._index)

    def set_position(self, position: float) -> None:
        self._index = max(0, min(int(position), len(self._paths)))

    @property
    def source_type(self) -> SourceType:
        return SourceType.IMAGE_DIRECTORY

    @property
    def total_frames(self) -> int:
        return len(self._paths)
