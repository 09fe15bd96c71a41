"""Build a :data:`FrameBatch` from raw per-sensor buffers."""

import logging
from typing import Optional, Sequence

import cv2
import numpy as np

from framestage.core import (
    ChannelCountError,
    FrameBatch,
    FrameRecord,
    channel_count,
    is_empty_image,
)

logger = logging.getLogger(__name__)


def normalize_channels(image: np.ndarray) -> np.ndarray:
    """Return ``image`` as 3-channel BGR.

    Grayscale input is converted; 3-channel input is returned untouched
    (same object).  Anything else is an integrity error since every stage
    downstream assumes BGR.
    """
    channels = channel_count(image)
    if channels == 3:
        return image
    if channels == 1:
        logger.warning("Input images must be 3-channel BGR. Converting grey image into BGR.")
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    raise ChannelCountError(channels)


def _calibration(sequence: Sequence[np.ndarray], index: int) -> Optional[np.ndarray]:
    return sequence[index] if len(sequence) > index else None


def assemble_batch(
    frames: Sequence[np.ndarray],
    name: str,
    frame_number: int,
    camera_matrices: Sequence[np.ndarray] = (),
    camera_extrinsics: Sequence[np.ndarray] = (),
    camera_intrinsics: Sequence[np.ndarray] = (),
) -> Optional[FrameBatch]:
    """Assemble one record per sensor.

    Every record carries sensor 0's ``name`` and ``frame_number``.  Only
    the primary buffer is channel-normalized; the other sensors are passed
    through as delivered.  Calibration for sensor *i* is attached only
    when the calibration sequences cover index *i*.

    Returns:
        The batch, or ``None`` when there are no frames or the primary
        buffer is empty.

    Raises:
        ChannelCountError: Primary buffer is neither 1- nor 3-channel.
    """
    if len(frames) == 0 or is_empty_image(frames[0]):
        return None

    batch: FrameBatch = []
    for index, image in enumerate(frames):
        if index == 0:
            image = normalize_channels(image)
        record = FrameRecord(
            name=name,
            frame_number=frame_number,
            input_image=image,
            output_image=image,
            camera_matrix=_calibration(camera_matrices, index),
            camera_extrinsics=_calibration(camera_extrinsics, index),
            camera_intrinsics=_calibration(camera_intrinsics, index),
        )
        batch.append(record)
    return batch
