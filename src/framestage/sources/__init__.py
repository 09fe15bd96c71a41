"""Capture source abstraction for framestage.

Provides a common interface for pulling frames from webcams, video
files, image directories, or synchronized multi-camera rigs.

Quick start::

    from framestage.sources import VideoFileSource

    with VideoFileSource("demo.mp4") as src:
        while src.is_open:
            frames = src.get_frames()
"""

from framestage.sources.base import CaptureSource
from framestage.sources.webcam import WebcamSource
from framestage.sources.video_file import VideoFileSource
from framestage.sources.image_directory import ImageDirectorySource
from framestage.sources.synchronized_rig import SynchronizedRigSource
from framestage.sources.calibration import (
    load_camera_parameters,
    load_rig_calibration,
    save_camera_parameters,
)

__all__ = [
    "CaptureSource",
    "WebcamSource",
    "VideoFileSource",
    "ImageDirectorySource",
    "SynchronizedRigSource",
    "load_camera_parameters",
    "load_rig_calibration",
    "save_camera_parameters",
]
