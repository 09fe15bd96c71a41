"""Loading per-camera calibration for synchronized rigs.

Each camera is described by one OpenCV ``FileStorage`` file (XML or YAML)
holding the nodes ``CameraMatrix`` (3x4 ``[R | t]`` extrinsics),
``Intrinsics`` (3x3 ``K``) and optionally ``Distortion``.
"""

import logging
from pathlib import Path
from typing import List

import cv2
import numpy as np

from framestage.core import CameraParameters, SourceError

logger = logging.getLogger(__name__)

CALIBRATION_EXTENSIONS = (".xml", ".yml", ".yaml")


def _read_matrix(storage: cv2.FileStorage, key: str, path: Path) -> np.ndarray:
    node = storage.getNode(key)
    if node.empty():
        raise SourceError(f"Calibration file {path} has no '{key}' node")
    return node.mat()


def load_camera_parameters(path: str | Path) -> CameraParameters:
    """Read one camera's calibration from ``path``."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Calibration file not found: {path}")

    storage = cv2.FileStorage(str(path), cv2.FILE_STORAGE_READ)
    if not storage.isOpened():
        raise SourceError(f"Could not open calibration file: {path}")
    try:
        extrinsics = _read_matrix(storage, "CameraMatrix", path)
        intrinsics = _read_matrix(storage, "Intrinsics", path)
        node = storage.getNode("Distortion")
        distortion = np.zeros(0) if node.empty() else node.mat()
    finally:
        storage.release()

    if intrinsics.shape != (3, 3):
        raise SourceError(f"Intrinsics in {path} must be 3x3, got {intrinsics.shape}")
    if extrinsics.shape != (3, 4):
        raise SourceError(f"CameraMatrix in {path} must be 3x4, got {extrinsics.shape}")

    return CameraParameters(
        intrinsics=intrinsics,
        extrinsics=extrinsics,
        distortion=distortion,
    )


def save_camera_parameters(path: str | Path, params: CameraParameters) -> None:
    """Write ``params`` in the layout :func:`load_camera_parameters` reads."""
    storage = cv2.FileStorage(str(path), cv2.FILE_STORAGE_WRITE)
    try:
        storage.write("CameraMatrix", params.extrinsics)
        storage.write("Intrinsics", params.intrinsics)
        if params.distortion.size:
            storage.write("Distortion", params.distortion)
    finally:
        storage.release()


def load_rig_calibration(directory: str | Path) -> List[CameraParameters]:
    """Load every calibration file in ``directory``, ordered by file name.

    File order defines sensor order, so name files ``cam0.xml``,
    ``cam1.xml``, ... to match the rig's child sources.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Calibration directory not found: {directory}")

    paths = sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.suffix.lower() in CALIBRATION_EXTENSIONS
    )
    params = [load_camera_parameters(p) for p in paths]
    logger.info("Loaded %d camera calibrations from %s", len(params), directory)
    return params
