"""Pytest configuration for framestage tests."""

from typing import List, Optional, Sequence

import numpy as np
import pytest

from framestage.core import SourceType
from framestage.sources import CaptureSource


def make_image(value: int = 0, channels: Optional[int] = 3,
               height: int = 4, width: int = 6) -> np.ndarray:
    """Small uint8 image filled with ``value``.

    ``channels=None`` gives a 2-D grayscale array.
    """
    shape = (height, width) if channels is None else (height, width, channels)
    return np.full(shape, value, dtype=np.uint8)


class FakeCaptureSource(CaptureSource):
    """In-memory capture source.

    ``cycles[i]`` is the list of per-sensor buffers returned by the i-th
    position; an empty list simulates a dropped frame.  Past the last
    cycle the source either closes itself (``close_at_end=True``, like a
    file) or keeps returning empty lists (a dead camera).
    """

    def __init__(
        self,
        cycles: Sequence[List[np.ndarray]],
        source_type: SourceType = SourceType.FILE,
        matrices: Sequence[np.ndarray] = (),
        extrinsics: Sequence[np.ndarray] = (),
        intrinsics: Sequence[np.ndarray] = (),
        close_at_end: bool = True,
        fail_on_pull: Optional[int] = None,
    ):
        self.cycles = list(cycles)
        self._type = source_type
        self._matrices = list(matrices)
        self._extrinsics = list(extrinsics)
        self._intrinsics = list(intrinsics)
        self.close_at_end = close_at_end
        self.fail_on_pull = fail_on_pull

        self.position = 0
        self.open = True
        self.pulls = 0
        self.release_calls = 0
        self.set_position_calls: List[float] = []

    @property
    def is_open(self) -> bool:
        return self.open

    def release(self) -> None:
        self.release_calls += 1
        self.open = False

    def next_frame_name(self) -> str:
        return f"frame_{self.position:04d}"

    def get_frames(self) -> List[np.ndarray]:
        self.pulls += 1
        if self.fail_on_pull is not None and self.pulls == self.fail_on_pull:
            raise OSError("device unplugged")
        if self.position >= len(self.cycles):
            if self.close_at_end:
                self.open = False
            return []
        frames = self.cycles[self.position]
        self.position += 1
        return list(frames)

    def get_position(self) -> float:
        return float(self.position)

    def set_position(self, position: float) -> None:
        self.set_position_calls.append(position)
        self.position = max(0, int(position))

    @property
    def source_type(self) -> SourceType:
        return self._type

    def camera_matrices(self) -> List[np.ndarray]:
        return self._matrices

    def camera_extrinsics(self) -> List[np.ndarray]:
        return self._extrinsics

    def camera_intrinsics(self) -> List[np.ndarray]:
        return self._intrinsics


@pytest.fixture(name="make_image")
def make_image_fixture():
    """The :func:`make_image` helper."""
    return make_image


@pytest.fixture
def fake_source():
    """The :class:`FakeCaptureSource` class, for tests that build their own."""
    return FakeCaptureSource


@pytest.fixture
def file_source() -> FakeCaptureSource:
    """A 30-frame single-camera file source; frame i is filled with i."""
    return FakeCaptureSource([[make_image(i)] for i in range(30)])


@pytest.fixture
def image_dir(tmp_path):
    """Directory with five colour PNGs named img_000..img_004."""
    import cv2

    for i in range(5):
        cv2.imwrite(str(tmp_path / f"img_{i:03d}.png"), make_image(i * 10))
    return tmp_path


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "camera: mark test as requiring a physical camera")
