"""Tests for VideoFileSource against a small generated video."""

import cv2
import numpy as np
import pytest

from framestage.core import SourceType
from framestage.producer import FrameProducer
from framestage.sources import VideoFileSource


@pytest.fixture
def video_path(tmp_path):
    """30-frame MJPG AVI, 64x48."""
    path = tmp_path / "clip.avi"
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), 30.0, (64, 48))
    if not writer.isOpened():
        pytest.skip("OpenCV build cannot write MJPG video")
    for i in range(30):
        writer.write(np.full((48, 64, 3), i * 8, dtype=np.uint8))
    writer.release()
    return path


class TestVideoFileSource:
    def test_properties(self, video_path):
        with VideoFileSource(video_path) as source:
            assert source.source_type is SourceType.FILE
            assert source.total_frames == 30
            assert source.resolution == (64, 48)
            assert source.fps == pytest.approx(30.0)

    def test_frame_names(self, video_path):
        with VideoFileSource(video_path) as source:
            source.set_position(7)
            assert source.next_frame_name() == "clip_000000000007"

    def test_releases_at_end_of_file(self, video_path):
        source = VideoFileSource(video_path)
        source.set_position(29)
        assert len(source.get_frames()) == 1
        assert source.get_frames() == []
        assert not source.is_open

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            VideoFileSource(tmp_path / "missing.mp4")


class TestVideoFileProducer:
    def test_window_10_to_19(self, video_path):
        source = VideoFileSource(video_path)
        producer = FrameProducer(source, frame_first=10, frame_last=19)

        batches = list(producer)

        assert len(batches) == 10
        assert [b[0].frame_number for b in batches] == list(range(10, 20))
        assert producer.fault is None
        assert not source.is_open
