"""Tests for building sources and producers from config."""

import numpy as np
import pytest

from framestage import main
from framestage.core import CameraParameters, ConfigError, SourceType
from framestage.factory import create_producer, create_source
from framestage.producer import SeekState
from framestage.sources import save_camera_parameters
from framestage.utils.config import FrameStageConfig, SourceConfig


class TestCreateSource:
    def test_image_directory(self, image_dir):
        source = create_source(SourceConfig(type="images", path=str(image_dir)))
        assert source.source_type is SourceType.IMAGE_DIRECTORY
        source.release()

    def test_path_required(self):
        with pytest.raises(ConfigError):
            create_source(SourceConfig(type="video"))

    def test_rig_needs_children(self):
        with pytest.raises(ConfigError):
            create_source(SourceConfig(type="rig"))

    def test_nested_rig_rejected(self):
        config = SourceConfig(type="rig", children=[SourceConfig(type="rig")])
        with pytest.raises(ConfigError):
            create_source(config)

    def test_rig_with_calibration(self, image_dir, tmp_path):
        calib = tmp_path / "calib"
        calib.mkdir()
        for i in range(2):
            save_camera_parameters(
                calib / f"cam{i}.xml",
                CameraParameters(intrinsics=np.eye(3), extrinsics=np.eye(3, 4)),
            )
        child = SourceConfig(type="images", path=str(image_dir))
        source = create_source(SourceConfig(
            type="rig", children=[child, child], calibration_dir=str(calib)
        ))

        assert source.source_type is SourceType.SYNCHRONIZED_RIG
        assert len(source.camera_matrices()) == 2
        assert len(source.get_frames()) == 2
        source.release()


class TestCreateProducer:
    def test_window_from_config(self, image_dir):
        config = FrameStageConfig(
            source={"type": "images", "path": str(image_dir)},
            producer={"frame_first": 2, "frame_last": 3},
        )
        producer = create_producer(config)

        assert [b[0].name for b in producer] == ["img_002", "img_003"]

    def test_enable_seek_creates_state(self, image_dir):
        config = FrameStageConfig(
            source={"type": "images", "path": str(image_dir)},
            producer={"enable_seek": True},
        )
        assert isinstance(create_producer(config).seek_state, SeekState)

    def test_explicit_seek_state_is_used(self, image_dir):
        config = FrameStageConfig(source={"type": "images", "path": str(image_dir)})
        state = SeekState()
        assert create_producer(config, seek_state=state).seek_state is state

    def test_no_seek_by_default(self, image_dir):
        config = FrameStageConfig(source={"type": "images", "path": str(image_dir)})
        assert create_producer(config).seek_state is None


class TestMain:
    def test_runs_image_directory(self, image_dir, tmp_path):
        code = main([
            "--config", str(tmp_path / "absent.yaml"),
            "--set", "source.type=images",
            "--set", f"source.path={image_dir}",
            "--set", "producer.frame_last=2",
        ])
        assert code == 0

    def test_bad_override_exits(self):
        with pytest.raises(SystemExit):
            main(["--set", "no-equals-sign"])

    def test_source_left_open_if_worker_hangs(self, image_dir, monkeypatch):
        import framestage.factory
        import framestage.producer

        class HungWorker:
            fault = None
            is_alive = True

            def __init__(self, producer, queue_size=8):
                self.producer = producer

            def start(self):
                pass

            def batches(self):
                return iter(())

            def stop(self, timeout=5.0):
                pass

        built = []

        def capture(config, seek_state=None):
            producer = create_producer(config, seek_state=seek_state)
            built.append(producer)
            return producer

        monkeypatch.setattr(framestage.producer, "ProducerWorker", HungWorker)
        monkeypatch.setattr(framestage.factory, "create_producer", capture)

        code = main([
            "--set", "source.type=images",
            "--set", f"source.path={image_dir}",
        ])

        assert code == 0
        assert built[0].source.is_open

    def test_source_released_after_run(self, image_dir, monkeypatch):
        import framestage.factory

        built = []

        def capture(config, seek_state=None):
            producer = create_producer(config, seek_state=seek_state)
            built.append(producer)
            return producer

        monkeypatch.setattr(framestage.factory, "create_producer", capture)

        assert main(["--set", "source.type=images", "--set", f"source.path={image_dir}"]) == 0
        assert not built[0].source.is_open
