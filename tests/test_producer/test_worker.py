"""Tests for the background producer worker."""

import pytest

from framestage.core import ChannelCountError
from framestage.producer import FrameProducer, ProducerWorker


class TestProducerWorker:
    def test_delivers_all_batches_then_stops(self, file_source):
        producer = FrameProducer(file_source, frame_first=10, frame_last=19)
        worker = ProducerWorker(producer, queue_size=2)
        worker.start()

        numbers = [batch[0].frame_number for batch in worker.batches()]
        worker.stop()

        assert numbers == list(range(10, 20))
        assert worker.fault is None
        assert not worker.is_alive

    def test_fault_ends_stream(self, fake_source, make_image):
        source = fake_source([[make_image()], [make_image(channels=2)], [make_image()]])
        worker = ProducerWorker(FrameProducer(source))
        worker.start()

        batches = list(worker.batches())
        worker.stop()

        assert len(batches) == 1
        assert isinstance(worker.fault, ChannelCountError)

    def test_stop_with_full_queue(self, fake_source, make_image):
        """stop() returns even if nobody is consuming."""
        source = fake_source([[make_image()]], close_at_end=False)
        source.cycles = [[make_image()]] * 10_000
        worker = ProducerWorker(FrameProducer(source), queue_size=1)
        worker.start()
        assert worker.get(timeout=5.0) is not None

        worker.stop(timeout=5.0)
        assert not worker.is_alive

    def test_cannot_start_twice(self, file_source):
        worker = ProducerWorker(FrameProducer(file_source))
        worker.start()
        with pytest.raises(RuntimeError):
            worker.start()
        worker.stop()
