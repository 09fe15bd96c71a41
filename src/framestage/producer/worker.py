"""Background thread that drives a :class:`FrameProducer`."""

import logging
import queue
import threading
from typing import Iterator, Optional

from framestage.core import FrameBatch, FrameStageError
from framestage.producer.frame_producer import FrameProducer

logger = logging.getLogger(__name__)


class ProducerWorker:
    """Polls a producer on a dedicated thread and queues the batches.

    The queue is bounded, so a slow consumer applies back-pressure to the
    capture source instead of buffering without limit.  When the producer
    stops (source closed, window exhausted or fault) a ``None`` sentinel
    is queued and the thread exits.

    Usage::

        worker = ProducerWorker(producer)
        worker.start()
        for batch in worker.batches():
            handle(batch)
        if worker.fault:
            ...
    """

    def __init__(self, producer: FrameProducer, queue_size: int = 8):
        self._producer = producer
        self._queue: "queue.Queue[Optional[FrameBatch]]" = queue.Queue(maxsize=queue_size)
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("ProducerWorker already started")
        self._thread = threading.Thread(
            target=self._run, name="framestage-producer", daemon=True
        )
        self._thread.start()
        logger.info("ProducerWorker started")

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """Ask the thread to finish and wait for it."""
        self._stop_event.set()
        if self._thread is not None:
            # Unblock a put() waiting on a full queue.
            self._drain()
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("ProducerWorker did not stop within %.1fs", timeout)

    def _run(self) -> None:
        try:
            while not self._stop_event.is_set():
                result = self._producer.poll()
                if not result.running:
                    break
                if result.batch is not None:
                    self._put(result.batch)
        finally:
            self._put(None)
            logger.info(
                "ProducerWorker finished: %d batches delivered",
                self._producer.frames_delivered,
            )

    def _put(self, item: Optional[FrameBatch]) -> None:
        while True:
            try:
                self._queue.put(item, timeout=0.1)
                return
            except queue.Full:
                if self._stop_event.is_set():
                    if item is not None:
                        return
                    # The sentinel must get through once stopping.
                    self._drain()

    def _drain(self) -> None:
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                return

    def get(self, timeout: Optional[float] = None) -> Optional[FrameBatch]:
        """Next batch, or ``None`` once the producer has stopped."""
        return self._queue.get(timeout=timeout)

    def batches(self) -> Iterator[FrameBatch]:
        """Yield queued batches until the producer stops."""
        while True:
            batch = self._queue.get()
            if batch is None:
                return
            yield batch

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def fault(self) -> Optional[FrameStageError]:
        return self._producer.fault
