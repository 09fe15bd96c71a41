"""Polling front end that turns a capture source into frame batches."""

import logging
from typing import Iterator, NamedTuple, Optional

from framestage.core import (
    FrameBatch,
    FrameStageError,
    ProducerWindow,
    SourceError,
    is_empty_image,
)
from framestage.producer.assembler import assemble_batch
from framestage.producer.seek import SeekController, SeekState
from framestage.producer.watchdog import EmptyFrameWatchdog
from framestage.sources.base import CaptureSource

logger = logging.getLogger(__name__)


class PollResult(NamedTuple):
    """Outcome of one :meth:`FrameProducer.poll`.

    Attributes:
        running: Whether the source was open at the time of the pull.
        batch: The assembled batch, or ``None`` when nothing was produced
            this cycle.
        fault: Terminal error, set once the producer is unusable.
    """
    running: bool
    batch: Optional[FrameBatch]
    fault: Optional[FrameStageError] = None


class FrameProducer:
    """Pulls frames from a :class:`CaptureSource` within a frame window.

    Each :meth:`poll` checks the window, applies pending seek/pause
    commands, pulls one frame per sensor, runs the empty-frame watchdog
    and assembles a batch.  Nothing raised inside a poll escapes it: the
    error is logged, kept in :attr:`fault`, and every later poll returns
    ``PollResult(False, None, fault)``.

    ``poll`` is not reentrant; drive it from a single worker
    (see :class:`ProducerWorker`).

    Args:
        source: Capture source to pull from.
        frame_first: First frame index to deliver.  Ignored for live
            devices, which cannot seek.
        frame_last: Last frame index to deliver (inclusive), or ``None``
            for no limit.
        seek_state: Shared seek/pause control, or ``None`` to disable
            seeking.
        empty_frame_threshold: Consecutive empty pulls tolerated before
            the producer fails.

    Raises:
        WindowError: If the window bounds are invalid.
    """

    def __init__(
        self,
        source: CaptureSource,
        frame_first: int = 0,
        frame_last: Optional[int] = None,
        seek_state: Optional[SeekState] = None,
        empty_frame_threshold: int = EmptyFrameWatchdog.EMPTY_FRAME_THRESHOLD,
    ):
        self._window = ProducerWindow(frame_first=frame_first, frame_last=frame_last)
        self._source = source
        self._seek = SeekController(seek_state)
        self._watchdog = EmptyFrameWatchdog(empty_frame_threshold)
        self._global_counter = 0
        self._fault: Optional[FrameStageError] = None

        if source.source_type.is_seekable:
            source.set_position(float(frame_first))

        logger.info(
            "FrameProducer created: source=%s  window=[%d, %s]  seek=%s",
            source.source_type.name, frame_first,
            "inf" if frame_last is None else frame_last,
            seek_state is not None,
        )

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def poll(self) -> PollResult:
        """Produce the next batch, if any."""
        if self._fault is not None:
            return PollResult(False, None, self._fault)

        try:
            return self._poll()
        except FrameStageError as e:
            return self._fail(e)
        except Exception as e:
            fault = SourceError(f"Capture source failed: {e}")
            fault.__cause__ = e
            return self._fail(fault)

    def _poll(self) -> PollResult:
        if self._window.is_exhausted(self._global_counter) and self._source.is_open:
            logger.info(
                "Frame window exhausted after %d frames; releasing source",
                self._global_counter,
            )
            self._source.release()

        running = self._source.is_open
        if not running:
            return PollResult(False, None)

        self._seek.apply(self._source)

        name = self._source.next_frame_name()
        frame_number = int(self._source.get_position())
        frames = self._source.get_frames()
        matrices = self._source.camera_matrices()
        extrinsics = self._source.camera_extrinsics()
        intrinsics = self._source.camera_intrinsics()

        self._watchdog.update(len(frames) == 0 or is_empty_image(frames[0]))

        batch = None
        if frames:
            batch = assemble_batch(
                frames, name, frame_number,
                camera_matrices=matrices,
                camera_extrinsics=extrinsics,
                camera_intrinsics=intrinsics,
            )
            if batch is not None:
                self._global_counter += 1

        return PollResult(running, batch)

    def _fail(self, fault: FrameStageError) -> PollResult:
        logger.error("FrameProducer stopped: %s", fault, exc_info=True)
        self._fault = fault
        return PollResult(False, None, fault)

    # ------------------------------------------------------------------
    # Iterator protocol
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[FrameBatch]:
        """Yield batches until the source closes.

        Raises:
            FrameStageError: The fault that stopped the producer, if any.
        """
        while True:
            result = self.poll()
            if result.fault is not None:
                raise result.fault
            if not result.running:
                return
            if result.batch is not None:
                yield result.batch

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def source(self) -> CaptureSource:
        return self._source

    @property
    def window(self) -> ProducerWindow:
        return self._window

    @property
    def seek_state(self) -> Optional[SeekState]:
        return self._seek.state

    @property
    def frames_delivered(self) -> int:
        """Number of batches delivered so far."""
        return self._global_counter

    @property
    def consecutive_empty_frames(self) -> int:
        return self._watchdog.consecutive_empty_frames

    @property
    def fault(self) -> Optional[FrameStageError]:
        """Terminal error, or ``None`` while the producer is usable."""
        return self._fault
