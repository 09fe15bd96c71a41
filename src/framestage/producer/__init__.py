"""Frame producer: seek control, empty-frame watchdog, batch assembly."""

from .seek import SeekState, SeekController
from .watchdog import EmptyFrameWatchdog
from .assembler import assemble_batch, normalize_channels
from .frame_producer import FrameProducer, PollResult
from .worker import ProducerWorker

__all__ = [
    "SeekState",
    "SeekController",
    "EmptyFrameWatchdog",
    "assemble_batch",
    "normalize_channels",
    "FrameProducer",
    "PollResult",
    "ProducerWorker",
]
