"""framestage - bounded frame acquisition for vision pipelines.

Pulls frames from webcams, video files, image directories or synchronized
camera rigs, normalizes them into per-sensor frame batches, and enforces a
first/last frame window.
"""

import argparse
import logging
from typing import Optional, Sequence

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the framestage command.

    Builds a producer from the configuration, drains it on a worker
    thread, and reports how many batches were delivered.
    """
    from framestage.factory import create_producer
    from framestage.producer import ProducerWorker
    from framestage.utils.config import load_config, parse_override

    parser = argparse.ArgumentParser(
        prog="framestage",
        description="Pull frame batches from a capture source.",
    )
    parser.add_argument("--config", default=None, help="Path to YAML config file")
    parser.add_argument(
        "--set", dest="overrides", action="append", default=[],
        metavar="KEY=VALUE",
        help="Override a config value, e.g. producer.frame_last=99",
    )
    parser.add_argument("--version", action="version", version=f"framestage {__version__}")
    args = parser.parse_args(argv)

    try:
        overrides = dict(parse_override(item) for item in args.overrides)
    except ValueError as e:
        parser.error(str(e))

    config = load_config(args.config, overrides=overrides)
    producer = create_producer(config)

    worker = ProducerWorker(producer, queue_size=config.producer.queue_size)
    worker.start()
    try:
        for batch in worker.batches():
            logger.debug("Batch %s: %d sensor(s)", batch[0].name, len(batch))
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping producer")
    finally:
        worker.stop()
        # The source is not thread-safe; leave it to a worker that is still pulling.
        if worker.is_alive:
            logger.warning("Producer worker did not stop; source left open")
        else:
            producer.source.release()

    logger.info("Delivered %d batches", producer.frames_delivered)
    if worker.fault is not None:
        logger.error("Producer failed: %s", worker.fault)
        return 1
    return 0
