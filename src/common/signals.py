"""Process-level cancellation on SIGINT/SIGTERM."""

import logging
import os
import signal
import threading

logger = logging.getLogger(__name__)


def setup_signal_handler() -> threading.Event:
    """Register SIGINT and SIGTERM handlers and return the cancellation event.

    The first signal sets the event so loops waiting on it can shut down.
    A second signal exits the process immediately with status 1.
    Must be called from the main thread.
    """
    stop_event = threading.Event()

    def _handle(signum, frame) -> None:
        if stop_event.is_set():
            logger.warning("Second signal received, exiting immediately")
            os._exit(1)
        logger.info("Received %s, shutting down", signal.Signals(signum).name)
        stop_event.set()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)

    return stop_event
