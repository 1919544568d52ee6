"""
Asynchronous Logging

Log records from the event loop are put on a queue and written to the log
file by a background listener thread, so a slow disk never stalls event
handling. ``shutdown_logging()`` stops the listener after it has written
everything still queued.
"""

from __future__ import annotations
import logging
import os
import queue
from logging.handlers import QueueHandler, QueueListener
from typing import Optional

LOGGER_NAME = "lwm"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
DEFAULT_LOG_PATH = os.path.join(os.path.expanduser("~"), "lwm.log")

_listener: Optional[QueueListener] = None
_queue_handler: Optional[QueueHandler] = None


def setup_logging(path: str = DEFAULT_LOG_PATH, debug: bool = False) -> QueueListener:
    """Route the ``lwm`` logger through a queue to a log file.

    Calling it again replaces the previous setup.

    Args:
        path: Log file, appended to
        debug: Log at DEBUG instead of INFO

    Returns:
        The running queue listener
    """
    global _listener, _queue_handler

    shutdown_logging()

    file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    records: queue.SimpleQueue = queue.SimpleQueue()
    _queue_handler = QueueHandler(records)
    _listener = QueueListener(records, file_handler)

    root_logger = logging.getLogger(LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    root_logger.addHandler(_queue_handler)
    root_logger.propagate = False

    _listener.start()
    return _listener


def shutdown_logging():
    """Stop the listener, flushing queued records, and close the log file."""
    global _listener, _queue_handler

    if _queue_handler is not None:
        root_logger = logging.getLogger(LOGGER_NAME)
        root_logger.removeHandler(_queue_handler)
        root_logger.propagate = True
        _queue_handler = None

    if _listener is not None:
        _listener.stop()
        for handler in _listener.handlers:
            handler.close()
        _listener = None
