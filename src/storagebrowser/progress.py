"""
Download progress reporting.

A transfer pushes the size of every received chunk into a ProgressChannel;
a ProgressReporter thread drains the channel and prints one
``<progress>NN</progress>`` line per chunk. Consumers parse these lines, so
their format must not change.
"""

import math
import queue
import sys
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO

from storagebrowser.constants import PROGRESS_LINE_FORMAT, PROGRESS_QUEUE_SIZE
from storagebrowser.log_utils import logger

# End-of-stream marker put on the queue by ProgressChannel.close()
_CLOSED = object()


def round_percent(value: float) -> int:
    """Round `value` to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def format_progress(received: int, total_size: int) -> str:
    """
    Build the progress line for `received` bytes out of `total_size`.

    The percentage is not clamped, so a transfer that delivers more than the
    declared size reports values above 100. A declared size of zero reports 100.
    """
    if total_size <= 0:
        percent = 100.0
    else:
        percent = 100 * float(received) / float(total_size)
    return PROGRESS_LINE_FORMAT.format(percent=round_percent(percent))


class ProgressChannel:
    """
    Bounded single-producer/single-consumer stream of chunk sizes.

    The producer calls send() for every chunk and close() once the transfer is
    over; close() may be called more than once.
    """

    def __init__(self, maxsize: int = PROGRESS_QUEUE_SIZE) -> None:
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=maxsize)
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, nbytes: int) -> None:
        """
        Publish the size of one received chunk.

        Raises:
            ValueError: If the channel has already been closed.
        """
        if self._closed:
            raise ValueError("send on closed progress channel")
        self._queue.put(int(nbytes))

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[int]:
        """Yield chunk sizes until the channel is closed."""
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]


class ProgressReporter(threading.Thread):
    """
    Thread that prints a progress line for every chunk sent to a channel.

    It only reports; whether the transfer succeeded is decided by the transfer.
    A failure to write a line is remembered in `error` and the channel keeps
    being drained so the producer never blocks.
    """

    def __init__(
        self,
        channel: ProgressChannel,
        total_size: int,
        stream: Optional[TextIO] = None,
    ) -> None:
        super().__init__(name="progress-reporter", daemon=True)
        self.channel = channel
        self.total_size = total_size
        self.stream = stream
        self.received = 0
        self.error: Optional[BaseException] = None
        self.started_event = threading.Event()

    def run(self) -> None:
        self.started_event.set()
        for nbytes in self.channel:
            self.received += nbytes
            if self.error is not None:
                continue
            try:
                out = self.stream if self.stream is not None else sys.stdout
                print(format_progress(self.received, self.total_size), file=out, flush=True)
            except (OSError, ValueError) as e:
                self.error = e
                logger.warning(f"Could not write download progress: {e}")


@contextmanager
def report_progress(
    total_size: int, stream: Optional[TextIO] = None
) -> Iterator[ProgressChannel]:
    """
    Run a ProgressReporter for the duration of the block.

    The reporter is running before the channel is handed out, so no chunk can
    be missed. On exit, whether the block raised or not, the channel is closed
    and the reporter is joined after it drained everything that was sent.

    Example:
        with report_progress(node.size) as channel:
            client.transfer(node, destination, channel)
    """
    channel = ProgressChannel()
    reporter = ProgressReporter(channel, total_size, stream)
    reporter.start()
    reporter.started_event.wait()
    try:
        yield channel
    finally:
        channel.close()
        reporter.join()
        logger.debug(
            f"Progress reporter finished after {reporter.received} of {total_size} bytes"
        )
