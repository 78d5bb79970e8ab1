"""
Range Stream — Pull-based cursor over historical snapshots

A link produces snapshots for a time range; the console pulls them one at
a time. The stream is a small state machine:

- PENDING: nothing ready yet, more may arrive (pull blocks)
- READY:   at least one snapshot can be pulled without blocking
- DONE:    producer finished and every snapshot was pulled
- FAILED:  producer reported an error; takes precedence over READY

Thread-safe. Producers call deliver()/finish()/fail() from any thread.
"""

import threading
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from loguru import logger

from .errors import StreamError
from .model import WorldState


class StreamState(Enum):
    PENDING = "pending"
    READY = "ready"
    DONE = "done"
    FAILED = "failed"


class RangeStream:
    """Cursor over snapshots delivered by a link."""

    def __init__(self, on_close: Optional[Callable[[], None]] = None):
        self._queue: deque = deque()
        self._lock = threading.Lock()
        self._ready = threading.Condition(self._lock)
        self._finished = False
        self._closed = False
        self._error: Optional[BaseException] = None
        self._on_close = on_close
        self.delivered = 0
        self.pulled = 0

    # -------------------------------------------------------------------------
    # Producer side
    # -------------------------------------------------------------------------

    def deliver(self, snapshot: WorldState) -> None:
        """Queue a snapshot. Ignored once the stream is closed or ended."""
        with self._ready:
            if self._closed or self._finished or self._error is not None:
                return
            self._queue.append(snapshot)
            self.delivered += 1
            self._ready.notify_all()

    def finish(self) -> None:
        """Mark the range complete; queued snapshots stay pullable."""
        with self._ready:
            self._finished = True
            self._ready.notify_all()

    def fail(self, error: BaseException) -> None:
        """Mark the range failed. Queued snapshots are no longer pulled."""
        with self._ready:
            if self._error is None:
                self._error = error
            self._ready.notify_all()

    # -------------------------------------------------------------------------
    # Consumer side
    # -------------------------------------------------------------------------

    @property
    def state(self) -> StreamState:
        with self._lock:
            return self._state()

    def _state(self) -> StreamState:
        if self._error is not None:
            return StreamState.FAILED
        if self._queue:
            return StreamState.READY
        if self._finished or self._closed:
            return StreamState.DONE
        return StreamState.PENDING

    @property
    def has_next(self) -> bool:
        """A snapshot can be pulled without blocking."""
        return self.state == StreamState.READY

    @property
    def is_complete(self) -> bool:
        return self.state in (StreamState.DONE, StreamState.FAILED)

    @property
    def is_error(self) -> bool:
        return self.state == StreamState.FAILED

    @property
    def error(self) -> Optional[BaseException]:
        with self._lock:
            return self._error

    def next(self, timeout: Optional[float] = None) -> Optional[WorldState]:
        """
        Pull the next snapshot.

        Blocks while PENDING. Returns None if the stream ends, fails, or
        the timeout expires before a snapshot arrives.
        """
        with self._ready:
            while self._state() == StreamState.PENDING:
                if not self._ready.wait(timeout):
                    return None
            if self._state() != StreamState.READY:
                return None
            self.pulled += 1
            return self._queue.popleft()

    def close(self) -> None:
        """
        Release the stream. Idempotent.

        Unread snapshots are dropped and the producer is told to stop.
        """
        with self._ready:
            if self._closed:
                return
            self._closed = True
            dropped = len(self._queue)
            self._queue.clear()
            self._ready.notify_all()
            callback = self._on_close
        if dropped:
            logger.debug("Range stream closed with {} unread snapshot(s)", dropped)
        if callback is not None:
            callback()


@dataclass
class DrainResult:
    """Outcome of draining a stream."""
    snapshots: int = 0
    error: Optional[StreamError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def drain(
    stream: RangeStream,
    on_snapshot: Callable[[WorldState], None],
    timeout: Optional[float] = None,
) -> DrainResult:
    """
    Pull every snapshot from a stream, handing each to on_snapshot as it
    arrives.

    The error flag is checked before every pull; once it is seen no
    further pull happens. An exception raised by on_snapshot aborts the
    drain and propagates. The stream is closed on every exit path.

    Args:
        stream: Stream to consume
        on_snapshot: Called once per snapshot, in arrival order
        timeout: Per-pull wait limit in seconds (None = wait forever)

    Returns:
        DrainResult with snapshot count and the stream fault, if any
    """
    result = DrainResult()
    try:
        while stream.has_next or not stream.is_complete:
            if stream.is_error:
                break
            snapshot = stream.next(timeout)
            if snapshot is None:
                if not stream.is_complete:
                    result.error = StreamError(TimeoutError("No snapshot within timeout"), result.snapshots)
                    return result
                continue
            result.snapshots += 1
            on_snapshot(snapshot)

        if stream.is_error:
            result.error = StreamError(stream.error, result.snapshots)
        return result
    finally:
        stream.close()
