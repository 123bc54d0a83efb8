"""
Thread-safe FIFO of pending publish requests.

One queue serves one worker. The stop marker is part of the queue so that
everything enqueued before it is drained before the worker exits.
"""

import logging
import threading
from collections import deque
from typing import Deque, Optional

from .core.models import DrainResult, QueueEntry, StopRequest


logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10


class PublishQueue:
    """
    FIFO of publish requests with blocking batch drain.
    
    Features:
    - enqueue() never blocks beyond the internal lock
    - drain_batch() waits until at least one entry is present
    - once the stop marker is drained, every later drain returns terminated
    """

    def __init__(self):
        self._entries: Deque[QueueEntry] = deque()
        self._cond = threading.Condition(threading.Lock())
        self._terminated = False

    def enqueue(self, request: QueueEntry) -> None:
        """Append a request (or stop marker) and wake one waiter."""
        with self._cond:
            self._entries.append(request)
            self._cond.notify()

    def stop(self) -> None:
        """Enqueue the stop marker."""
        self.enqueue(StopRequest())

    @property
    def terminated(self) -> bool:
        with self._cond:
            return self._terminated

    def drain_batch(
        self,
        max_size: int = DEFAULT_BATCH_SIZE,
        timeout: Optional[float] = None,
    ) -> DrainResult:
        """
        Remove up to max_size requests from the head of the queue.
        
        Blocks while the queue is empty. Draining stops early at the stop
        marker, which is consumed but not returned.
        
        Args:
            max_size: Maximum number of requests to return
            timeout: Optional wait limit in seconds; an empty, non-terminated
                result is returned when it expires
            
        Returns:
            DrainResult with the requests and the termination flag
        """
        if max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}")

        with self._cond:
            if self._terminated:
                return DrainResult(terminated=True)

            if not self._cond.wait_for(lambda: len(self._entries) > 0, timeout=timeout):
                return DrainResult()

            result = DrainResult()
            while self._entries and len(result.requests) < max_size:
                entry = self._entries.popleft()
                if isinstance(entry, StopRequest):
                    self._terminated = True
                    result.terminated = True
                    break
                result.requests.append(entry)

            if self._terminated and self._entries:
                logger.debug(
                    f"Stop marker drained with {len(self._entries)} later "
                    f"request(s) left undelivered"
                )
            return result

    def __len__(self) -> int:
        with self._cond:
            return len(self._entries)
