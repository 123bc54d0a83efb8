"""
Background worker that drains a publish queue in batches.

Each worker owns one daemon thread. Batches of up to ten requests are sent
as a single transport call per (uri, auth header) pair, and every request's
callback in the batch receives the same outcome.
"""

import logging
import threading
from typing import Callable, Dict, List, Optional, Tuple

from .core.exceptions import PubControlError
from .core.models import PublishRequest
from .queue import DEFAULT_BATCH_SIZE, PublishQueue


logger = logging.getLogger(__name__)

Dispatch = Callable[[str, Optional[str], List[dict]], None]
"""Send (uri, auth_header, items); raise PubControlError on failure."""


def group_by_destination(
    requests: List[PublishRequest],
) -> List[Tuple[Tuple[str, Optional[str]], List[PublishRequest]]]:
    """
    Group requests by (uri, auth_header) in first-appearance order.
    
    Relative order of requests inside each group is preserved.
    """
    groups: Dict[Tuple[str, Optional[str]], List[PublishRequest]] = {}
    for request in requests:
        groups.setdefault((request.uri, request.auth_header), []).append(request)
    return list(groups.items())


class PublishWorker:
    """
    Drains a PublishQueue on a background thread until the stop marker.
    
    Example:
        >>> worker = PublishWorker(queue, client._pub_call, name="pubcontrol-worker")
        >>> worker.start()
        >>> queue.enqueue(request)
        >>> worker.stop()
        >>> worker.join()
    """

    def __init__(
        self,
        queue: PublishQueue,
        dispatch: Dispatch,
        name: str = "pubcontrol-worker",
        batch_size: int = DEFAULT_BATCH_SIZE,
        on_exit: Optional[Callable[["PublishWorker"], None]] = None,
    ):
        """
        Initialize the worker.
        
        Args:
            queue: Queue to drain
            dispatch: Callable performing one transport call
            name: Thread name
            batch_size: Maximum requests per drained batch
            on_exit: Called with this worker on its own thread just before
                the thread exits
        """
        self.queue = queue
        self.dispatch = dispatch
        self.name = name
        self.batch_size = batch_size
        self.batches_sent = 0
        self.on_exit = on_exit
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        """Enqueue the stop marker; the worker exits after draining up to it."""
        self.queue.stop()

    def join(self, timeout: Optional[float] = None) -> None:
        self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def is_current_thread(self) -> bool:
        return threading.current_thread() is self._thread

    def _run(self) -> None:
        logger.info(f"Publish worker {self.name} started", extra={"worker": self.name})
        while True:
            result = self.queue.drain_batch(self.batch_size)
            if result.requests:
                self.publish_batch(result.requests)
            if result.terminated:
                break
        logger.info(
            f"Publish worker {self.name} stopped after {self.batches_sent} batch(es)",
            extra={"worker": self.name},
        )
        if self.on_exit is not None:
            self.on_exit(self)

    def publish_batch(self, requests: List[PublishRequest]) -> None:
        """
        Send a drained batch and resolve every request's callback.
        
        Failure is all-or-nothing per transport call: each request sharing
        the call gets the same (success, message) result.
        """
        for (uri, auth_header), group in group_by_destination(requests):
            items: List[dict] = []
            for request in group:
                items.extend(request.items)

            success = True
            message = None
            try:
                logger.debug(
                    f"Dispatching {len(group)} request(s) with {len(items)} item(s)",
                    extra={"uri": uri, "batch_size": len(group)},
                )
                self.dispatch(uri, auth_header, items)
            except PubControlError as e:
                success = False
                message = str(e)
                logger.warning(
                    f"Async publish failed: {message}",
                    extra={"uri": uri, "batch_size": len(group)},
                )
            except Exception as e:
                # Async failures are only reported through callbacks
                success = False
                message = f"failed to publish: {e}"
                logger.exception(
                    "Unexpected error dispatching batch",
                    extra={"uri": uri, "batch_size": len(group)},
                )
            self.batches_sent += 1

            for request in group:
                self._complete(request, success, message)

    def _complete(
        self, request: PublishRequest, success: bool, message: Optional[str]
    ) -> None:
        if request.callback is None:
            return
        try:
            request.callback(success, message)
        except Exception:
            logger.exception(
                "Publish callback raised; continuing with remaining callbacks",
                extra={"uri": request.uri},
            )
