"""
Client for publishing items to a single endpoint.

Publishing is either synchronous (one HTTP call on the caller's thread) or
asynchronous (queued and sent by a background worker in batches, with an
optional completion callback). The worker is started lazily on the first
asynchronous publish and drained by finish().
"""

import json
import logging
import threading
from typing import Any, Dict, List, Optional, Sequence, Union

from .auth import AuthHeaderGenerator
from .core.exceptions import PublishFailedError, TransportError
from .core.item import Item
from .core.models import PublishCallback, PublishRequest, WorkerState
from .queue import PublishQueue
from .transport.base import Transport, TransportRequest
from .worker import PublishWorker


logger = logging.getLogger(__name__)

PUBLISH_PATH = "/publish/"

Channels = Union[str, Sequence[str]]


def _normalize_channels(channels: Channels) -> List[str]:
    if isinstance(channels, str):
        return [channels]
    return list(channels)


class PubControlClient:
    """
    Publishes items to one endpoint.

    Features:
    - Basic, JWT, or bearer authorization (last one set wins)
    - Synchronous publish that raises PublishFailedError
    - Asynchronous publish with batching and per-request callbacks
    - finish() to block until queued publishes are delivered

    Example:
        >>> client = PubControlClient("https://api.example.com/realm/abc")
        >>> client.set_auth_jwt({"iss": "abc"}, b"secret")
        >>> client.publish_async("news", item, callback=on_done)
        >>> client.finish()
    """

    def __init__(self, uri: str, transport: Optional[Transport] = None):
        """
        Initialize the client.

        Args:
            uri: Endpoint base uri; '/publish/' is appended per call
            transport: Transport to send with (defaults to HttpTransport)
        """
        if transport is None:
            from .transport.http_transport import HttpTransport
            transport = HttpTransport()

        self.transport = transport
        self._uri = uri
        self._lock = threading.RLock()
        self._cond = threading.Condition(self._lock)
        self._auth = AuthHeaderGenerator(lock=self._lock)
        self._queue: Optional[PublishQueue] = None
        self._worker: Optional[PublishWorker] = None
        self._worker_state = WorkerState.NOT_STARTED

    # -----Configuration-------------------------------------------------------

    @property
    def uri(self) -> str:
        with self._lock:
            return self._uri

    @uri.setter
    def uri(self, value: str) -> None:
        with self._lock:
            self._uri = value

    @property
    def worker_state(self) -> WorkerState:
        with self._lock:
            return self._worker_state

    def set_auth_basic(self, user: str, password: str) -> None:
        """Use HTTP basic authentication with the endpoint."""
        self._auth.set_basic(user, password)

    def set_auth_jwt(self, claims: Dict[str, Any], key: Union[bytes, str]) -> None:
        """Use a JWT built from the claims and signed with the key."""
        self._auth.set_jwt(claims, key)

    def set_auth_bearer(self, token: str) -> None:
        """Use a static bearer token."""
        self._auth.set_bearer(token)

    def clear_auth(self) -> None:
        """Send no Authorization header."""
        self._auth.clear()

    # -----Publishing----------------------------------------------------------

    def publish(self, channels: Channels, item: Item) -> None:
        """
        Publish an item to the channels and wait for the endpoint.

        Args:
            channels: Channel name or sequence of channel names
            item: Item to publish

        Raises:
            DuplicateFormatError: If the item carries a format twice
            PublishFailedError: If the endpoint call fails
        """
        exports = self._export(channels, item)
        with self._lock:
            uri = self._uri
            auth_header = self._auth.generate()
        try:
            self._pub_call(uri, auth_header, exports)
        except PublishFailedError as e:
            logger.error(f"Publish failed: {e}", extra={"uri": uri})
            raise

    def publish_async(
        self,
        channels: Channels,
        item: Item,
        callback: Optional[PublishCallback] = None,
    ) -> None:
        """
        Queue an item for publishing by the background worker.

        The uri and Authorization header are captured now, not at send time.
        If a finish() is still draining the previous worker, this call waits
        for that worker to exit before a new one is started.

        Args:
            channels: Channel name or sequence of channel names
            item: Item to publish
            callback: Optional callable receiving (success, error_message)
                exactly once after the publish completes

        Raises:
            DuplicateFormatError: If the item carries a format twice
        """
        exports = self._export(channels, item)
        with self._cond:
            request = PublishRequest(
                uri=self._uri,
                auth_header=self._auth.generate(),
                items=exports,
                callback=callback,
            )
            queue = self._ensure_worker()
            queue.enqueue(request)
        logger.debug(
            f"Queued {len(exports)} item(s)",
            extra={"uri": request.uri, "channels": [e["channel"] for e in exports]},
        )

    def finish(self) -> None:
        """
        Block until all queued asynchronous publishes are delivered.

        Stops the worker after it has sent everything queued before this
        call. Calling finish() with no worker running does nothing. When
        called from a publish callback (on the worker thread) the stop is
        requested but not waited for.
        """
        with self._cond:
            worker = self._worker
            if worker is None:
                return
            if self._worker_state != WorkerState.STOPPING:
                worker.stop()
                self._worker_state = WorkerState.STOPPING
        if worker.is_current_thread():
            return
        worker.join()
        logger.debug(f"Worker {worker.name} drained", extra={"uri": self.uri})

    def close(self) -> None:
        """Finish pending publishes and close the transport."""
        self.finish()
        self.transport.close()

    # -----Internals-----------------------------------------------------------

    def _export(self, channels: Channels, item: Item) -> List[Dict[str, Any]]:
        exports = []
        for channel in _normalize_channels(channels):
            export = item.export()
            export["channel"] = channel
            exports.append(export)
        return exports

    def _ensure_worker(self) -> PublishQueue:
        # Caller holds self._cond
        while self._worker_state == WorkerState.STOPPING:
            if self._worker.is_current_thread():
                # A callback on the stopping worker cannot wait for itself
                break
            self._cond.wait()

        if self._worker is None or self._worker_state == WorkerState.STOPPING:
            self._queue = PublishQueue()
            self._worker = PublishWorker(
                self._queue,
                self._pub_call,
                name=f"pubcontrol-worker-{id(self):x}",
                on_exit=self._on_worker_exit,
            )
            self._worker.start()
            self._worker_state = WorkerState.RUNNING
        return self._queue

    def _on_worker_exit(self, worker: PublishWorker) -> None:
        with self._cond:
            if self._worker is worker:
                self._worker = None
                self._queue = None
                self._worker_state = WorkerState.STOPPED
            self._cond.notify_all()

    def _pub_call(
        self, uri: str, auth_header: Optional[str], items: List[Dict[str, Any]]
    ) -> None:
        """
        Send items to the endpoint in a single call.

        Raises:
            PublishFailedError: On non-2xx responses or transport errors
        """
        headers = {"Content-Type": "application/json"}
        if auth_header is not None:
            headers["Authorization"] = auth_header

        try:
            body = json.dumps({"items": items})
        except (TypeError, ValueError) as e:
            raise PublishFailedError(f"failed to publish: {e}", uri=uri) from e

        request = TransportRequest(uri=uri + PUBLISH_PATH, headers=headers, body=body)
        try:
            response = self.transport.send(request)
        except TransportError as e:
            raise PublishFailedError(f"failed to publish: {e}", uri=uri) from e

        if not response.ok:
            raise PublishFailedError(
                f"failed to publish: {response.status_code} {response.reason}".rstrip(),
                status_code=response.status_code,
                uri=uri,
            )
