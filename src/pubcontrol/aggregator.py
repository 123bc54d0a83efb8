"""
Fan-out publishing across several endpoint clients.

The synchronous path is fail-fast: the first client that fails aborts the
sequence. The asynchronous path is best-effort: every client attempts its
publish and the outcomes are merged into one callback invocation.
"""

import logging
import threading
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from .client import Channels, PubControlClient
from .core.exceptions import PubControlConfigError
from .core.item import Item
from .core.models import EndpointConfig, PublishCallback
from .transport.base import Transport


logger = logging.getLogger(__name__)

ConfigEntry = Union[EndpointConfig, Mapping[str, Any]]


class CallbackAggregator:
    """
    Merges completions from several clients into a single callback.

    The wrapped callback fires exactly once, when the last expected
    completion arrives. Success is sticky-false and the first error message
    is kept.

    Example:
        >>> agg = CallbackAggregator(2, callback)
        >>> agg(False, "boom")
        >>> agg(True, None)   # callback(False, "boom") fires here
    """

    def __init__(self, count: int, callback: PublishCallback):
        """
        Initialize the aggregator.

        Args:
            count: Number of completions to wait for
            callback: Callable receiving (success, first_error_message)
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        self.callback = callback
        self.remaining = count
        self.success = True
        self.first_error_message: Optional[str] = None
        self._lock = threading.Lock()
        self._fired = count == 0
        if self._fired:
            self.callback(True, None)

    @property
    def fired(self) -> bool:
        with self._lock:
            return self._fired

    def __call__(self, success: bool, message: Optional[str] = None) -> None:
        with self._lock:
            if self._fired:
                logger.warning("Completion received after aggregate callback fired")
                return
            if not success and self.success:
                self.success = False
                self.first_error_message = message
            self.remaining -= 1
            if self.remaining > 0:
                return
            self._fired = True
            success, message = self.success, self.first_error_message
        self.callback(success, message)


class PubControl:
    """
    Manages a set of PubControlClient instances.

    Clients are added one at a time with add_client() or built from
    endpoint configuration with apply_config().

    Example:
        >>> pub = PubControl([{"uri": "https://api.example.com/realm/abc",
        ...                    "iss": "abc", "key": b"secret"}])
        >>> pub.publish_async(["news"], item, callback=on_done)
        >>> pub.finish()
    """

    def __init__(
        self,
        config: Optional[Union[ConfigEntry, Iterable[ConfigEntry]]] = None,
        transport: Optional[Transport] = None,
    ):
        """
        Initialize with or without configuration.

        Args:
            config: Endpoint entry or sequence of entries, applied now
            transport: Transport shared by clients built from config
        """
        self.transport = transport
        self._clients: List[PubControlClient] = []
        if config is not None:
            self.apply_config(config)

    @property
    def clients(self) -> Tuple[PubControlClient, ...]:
        return tuple(self._clients)

    def add_client(self, client: PubControlClient) -> None:
        self._clients.append(client)

    def remove_all_clients(self) -> None:
        self._clients.clear()

    def apply_config(
        self, config: Union[ConfigEntry, Iterable[ConfigEntry]]
    ) -> None:
        """
        Create one client per endpoint entry.

        Entries are EndpointConfig instances or mappings with 'uri' and
        optional 'iss' (or 'issuer') and 'key'. When both issuer and key are
        present the client is given a JWT credential with claims
        {'iss': issuer}.

        Raises:
            PubControlConfigError: If an entry has no uri
        """
        if isinstance(config, (EndpointConfig, Mapping)):
            config = [config]

        for entry in config:
            endpoint = endpoint_from_entry(entry)
            client = PubControlClient(endpoint.uri, transport=self.transport)
            if endpoint.has_jwt:
                client.set_auth_jwt({"iss": endpoint.issuer}, endpoint.key)
            self._clients.append(client)
            logger.debug(f"Added client for {endpoint.uri}", extra={"uri": endpoint.uri})

    def publish(self, channels: Channels, item: Item) -> None:
        """
        Publish synchronously to every client in order.

        Stops at the first failure; later clients are not attempted.

        Raises:
            PublishFailedError: From the first client that fails
        """
        for client in self._clients:
            client.publish(channels, item)

    def publish_async(
        self,
        channels: Channels,
        item: Item,
        callback: Optional[PublishCallback] = None,
    ) -> None:
        """
        Queue the item on every client.

        All clients attempt their publish regardless of the others. When a
        callback is given it is called once with the merged result after
        every client has completed.
        """
        cb = None
        if callback is not None:
            cb = CallbackAggregator(len(self._clients), callback)
        for client in self._clients:
            client.publish_async(channels, item, cb)

    def finish(self) -> None:
        """Block until every client has delivered its queued publishes."""
        for client in self._clients:
            client.finish()

    def close(self) -> None:
        """Finish all clients and release their transports."""
        self.finish()
        closed = set()
        for client in self._clients:
            if id(client.transport) not in closed:
                closed.add(id(client.transport))
                client.transport.close()


def endpoint_from_entry(entry: ConfigEntry) -> EndpointConfig:
    """
    Normalize a configuration entry into an EndpointConfig.

    Raises:
        PubControlConfigError: If the entry is not a mapping or has no uri
    """
    if isinstance(entry, EndpointConfig):
        return entry
    if not isinstance(entry, Mapping):
        raise PubControlConfigError(
            f"endpoint entry must be a mapping, got {type(entry).__name__}"
        )

    uri = entry.get("uri")
    if not uri:
        raise PubControlConfigError("endpoint entry is missing 'uri'")

    issuer = entry.get("iss", entry.get("issuer"))
    key = entry.get("key")
    if isinstance(key, str):
        key = key.encode("utf-8")

    return EndpointConfig(uri=uri, issuer=issuer, key=key)
