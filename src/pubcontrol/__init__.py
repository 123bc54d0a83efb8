"""
Client-side publishing library.

Publishes items composed of one or more named formats to one or more HTTP
publish endpoints, synchronously or through a per-endpoint background worker.
"""

from .aggregator import CallbackAggregator, PubControl
from .auth import AuthHeaderGenerator
from .client import PubControlClient
from .core import (
    Format,
    JsonObjectFormat,
    Item,
    EndpointConfig,
    WorkerState,
    PubControlError,
    DuplicateFormatError,
    PublishFailedError,
    TransportError,
    PubControlConfigError,
)
from .core.logging import configure_logging
from .queue import PublishQueue
from .worker import PublishWorker

__version__ = "1.0.0"

__all__ = [
    "PubControl",
    "PubControlClient",
    "CallbackAggregator",
    "AuthHeaderGenerator",
    "PublishQueue",
    "PublishWorker",
    "Format",
    "JsonObjectFormat",
    "Item",
    "EndpointConfig",
    "WorkerState",
    "PubControlError",
    "DuplicateFormatError",
    "PublishFailedError",
    "TransportError",
    "PubControlConfigError",
    "configure_logging",
]
