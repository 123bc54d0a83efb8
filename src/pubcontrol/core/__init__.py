"""
Core subpackage for the publishing client.

Contains items, formats, data models, exceptions, and logging utilities.
"""

from .exceptions import (
    PubControlError,
    DuplicateFormatError,
    PublishFailedError,
    TransportError,
    PubControlConfigError,
)
from .format import Format, JsonObjectFormat
from .item import Item
from .models import (
    PublishCallback,
    WorkerState,
    NoCredential,
    BasicCredential,
    JwtCredential,
    BearerCredential,
    Credential,
    PublishRequest,
    StopRequest,
    DrainResult,
    EndpointConfig,
)

__all__ = [
    # Items
    "Format",
    "JsonObjectFormat",
    "Item",
    # Models
    "PublishCallback",
    "WorkerState",
    "NoCredential",
    "BasicCredential",
    "JwtCredential",
    "BearerCredential",
    "Credential",
    "PublishRequest",
    "StopRequest",
    "DrainResult",
    "EndpointConfig",
    # Exceptions
    "PubControlError",
    "DuplicateFormatError",
    "PublishFailedError",
    "TransportError",
    "PubControlConfigError",
]
