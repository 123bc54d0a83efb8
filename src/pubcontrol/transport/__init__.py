"""
Transports for sending publish calls.
"""

from .base import Transport, TransportRequest, TransportResponse
from .http_transport import HttpTransport

__all__ = ["Transport", "TransportRequest", "TransportResponse", "HttpTransport"]
