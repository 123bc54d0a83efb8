"""
Shared test fixtures and configuration for pytest.
"""

import logging
import sys
import threading
from pathlib import Path
from typing import List, Optional

import pytest

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pubcontrol.core.exceptions import TransportError
from pubcontrol.core.format import Format
from pubcontrol.transport.base import Transport, TransportRequest, TransportResponse


logger = logging.getLogger(__name__)


# ============================================================================
# Test doubles
# ============================================================================

class RecordingTransport(Transport):
    """
    Transport that records requests and returns a configurable status.
    
    Set `status_code` for non-2xx responses or `error` to raise a
    TransportError. Set `gate` to an Event to hold every send until it is set.
    """
    
    def __init__(self, status_code: int = 200, reason: str = "OK"):
        self.status_code = status_code
        self.reason = reason
        self.error: Optional[str] = None
        self.gate: Optional[threading.Event] = None
        self.requests: List[TransportRequest] = []
        self.closed = False
        self._lock = threading.Lock()
    
    def send(self, request: TransportRequest) -> TransportResponse:
        if self.gate is not None:
            self.gate.wait(timeout=5)
        with self._lock:
            self.requests.append(request)
        if self.error is not None:
            raise TransportError(self.error)
        return TransportResponse(status_code=self.status_code, reason=self.reason)
    
    def close(self) -> None:
        self.closed = True


class NamedFormat(Format):
    """Format with a configurable name and payload."""
    
    def __init__(self, format_name: str, payload=None):
        self.format_name = format_name
        self.payload = payload if payload is not None else {"name": "value"}
    
    def name(self) -> str:
        return self.format_name
    
    def export(self):
        return dict(self.payload)


class CallbackRecorder:
    """Thread-safe collector of (success, message) callback invocations."""
    
    def __init__(self, expected: int = 1):
        self.calls = []
        self.expected = expected
        self.done = threading.Event()
        self._lock = threading.Lock()
    
    def __call__(self, success, message):
        with self._lock:
            self.calls.append((success, message))
            if len(self.calls) >= self.expected:
                self.done.set()
    
    def wait(self, timeout: float = 5) -> bool:
        return self.done.wait(timeout)


# ============================================================================
# Pytest hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "concurrency: Tests that start worker threads")


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def transport():
    """Fixture providing a recording transport that returns 200."""
    return RecordingTransport()


@pytest.fixture
def item():
    """Fixture providing a single-format item."""
    from pubcontrol.core.item import Item
    
    return Item(NamedFormat("test-name"), id="id", prev_id="prev")


@pytest.fixture
def client(transport):
    """Fixture providing a client bound to the recording transport."""
    from pubcontrol.client import PubControlClient
    
    client = PubControlClient("https://pub.example.com/realm", transport=transport)
    yield client
    client.finish()
