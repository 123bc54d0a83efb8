"""
Core data models for the publishing client.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union


PublishCallback = Callable[[bool, Optional[str]], None]
"""Completion callback: (success, error_message)."""


class WorkerState(str, Enum):
    """Lifecycle state of a client's background publish worker."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


# -----Credentials--------------------------------------------------------------

@dataclass(frozen=True)
class NoCredential:
    """No authorization header is sent."""


@dataclass(frozen=True)
class BasicCredential:
    """
    HTTP basic authentication.
    
    Attributes:
        user: User name
        password: Password
    """
    user: str
    password: str

    def __repr__(self) -> str:
        return f"BasicCredential(user={self.user!r}, password='***')"


@dataclass(frozen=True)
class JwtCredential:
    """
    JWT claims signed with HS256 on every header generation.
    
    Attributes:
        claims: Claims to sign; 'exp' is added when missing
        key: HMAC signing key
    """
    claims: Dict[str, Any]
    key: bytes

    def __repr__(self) -> str:
        return f"JwtCredential(claims={self.claims!r}, key='***')"


@dataclass(frozen=True)
class BearerCredential:
    """
    Static bearer token.
    
    Attributes:
        token: Token sent verbatim after 'Bearer '
    """
    token: str

    def __repr__(self) -> str:
        return "BearerCredential(token='***')"


Credential = Union[NoCredential, BasicCredential, JwtCredential, BearerCredential]


# -----Queue requests-----------------------------------------------------------

@dataclass
class PublishRequest:
    """
    A queued asynchronous publish.
    
    The uri and auth header are captured at enqueue time so later credential
    changes do not affect requests already waiting in the queue.
    
    Attributes:
        uri: Endpoint base uri
        auth_header: Authorization header value, or None
        items: Exported records, one per channel
        callback: Optional completion callback, invoked exactly once
    """
    uri: str
    auth_header: Optional[str]
    items: List[Dict[str, Any]]
    callback: Optional[PublishCallback] = None


@dataclass(frozen=True)
class StopRequest:
    """Marker that terminates the worker once everything before it is sent."""


QueueEntry = Union[PublishRequest, StopRequest]


@dataclass
class DrainResult:
    """
    Result of draining one batch from the queue.
    
    Attributes:
        requests: Publish requests in enqueue order
        terminated: True once the stop marker has been observed
    """
    requests: List[PublishRequest] = field(default_factory=list)
    terminated: bool = False


# -----Configuration------------------------------------------------------------

@dataclass
class EndpointConfig:
    """
    Parsed endpoint descriptor.
    
    Attributes:
        uri: Endpoint base uri ('/publish/' is appended when publishing)
        issuer: Optional JWT issuer claim
        key: Optional JWT signing key
    """
    uri: str
    issuer: Optional[str] = None
    key: Optional[bytes] = None

    @property
    def has_jwt(self) -> bool:
        return bool(self.issuer) and bool(self.key)

    def __repr__(self) -> str:
        key = "'***'" if self.key else "None"
        return f"EndpointConfig(uri={self.uri!r}, issuer={self.issuer!r}, key={key})"
