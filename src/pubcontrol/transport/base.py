"""
Transport interface for sending publish calls to an endpoint.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class TransportRequest:
    """
    A single HTTP POST to be sent by a transport.
    
    Attributes:
        uri: Full publish uri (including the '/publish/' suffix)
        headers: Request headers
        body: Encoded JSON request body
    """
    uri: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""


@dataclass
class TransportResponse:
    """
    Response from a transport.
    
    Attributes:
        status_code: HTTP status code
        reason: HTTP reason phrase
        text: Response body as text
        headers: Response headers
        duration_ms: Time taken for the request in milliseconds
    """
    status_code: int
    reason: str = ""
    text: str = ""
    headers: Optional[Dict[str, str]] = None
    duration_ms: Optional[int] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(ABC):
    """
    Abstract base class for all transports.
    
    Transports perform the raw HTTP exchange. Status codes are returned
    as-is; only network-level failures are raised, as TransportError.
    """

    @abstractmethod
    def send(self, request: TransportRequest) -> TransportResponse:
        """
        Send the request.
        
        Args:
            request: The request to execute
            
        Returns:
            TransportResponse with the result
            
        Raises:
            TransportError: If no response could be obtained
        """
        pass

    def close(self) -> None:
        """Release any pooled connections."""
        pass
