"""
HTTP transport backed by a requests session.
"""

import logging
import time
from typing import Optional

import requests

from ..core.exceptions import TransportError
from .base import Transport, TransportRequest, TransportResponse


logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "pubcontrol-python/1.0"


class HttpTransport(Transport):
    """
    Transport that POSTs publish calls with requests.
    
    One session is kept per transport so connections to the same endpoint
    are reused. The session is safe to share between a client's caller
    thread and its worker thread for simple POSTs.
    """

    def __init__(
        self,
        timeout: float = 30,
        user_agent: Optional[str] = None,
        verify: bool = True,
    ):
        """
        Initialize the HTTP transport.
        
        Args:
            timeout: Request timeout in seconds
            user_agent: Custom User-Agent header
            verify: Whether to verify TLS certificates
        """
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.verify = verify
        self.session = requests.Session()

    def send(self, request: TransportRequest) -> TransportResponse:
        """
        POST the request body to the request uri.
        
        Args:
            request: The request to execute
            
        Returns:
            TransportResponse with the result
            
        Raises:
            TransportError: On connection errors, timeouts, or invalid uris
        """
        headers = dict(request.headers)
        if "User-Agent" not in headers:
            headers["User-Agent"] = self.user_agent

        start_time = time.time()
        try:
            response = self.session.post(
                request.uri,
                data=request.body.encode("utf-8"),
                headers=headers,
                timeout=self.timeout,
                verify=self.verify,
            )
        except requests.exceptions.RequestException as e:
            logger.debug(f"HTTP request to {request.uri} failed: {e}")
            raise TransportError(str(e)) from e

        duration_ms = int((time.time() - start_time) * 1000)
        logger.debug(
            f"POST {request.uri} -> {response.status_code} in {duration_ms}ms"
        )

        return TransportResponse(
            status_code=response.status_code,
            reason=response.reason or "",
            text=response.text,
            headers=dict(response.headers),
            duration_ms=duration_ms,
        )

    def close(self) -> None:
        """Close the session."""
        if self.session:
            self.session.close()
