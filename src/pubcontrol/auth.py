"""
Authorization header generation for publish endpoints.

A client holds exactly one active credential. Setting a credential replaces
whatever was set before, so there is no precedence between modes.
"""

import base64
import logging
import threading
import time
from typing import Any, Dict, Optional, Union

import jwt

from .core.models import (
    BasicCredential,
    BearerCredential,
    Credential,
    JwtCredential,
    NoCredential,
)


logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
JWT_DEFAULT_TTL_SECONDS = 3600


class AuthHeaderGenerator:
    """
    Thread-safe holder of one endpoint's credential.
    
    Example:
        >>> auth = AuthHeaderGenerator()
        >>> auth.set_basic("user", "pass")
        >>> auth.generate()
        'Basic dXNlcjpwYXNz'
    """

    def __init__(self, lock=None):
        """
        Initialize with no credential.
        
        Args:
            lock: Lock to guard the credential. Clients pass their own state
                lock so uri and credential are read under the same lock.
        """
        self._lock = lock or threading.RLock()
        self._credential: Credential = NoCredential()

    @property
    def credential(self) -> Credential:
        with self._lock:
            return self._credential

    def set_basic(self, user: str, password: str) -> None:
        """Use HTTP basic authentication."""
        self._set(BasicCredential(user=user, password=password))

    def set_jwt(self, claims: Dict[str, Any], key: Union[bytes, str]) -> None:
        """Sign the given claims with HS256 on each header generation."""
        if isinstance(key, str):
            key = key.encode("utf-8")
        self._set(JwtCredential(claims=dict(claims), key=key))

    def set_bearer(self, token: str) -> None:
        """Send a static bearer token."""
        self._set(BearerCredential(token=token))

    def clear(self) -> None:
        """Stop sending an Authorization header."""
        self._set(NoCredential())

    def _set(self, credential: Credential) -> None:
        with self._lock:
            self._credential = credential
        logger.debug(f"Credential mode set to {type(credential).__name__}")

    def generate(self) -> Optional[str]:
        """
        Build the Authorization header value for the active credential.
        
        Returns:
            Header value, or None when no credential is set
        """
        with self._lock:
            credential = self._credential

            if isinstance(credential, BasicCredential):
                raw = f"{credential.user}:{credential.password}".encode("utf-8")
                return "Basic " + base64.b64encode(raw).decode("ascii")

            if isinstance(credential, JwtCredential):
                return "Bearer " + self._sign(credential)

            if isinstance(credential, BearerCredential):
                return "Bearer " + credential.token

            return None

    @staticmethod
    def _sign(credential: JwtCredential) -> str:
        claims = dict(credential.claims)
        if claims.get("exp") is None:
            claims["exp"] = int(time.time()) + JWT_DEFAULT_TTL_SECONDS
        return jwt.encode(claims, credential.key, algorithm=JWT_ALGORITHM)
