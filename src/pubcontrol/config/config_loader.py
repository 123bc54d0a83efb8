"""
Configuration loader for publish endpoints.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..aggregator import PubControl, endpoint_from_entry
from ..core.exceptions import PubControlConfigError
from ..core.models import EndpointConfig
from ..transport.http_transport import HttpTransport


logger = logging.getLogger(__name__)


class PubControlConfig:
    """
    Configuration for the publishing client.
    
    Loads a YAML file listing endpoints and transport settings, then applies
    PUBCONTROL_* environment variable overrides.
    
    Example config:
        endpoints:
          - uri: https://api.example.com/realm/abc
            iss: abc
            key: secret
        transport:
          timeout: 30
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration.
        
        Args:
            config_path: Path to YAML config file (optional)
        """
        self.config_path = Path(config_path) if config_path else None
        self.config = self._load_config() if self.config_path else self._default_config()
        self._apply_env_overrides()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")
        
        logger.info(f"Loading config from: {self.config_path}")
        
        with open(self.config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
        
        if config is None:
            return self._default_config()
        if not isinstance(config, dict):
            raise PubControlConfigError(
                f"Config root must be a mapping: {self.config_path}"
            )
        return config

    def _default_config(self) -> Dict[str, Any]:
        """Return default configuration."""
        return {
            "endpoints": [],
            "transport": {
                "timeout": 30,
                "verify": True,
            },
        }

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides to loaded config."""
        uri = os.environ.get("PUBCONTROL_URI")
        if uri:
            endpoint: Dict[str, Any] = {"uri": uri}
            issuer = os.environ.get("PUBCONTROL_ISS")
            key = os.environ.get("PUBCONTROL_KEY")
            if issuer and key:
                endpoint["iss"] = issuer
                endpoint["key"] = key
            self.config["endpoints"] = [endpoint]
        
        timeout = os.environ.get("PUBCONTROL_TIMEOUT")
        if timeout:
            try:
                timeout_value = float(timeout)
            except ValueError:
                raise PubControlConfigError(
                    f"PUBCONTROL_TIMEOUT must be a number, got {timeout!r}"
                )
            transport = self.config.setdefault("transport", {})
            transport["timeout"] = timeout_value

    def get_endpoints(self) -> List[EndpointConfig]:
        """
        Get the parsed endpoint list.
        
        Raises:
            PubControlConfigError: If 'endpoints' is not a list of mappings
                or an entry has no uri
        """
        entries = self.config.get("endpoints") or []
        if not isinstance(entries, list):
            raise PubControlConfigError("'endpoints' must be a list")
        return [endpoint_from_entry(entry) for entry in entries]

    def get_transport_config(self) -> Dict[str, Any]:
        """Get transport configuration."""
        return self.config.get("transport") or {}

    def build_transport(self) -> HttpTransport:
        """Create an HttpTransport from the transport section."""
        transport_config = self.get_transport_config()
        return HttpTransport(
            timeout=transport_config.get("timeout", 30),
            user_agent=transport_config.get("user_agent"),
            verify=transport_config.get("verify", True),
        )

    def build_pubcontrol(self) -> PubControl:
        """Create a PubControl with one client per configured endpoint."""
        endpoints = self.get_endpoints()
        if not endpoints:
            logger.warning("No endpoints configured; publishes will be no-ops")
        return PubControl(endpoints, transport=self.build_transport())
