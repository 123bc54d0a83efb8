"""
Configuration loading for publish endpoints.
"""

from .config_loader import PubControlConfig

__all__ = ["PubControlConfig"]
