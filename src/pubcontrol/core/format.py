"""
Format interface for payloads carried by an item.
"""

from abc import ABC, abstractmethod
from typing import Any


class Format(ABC):
    """
    Abstract base class for all publishing formats.
    
    A format is a named payload kind. Examples include 'json-object',
    'http-response' and 'http-stream'. An item may carry at most one
    format of each name.
    """

    @abstractmethod
    def name(self) -> str:
        """Return the format name used as the key in exported items."""
        pass

    @abstractmethod
    def export(self) -> Any:
        """Return the format-specific payload, ready for JSON encoding."""
        pass


class JsonObjectFormat(Format):
    """
    Format carrying an arbitrary JSON-serializable value.
    
    Published under the name 'json-object'.
    """

    def __init__(self, value: Any):
        self.value = value

    def name(self) -> str:
        return "json-object"

    def export(self) -> Any:
        return self.value
