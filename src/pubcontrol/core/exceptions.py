"""
Custom exceptions for the publishing client.
"""


class PubControlError(Exception):
    """Base exception for all publishing client errors."""
    pass


class DuplicateFormatError(PubControlError, ValueError):
    """
    Error exporting an item that carries the same format twice.
    
    Raised when:
    - Two formats in one item report the same name()
    """
    
    def __init__(self, message: str, format_name: str = None):
        super().__init__(message)
        self.format_name = format_name


class PublishFailedError(PubControlError):
    """
    Error publishing to an endpoint on the synchronous path.
    
    Raised when:
    - The endpoint returns a non-2xx response
    - The endpoint is unreachable or the request times out
    """
    
    def __init__(self, message: str, status_code: int = None, uri: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.uri = uri


class TransportError(PubControlError):
    """
    Network-level failure reported by a transport.
    
    Raised when:
    - Connection cannot be established
    - TLS negotiation fails
    - Request times out
    """
    pass


class PubControlConfigError(PubControlError):
    """
    Error in endpoint configuration.
    
    Raised when:
    - An endpoint entry has no uri
    - The endpoints section is not a list of mappings
    """
    pass
