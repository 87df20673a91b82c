"""Exceptions raised while retrieving credentials."""

from typing import Optional


class CredentialError(Exception):
    """Base class for credential retrieval failures."""
    pass


class ConfigurationError(CredentialError):
    """Raised when no usable endpoint or role could be found."""
    pass


class TransportError(CredentialError):
    """Raised when a metadata endpoint cannot be reached."""
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Request to '{url}' failed: {reason}")


class ProtocolError(CredentialError):
    """Raised when a metadata endpoint answers with something unusable."""
    def __init__(self, message: str, url: Optional[str] = None, status: Optional[int] = None):
        self.url = url
        self.status = status
        super().__init__(message)
