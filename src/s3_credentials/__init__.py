"""S3 Credentials - credential resolution and caching for object storage clients."""

__version__ = "0.1.0"

from .config import CredentialSettings
from .credentials.cache import CredentialCache, default_chain
from .credentials.types import CredentialValue, SignatureType

__all__ = ["CredentialCache", "CredentialSettings", "CredentialValue", "SignatureType", "default_chain"]
