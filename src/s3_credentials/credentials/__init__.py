"""Credential providers, chain and cache for object storage clients."""

from .cache import CacheState, CredentialCache, default_chain
from .chain import ChainProvider
from .exceptions import (
    ConfigurationError,
    CredentialError,
    ProtocolError,
    TransportError
)
from .http import HttpResponse, httpx_fetch
from .iam import IAMRoleProvider
from .providers import (
    CredentialProvider,
    EnvAWSProvider,
    EnvMinioProvider,
    StaticProvider
)
from .types import ANONYMOUS_CREDENTIALS, CredentialValue, Expiry, SignatureType

__all__ = [
    "ANONYMOUS_CREDENTIALS",
    "CacheState",
    "ChainProvider",
    "ConfigurationError",
    "CredentialCache",
    "CredentialError",
    "CredentialProvider",
    "CredentialValue",
    "EnvAWSProvider",
    "EnvMinioProvider",
    "Expiry",
    "HttpResponse",
    "IAMRoleProvider",
    "ProtocolError",
    "SignatureType",
    "StaticProvider",
    "TransportError",
    "default_chain",
    "httpx_fetch",
]
