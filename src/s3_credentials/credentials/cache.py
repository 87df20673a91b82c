"""Caching credentials container with a single in-flight refresh."""

import asyncio
import logging
from enum import Enum
from typing import List, Optional

from ..config import CredentialSettings, get_settings
from .chain import ChainProvider
from .http import Fetch, make_fetch
from .iam import IAMRoleProvider
from .providers import (
    CredentialProvider,
    EnvAWSProvider,
    EnvLookup,
    EnvMinioProvider,
    StaticProvider
)
from .types import CredentialValue

logger = logging.getLogger(__name__)


class CacheState(Enum):
    EMPTY = "empty"
    PENDING = "pending"
    READY = "ready"


class CredentialCache:
    """Caches the credentials value of a provider until it expires.

    The first get() always calls the provider's retrieve(). Later calls
    return the cached value until is_expired() is true. Concurrent get()
    calls made while a refresh is running all wait on that same refresh,
    so the provider never has more than one retrieve() in flight.
    """

    def __init__(self, provider: CredentialProvider, force_refresh: bool = True):
        self.provider = provider
        self.force_refresh = force_refresh
        self._value: Optional[CredentialValue] = None
        self._pending: Optional["asyncio.Task[CredentialValue]"] = None
        # Bumped by expire() so a refresh started earlier does not clear a newer request.
        self._expire_count = 0

    @classmethod
    def from_settings(
        cls,
        settings: Optional[CredentialSettings] = None,
        env: Optional[EnvLookup] = None,
        fetch: Optional[Fetch] = None
    ) -> "CredentialCache":
        """Create a cache around the default provider chain."""
        return cls(default_chain(settings, env=env, fetch=fetch))

    @property
    def state(self) -> CacheState:
        if self._pending is not None:
            return CacheState.PENDING
        if self._value is None:
            return CacheState.EMPTY
        return CacheState.READY

    @property
    def value(self) -> Optional[CredentialValue]:
        """Last successfully retrieved credentials."""
        return self._value

    async def get(self) -> CredentialValue:
        """Return the credentials, refreshing them first if they expired.

        Raises:
            CredentialError: Whatever the provider raised; the cache is left as it was
        """
        if self._pending is None:
            if self._value is not None and not self.is_expired():
                return self._value
            self._pending = asyncio.ensure_future(self._refresh(self._expire_count))
            self._pending.add_done_callback(_consume_exception)

        # Shield so a cancelled caller does not cancel the refresh other callers share.
        return await asyncio.shield(self._pending)

    def expire(self) -> None:
        """Force the next get() to retrieve credentials from the provider."""
        self.force_refresh = True
        self._expire_count += 1

    def is_expired(self) -> bool:
        return self.force_refresh or self.provider.is_expired()

    async def _refresh(self, expire_count: int) -> CredentialValue:
        logger.debug(f"Refreshing credentials from {self.provider.__class__.__name__}")
        try:
            value = await self.provider.retrieve()
        except Exception as e:
            logger.error(f"Failed to refresh credentials: {e}")
            raise
        else:
            self._value = value
            if expire_count == self._expire_count:
                self.force_refresh = False
            return value
        finally:
            self._pending = None


def _consume_exception(task: "asyncio.Task[CredentialValue]") -> None:
    # The failure was already logged; mark it retrieved in case every caller was cancelled.
    if not task.cancelled():
        task.exception()


def default_chain(
    settings: Optional[CredentialSettings] = None,
    env: Optional[EnvLookup] = None,
    fetch: Optional[Fetch] = None
) -> ChainProvider:
    """Build the standard provider chain.

    Order: static credentials from settings (if both keys are set), AWS
    environment variables, MinIO environment variables, IAM role.
    """
    settings = settings or get_settings()
    providers: List[CredentialProvider] = []

    if settings.has_static_credentials:
        providers.append(StaticProvider(
            settings.access_key,
            settings.secret_key,
            session_token=settings.session_token
        ))

    providers.extend([
        EnvAWSProvider(env=env),
        EnvMinioProvider(env=env),
        IAMRoleProvider(
            endpoint=settings.metadata_endpoint,
            fetch=fetch or make_fetch(settings.http_timeout),
            env=env
        )
    ])
    return ChainProvider(providers)
