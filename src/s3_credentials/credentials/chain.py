"""Provider that tries a list of providers in order."""

import logging
from typing import Optional, Sequence

from .providers import CredentialProvider
from .types import ANONYMOUS_CREDENTIALS, CredentialValue

logger = logging.getLogger(__name__)


class ChainProvider(CredentialProvider):
    """Tries each provider in order until one returns non-empty credentials.

    A provider failure is not a reason to move on; the error propagates
    to the caller. If every provider returns empty credentials the chain
    resolves to anonymous credentials.
    """

    def __init__(self, providers: Sequence[CredentialProvider]):
        self.providers = tuple(providers)
        # Index of the provider that satisfied the last retrieve().
        self._current: Optional[int] = None

    @property
    def current(self) -> Optional[CredentialProvider]:
        """Provider that supplied the last credentials, if any."""
        if self._current is None:
            return None
        return self.providers[self._current]

    async def retrieve(self) -> CredentialValue:
        for index, provider in enumerate(self.providers):
            name = provider.__class__.__name__
            logger.debug(f"Trying provider {name}")

            credentials = await provider.retrieve()
            if credentials is None or credentials.is_empty:
                logger.debug(f"Provider {name} returned no credentials")
                continue

            logger.info(f"Got credentials from {name}")
            self._current = index
            return credentials

        logger.info("No provider returned credentials, using anonymous credentials")
        self._current = None
        return ANONYMOUS_CREDENTIALS

    def is_expired(self) -> bool:
        if self._current is None:
            return True
        return self.providers[self._current].is_expired()
