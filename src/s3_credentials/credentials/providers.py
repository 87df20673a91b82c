"""Credential providers for object storage authentication."""

import os
import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from .types import CredentialValue, SignatureType

logger = logging.getLogger(__name__)


EnvLookup = Callable[[str], Optional[str]]


class CredentialProvider(ABC):
    """Base class for credential providers."""

    @abstractmethod
    async def retrieve(self) -> CredentialValue:
        """Retrieve credentials, possibly performing network I/O."""
        pass

    @abstractmethod
    def is_expired(self) -> bool:
        """Check if the last retrieved credentials need refreshing."""
        pass


class StaticProvider(CredentialProvider):
    """Provider for a fixed set of credentials. Never expires."""

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        session_token: Optional[str] = None,
        signature_type: SignatureType = SignatureType.V4
    ):
        self._credentials = CredentialValue(
            access_key=access_key,
            secret_key=secret_key,
            session_token=session_token,
            signature_type=signature_type
        )

    async def retrieve(self) -> CredentialValue:
        return self._credentials

    def is_expired(self) -> bool:
        return False


class _EnvironmentProvider(CredentialProvider):
    """Shared behaviour of the environment variable providers.

    The environment is assumed not to change for the lifetime of the
    process, so credentials are expired only until the first read.
    """

    def __init__(self, env: Optional[EnvLookup] = None):
        self._env = env or os.environ.get
        self._retrieved = False

    def _get(self, *names: str) -> str:
        """Return the first non-empty value among ``names``."""
        for name in names:
            value = self._env(name)
            if value:
                return value
        return ""

    def is_expired(self) -> bool:
        return not self._retrieved


class EnvAWSProvider(_EnvironmentProvider):
    """Provider for AWS environment variable credentials.

    Variables used:

    * Access key:    AWS_ACCESS_KEY_ID or AWS_ACCESS_KEY
    * Secret key:    AWS_SECRET_ACCESS_KEY or AWS_SECRET_KEY
    * Session token: AWS_SESSION_TOKEN
    """

    async def retrieve(self) -> CredentialValue:
        access_key = self._get("AWS_ACCESS_KEY_ID", "AWS_ACCESS_KEY")
        secret_key = self._get("AWS_SECRET_ACCESS_KEY", "AWS_SECRET_KEY")

        credentials = CredentialValue(
            access_key=access_key,
            secret_key=secret_key,
            session_token=self._env("AWS_SESSION_TOKEN"),
            signature_type=SignatureType.ANONYMOUS if access_key == "" else SignatureType.V4
        )
        self._retrieved = True
        logger.debug(f"EnvAWSProvider read credentials (anonymous={credentials.is_anonymous})")
        return credentials


class EnvMinioProvider(_EnvironmentProvider):
    """Provider for MINIO_ACCESS_KEY / MINIO_SECRET_KEY credentials."""

    async def retrieve(self) -> CredentialValue:
        access_key = self._get("MINIO_ACCESS_KEY")
        secret_key = self._get("MINIO_SECRET_KEY")

        if access_key == "" or secret_key == "":
            signature_type = SignatureType.ANONYMOUS
        else:
            signature_type = SignatureType.V4

        credentials = CredentialValue(
            access_key=access_key,
            secret_key=secret_key,
            signature_type=signature_type
        )
        self._retrieved = True
        logger.debug(f"EnvMinioProvider read credentials (anonymous={credentials.is_anonymous})")
        return credentials
