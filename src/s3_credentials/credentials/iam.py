"""Provider for temporary credentials from the EC2 instance or ECS task metadata service."""

import os
import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from .exceptions import ConfigurationError, ProtocolError
from .http import Fetch, HttpResponse, make_fetch
from .providers import CredentialProvider, EnvLookup
from .types import CredentialValue, Expiry, SignatureType

logger = logging.getLogger(__name__)


# Credentials are refreshed this long before they actually expire so
# in-flight requests do not fail with an expired token.
DEFAULT_EXPIRY_WINDOW = timedelta(seconds=10)

DEFAULT_IAM_ROLE_ENDPOINT = "http://169.254.169.254"
DEFAULT_ECS_ROLE_ENDPOINT = "http://169.254.170.2"
DEFAULT_IAM_SECURITY_CREDENTIALS_PATH = "/latest/meta-data/iam/security-credentials"

ECS_RELATIVE_URI_VAR = "AWS_CONTAINER_CREDENTIALS_RELATIVE_URI"


class MetadataCredentialResponse(BaseModel):
    """Credential document served by the metadata service."""
    access_key_id: str = Field(validation_alias=AliasChoices("AccessKeyId", "AccessKeyID"))
    secret_access_key: str = Field(validation_alias="SecretAccessKey")
    token: Optional[str] = Field(default=None, validation_alias="Token")
    expiration: datetime = Field(validation_alias="Expiration")

    # Error state
    code: Optional[str] = Field(default=None, validation_alias="Code")
    message: Optional[str] = Field(default=None, validation_alias="Message")

    # Unused
    last_updated: Optional[str] = Field(default=None, validation_alias="LastUpdated")
    type: Optional[str] = Field(default=None, validation_alias="Type")


def _join(base: str, *parts: str) -> str:
    url = base.rstrip("/")
    for part in parts:
        url = f"{url}/{part.strip('/')}"
    return url


class IAMRoleProvider(CredentialProvider):
    """Provider for IAM role credentials (EC2 instance profile / ECS task role).

    On EC2 the role name is first listed from the instance metadata service,
    then its credentials are fetched. Inside an ECS task the relative URI
    from the environment points directly at the credential document.
    """

    def __init__(
        self,
        endpoint: str = "",
        fetch: Optional[Fetch] = None,
        env: Optional[EnvLookup] = None,
        expiry: Optional[Expiry] = None,
        expiry_window: timedelta = DEFAULT_EXPIRY_WINDOW
    ):
        """Initialize IAM role provider.

        Args:
            endpoint: Explicit metadata endpoint (defaults depend on the environment)
            fetch: Async GET primitive (defaults to an httpx based one)
            env: Environment variable lookup (defaults to os.environ.get)
            expiry: Expiry tracker, shared with callers that want to inspect it
            expiry_window: Safety window subtracted from the document's expiration
        """
        self.endpoint = endpoint
        self.expiry = expiry or Expiry()
        self.expiry_window = expiry_window
        self._fetch = fetch or make_fetch()
        self._env = env or os.environ.get

    def resolve_endpoint(self) -> Tuple[str, bool]:
        """Return the endpoint to query and whether it is an ECS task endpoint."""
        relative_uri = self._env(ECS_RELATIVE_URI_VAR) or ""
        is_ecs_task = relative_uri != ""

        if self.endpoint:
            return self.endpoint, is_ecs_task
        if is_ecs_task:
            return f"{DEFAULT_ECS_ROLE_ENDPOINT}{relative_uri}", True
        return DEFAULT_IAM_ROLE_ENDPOINT, False

    async def retrieve(self) -> CredentialValue:
        """Retrieve credentials from the metadata service.

        Raises:
            ConfigurationError: If no IAM role is attached to the instance
            TransportError: If the metadata service cannot be reached
            ProtocolError: On a non-200 status or an unusable credential document
        """
        endpoint, is_ecs_task = self.resolve_endpoint()
        logger.debug(f"IAMRoleProvider using endpoint {endpoint} (ecs_task={is_ecs_task})")

        if is_ecs_task:
            document = await self._get_document(endpoint)
        else:
            document = await self._get_instance_credentials(endpoint)

        self.expiry.set_expiration(document.expiration, self.expiry_window)
        logger.info(f"Retrieved IAM role credentials, expires: {document.expiration.isoformat()}")

        return CredentialValue(
            access_key=document.access_key_id,
            secret_key=document.secret_access_key,
            session_token=document.token,
            signature_type=SignatureType.V4
        )

    def is_expired(self) -> bool:
        return self.expiry.is_expired()

    async def _list_role_names(self, url: str) -> list[str]:
        """List the IAM role names attached to the current EC2 instance."""
        body = await self._get(url)
        roles = [line.strip() for line in body.splitlines() if line.strip()]
        if not roles:
            raise ConfigurationError("No IAM roles attached to this EC2 instance")
        return roles

    async def _get_instance_credentials(self, endpoint: str) -> MetadataCredentialResponse:
        roles_url = _join(endpoint, DEFAULT_IAM_SECURITY_CREDENTIALS_PATH)
        # An instance profile can contain only one IAM role.
        role_name = (await self._list_role_names(roles_url))[0]
        logger.debug(f"Using IAM role '{role_name}'")
        return await self._get_document(_join(roles_url, role_name))

    async def _get_document(self, url: str) -> MetadataCredentialResponse:
        body = await self._get(url)
        try:
            document = MetadataCredentialResponse.model_validate_json(body)
        except ValidationError as e:
            logger.error(f"Invalid credential document from {url}: {e}")
            raise ProtocolError(f"Invalid credential document from '{url}'", url=url) from e

        if document.code and document.code != "Success":
            message = f"Metadata service returned {document.code}"
            if document.message:
                message += f": {document.message}"
            logger.error(message)
            raise ProtocolError(message, url=url)
        return document

    async def _get(self, url: str) -> str:
        response: HttpResponse = await self._fetch(url)
        if response.status != 200:
            logger.error(f"GET {url} returned status {response.status}")
            raise ProtocolError(
                f"Request failed.\nStatus Code: {response.status}",
                url=url,
                status=response.status
            )
        return response.body
