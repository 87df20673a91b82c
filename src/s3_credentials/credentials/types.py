"""Credential value types and the expiry tracker."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SignatureType(str, Enum):
    """Signing scheme a credential value is meant for."""
    V4 = "S3v4"
    # Anonymous signifies no signature.
    ANONYMOUS = "Anonymous"


@dataclass(frozen=True)
class CredentialValue:
    """Object storage credentials container."""
    access_key: str
    secret_key: str
    session_token: Optional[str] = None
    signature_type: SignatureType = SignatureType.V4

    @property
    def is_empty(self) -> bool:
        """True when neither key is set."""
        return self.access_key == "" and self.secret_key == ""

    @property
    def is_anonymous(self) -> bool:
        return self.signature_type is SignatureType.ANONYMOUS

    def __repr__(self) -> str:
        secret = "***" if self.secret_key else "''"
        token = "***" if self.session_token else None
        return (
            f"CredentialValue(access_key={self.access_key!r}, secret_key={secret}, "
            f"session_token={token}, signature_type={self.signature_type.value})"
        )


ANONYMOUS_CREDENTIALS = CredentialValue(
    access_key="",
    secret_key="",
    signature_type=SignatureType.ANONYMOUS,
)


class Expiry:
    """Absolute expiration with a safety window.

    The window makes credentials look expired slightly before they really
    are, so a request signed right before the deadline does not fail with
    an expired token.
    """

    def __init__(self, expiration: Optional[datetime] = None, clock: Clock = utc_now):
        self._clock = clock
        # Until set_expiration() is called the tracker is already expired.
        self.expiration = expiration if expiration is not None else clock()

    def set_expiration(self, expiration: datetime, window: timedelta = timedelta(0)) -> None:
        """Set the expiration instant, moved earlier by ``window`` when positive.

        Args:
            expiration: Timezone-aware instant the credentials stop working
            window: Time before ``expiration`` to already treat as expired
        """
        if expiration.tzinfo is None:
            expiration = expiration.replace(tzinfo=timezone.utc)
        if window > timedelta(0):
            self.expiration = expiration - window
        else:
            self.expiration = expiration

    def is_expired(self) -> bool:
        return self._clock() >= self.expiration
