"""Shared fixtures for credential tests."""

import json
from datetime import datetime, timezone
from typing import Dict, List, Union

import pytest

from s3_credentials.credentials import CredentialProvider, CredentialValue, HttpResponse


class FakeFetch:
    """Async fetch double returning canned responses per URL."""

    def __init__(self, responses: Dict[str, Union[HttpResponse, Exception]]):
        self.responses = responses
        self.calls: List[str] = []

    async def __call__(self, url: str) -> HttpResponse:
        self.calls.append(url)
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


class RecordingProvider(CredentialProvider):
    """Provider returning a fixed value (or raising) and counting calls."""

    def __init__(self, value=None, error=None, expired=False):
        self.value = value
        self.error = error
        self.expired = expired
        self.calls = 0

    async def retrieve(self) -> CredentialValue:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.value

    def is_expired(self) -> bool:
        return self.expired


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def credential_document(**overrides) -> str:
    document = {
        "Code": "Success",
        "LastUpdated": "2029-12-31T18:00:00Z",
        "Type": "AWS-HMAC",
        "AccessKeyId": "ASIAROLE",
        "SecretAccessKey": "role-secret",
        "Token": "role-token",
        "Expiration": "2030-01-01T00:00:00Z",
    }
    document.update(overrides)
    return json.dumps(document)


@pytest.fixture
def env_vars():
    """Mutable environment mapping; pass ``env_vars.get`` as the lookup."""
    return {}


@pytest.fixture
def fixed_clock():
    return FakeClock(datetime(2029, 12, 31, 23, 0, tzinfo=timezone.utc))
