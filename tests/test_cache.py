"""Tests for the credential cache."""

import asyncio
import gc

import pytest

from s3_credentials.config import CredentialSettings
from s3_credentials.credentials import (
    CacheState,
    ChainProvider,
    CredentialCache,
    CredentialValue,
    EnvAWSProvider,
    EnvMinioProvider,
    HttpResponse,
    IAMRoleProvider,
    ProtocolError,
    StaticProvider,
    TransportError,
    default_chain,
)

from conftest import FakeFetch, RecordingProvider, credential_document


VALUE = CredentialValue("AKIA1", "secret1")


class SlowProvider(RecordingProvider):
    """Provider whose retrieve() blocks until released."""

    def __init__(self, value=None, error=None):
        super().__init__(value, error)
        self.release = asyncio.Event()

    async def retrieve(self) -> CredentialValue:
        self.calls += 1
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.value


@pytest.mark.asyncio
async def test_first_get_retrieves_then_caches():
    provider = RecordingProvider(VALUE)
    cache = CredentialCache(provider)
    assert cache.state is CacheState.EMPTY
    assert cache.is_expired()

    assert await cache.get() == VALUE
    assert await cache.get() == VALUE

    assert provider.calls == 1
    assert cache.state is CacheState.READY
    assert not cache.is_expired()


@pytest.mark.asyncio
async def test_refreshes_when_provider_expires():
    provider = RecordingProvider(VALUE)
    cache = CredentialCache(provider)
    await cache.get()

    provider.expired = True
    provider.value = CredentialValue("AKIA2", "secret2")

    assert (await cache.get()).access_key == "AKIA2"
    assert provider.calls == 2


@pytest.mark.asyncio
async def test_expire_forces_refresh():
    provider = RecordingProvider(VALUE, expired=False)
    cache = CredentialCache(provider)
    await cache.get()

    cache.expire()
    assert cache.is_expired()
    await cache.get()

    assert provider.calls == 2
    assert not cache.is_expired()


@pytest.mark.asyncio
async def test_concurrent_gets_share_one_refresh():
    provider = SlowProvider(VALUE)
    cache = CredentialCache(provider)

    first = asyncio.ensure_future(cache.get())
    second = asyncio.ensure_future(cache.get())
    await asyncio.sleep(0)
    assert cache.state is CacheState.PENDING

    provider.release.set()
    results = await asyncio.gather(first, second)

    assert results == [VALUE, VALUE]
    assert provider.calls == 1
    assert cache.state is CacheState.READY


@pytest.mark.asyncio
async def test_concurrent_gets_share_one_failure():
    error = ProtocolError("Request failed.\nStatus Code: 500", status=500)
    provider = SlowProvider(error=error)
    cache = CredentialCache(provider)

    first = asyncio.ensure_future(cache.get())
    second = asyncio.ensure_future(cache.get())
    await asyncio.sleep(0)
    provider.release.set()
    results = await asyncio.gather(first, second, return_exceptions=True)

    assert results == [error, error]
    assert provider.calls == 1
    assert cache.state is CacheState.EMPTY


@pytest.mark.asyncio
async def test_failed_refresh_keeps_previous_value():
    provider = RecordingProvider(VALUE)
    cache = CredentialCache(provider)
    await cache.get()

    cache.expire()
    provider.error = TransportError("http://169.254.169.254", "timed out")
    with pytest.raises(TransportError):
        await cache.get()

    assert cache.value == VALUE
    assert cache.state is CacheState.READY
    assert cache.is_expired()

    provider.error = None
    assert await cache.get() == VALUE
    assert provider.calls == 3


@pytest.mark.asyncio
async def test_expire_during_refresh_is_not_lost():
    provider = SlowProvider(VALUE)
    cache = CredentialCache(provider)

    pending = asyncio.ensure_future(cache.get())
    await asyncio.sleep(0)
    cache.expire()
    provider.release.set()
    await pending

    assert cache.is_expired()


@pytest.mark.asyncio
async def test_cancelled_caller_does_not_cancel_refresh():
    provider = SlowProvider(VALUE)
    cache = CredentialCache(provider)

    cancelled = asyncio.ensure_future(cache.get())
    waiting = asyncio.ensure_future(cache.get())
    await asyncio.sleep(0)
    cancelled.cancel()
    provider.release.set()

    assert await waiting == VALUE
    assert provider.calls == 1


def test_default_chain_order(env_vars):
    settings = CredentialSettings(access_key="AKIA1", secret_key="secret1", metadata_endpoint="http://meta")
    chain = default_chain(settings, env=env_vars.get, fetch=FakeFetch({}))

    assert [type(p) for p in chain.providers] == [
        StaticProvider, EnvAWSProvider, EnvMinioProvider, IAMRoleProvider
    ]
    assert chain.providers[-1].endpoint == "http://meta"


def test_default_chain_without_static_keys(env_vars):
    chain = default_chain(CredentialSettings(access_key="AKIA1"), env=env_vars.get, fetch=FakeFetch({}))
    assert [type(p) for p in chain.providers] == [EnvAWSProvider, EnvMinioProvider, IAMRoleProvider]


@pytest.mark.asyncio
async def test_from_settings_falls_back_to_instance_metadata(env_vars):
    roles_url = "http://169.254.169.254/latest/meta-data/iam/security-credentials"
    fetch = FakeFetch({
        roles_url: HttpResponse(200, "role"),
        f"{roles_url}/role": HttpResponse(200, credential_document()),
    })
    cache = CredentialCache.from_settings(CredentialSettings(), env=env_vars.get, fetch=fetch)

    value = await cache.get()

    assert value.access_key == "ASIAROLE"
    assert isinstance(cache.provider, ChainProvider)
    assert isinstance(cache.provider.current, IAMRoleProvider)


@pytest.mark.asyncio
async def test_from_settings_prefers_environment(env_vars):
    env_vars.update({"AWS_ACCESS_KEY_ID": "AKIA1", "AWS_SECRET_ACCESS_KEY": "secret1"})
    fetch = FakeFetch({})
    cache = CredentialCache.from_settings(CredentialSettings(), env=env_vars.get, fetch=fetch)

    assert await cache.get() == VALUE
    assert fetch.calls == []
    assert not cache.is_expired()


def test_default_chain_uses_settings_timeout(env_vars, monkeypatch):
    timeouts = []

    def fake_make_fetch(timeout):
        timeouts.append(timeout)
        return FakeFetch({})

    monkeypatch.setattr("s3_credentials.credentials.cache.make_fetch", fake_make_fetch)
    chain = default_chain(CredentialSettings(http_timeout=1.5), env=env_vars.get)

    assert timeouts == [1.5]
    assert isinstance(chain.providers[-1]._fetch, FakeFetch)


@pytest.mark.asyncio
async def test_failure_with_every_caller_cancelled_is_consumed(caplog):
    provider = SlowProvider(error=TransportError("http://169.254.169.254", "timed out"))
    cache = CredentialCache(provider)

    caller = asyncio.ensure_future(cache.get())
    await asyncio.sleep(0)
    refresh = cache._pending
    caller.cancel()
    provider.release.set()
    with pytest.raises(asyncio.CancelledError):
        await caller
    await asyncio.wait([refresh])

    del refresh
    gc.collect()

    assert "exception was never retrieved" not in caplog.text
    assert cache.state is CacheState.EMPTY
    assert cache.is_expired()
