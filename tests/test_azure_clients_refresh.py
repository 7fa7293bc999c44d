import asyncio
import time
from unittest.mock import patch

import pytest
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError

from azprovider.arm import clients as azure_clients
from azprovider.core.config import Settings
from azprovider.core.exceptions import ConfigurationError


class DummyClients:
    def __init__(self, sid: str) -> None:
        self.subscription_id = sid
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def _settings(**retry) -> Settings:
    return Settings(retry=retry or {})


def test_get_clients_refreshes_expired_entry() -> None:
    async def run() -> None:
        counter = {"count": 0}
        built: list[DummyClients] = []

        async def fake_build(sid: str, settings=None):
            counter["count"] += 1
            c = DummyClients(sid)
            built.append(c)
            return c, int(time.time()) + 1

        azure_clients._CACHE.clear()
        with patch("azprovider.arm.clients.build_clients", fake_build):
            c1 = await azure_clients.get_clients("sid", _settings())
            await asyncio.sleep(1.1)
            c2 = await azure_clients.get_clients("sid", _settings())
        assert c1 is not c2
        assert counter["count"] == 2
        assert built[0].closed
        azure_clients._CACHE.clear()

    asyncio.run(run())


def test_get_clients_reuses_live_entry_and_evicts_oldest() -> None:
    async def run() -> None:
        async def fake_build(sid: str, settings=None):
            return DummyClients(sid), int(time.time()) + 3600

        azure_clients._CACHE.clear()
        settings = _settings(client_cache_max_size=1)
        with patch("azprovider.arm.clients.build_clients", fake_build):
            a1 = await azure_clients.get_clients("a", settings)
            a2 = await azure_clients.get_clients("a", settings)
            b = await azure_clients.get_clients("b", settings)
        assert a1 is a2
        assert a1.closed
        assert list(azure_clients._CACHE) == ["b"]
        assert not b.closed
        await azure_clients.close_all()
        assert b.closed
        assert not azure_clients._CACHE

    asyncio.run(run())


def test_missing_subscription_is_a_configuration_error(monkeypatch) -> None:
    monkeypatch.delenv("AZURE_SUBSCRIPTION_ID", raising=False)
    with pytest.raises(ConfigurationError):
        asyncio.run(azure_clients.get_clients(None, Settings()))


def test_is_not_found() -> None:
    assert azure_clients.is_not_found(ResourceNotFoundError(message="gone"))
    err = HttpResponseError(message="gone")
    err.status_code = 404
    assert azure_clients.is_not_found(err)
    err.status_code = 500
    assert not azure_clients.is_not_found(err)
    assert not azure_clients.is_not_found(ValueError("x"))
