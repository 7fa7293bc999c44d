from __future__ import annotations

import uuid
from types import SimpleNamespace
from typing import Any

import pytest
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError

from azprovider.core.config import Settings
from azprovider.resources.maps_account import MapsAccountResource
from azprovider.sdk import ProviderMeta

SUBSCRIPTION = "11111111-2222-3333-4444-555555555555"


def not_found(name: str) -> ResourceNotFoundError:
    err = ResourceNotFoundError(message=f"The Resource 'Microsoft.Maps/accounts/{name}' was not found.")
    err.status_code = 404
    return err


def http_error(status: int, message: str = "boom") -> HttpResponseError:
    err = HttpResponseError(message=message)
    err.status_code = status
    return err


class FakeAccounts:
    """In-memory stand-in for ``AzureMapsManagementClient.accounts``."""

    def __init__(self, subscription_id: str = SUBSCRIPTION) -> None:
        self.subscription_id = subscription_id
        self.store: dict[tuple[str, str], SimpleNamespace] = {}
        self.keys: dict[tuple[str, str], SimpleNamespace] = {}
        self.calls: list[tuple[str, str, str]] = []
        self.payloads: list[Any] = []
        self.failures: dict[str, BaseException] = {}
        self.omit_id = False

    def _key(self, resource_group: str, name: str) -> tuple[str, str]:
        return resource_group.lower(), name.lower()

    def _record(self, op: str, resource_group: str, name: str) -> None:
        self.calls.append((op, resource_group, name))
        if op in self.failures:
            raise self.failures[op]

    def count(self, op: str) -> int:
        return sum(1 for c in self.calls if c[0] == op)

    def seed(self, resource_group: str, name: str, sku: str = "S0", tags: dict[str, str] | None = None) -> str:
        resource_id = (
            f"/subscriptions/{self.subscription_id}/resourceGroups/{resource_group}"
            f"/providers/Microsoft.Maps/accounts/{name}"
        )
        self.store[self._key(resource_group, name)] = SimpleNamespace(
            id=resource_id,
            name=name,
            location="global",
            sku=SimpleNamespace(name=sku, tier="Standard"),
            tags=tags,
            properties=SimpleNamespace(unique_id=str(uuid.uuid4())),
        )
        self.keys[self._key(resource_group, name)] = SimpleNamespace(
            primary_key=uuid.uuid4().hex, secondary_key=uuid.uuid4().hex
        )
        return resource_id

    async def get(self, resource_group_name: str, account_name: str) -> SimpleNamespace:
        self._record("get", resource_group_name, account_name)
        account = self.store.get(self._key(resource_group_name, account_name))
        if account is None:
            raise not_found(account_name)
        if self.omit_id:
            return SimpleNamespace(**{**vars(account), "id": None})
        return account

    async def create_or_update(
        self, resource_group_name: str, account_name: str, maps_account: Any
    ) -> SimpleNamespace:
        self._record("create_or_update", resource_group_name, account_name)
        self.payloads.append(maps_account)
        key = self._key(resource_group_name, account_name)
        if key not in self.store:
            self.seed(resource_group_name, account_name, sku=maps_account.sku.name)
        account = self.store[key]
        account.tags = dict(maps_account.tags) if maps_account.tags else None
        return account

    async def delete(self, resource_group_name: str, account_name: str) -> None:
        self._record("delete", resource_group_name, account_name)
        key = self._key(resource_group_name, account_name)
        self.store.pop(key, None)
        self.keys.pop(key, None)

    async def list_keys(self, resource_group_name: str, account_name: str) -> SimpleNamespace:
        self._record("list_keys", resource_group_name, account_name)
        keys = self.keys.get(self._key(resource_group_name, account_name))
        if keys is None:
            raise not_found(account_name)
        return keys


@pytest.fixture
def fake_accounts() -> FakeAccounts:
    return FakeAccounts()


@pytest.fixture
def settings() -> Settings:
    return Settings(azure={"subscription_id": SUBSCRIPTION})


@pytest.fixture
def meta(fake_accounts: FakeAccounts, settings: Settings) -> ProviderMeta:
    clients = SimpleNamespace(
        subscription_id=SUBSCRIPTION,
        maps=SimpleNamespace(accounts=fake_accounts),
    )
    return ProviderMeta(clients=clients, settings=settings)  # type: ignore[arg-type]


@pytest.fixture
def resource() -> MapsAccountResource:
    return MapsAccountResource()
