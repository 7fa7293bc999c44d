"""
Resource ID codec for Maps accounts.

    /subscriptions/{subscription}/resourceGroups/{group}/providers/Microsoft.Maps/accounts/{name}
"""
from __future__ import annotations

from dataclasses import dataclass

from azprovider.core.exceptions import InvalidResourceIdError

MAPS_PROVIDER = "Microsoft.Maps"
ACCOUNTS_TYPE = "accounts"


def _pairs(text: str) -> list[tuple[str, str]]:
    trimmed = text.strip("/")
    if not trimmed:
        raise InvalidResourceIdError(text, "id is empty")
    toks = trimmed.split("/")
    if len(toks) % 2:
        raise InvalidResourceIdError(text, "the number of path segments is not divisible by 2")
    pairs = list(zip(toks[::2], toks[1::2], strict=True))
    for key, value in pairs:
        if not value:
            raise InvalidResourceIdError(text, f"key {key!r} has no value")
    return pairs


@dataclass(frozen=True)
class AccountId:
    subscription_id: str
    resource_group: str
    name: str

    def id(self) -> str:
        return (
            f"/subscriptions/{self.subscription_id}"
            f"/resourceGroups/{self.resource_group}"
            f"/providers/{MAPS_PROVIDER}/{ACCOUNTS_TYPE}/{self.name}"
        )

    def __str__(self) -> str:
        return self.id()


def parse_account_id(text: str) -> AccountId:
    pairs = _pairs(text)
    expected = ("subscriptions", "resourceGroups", "providers", ACCOUNTS_TYPE)
    if len(pairs) != len(expected):
        raise InvalidResourceIdError(
            text, f"expected {len(expected)} key/value segments, got {len(pairs)}"
        )
    (sub_key, sub), (rg_key, rg), (prov_key, provider), (type_key, name) = pairs
    if sub_key != "subscriptions":
        raise InvalidResourceIdError(text, "no subscription ID found")
    if rg_key not in ("resourceGroups", "resourcegroups"):
        raise InvalidResourceIdError(text, "no resource group name found")
    if prov_key != "providers":
        raise InvalidResourceIdError(text, "no provider namespace found")
    if provider.lower() != MAPS_PROVIDER.lower():
        raise InvalidResourceIdError(text, f"provider {provider!r} is not {MAPS_PROVIDER!r}")
    if type_key.lower() != ACCOUNTS_TYPE:
        raise InvalidResourceIdError(text, f"resource type {type_key!r} is not {ACCOUNTS_TYPE!r}")
    return AccountId(subscription_id=sub, resource_group=rg, name=name)
