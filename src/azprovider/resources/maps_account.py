from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from azure.core.exceptions import AzureError
from azure.mgmt.maps.models import MapsAccount, Sku
from pydantic import BaseModel, ConfigDict, field_validator

from azprovider.arm import tags as arm_tags
from azprovider.arm.clients import is_not_found
from azprovider.arm.resource_id import AccountId, parse_account_id
from azprovider.arm.validators import name_hint, validate_name
from azprovider.core.exceptions import (
    AzureRequestError,
    ConsistencyError,
    ResourceAlreadyExistsError,
)
from azprovider.core.logging import get_logger
from azprovider.core.retry import status_code
from azprovider.sdk import (
    ProviderMeta,
    ResourceData,
    ResourceHandler,
    ResourceTimeouts,
    computed,
    optional,
    required,
)

logger = get_logger(__name__)

SkuName = Literal["S0", "S1", "G2"]
SKU_NAMES: tuple[str, ...] = ("S0", "S1", "G2")
LOCATION = "global"


class MapsAccountModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = required(force_new=True)
    resource_group_name: str = required(force_new=True)
    sku_name: SkuName = required(force_new=True)
    tags: dict[str, str] = optional(default_factory=dict)

    x_ms_client_id: str | None = computed()
    primary_access_key: str | None = computed(sensitive=True)
    secondary_access_key: str | None = computed(sensitive=True)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str) -> str:
        if not validate_name("maps_account", v):
            raise ValueError(name_hint("maps_account"))
        return v

    @field_validator("resource_group_name")
    @classmethod
    def _validate_resource_group(cls, v: str) -> str:
        if not validate_name("resource_group", v):
            raise ValueError(f"resource group names {name_hint('resource_group')}")
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def _validate_tags(cls, v: Any) -> Any:
        if v is None:
            return {}
        if not isinstance(v, Mapping):
            return v
        errors = arm_tags.validate(v)
        if errors:
            raise ValueError("; ".join(errors))
        return arm_tags.expand(v)


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def _describe(account_id: AccountId | None, name: str = "", resource_group: str = "") -> str:
    if account_id is not None:
        name, resource_group = account_id.name, account_id.resource_group
    return f"Maps Account {name!r} (Resource Group {resource_group!r})"


class MapsAccountResource(ResourceHandler[MapsAccountModel]):
    type_name = "azure_maps_account"
    model = MapsAccountModel
    timeouts = ResourceTimeouts(create=30 * 60.0, read=5 * 60.0, update=30 * 60.0, delete=30 * 60.0)

    async def create(self, d: ResourceData[MapsAccountModel], meta: ProviderMeta) -> None:
        await self._create_update(d, meta)

    async def update(self, d: ResourceData[MapsAccountModel], meta: ProviderMeta) -> None:
        await self._create_update(d, meta)

    async def _create_update(self, d: ResourceData[MapsAccountModel], meta: ProviderMeta) -> None:
        accounts = meta.clients.maps.accounts
        async with self.deadline_for_create_update(d, meta):
            desired = d.desired()
            name, resource_group = desired.name, desired.resource_group_name
            what = _describe(None, name, resource_group)
            log = logger.bind(name=name, resource_group=resource_group)
            log.info("maps_account.create_update.start", new_resource=d.is_new_resource())

            if d.is_new_resource():
                existing = None
                try:
                    existing = await accounts.get(resource_group, name)
                except AzureError as exc:
                    if not is_not_found(exc):
                        raise AzureRequestError(
                            f"checking for presence of existing {what}",
                            operation="get",
                            status_code=status_code(exc),
                            cause=exc,
                        ) from exc
                if existing is not None and existing.id:
                    log.warning("maps_account.create_update.exists", resource_id=existing.id)
                    raise ResourceAlreadyExistsError(self.type_name, existing.id)

            parameters = MapsAccount(
                location=LOCATION,
                sku=Sku(name=desired.sku_name),
                tags=arm_tags.expand(desired.tags),
            )
            try:
                await accounts.create_or_update(resource_group, name, parameters)
            except AzureError as exc:
                raise AzureRequestError(
                    f"creating/updating {what}",
                    operation="create_or_update",
                    status_code=status_code(exc),
                    cause=exc,
                ) from exc

            try:
                read = await accounts.get(resource_group, name)
            except AzureError as exc:
                raise AzureRequestError(
                    f"retrieving {what}",
                    operation="get",
                    status_code=status_code(exc),
                    cause=exc,
                ) from exc

            if not read.id:
                raise ConsistencyError(f"Cannot read {what} ID")

            d.set_id(read.id)
            log.info("maps_account.create_update.done", resource_id=read.id)

        await self.read(d, meta)

    async def read(self, d: ResourceData[MapsAccountModel], meta: ProviderMeta) -> None:
        accounts = meta.clients.maps.accounts
        async with self.deadline("read", d, meta):
            account_id = parse_account_id(d.id)
            what = _describe(account_id)
            try:
                resp = await accounts.get(account_id.resource_group, account_id.name)
            except AzureError as exc:
                if is_not_found(exc):
                    logger.info(
                        "maps_account.read.gone",
                        resource_id=d.id,
                        name=account_id.name,
                        resource_group=account_id.resource_group,
                    )
                    d.discard()
                    return
                raise AzureRequestError(
                    f"making Read request on {what}",
                    operation="get",
                    status_code=status_code(exc),
                    cause=exc,
                ) from exc

            d.set("name", account_id.name)
            d.set("resource_group_name", account_id.resource_group)
            if resp.sku is not None:
                d.set("sku_name", _enum_value(resp.sku.name))
            if resp.properties is not None:
                d.set("x_ms_client_id", resp.properties.unique_id)

            try:
                keys = await accounts.list_keys(account_id.resource_group, account_id.name)
            except AzureError as exc:
                raise AzureRequestError(
                    f"making Read Access Keys request on {what}",
                    operation="list_keys",
                    status_code=status_code(exc),
                    cause=exc,
                ) from exc
            d.set("primary_access_key", keys.primary_key)
            d.set("secondary_access_key", keys.secondary_key)

            d.set("tags", arm_tags.flatten(resp.tags))
            logger.debug("maps_account.read.done", resource_id=d.id)

    async def delete(self, d: ResourceData[MapsAccountModel], meta: ProviderMeta) -> None:
        accounts = meta.clients.maps.accounts
        async with self.deadline("delete", d, meta):
            account_id = parse_account_id(d.id)
            try:
                await accounts.delete(account_id.resource_group, account_id.name)
            except AzureError as exc:
                raise AzureRequestError(
                    f"deleting {_describe(account_id)}",
                    operation="delete",
                    status_code=status_code(exc),
                    cause=exc,
                ) from exc
            logger.info("maps_account.delete.done", resource_id=d.id)

    def import_state(self, resource_id: str) -> ResourceData[MapsAccountModel]:
        parse_account_id(resource_id)
        return self.new_data(id=resource_id)
