from __future__ import annotations

import asyncio
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any

from azure.core.credentials import AccessToken
from azure.core.credentials_async import AsyncTokenCredential
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError
from azure.mgmt.maps.aio import AzureMapsManagementClient

from azprovider.core.azure_auth import arm_scopes, build_async_credential
from azprovider.core.config import Settings, get_settings
from azprovider.core.exceptions import ConfigurationError
from azprovider.core.logging import get_logger
from azprovider.core.retry import common_retry, status_code

logger = get_logger(__name__)


def _sub_id(explicit: str | None, settings: Settings) -> str:
    sid = explicit or settings.azure.subscription_id
    if not sid:
        raise ConfigurationError(
            "azure.subscription_id",
            "missing; set AZPROVIDER_AZURE__SUBSCRIPTION_ID or AZURE_SUBSCRIPTION_ID",
        )
    return sid


@dataclass(frozen=True)
class Clients:
    subscription_id: str
    cred: AsyncTokenCredential
    maps: AzureMapsManagementClient

    async def close(self) -> None:
        try:
            await self.maps.close()
        except Exception as e:
            logger.debug("azure_clients.close_error", client="maps", error=str(e))
        try:
            await self.cred.close()
        except Exception as e:
            logger.debug("azure_clients.close_error", client="credential", error=str(e))


_CACHE: OrderedDict[str, tuple[Clients, int]] = OrderedDict()
_CACHE_LOCK = asyncio.Lock()


def is_not_found(exc: BaseException) -> bool:
    if isinstance(exc, ResourceNotFoundError):
        return True
    return isinstance(exc, HttpResponseError) and status_code(exc) == 404


async def _dispose(clients: Clients) -> None:
    try:
        await clients.close()
    except Exception as exc:
        logger.warning(
            "azure_clients.dispose_error",
            subscription_id=clients.subscription_id,
            error=str(exc),
            exc_info=True,
        )


async def _acquire_token(cred: AsyncTokenCredential, settings: Settings) -> AccessToken:
    @common_retry(
        max_attempts=settings.retry.token_retry_max_attempts,
        max_wait=settings.retry.token_retry_max_wait_seconds,
    )
    async def _get() -> AccessToken:
        return await cred.get_token(*arm_scopes(settings.azure))

    return await _get()


async def build_clients(sid: str, settings: Settings | None = None) -> tuple[Clients, int]:
    settings = settings or get_settings()
    logger.debug("azure_clients.build.start", subscription_id=sid)
    cred = build_async_credential(settings.azure)
    try:
        token = await _acquire_token(cred, settings)
        expiry = int(token.expires_on) - settings.retry.token_expiry_margin_seconds
        endpoint = (settings.azure.resource_manager_endpoint or "").rstrip("/")
        kwargs: dict[str, Any] = {"credential_scopes": list(arm_scopes(settings.azure))}
        if endpoint:
            kwargs["base_url"] = endpoint
        clients = Clients(
            subscription_id=sid,
            cred=cred,
            maps=AzureMapsManagementClient(cred, sid, **kwargs),
        )
        logger.debug(
            "azure_clients.build.end",
            subscription_id=sid,
            expires_in_s=expiry - int(time.time()),
        )
        return clients, expiry
    except Exception as exc:
        await cred.close()
        logger.error(
            "azure_clients.build.error",
            subscription_id=sid,
            error_type=type(exc).__name__,
            error=str(exc),
            exc_info=True,
        )
        raise


async def get_clients(
    subscription_id: str | None = None, settings: Settings | None = None
) -> Clients:
    settings = settings or get_settings()
    sid = _sub_id(subscription_id, settings)
    async with _CACHE_LOCK:
        now = int(time.time())
        entry = _CACHE.get(sid)
        if entry:
            clients, expiry = entry
            if expiry <= now:
                _CACHE.pop(sid, None)
                await _dispose(clients)
                logger.debug("azure_clients.cache.expired", subscription_id=sid)
            else:
                _CACHE.move_to_end(sid)
                logger.debug("azure_clients.cache.hit", subscription_id=sid)
                return clients

        clients, expiry = await build_clients(sid, settings)
        _CACHE[sid] = (clients, expiry)
        _CACHE.move_to_end(sid)

        while len(_CACHE) > settings.retry.client_cache_max_size:
            _, (old_clients, _) = _CACHE.popitem(last=False)
            await _dispose(old_clients)

        logger.debug("azure_clients.cache.miss", subscription_id=sid)
        return clients


async def close_all() -> None:
    async with _CACHE_LOCK:
        while _CACHE:
            _, (clients, _) = _CACHE.popitem(last=False)
            await _dispose(clients)
