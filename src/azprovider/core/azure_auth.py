from __future__ import annotations

import time
from collections.abc import Sequence
from urllib.parse import urlparse

from azure.core.credentials_async import AsyncTokenCredential
from azure.identity.aio import AzureCliCredential as AzureCliCredentialAsync
from azure.identity.aio import ClientSecretCredential as ClientSecretCredentialAsync
from azure.identity.aio import DefaultAzureCredential as DefaultAzureCredentialAsync
from azure.identity.aio import EnvironmentCredential as EnvironmentCredentialAsync
from azure.identity.aio import ManagedIdentityCredential as ManagedIdentityCredentialAsync
from azure.identity.aio import WorkloadIdentityCredential as WorkloadIdentityCredentialAsync

from azprovider.core.config import AzureConfig, get_settings
from azprovider.core.exceptions import ConfigurationError
from azprovider.core.logging import get_logger

logger = get_logger(__name__)


def arm_scopes(cfg: AzureConfig | None = None) -> Sequence[str]:
    cfg = cfg or get_settings().azure
    endpoint = cfg.resource_manager_endpoint or "https://management.azure.com/"
    parsed = urlparse(endpoint)
    return [f"{parsed.scheme}://{parsed.netloc}/.default"]


def _authority_host(cfg: AzureConfig) -> str:
    return (cfg.authority_host or "https://login.microsoftonline.com").rstrip("/")


def build_async_credential(cfg: AzureConfig | None = None) -> AsyncTokenCredential:
    cfg = cfg or get_settings().azure
    authority = _authority_host(cfg)
    start = time.perf_counter()
    logger.debug("build_async_credential.start", auth_mode=cfg.auth_mode, authority=authority)

    credential: AsyncTokenCredential
    if cfg.auth_mode == "service_principal":
        if cfg.tenant_id is None or cfg.client_id is None or cfg.client_secret is None:
            raise ConfigurationError(
                "azure", "tenant_id, client_id and client_secret are required for service_principal"
            )
        credential = ClientSecretCredentialAsync(
            tenant_id=cfg.tenant_id,
            client_id=cfg.client_id,
            client_secret=cfg.client_secret.get_secret_value(),
            authority=authority,
        )
    elif cfg.auth_mode == "managed_identity":
        credential = ManagedIdentityCredentialAsync(
            client_id=cfg.user_assigned_identity_client_id
        )
    elif cfg.auth_mode == "azure_cli":
        credential = AzureCliCredentialAsync()
    elif cfg.auth_mode == "workload_identity":
        if not all([cfg.tenant_id, cfg.client_id, cfg.workload_identity_token_file]):
            raise ConfigurationError(
                "azure", "tenant_id, client_id and workload_identity_token_file are required"
            )
        credential = WorkloadIdentityCredentialAsync(
            tenant_id=cfg.tenant_id,
            client_id=cfg.client_id,
            token_file_path=cfg.workload_identity_token_file,
            authority=authority,
        )
    elif cfg.auth_mode == "environment":
        credential = EnvironmentCredentialAsync(authority=authority)
    else:
        credential = DefaultAzureCredentialAsync(
            authority=authority,
            managed_identity_client_id=cfg.user_assigned_identity_client_id,
            exclude_cli_credential=not cfg.enable_cli_fallback,
        )

    logger.debug(
        "build_async_credential.end",
        credential_type=type(credential).__name__,
        duration_ms=(time.perf_counter() - start) * 1000.0,
    )
    return credential
