from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AzureConfig(BaseModel):
    subscription_id: str | None = Field(default=None, pattern="^[a-f0-9-]{36}$")
    tenant_id: str | None = Field(default=None, pattern="^[a-f0-9-]{36}$")
    client_id: str | None = None
    client_secret: SecretStr | None = None
    auth_mode: Literal[
        "default",
        "managed_identity",
        "service_principal",
        "azure_cli",
        "workload_identity",
        "environment",
    ] = "default"
    user_assigned_identity_client_id: str | None = None
    workload_identity_token_file: str | None = None
    cloud: Literal["public", "usgov", "china"] = "public"
    authority_host: str | None = None
    resource_manager_endpoint: str | None = None
    enable_cli_fallback: bool = True

    @model_validator(mode="after")
    def _fill_cloud_endpoints(self) -> AzureConfig:
        authorities = {
            "public": "https://login.microsoftonline.com",
            "usgov": "https://login.microsoftonline.us",
            "china": "https://login.chinacloudapi.cn",
        }
        endpoints = {
            "public": "https://management.azure.com/",
            "usgov": "https://management.usgovcloudapi.net/",
            "china": "https://management.chinacloudapi.cn/",
        }
        if not self.authority_host:
            self.authority_host = authorities[self.cloud]
        if not self.resource_manager_endpoint:
            self.resource_manager_endpoint = endpoints[self.cloud]
        return self


class TimeoutsConfig(BaseModel):
    """Global overrides for lifecycle deadlines. ``None`` keeps the resource default."""

    create_minutes: float | None = Field(default=None, gt=0)
    read_minutes: float | None = Field(default=None, gt=0)
    update_minutes: float | None = Field(default=None, gt=0)
    delete_minutes: float | None = Field(default=None, gt=0)

    def override(self, operation: str) -> float | None:
        minutes = getattr(self, f"{operation}_minutes", None)
        return None if minutes is None else float(minutes) * 60.0


class ObservabilityConfig(BaseModel):
    enable_tracing: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation_size_mb: int = Field(default=100, ge=1)
    log_retention_days: int = Field(default=30, ge=1)
    otel_service_name: str = "azprovider"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v: Any) -> Any:
        return str(v).upper() if v else "INFO"


class RetryConfig(BaseModel):
    token_retry_max_attempts: int = Field(default=4, ge=1)
    token_retry_max_wait_seconds: int = Field(default=30, ge=1)
    client_cache_max_size: int = Field(default=8, ge=1)
    token_expiry_margin_seconds: int = Field(default=300, ge=0)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="AZPROVIDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )

    app_name: str = "azprovider"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"

    azure: AzureConfig = Field(default_factory=AzureConfig)
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)

    @model_validator(mode="after")
    def apply_azure_env(self) -> Settings:
        # standard AZURE_* variables win only when nothing was configured explicitly
        if not self.azure.subscription_id and os.getenv("AZURE_SUBSCRIPTION_ID"):
            self.azure.subscription_id = os.environ["AZURE_SUBSCRIPTION_ID"]
        if not self.azure.tenant_id and os.getenv("AZURE_TENANT_ID"):
            self.azure.tenant_id = os.environ["AZURE_TENANT_ID"]
        return self

    def export_safe_config(self) -> dict[str, Any]:
        cfg = self.model_dump()
        if cfg["azure"].get("client_secret") is not None:
            cfg["azure"]["client_secret"] = "***REDACTED***"
        return cfg


@lru_cache
def get_settings() -> Settings:
    return Settings()


def reload_settings() -> Settings:
    get_settings.cache_clear()
    return get_settings()
