from azprovider.core.config import Settings, get_settings, reload_settings


def test_nested_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("AZPROVIDER_TIMEOUTS__READ_MINUTES", "2")
    monkeypatch.setenv("AZPROVIDER_OBSERVABILITY__LOG_LEVEL", "debug")
    monkeypatch.setenv("AZPROVIDER_AZURE__CLOUD", "usgov")
    s = Settings()
    assert s.timeouts.override("read") == 120.0
    assert s.timeouts.override("create") is None
    assert s.observability.log_level == "DEBUG"
    assert s.azure.authority_host == "https://login.microsoftonline.us"
    assert s.azure.resource_manager_endpoint == "https://management.usgovcloudapi.net/"


def test_standard_azure_env_is_used_as_fallback(monkeypatch) -> None:
    monkeypatch.delenv("AZPROVIDER_AZURE__SUBSCRIPTION_ID", raising=False)
    monkeypatch.setenv("AZURE_SUBSCRIPTION_ID", "aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee")
    assert Settings().azure.subscription_id == "aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee"


def test_export_safe_config_redacts_secret() -> None:
    s = Settings(azure={"client_id": "app", "client_secret": "hunter2"})
    cfg = s.export_safe_config()
    assert cfg["azure"]["client_secret"] == "***REDACTED***"
    assert cfg["azure"]["client_id"] == "app"
    assert "hunter2" not in str(cfg)


def test_settings_are_cached_until_reload() -> None:
    first = get_settings()
    assert get_settings() is first
    assert reload_settings() is not first
