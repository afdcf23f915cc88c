"""Configuration and store construction tests."""

import pytest

from warrantywatch.config import Settings
from warrantywatch.database import create_store
from warrantywatch.errors import ConfigurationError
from warrantywatch.store import MultiTenantDeviceStore, SingleTenantDeviceStore


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("WARRANTYWATCH_LOOKUP_CONCURRENCY", "5")
    monkeypatch.setenv("WARRANTYWATCH_DEPLOYMENT_MODE", "saas")
    monkeypatch.setenv("WARRANTYWATCH_DATA_DIR", str(tmp_path))

    settings = Settings()

    assert settings.lookup_concurrency == 5
    assert settings.is_saas
    assert settings.data_dir == tmp_path


def test_self_hosted_builds_sqlite_store(tmp_path):
    settings = Settings(deployment_mode="self-hosted", db_path=tmp_path / "db" / "warranty.db")

    store = create_store(settings)
    try:
        assert isinstance(store, SingleTenantDeviceStore)
        assert (tmp_path / "db" / "warranty.db").exists()
    finally:
        store.close()


def test_saas_requires_database_url():
    with pytest.raises(ConfigurationError):
        create_store(Settings(deployment_mode="saas", database_url=None))


def test_saas_builds_multi_tenant_store(tmp_path):
    settings = Settings(deployment_mode="saas", database_url=f"sqlite:///{tmp_path / 'saas.db'}")

    store = create_store(settings)
    try:
        assert isinstance(store, MultiTenantDeviceStore)
    finally:
        store.close()
