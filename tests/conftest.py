"""Pytest configuration and shared fixtures."""

import os
import tempfile

# Point the app at a throwaway data directory before anything imports settings
os.environ["WARRANTYWATCH_DATA_DIR"] = tempfile.mkdtemp()
os.environ["WARRANTYWATCH_DB_PATH"] = os.path.join(os.environ["WARRANTYWATCH_DATA_DIR"], "test.db")
os.environ["WARRANTYWATCH_DEPLOYMENT_MODE"] = "self-hosted"

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from warrantywatch.models.device import Device
from warrantywatch.services.tenancy import SingleTenantContext
from warrantywatch.store import MultiTenantDeviceStore, SingleTenantDeviceStore


def memory_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def single_store():
    store = SingleTenantDeviceStore(memory_engine())
    store.init_schema()
    yield store
    store.close()


@pytest.fixture
def multi_store():
    store = MultiTenantDeviceStore(memory_engine())
    store.init_schema()
    yield store
    store.close()


@pytest.fixture
def tenants():
    return SingleTenantContext()


class FixedTenantContext:
    """Tenant context pinned to one tenant id."""

    def __init__(self, tenant):
        self.tenant = tenant

    def current(self):
        return self.tenant


@pytest.fixture
def tenant_of():
    return FixedTenantContext


@pytest.fixture
def make_device():
    def _make(serial_number="SN001", manufacturer="dell", **fields):
        return Device(serial_number=serial_number, manufacturer=manufacturer, **fields)
    return _make
