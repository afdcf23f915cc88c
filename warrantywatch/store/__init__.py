"""Device Record Store: contract and the two interchangeable engines."""

from warrantywatch.store.base import DeviceStore
from warrantywatch.store.multi_tenant import MultiTenantDeviceStore
from warrantywatch.store.single_tenant import SingleTenantDeviceStore

__all__ = [
    "DeviceStore",
    "MultiTenantDeviceStore",
    "SingleTenantDeviceStore",
]
