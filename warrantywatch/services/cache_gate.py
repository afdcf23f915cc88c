"""Warranty cache gate: which devices need a fresh lookup.

"Cached" means "ever successfully fetched". There is no age-based expiry.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from warrantywatch.models.device import Device
from warrantywatch.schemas.warranty import WarrantyResult
from warrantywatch.services.tenancy import TenantContext
from warrantywatch.store.base import DeviceStore

logger = logging.getLogger(__name__)


class WarrantyCacheGate:
    def __init__(self, store: DeviceStore, tenants: TenantContext):
        self.store = store
        self.tenants = tenants

    def partition(
        self, devices: list[Device], skip_if_cached: bool
    ) -> tuple[list[Device], list[Device]]:
        """Split devices into (needs lookup, stored records served from cache)."""
        if not skip_if_cached:
            return list(devices), []

        needs_lookup: list[Device] = []
        cached: list[Device] = []
        for device in devices:
            try:
                stored = self.store.get_by_serial(device.serial_number, self.tenants.current())
            except SQLAlchemyError as e:
                # Unknown cache state counts as not cached
                logger.error("Error checking warranty cache for %s: %s", device.serial_number, e)
                needs_lookup.append(device)
                continue

            if stored is not None and stored.warranty_fetched_at is not None:
                logger.info("Skipping %s - already has warranty info in database", device.serial_number)
                cached.append(stored)
            else:
                needs_lookup.append(device)
        return needs_lookup, cached

    def filter_for_lookup(self, devices: list[Device], skip_if_cached: bool) -> list[Device]:
        return self.partition(devices, skip_if_cached)[0]

    def cached_results(self, devices: list[Device]) -> list[WarrantyResult]:
        """Results for the devices the gate would skip, built from stored data."""
        _, cached = self.partition(devices, skip_if_cached=True)
        return [WarrantyResult.from_device(device) for device in cached]
