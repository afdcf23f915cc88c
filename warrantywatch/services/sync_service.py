"""Warranty sync pipeline for one caller: ingest, gate, look up, write back."""

import logging
from typing import Mapping, Optional

from warrantywatch.connectors.base import ManufacturerConnector, PlatformConnector
from warrantywatch.models.device import Device
from warrantywatch.schemas.credentials import ManufacturerCredentials, PlatformCredentials
from warrantywatch.schemas.warranty import WarrantyResult, WriteBackReport
from warrantywatch.services.cache_gate import WarrantyCacheGate
from warrantywatch.services.lookup import DEFAULT_CONCURRENCY, LookupOrchestrator, ProgressCallback
from warrantywatch.services.pool_writer import PoolWriter
from warrantywatch.services.tenancy import TenantContext
from warrantywatch.services.write_back import WriteBackCoordinator
from warrantywatch.store.base import DeviceStore

logger = logging.getLogger(__name__)


class WarrantySyncService:
    def __init__(
        self,
        store: DeviceStore,
        tenants: TenantContext,
        manufacturer_connectors: Mapping[str, ManufacturerConnector],
        platform_connectors: Mapping[str, PlatformConnector],
        concurrency: int = DEFAULT_CONCURRENCY,
    ):
        self.store = store
        self.tenants = tenants
        self.pool = PoolWriter(store, tenants, platform_connectors)
        self.gate = WarrantyCacheGate(store, tenants)
        self.orchestrator = LookupOrchestrator(store, tenants, manufacturer_connectors, concurrency)
        self.writer = WriteBackCoordinator(store, tenants, platform_connectors)

    async def sync(
        self,
        devices: list[Device],
        credentials: Optional[ManufacturerCredentials] = None,
        skip_if_cached: bool = True,
        on_progress: Optional[ProgressCallback] = None,
    ) -> list[WarrantyResult]:
        """Look up every device that needs it and report cached ones as-is."""
        to_lookup, cached = self.gate.partition(devices, skip_if_cached)
        if cached:
            logger.info("Serving %d devices from warranty cache", len(cached))
        results = await self.orchestrator.lookup_batch(to_lookup, credentials, on_progress)
        return results + [WarrantyResult.from_device(device) for device in cached]

    async def write_back(
        self,
        results: list[WarrantyResult],
        original_devices: Optional[list[Device]] = None,
        credentials: Optional[PlatformCredentials] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> WriteBackReport:
        return await self.writer.write_back(results, original_devices or [], credentials, on_progress)
