"""Ingestion: normalize device batches from any source into store writes."""

import logging
from enum import Enum
from typing import Mapping, Optional

from warrantywatch.connectors.base import PlatformConnector
from warrantywatch.connectors.csv_import import parse_csv_devices
from warrantywatch.errors import AuthenticationRequiredError, ConfigurationError
from warrantywatch.models.device import Device, Platform
from warrantywatch.schemas.credentials import PlatformCredentials
from warrantywatch.schemas.warranty import IngestSummary
from warrantywatch.services.tenancy import TenantContext
from warrantywatch.store.base import DeviceStore

logger = logging.getLogger(__name__)


def _platform_value(platform: "str | Platform") -> str:
    return platform.value if isinstance(platform, Enum) else str(platform)


class PoolWriter:
    """Writes ingested devices into the device pool, one record at a time."""

    def __init__(
        self,
        store: DeviceStore,
        tenants: TenantContext,
        platform_connectors: Optional[Mapping[str, PlatformConnector]] = None,
    ):
        self.store = store
        self.tenants = tenants
        self.platform_connectors = platform_connectors or {}

    def ingest(self, devices: list[Device], source_platform: "str | Platform") -> IngestSummary:
        """Store a batch of devices from one source.

        A malformed or unstorable device is counted and skipped; the rest of
        the batch still lands. Only tenant/configuration faults propagate.
        """
        platform = _platform_value(source_platform)
        logger.info("Storing %d devices from %s", len(devices), platform)
        summary = IngestSummary()

        for device in devices:
            record = Device(**{
                **device.model_dump(),
                "source_platform": platform,
                # Keep a known platform id, otherwise the id the platform reported
                "source_device_id": device.source_device_id or device.id,
            })
            try:
                self.store.upsert(record, self.tenants.current())
                summary.success_count += 1
            except (AuthenticationRequiredError, ConfigurationError):
                raise
            except Exception as e:
                logger.error("Error storing device %s from %s: %s", device.serial_number, platform, e)
                summary.error_count += 1

        logger.info(
            "Stored %d devices from %s. Errors: %d",
            summary.success_count, platform, summary.error_count,
        )
        return summary

    async def import_from_platform(
        self,
        platform: "str | Platform",
        credentials: Optional[PlatformCredentials] = None,
    ) -> tuple[int, IngestSummary]:
        """Pull a platform's inventory and ingest it. Returns (received, summary)."""
        name = _platform_value(platform)
        connector = self.platform_connectors.get(name)
        if connector is None:
            raise ValueError(f"Platform {name} is not supported for device import")

        creds = credentials.for_platform(name) if credentials else None
        devices = await connector.fetch_devices(creds)
        return len(devices), self.ingest(devices, name)

    def import_csv(self, content: str) -> tuple[int, IngestSummary]:
        """Parse a CSV sheet and ingest it under the flat-file platform."""
        devices = parse_csv_devices(content)
        return len(devices), self.ingest(devices, Platform.CSV)
