"""Write-back coordinator: push newly resolved end dates to source platforms.

Items are processed one at a time. A failed platform update is recorded on
that item only and never undoes the lookup already persisted in the store.
"""

import logging
from typing import Callable, Mapping, Optional

from warrantywatch.connectors.base import PlatformConnector
from warrantywatch.errors import AuthenticationRequiredError, ConfigurationError, WriteBackError
from warrantywatch.models.device import Device, Platform
from warrantywatch.schemas.credentials import PlatformCredentials
from warrantywatch.schemas.warranty import (
    ResultError,
    WarrantyResult,
    WriteBackOutcome,
    WriteBackReport,
)
from warrantywatch.services.tenancy import TenantContext
from warrantywatch.store.base import DeviceStore
from warrantywatch.utils.dates import utcnow

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def is_write_back_eligible(result: WarrantyResult) -> bool:
    """Only fresh, successful lookups that were not pushed yet are written back."""
    return (
        result.error is None
        and not result.skipped
        and not result.from_cache
        and not result.written_back
        and result.end_date is not None
    )


class WriteBackCoordinator:
    def __init__(
        self,
        store: DeviceStore,
        tenants: TenantContext,
        connectors: Mapping[str, PlatformConnector],
    ):
        self.store = store
        self.tenants = tenants
        self.connectors = connectors

    async def write_back(
        self,
        results: list[WarrantyResult],
        original_devices: list[Device],
        credentials: Optional[PlatformCredentials] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> WriteBackReport:
        updated = [result.model_copy(deep=True) for result in results]
        eligible = [result for result in updated if is_write_back_eligible(result)]
        by_serial = {
            (device.serial_number or "").strip(): device
            for device in original_devices
            if device.serial_number
        }

        report = WriteBackReport(results=updated, outcomes=[], eligible=len(eligible))
        logger.info("Writing back %d of %d warranty results", len(eligible), len(results))

        for completed, result in enumerate(eligible, start=1):
            outcome = await self._write_one(result, by_serial, credentials)
            report.outcomes.append(outcome)
            if outcome.status == "written":
                report.written += 1
            elif outcome.status == "failed":
                report.failed += 1
            else:
                report.skipped += 1
            if on_progress:
                on_progress(completed, len(eligible))

        logger.info(
            "Write-back finished: %d written, %d failed, %d skipped",
            report.written, report.failed, report.skipped,
        )
        return report

    def _resolve_target(
        self, serial_number: str, by_serial: dict[str, Device]
    ) -> Optional[tuple[Optional[str], Optional[str]]]:
        """(source platform, platform-native id) for a serial, or None if unknown.

        The caller's copy wins field by field and the stored record fills
        the gaps. The store's own primary key is never a platform id.
        """
        original = by_serial.get(serial_number)
        stored = self.store.get_by_serial(serial_number, self.tenants.current())
        if original is None and stored is None:
            return None

        platform = None
        device_id = None
        if original is not None:
            platform = original.source_platform
            device_id = original.source_device_id
            if not device_id and original.id and (stored is None or original.id != stored.id):
                device_id = original.id
        if stored is not None:
            platform = platform or stored.source_platform
            device_id = device_id or stored.source_device_id
        return platform, device_id

    async def _write_one(
        self,
        result: WarrantyResult,
        by_serial: dict[str, Device],
        credentials: Optional[PlatformCredentials],
    ) -> WriteBackOutcome:
        serial_number = result.serial_number
        target = self._resolve_target(serial_number, by_serial)
        if target is None:
            return self._failed(result, None, f"Device {serial_number} not found in device pool")

        platform, device_id = target
        platform = platform or result.source_platform
        if platform == Platform.CSV.value:
            logger.info("Skipping write-back for %s - imported from CSV", serial_number)
            return WriteBackOutcome(
                serial_number=serial_number,
                platform=platform,
                status="skipped",
                message="CSV imports have no write-back target",
            )

        if not platform:
            return self._failed(result, None, f"No source platform for {serial_number}")
        if not device_id:
            return self._failed(result, platform, f"No platform-native device id for {serial_number}")

        connector = self.connectors.get(platform)
        if connector is None:
            return self._failed(result, platform, f"Write-back is not supported for platform {platform}")

        try:
            creds = credentials.for_platform(platform) if credentials else None
            if not await connector.update_warranty(device_id, result.end_date, creds):
                raise WriteBackError(f"{platform} rejected the warranty update for device {device_id}")
        except (AuthenticationRequiredError, ConfigurationError):
            raise
        except Exception as e:
            logger.error("Error writing back warranty for %s to %s: %s", serial_number, platform, e)
            return self._failed(result, platform, str(e) or type(e).__name__)

        written_at = utcnow()
        try:
            stored = self.store.mark_written_back(serial_number, self.tenants.current(), written_at=written_at)
        except (AuthenticationRequiredError, ConfigurationError):
            raise
        except Exception as e:
            logger.error("Error recording write-back for %s: %s", serial_number, e)
            stored = None

        result.written_back = True
        result.written_back_at = stored.warranty_written_back_at if stored else written_at
        return WriteBackOutcome(serial_number=serial_number, platform=platform, status="written")

    @staticmethod
    def _failed(result: WarrantyResult, platform: Optional[str], message: str) -> WriteBackOutcome:
        result.error = ResultError(kind="write_back", message=message)
        return WriteBackOutcome(
            serial_number=result.serial_number,
            platform=platform,
            status="failed",
            message=message,
        )
