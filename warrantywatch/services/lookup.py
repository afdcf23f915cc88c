"""Lookup orchestrator: fan a batch of devices out to manufacturer connectors.

Every input device produces exactly one result (success, skipped or error).
A failing device never aborts the batch; only tenant/configuration faults do.
Each resolved warranty is persisted as soon as it arrives, so abandoning a
batch part-way keeps everything resolved so far.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Mapping, Optional

from warrantywatch.connectors.base import ManufacturerConnector
from warrantywatch.errors import AuthenticationRequiredError, ConfigurationError, WarrantyLookupError
from warrantywatch.models.device import Device
from warrantywatch.schemas.credentials import ManufacturerCredentials
from warrantywatch.schemas.warranty import (
    SKIP_MISSING_SERIAL,
    ResultError,
    WarrantyDates,
    WarrantyResult,
)
from warrantywatch.services.tenancy import TenantContext
from warrantywatch.store.base import DeviceStore
from warrantywatch.utils.dates import utcnow

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

DEFAULT_CONCURRENCY = 2


def identity_result(device: Device) -> WarrantyResult:
    """A blank result carrying only who the device is."""
    manufacturer = device.manufacturer
    if isinstance(manufacturer, Enum):
        manufacturer = manufacturer.value
    return WarrantyResult(
        serial_number=(device.serial_number or "").strip(),
        manufacturer=manufacturer or "",
        device_id=device.id,
        hostname=device.hostname,
        client_name=device.client_name,
        source_platform=device.source_platform,
    )


class LookupOrchestrator:
    def __init__(
        self,
        store: DeviceStore,
        tenants: TenantContext,
        connectors: Mapping[str, ManufacturerConnector],
        concurrency: int = DEFAULT_CONCURRENCY,
    ):
        self.store = store
        self.tenants = tenants
        self.connectors = connectors
        self.concurrency = max(1, concurrency)

    async def lookup_batch(
        self,
        devices: list[Device],
        credentials: Optional[ManufacturerCredentials] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> list[WarrantyResult]:
        """Look up warranties for a batch with bounded parallelism.

        Results are in completion order. ``on_progress(completed, total)``
        is called after each device. Cancelling the awaiting task stops
        dispatching further devices.
        """
        total = len(devices)
        results: list[WarrantyResult] = []
        if not total:
            return results

        logger.info("Looking up warranties for %d devices (concurrency %d)", total, self.concurrency)
        pending = iter(devices)

        async def worker() -> None:
            for device in pending:
                results.append(await self.lookup_device(device, credentials))
                if on_progress:
                    on_progress(len(results), total)

        workers = [asyncio.create_task(worker()) for _ in range(min(self.concurrency, total))]
        try:
            await asyncio.gather(*workers)
        except BaseException:
            for task in workers:
                task.cancel()
            raise

        errors = sum(1 for r in results if r.error)
        skipped = sum(1 for r in results if r.skipped)
        logger.info(
            "Warranty lookup finished: %d resolved, %d skipped, %d errors",
            total - errors - skipped, skipped, errors,
        )
        return results

    async def lookup_device(
        self,
        device: Device,
        credentials: Optional[ManufacturerCredentials] = None,
    ) -> WarrantyResult:
        result = identity_result(device)
        serial_number = result.serial_number

        if not serial_number:
            logger.warning("Skipping device %s - no serial number", device.id or device.hostname or "N/A")
            result.skipped = True
            result.skip_reason = SKIP_MISSING_SERIAL
            return result

        manufacturer = result.manufacturer.lower()
        connector = self.connectors.get(manufacturer)
        if connector is None:
            return self._failed(result, f"Unsupported manufacturer: {manufacturer or 'unknown'}")

        try:
            creds = credentials.for_manufacturer(manufacturer) if credentials else None
            dates = await connector.get_warranty(serial_number, creds)
            if isinstance(dates, dict):
                dates = WarrantyDates.model_validate(dates)
            if dates is None or dates.end_date is None:
                raise WarrantyLookupError(f"Invalid or empty warranty data for {serial_number}")
        except (AuthenticationRequiredError, ConfigurationError):
            raise
        except Exception as e:
            logger.error("Error fetching warranty for %s from %s: %s", serial_number, manufacturer, e)
            return self._failed(result, str(e) or type(e).__name__)

        fetched_at = utcnow()
        try:
            self.store.record_warranty(
                serial_number,
                dates.start_date,
                dates.end_date,
                self.tenants.current(),
                fetched_at=fetched_at,
            )
        except (AuthenticationRequiredError, ConfigurationError):
            raise
        except Exception as e:
            logger.error("Error storing warranty info for %s: %s", serial_number, e)

        result.start_date = dates.start_date
        result.end_date = dates.end_date
        result.product_description = dates.product_description
        result.fetched_at = fetched_at
        return result

    @staticmethod
    def _failed(result: WarrantyResult, message: str) -> WarrantyResult:
        result.error = ResultError(kind="lookup", message=message)
        return result
