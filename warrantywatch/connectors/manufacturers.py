"""Manufacturer warranty connectors (demo mode).

Each connector validates the credential shape it was given and returns
synthetic, serial-derived coverage so the pipeline can be evaluated without
vendor API access. A live client implements ``ManufacturerConnector`` and is
registered in place of these.
"""

import asyncio
import hashlib
import logging
from datetime import timedelta
from typing import Optional

from pydantic import BaseModel

from warrantywatch.connectors.base import ManufacturerConnector, check_credentials
from warrantywatch.models.device import Manufacturer
from warrantywatch.schemas.credentials import DellCredentials, HPCredentials, LenovoCredentials
from warrantywatch.schemas.warranty import WarrantyDates
from warrantywatch.utils.dates import utcnow

logger = logging.getLogger(__name__)


def _serial_offset(serial_number: str, span_days: int) -> int:
    """Stable pseudo-random offset in [-span_days, span_days] for a serial."""
    digest = hashlib.sha256(serial_number.upper().encode()).digest()
    return int.from_bytes(digest[:4], "big") % (2 * span_days + 1) - span_days


class DemoWarrantyConnector(ManufacturerConnector):
    """Synthetic warranty lookups for one manufacturer."""

    term_days = 3 * 365
    span_days = 2 * 365

    def __init__(
        self,
        manufacturer: str,
        credentials_type: type[BaseModel],
        product_description: str,
        latency: float = 0.0,
    ):
        self.manufacturer = manufacturer
        self.credentials_type = credentials_type
        self.product_description = product_description
        self.latency = latency

    async def get_warranty(
        self, serial_number: str, credentials: Optional[BaseModel]
    ) -> WarrantyDates:
        check_credentials(credentials, self.credentials_type, f"{self.manufacturer} connector")
        if not serial_number:
            raise ValueError("serial number is required")

        logger.info("Looking up %s warranty for %s (demo)", self.manufacturer, serial_number)
        if self.latency:
            await asyncio.sleep(self.latency)

        end = utcnow().date() + timedelta(days=_serial_offset(serial_number, self.span_days))
        start = end - timedelta(days=self.term_days)
        return WarrantyDates(
            start_date=start,
            end_date=end,
            product_description=f"{self.product_description} (mock data)",
        )


def dell_connector(latency: float = 0.0) -> DemoWarrantyConnector:
    return DemoWarrantyConnector(Manufacturer.DELL.value, DellCredentials, "Dell Latitude 5420", latency)


def hp_connector(latency: float = 0.0) -> DemoWarrantyConnector:
    return DemoWarrantyConnector(Manufacturer.HP.value, HPCredentials, "HP EliteBook 840 G8", latency)


def lenovo_connector(latency: float = 0.0) -> DemoWarrantyConnector:
    return DemoWarrantyConnector(Manufacturer.LENOVO.value, LenovoCredentials, "Lenovo ThinkPad X1 Carbon", latency)
