"""Source platform connectors (demo mode).

Demo connectors serve a fixed mock inventory and accept warranty
update, remembering it in ``updates`` so a sync can be inspected end to end.
HaloPSA is import-only and rejects updates.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Optional

from pydantic import BaseModel

from warrantywatch.connectors.base import PlatformConnector, check_credentials
from warrantywatch.errors import WriteBackError
from warrantywatch.models.device import Device, Manufacturer, Platform
from warrantywatch.schemas.credentials import (
    DattoCredentials,
    HaloPSACredentials,
    NCentralCredentials,
)
from warrantywatch.utils.dates import parse_date

logger = logging.getLogger(__name__)


DATTO_MOCK_DEVICES: list[dict[str, Any]] = [
    {"id": "dev-1", "serial_number": "DELL00123456", "manufacturer": Manufacturer.DELL,
     "model": "Latitude 5420 (mock data)", "hostname": "DESKTOP-ABCDE1", "client_name": "Acme Dental"},
    {"id": "dev-2", "serial_number": "HP00789012", "manufacturer": Manufacturer.HP,
     "model": "EliteBook 840 G8 (mock data)", "hostname": "DESKTOP-FGHIJ2", "client_name": "Acme Dental",
     "warranty_end_date": "2025-01-15"},
    {"id": "dev-3", "serial_number": "DELL00345678", "manufacturer": Manufacturer.DELL,
     "model": "OptiPlex 7080 (mock data)", "hostname": "DESKTOP-KLMNO3", "client_name": "Brightside Legal"},
    {"id": "dev-4", "serial_number": "HP00901234", "manufacturer": Manufacturer.HP,
     "model": "ProBook 450 G8 (mock data)", "hostname": "DESKTOP-PQRST4", "client_name": "Brightside Legal",
     "warranty_end_date": "2023-03-10"},
    {"id": "dev-5", "serial_number": "LR0394B2", "manufacturer": Manufacturer.LENOVO,
     "model": "ThinkPad X1 Carbon (mock data)", "hostname": "LAPTOP-UVWXY5", "client_name": "Acme Dental"},
    {"id": "dev-6", "serial_number": "PF2BXTWK", "manufacturer": Manufacturer.LENOVO,
     "model": "ThinkCentre M70q (mock data)", "hostname": "DESKTOP-TUVWX10", "client_name": "Northwind Clinic",
     "warranty_end_date": "2026-10-01"},
]

NCENTRAL_MOCK_DEVICES: list[dict[str, Any]] = [
    {"id": "1001", "serial_number": "DELL00555111", "manufacturer": Manufacturer.DELL,
     "model": "Latitude 7440 (mock data)", "hostname": "NC-LAPTOP-01", "client_name": "Harbor Logistics",
     "device_class": "Laptop - Windows"},
    {"id": "1002", "serial_number": "HP00555222", "manufacturer": Manufacturer.HP,
     "model": "EliteDesk 800 G6 (mock data)", "hostname": "NC-DESKTOP-02", "client_name": "Harbor Logistics",
     "device_class": "Workstation - Windows"},
    {"id": "1003", "serial_number": "MP1DU39T", "manufacturer": Manufacturer.LENOVO,
     "model": "ThinkPad T14 (mock data)", "hostname": "NC-LAPTOP-03", "client_name": "Summit Accounting",
     "device_class": "Laptop - Windows"},
]

HALOPSA_MOCK_DEVICES: list[dict[str, Any]] = [
    {"id": "1", "serial_number": "JH2RRW1", "manufacturer": Manufacturer.DELL,
     "model": "Dell OptiPlex 7070 (mock data)", "hostname": "HALO-DEV-001",
     "client_id": "14", "client_name": "Mario and Luigi's Pizza Place", "device_class": "Desktop Computer",
     "warranty_start_date": "2025-06-04T12:00:00", "warranty_end_date": "2026-06-04T12:00:00"},
    {"id": "2", "serial_number": "5CG1234XYZ", "manufacturer": Manufacturer.HP,
     "model": "HP ProBook 440 G9 (mock data)", "hostname": "HALO-DEV-002",
     "client_id": "14", "client_name": "Mario and Luigi's Pizza Place", "device_class": "Laptop"},
]


class DemoPlatformConnector(PlatformConnector):
    """Mock inventory for one platform."""

    def __init__(
        self,
        platform: str,
        credentials_type: type[BaseModel],
        inventory: list[dict[str, Any]],
        latency: float = 0.0,
        writable: bool = True,
    ):
        self.platform = platform
        self.credentials_type = credentials_type
        self.inventory = inventory
        self.latency = latency
        self.writable = writable
        self.updates: dict[str, date] = {}

    async def fetch_devices(self, credentials: Optional[BaseModel]) -> list[Device]:
        check_credentials(credentials, self.credentials_type, f"{self.platform} connector")
        logger.info("Fetching devices from %s (demo)", self.platform)
        if self.latency:
            await asyncio.sleep(self.latency)

        devices = []
        for item in self.inventory:
            fields = dict(item)
            fields["manufacturer"] = Manufacturer(fields["manufacturer"]).value
            fields["warranty_start_date"] = parse_date(fields.get("warranty_start_date"))
            fields["warranty_end_date"] = parse_date(fields.get("warranty_end_date"))
            devices.append(Device(**fields))
        return devices

    async def update_warranty(
        self, device_id: str, end_date: date, credentials: Optional[BaseModel]
    ) -> bool:
        check_credentials(credentials, self.credentials_type, f"{self.platform} connector")
        if not self.writable:
            raise WriteBackError(f"Platform {self.platform} is not supported for updates")
        if not device_id or end_date is None:
            return False
        if self.latency:
            await asyncio.sleep(self.latency)

        self.updates[device_id] = end_date
        logger.info(
            "Updated warranty for %s device %s to %s (demo)",
            self.platform, device_id, end_date.isoformat(),
        )
        return True


def datto_connector(latency: float = 0.0) -> DemoPlatformConnector:
    return DemoPlatformConnector(Platform.DATTO_RMM.value, DattoCredentials, DATTO_MOCK_DEVICES, latency)


def ncentral_connector(latency: float = 0.0) -> DemoPlatformConnector:
    return DemoPlatformConnector(Platform.NCENTRAL.value, NCentralCredentials, NCENTRAL_MOCK_DEVICES, latency)


def halopsa_connector(latency: float = 0.0) -> DemoPlatformConnector:
    return DemoPlatformConnector(
        Platform.HALOPSA.value, HaloPSACredentials, HALOPSA_MOCK_DEVICES, latency, writable=False
    )
