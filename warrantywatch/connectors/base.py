"""Connector contracts for manufacturer warranty APIs and source platforms.

Connectors are black boxes to the sync pipeline: they raise on API or auth
failure and own their own timeouts.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from pydantic import BaseModel

from warrantywatch.errors import CredentialsError
from warrantywatch.models.device import Device
from warrantywatch.schemas.warranty import WarrantyDates


def check_credentials(
    credentials: Optional[BaseModel],
    expected: type[BaseModel],
    owner: str,
) -> Optional[BaseModel]:
    """Reject credentials built for a different connector."""
    if credentials is not None and not isinstance(credentials, expected):
        raise CredentialsError(
            f"{owner} expects {expected.__name__}, got {type(credentials).__name__}"
        )
    return credentials


class ManufacturerConnector(ABC):
    """Looks up warranty coverage for one serial number."""

    manufacturer: str
    credentials_type: type[BaseModel]

    @abstractmethod
    async def get_warranty(
        self, serial_number: str, credentials: Optional[BaseModel]
    ) -> WarrantyDates:
        ...


class PlatformConnector(ABC):
    """Reads a platform's device inventory and accepts warranty updates."""

    platform: str
    credentials_type: type[BaseModel]

    @abstractmethod
    async def fetch_devices(self, credentials: Optional[BaseModel]) -> list[Device]:
        """Devices as the platform reports them; ``id`` holds the platform's own id."""

    @abstractmethod
    async def update_warranty(
        self, device_id: str, end_date: date, credentials: Optional[BaseModel]
    ) -> bool:
        ...
