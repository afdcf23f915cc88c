"""Device Record Store contract and the merge rules shared by both engines."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from warrantywatch.errors import ValidationError
from warrantywatch.models.device import Device
from warrantywatch.services.tenancy import NO_TENANT, TenantId
from warrantywatch.utils.dates import parse_date, parse_timestamp

# Fields an upsert may change on an existing record.
MERGE_FIELDS = (
    "manufacturer",
    "model",
    "hostname",
    "device_class",
    "client_id",
    "client_name",
    "source_platform",
    "source_device_id",
    "warranty_start_date",
    "warranty_end_date",
    "warranty_fetched_at",
    "warranty_written_back_at",
)

_DATE_FIELDS = ("warranty_start_date", "warranty_end_date")
_TIMESTAMP_FIELDS = ("warranty_fetched_at", "warranty_written_back_at")


def is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _clean(value: Any) -> Any:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def validate_device(device: Device) -> None:
    """Reject records that cannot be keyed or routed to a connector."""
    if is_empty(device.serial_number) or is_empty(_clean(device.manufacturer)):
        raise ValidationError(
            f"Device missing required fields: serial_number={device.serial_number!r}, "
            f"manufacturer={device.manufacturer!r}"
        )


def normalized_values(device: Device) -> dict[str, Any]:
    """Field values of an incoming device, coerced to storable types.

    Blank strings become None so the merge treats them as absent.
    """
    values: dict[str, Any] = {"serial_number": _clean(device.serial_number)}
    for name in MERGE_FIELDS:
        value = _clean(getattr(device, name))
        if name in _DATE_FIELDS:
            value = parse_date(value)
        elif name in _TIMESTAMP_FIELDS:
            value = parse_timestamp(value)
        values[name] = value
    values["manufacturer"] = values["manufacturer"].lower()
    return values


def merge_into(existing: Device, values: dict[str, Any]) -> bool:
    """Apply incoming values onto an existing record.

    Non-empty incoming values win; empty ones keep what is stored. Warranty
    dates and their timestamps follow the same rule, so an import without
    warranty data never clears a fetched warranty. Returns True if anything
    changed.
    """
    changed = False
    for name in MERGE_FIELDS:
        value = values.get(name)
        if is_empty(value):
            continue
        if getattr(existing, name) != value:
            setattr(existing, name, value)
            changed = True
    return changed


class DeviceStore(ABC):
    """Persistent, tenant-scoped table of devices with merge-on-write."""

    @abstractmethod
    def upsert(self, device: Device, tenant: TenantId = NO_TENANT) -> None:
        ...

    @abstractmethod
    def get_by_serial(self, serial_number: str, tenant: TenantId = NO_TENANT) -> Optional[Device]:
        ...

    @abstractmethod
    def list_all(self, tenant: TenantId = NO_TENANT) -> list[Device]:
        ...

    @abstractmethod
    def list_by_platform(self, platform: str, tenant: TenantId = NO_TENANT) -> list[Device]:
        ...

    @abstractmethod
    def list_by_client(self, client_name: str, tenant: TenantId = NO_TENANT) -> list[Device]:
        ...

    @abstractmethod
    def delete_by_id(self, device_id: str, tenant: TenantId = NO_TENANT) -> bool:
        ...

    @abstractmethod
    def list_distinct_clients(self, tenant: TenantId = NO_TENANT) -> list[str]:
        ...

    @abstractmethod
    def count_by_client(self, tenant: TenantId = NO_TENANT) -> list[tuple[str, int]]:
        ...

    @abstractmethod
    def record_warranty(
        self,
        serial_number: str,
        start_date: Optional[date],
        end_date: Optional[date],
        tenant: TenantId = NO_TENANT,
        fetched_at: Optional[datetime] = None,
    ) -> Optional[Device]:
        """Persist looked-up warranty dates and stamp ``warranty_fetched_at``."""

    @abstractmethod
    def mark_written_back(
        self,
        serial_number: str,
        tenant: TenantId = NO_TENANT,
        written_at: Optional[datetime] = None,
    ) -> Optional[Device]:
        """Stamp ``warranty_written_back_at`` after a successful write-back."""

    @abstractmethod
    def cleanup_older_than(self, days_old: int, tenant: TenantId = NO_TENANT) -> int:
        """Delete records not updated for ``days_old`` days. Returns the count."""

    @abstractmethod
    def close(self) -> None:
        ...
