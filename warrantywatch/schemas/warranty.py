"""Warranty lookup and write-back schemas."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, computed_field

from warrantywatch.models.device import Device
from warrantywatch.schemas.credentials import ManufacturerCredentials, PlatformCredentials
from warrantywatch.utils.dates import infer_warranty_status

SKIP_MISSING_SERIAL = "missing serial number"


class WarrantyDates(BaseModel):
    """What a manufacturer connector returns for one serial number."""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    product_description: Optional[str] = None


class ResultError(BaseModel):
    kind: Literal["lookup", "write_back"]
    message: str


class WarrantyResult(BaseModel):
    """Per-device outcome passed between pipeline stages and back to the caller."""

    serial_number: str = ""
    manufacturer: str = ""
    device_id: Optional[str] = None
    hostname: Optional[str] = None
    client_name: Optional[str] = None
    source_platform: Optional[str] = None

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    product_description: Optional[str] = None
    fetched_at: Optional[datetime] = None

    from_cache: bool = False
    skipped: bool = False
    skip_reason: Optional[str] = None
    written_back: bool = False
    written_back_at: Optional[datetime] = None
    error: Optional[ResultError] = None

    @computed_field
    @property
    def status(self) -> str:
        return infer_warranty_status(self.end_date)

    @property
    def outcome(self) -> str:
        if self.error is not None:
            return "error"
        if self.skipped:
            return "skipped"
        return "success"

    @classmethod
    def from_device(cls, device: Device) -> "WarrantyResult":
        """Build a result reflecting what is already known about a device.

        A device that has ever been looked up is reported as served from cache.
        """
        return cls(
            serial_number=device.serial_number or "",
            manufacturer=device.manufacturer or "",
            device_id=device.id,
            hostname=device.hostname,
            client_name=device.client_name,
            source_platform=device.source_platform,
            start_date=device.warranty_start_date,
            end_date=device.warranty_end_date,
            product_description=device.model,
            fetched_at=device.warranty_fetched_at,
            from_cache=device.warranty_fetched_at is not None,
            written_back=device.warranty_written_back_at is not None,
            written_back_at=device.warranty_written_back_at,
        )


class IngestSummary(BaseModel):
    success_count: int = 0
    error_count: int = 0


class WriteBackOutcome(BaseModel):
    serial_number: str
    platform: Optional[str] = None
    status: Literal["written", "failed", "skipped"]
    message: Optional[str] = None


class WriteBackReport(BaseModel):
    results: list[WarrantyResult]
    outcomes: list[WriteBackOutcome]
    eligible: int = 0
    written: int = 0
    failed: int = 0
    skipped: int = 0


# --- API ---

class LookupRequest(BaseModel):
    serial_numbers: Optional[list[str]] = None  # None = whole pool
    client_name: Optional[str] = None
    skip_if_cached: bool = True
    credentials: ManufacturerCredentials = Field(default_factory=ManufacturerCredentials)


class LookupResponse(BaseModel):
    results: list[WarrantyResult]
    dispatched: int
    cached: int
    errors: int
    skipped: int


class WriteBackRequest(BaseModel):
    results: list[WarrantyResult]
    credentials: PlatformCredentials = Field(default_factory=PlatformCredentials)
