"""Device pool request/response schemas."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from warrantywatch.schemas.credentials import PlatformCredentials


class DeviceResponse(BaseModel):
    id: str
    serial_number: str
    manufacturer: str
    model: Optional[str]
    hostname: Optional[str]
    device_class: Optional[str]
    client_id: Optional[str]
    client_name: Optional[str]
    source_platform: Optional[str]
    source_device_id: Optional[str]
    warranty_start_date: Optional[date]
    warranty_end_date: Optional[date]
    warranty_status: str
    warranty_fetched_at: Optional[datetime]
    warranty_written_back_at: Optional[datetime]
    updated_at: Optional[datetime]


class DeviceListResponse(BaseModel):
    devices: list[DeviceResponse]
    total: int


class ClientCount(BaseModel):
    client_name: str
    count: int


class ClientListResponse(BaseModel):
    clients: list[ClientCount]


class PlatformImportRequest(BaseModel):
    credentials: PlatformCredentials = Field(default_factory=PlatformCredentials)


class CsvImportRequest(BaseModel):
    content: str


class ImportResponse(BaseModel):
    platform: str
    received: int
    success_count: int
    error_count: int


class CleanupResponse(BaseModel):
    deleted: int
    days_old: int
