"""Device model."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from warrantywatch.utils.dates import utcnow


class Manufacturer(str, Enum):
    DELL = "dell"
    HP = "hp"
    LENOVO = "lenovo"
    APPLE = "apple"
    MICROSOFT = "microsoft"


class Platform(str, Enum):
    DATTO_RMM = "datto_rmm"
    NCENTRAL = "ncentral"
    HALOPSA = "halopsa"
    CSV = "csv"  # flat-file import, nothing to write back to


class Device(SQLModel, table=True):
    """Canonical record for one physical asset.

    Incoming records built by connectors may carry the platform's own
    identifier in ``id``; the store never reuses it as a primary key.
    """

    __tablename__ = "devices"
    __table_args__ = (
        UniqueConstraint("owner_id", "serial_number", name="uq_devices_owner_serial"),
    )

    id: Optional[str] = Field(default=None, primary_key=True)
    owner_id: Optional[str] = Field(default=None, index=True)  # multi-tenant only
    serial_number: str = Field(default="", index=True)
    manufacturer: str = ""
    model: Optional[str] = None
    hostname: Optional[str] = None
    device_class: Optional[str] = None
    client_id: Optional[str] = None
    client_name: Optional[str] = Field(default=None, index=True)
    source_platform: Optional[str] = Field(default=None, index=True)
    source_device_id: Optional[str] = None

    warranty_start_date: Optional[date] = None
    warranty_end_date: Optional[date] = None
    # Timestamps are naive UTC (see utils.dates.utcnow)
    warranty_fetched_at: Optional[datetime] = Field(default=None, index=True, sa_type=DateTime)
    warranty_written_back_at: Optional[datetime] = Field(default=None, sa_type=DateTime)

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utcnow, index=True, sa_type=DateTime)
