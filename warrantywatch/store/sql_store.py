"""SQLModel implementation of the device store shared by both engines.

Subclasses decide how queries are scoped to a tenant and which owner new
rows get; everything else (merge, warranty stamping, cleanup) lives here.
"""

import logging
import uuid
from abc import abstractmethod
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, col, select

from warrantywatch.models.device import Device
from warrantywatch.services.tenancy import NO_TENANT, TenantId
from warrantywatch.store.base import DeviceStore, merge_into, normalized_values, validate_device
from warrantywatch.utils.dates import utcnow

logger = logging.getLogger(__name__)


class SQLDeviceStore(DeviceStore):
    """Device store over a SQLAlchemy engine."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def init_schema(self) -> None:
        SQLModel.metadata.create_all(self.engine)

    # --- Tenant hooks ---

    @abstractmethod
    def _scoped(self, statement, tenant: TenantId):
        """Restrict a statement over the devices table to the tenant's rows."""

    @abstractmethod
    def _owner_for(self, tenant: TenantId) -> Optional[str]:
        """Owner id stamped on newly inserted rows."""

    def _session(self) -> Session:
        return Session(self.engine, expire_on_commit=False)

    def _find(self, session: Session, serial_number: str, tenant: TenantId) -> Optional[Device]:
        statement = self._scoped(
            select(Device).where(Device.serial_number == serial_number.strip()), tenant
        )
        return session.exec(statement).first()

    def _list(self, tenant: TenantId, *criteria) -> list[Device]:
        statement = select(Device)
        if criteria:
            statement = statement.where(*criteria)
        statement = self._scoped(statement, tenant).order_by(col(Device.updated_at).desc())
        with self._session() as session:
            return list(session.exec(statement).all())

    # --- Writes ---

    def upsert(self, device: Device, tenant: TenantId = NO_TENANT) -> None:
        validate_device(device)
        owner_id = self._owner_for(tenant)
        values = normalized_values(device)

        with self._session() as session:
            existing = self._find(session, values["serial_number"], tenant)
            if existing:
                # Existing primary key and owner are kept
                merge_into(existing, values)
                existing.updated_at = utcnow()
                session.add(existing)
                logger.debug("Updated existing device: %s", values["serial_number"])
            else:
                now = utcnow()
                session.add(Device(
                    id=uuid.uuid4().hex,
                    owner_id=owner_id,
                    created_at=now,
                    updated_at=now,
                    **values,
                ))
                logger.debug("Inserted new device: %s", values["serial_number"])
            session.commit()

    def record_warranty(
        self,
        serial_number: str,
        start_date: Optional[date],
        end_date: Optional[date],
        tenant: TenantId = NO_TENANT,
        fetched_at: Optional[datetime] = None,
    ) -> Optional[Device]:
        with self._session() as session:
            device = self._find(session, serial_number, tenant)
            if not device:
                logger.warning("Cannot store warranty for %s: not in device pool", serial_number)
                return None
            if start_date:
                device.warranty_start_date = start_date
            if end_date:
                device.warranty_end_date = end_date
            device.warranty_fetched_at = fetched_at or utcnow()
            device.updated_at = utcnow()
            session.add(device)
            session.commit()
            return device

    def mark_written_back(
        self,
        serial_number: str,
        tenant: TenantId = NO_TENANT,
        written_at: Optional[datetime] = None,
    ) -> Optional[Device]:
        with self._session() as session:
            device = self._find(session, serial_number, tenant)
            if not device:
                logger.warning("Cannot mark %s as written back: not in device pool", serial_number)
                return None
            written_at = written_at or utcnow()
            # A write-back can never predate the lookup it pushed
            if device.warranty_fetched_at and written_at < device.warranty_fetched_at:
                written_at = device.warranty_fetched_at
            device.warranty_written_back_at = written_at
            device.updated_at = utcnow()
            session.add(device)
            session.commit()
            return device

    def delete_by_id(self, device_id: str, tenant: TenantId = NO_TENANT) -> bool:
        with self._session() as session:
            device = session.exec(
                self._scoped(select(Device).where(Device.id == device_id), tenant)
            ).first()
            if not device:
                return False
            session.delete(device)
            session.commit()
            return True

    def cleanup_older_than(self, days_old: int, tenant: TenantId = NO_TENANT) -> int:
        cutoff = utcnow() - timedelta(days=days_old)
        statement = self._scoped(select(Device).where(col(Device.updated_at) < cutoff), tenant)
        with self._session() as session:
            stale = session.exec(statement).all()
            for device in stale:
                session.delete(device)
            session.commit()
            deleted = len(stale)
        logger.info("Pool cleanup removed %d devices older than %d days", deleted, days_old)
        return deleted

    # --- Reads ---

    def get_by_serial(self, serial_number: str, tenant: TenantId = NO_TENANT) -> Optional[Device]:
        if not serial_number or not serial_number.strip():
            return None
        with self._session() as session:
            return self._find(session, serial_number, tenant)

    def list_all(self, tenant: TenantId = NO_TENANT) -> list[Device]:
        return self._list(tenant)

    def list_by_platform(self, platform: str, tenant: TenantId = NO_TENANT) -> list[Device]:
        return self._list(tenant, Device.source_platform == platform)

    def list_by_client(self, client_name: str, tenant: TenantId = NO_TENANT) -> list[Device]:
        return self._list(tenant, Device.client_name == client_name)

    def list_distinct_clients(self, tenant: TenantId = NO_TENANT) -> list[str]:
        statement = self._scoped(
            select(Device.client_name)
            .where(col(Device.client_name).is_not(None), Device.client_name != "")
            .distinct(),
            tenant,
        ).order_by(col(Device.client_name).asc())
        with self._session() as session:
            return list(session.exec(statement).all())

    def count_by_client(self, tenant: TenantId = NO_TENANT) -> list[tuple[str, int]]:
        count = func.count(Device.id).label("count")
        statement = self._scoped(
            select(Device.client_name, count)
            .where(col(Device.client_name).is_not(None), Device.client_name != "")
            .group_by(Device.client_name),
            tenant,
        ).order_by(count.desc(), col(Device.client_name).asc())
        with self._session() as session:
            return [(name, total) for name, total in session.exec(statement).all()]

    def close(self) -> None:
        self.engine.dispose()
