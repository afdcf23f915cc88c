"""Device pool API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from warrantywatch.api.deps import get_settings, get_store, get_tenant_context
from warrantywatch.config import Settings
from warrantywatch.models.device import Device, Platform
from warrantywatch.schemas.device import (
    CleanupResponse,
    ClientCount,
    ClientListResponse,
    DeviceListResponse,
    DeviceResponse,
)
from warrantywatch.services.tenancy import TenantContext
from warrantywatch.store.base import DeviceStore
from warrantywatch.utils.dates import infer_warranty_status

router = APIRouter(tags=["devices"])


def device_response(d: Device) -> DeviceResponse:
    return DeviceResponse(
        id=d.id,
        serial_number=d.serial_number,
        manufacturer=d.manufacturer,
        model=d.model,
        hostname=d.hostname,
        device_class=d.device_class,
        client_id=d.client_id,
        client_name=d.client_name,
        source_platform=d.source_platform,
        source_device_id=d.source_device_id,
        warranty_start_date=d.warranty_start_date,
        warranty_end_date=d.warranty_end_date,
        warranty_status=infer_warranty_status(d.warranty_end_date),
        warranty_fetched_at=d.warranty_fetched_at,
        warranty_written_back_at=d.warranty_written_back_at,
        updated_at=d.updated_at,
    )


@router.get("/devices", response_model=DeviceListResponse)
def list_devices(
    platform: Optional[Platform] = None,
    client: Optional[str] = None,
    store: DeviceStore = Depends(get_store),
    tenants: TenantContext = Depends(get_tenant_context),
):
    """List the device pool, optionally narrowed to one platform or client."""
    tenant = tenants.current()
    if platform:
        devices = store.list_by_platform(platform.value, tenant)
    else:
        devices = store.list_all(tenant)
    if client:
        devices = [d for d in devices if d.client_name == client]

    return DeviceListResponse(devices=[device_response(d) for d in devices], total=len(devices))


@router.get("/devices/{serial_number}", response_model=DeviceResponse)
def get_device(
    serial_number: str,
    store: DeviceStore = Depends(get_store),
    tenants: TenantContext = Depends(get_tenant_context),
):
    device = store.get_by_serial(serial_number, tenants.current())
    if not device:
        raise HTTPException(status_code=404, detail="Device not found")
    return device_response(device)


@router.delete("/devices/{device_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_device(
    device_id: str,
    store: DeviceStore = Depends(get_store),
    tenants: TenantContext = Depends(get_tenant_context),
):
    """Remove a device from the pool."""
    if not store.delete_by_id(device_id, tenants.current()):
        raise HTTPException(status_code=404, detail="Device not found")


@router.post("/devices/cleanup", response_model=CleanupResponse)
def cleanup_devices(
    days_old: Optional[int] = Query(default=None, ge=0),
    store: DeviceStore = Depends(get_store),
    tenants: TenantContext = Depends(get_tenant_context),
    settings: Settings = Depends(get_settings),
):
    """Delete devices that no import or lookup has touched for ``days_old`` days."""
    days = settings.cleanup_default_days if days_old is None else days_old
    deleted = store.cleanup_older_than(days, tenants.current())
    return CleanupResponse(deleted=deleted, days_old=days)


@router.get("/clients", response_model=ClientListResponse)
def list_clients(
    store: DeviceStore = Depends(get_store),
    tenants: TenantContext = Depends(get_tenant_context),
):
    counts = store.count_by_client(tenants.current())
    return ClientListResponse(
        clients=[ClientCount(client_name=name, count=count) for name, count in counts]
    )
