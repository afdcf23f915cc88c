"""Import, warranty lookup and write-back API endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from warrantywatch.api.deps import get_sync_service
from warrantywatch.models.device import Platform
from warrantywatch.schemas.device import CsvImportRequest, ImportResponse, PlatformImportRequest
from warrantywatch.schemas.warranty import (
    LookupRequest,
    LookupResponse,
    ResultError,
    WarrantyResult,
    WriteBackReport,
    WriteBackRequest,
)
from warrantywatch.services.sync_service import WarrantySyncService

router = APIRouter(tags=["sync"])


@router.post("/devices/import/csv", response_model=ImportResponse)
def import_csv(
    request: CsvImportRequest,
    service: WarrantySyncService = Depends(get_sync_service),
):
    received, summary = service.pool.import_csv(request.content)
    return ImportResponse(
        platform=Platform.CSV.value,
        received=received,
        success_count=summary.success_count,
        error_count=summary.error_count,
    )


@router.post("/devices/import/{platform}", response_model=ImportResponse)
async def import_platform(
    platform: Platform,
    request: PlatformImportRequest,
    service: WarrantySyncService = Depends(get_sync_service),
):
    """Pull a platform's device inventory into the pool."""
    try:
        received, summary = await service.pool.import_from_platform(platform, request.credentials)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ImportResponse(
        platform=platform.value,
        received=received,
        success_count=summary.success_count,
        error_count=summary.error_count,
    )


@router.post("/warranty/lookup", response_model=LookupResponse)
async def lookup_warranties(
    request: LookupRequest,
    service: WarrantySyncService = Depends(get_sync_service),
):
    """Look up warranties for the requested serials, one client, or the whole pool."""
    tenant = service.tenants.current()
    missing: list[WarrantyResult] = []

    if request.serial_numbers is not None:
        devices = []
        for serial_number in request.serial_numbers:
            device = service.store.get_by_serial(serial_number, tenant)
            if device:
                devices.append(device)
            else:
                missing.append(WarrantyResult(
                    serial_number=serial_number,
                    error=ResultError(kind="lookup", message=f"Device {serial_number} not found in device pool"),
                ))
    elif request.client_name:
        devices = service.store.list_by_client(request.client_name, tenant)
    else:
        devices = service.store.list_all(tenant)

    results = await service.sync(devices, request.credentials, request.skip_if_cached) + missing
    cached = sum(1 for r in results if r.from_cache)
    return LookupResponse(
        results=results,
        dispatched=len(devices) - cached,
        cached=cached,
        errors=sum(1 for r in results if r.error),
        skipped=sum(1 for r in results if r.skipped),
    )


@router.post("/warranty/write-back", response_model=WriteBackReport)
async def write_back_warranties(
    request: WriteBackRequest,
    service: WarrantySyncService = Depends(get_sync_service),
):
    """Push freshly looked-up end dates to each device's source platform."""
    return await service.write_back(request.results, credentials=request.credentials)
