"""Common API dependencies: store, tenant context and the sync pipeline."""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from warrantywatch.config import Settings
from warrantywatch.services.sync_service import WarrantySyncService
from warrantywatch.services.tenancy import (
    BearerTokenTenantProvider,
    MultiTenantContext,
    SingleTenantContext,
    TenantContext,
)
from warrantywatch.store.base import DeviceStore

# Missing tokens are reported by the tenant context, not by the scheme
bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> DeviceStore:
    return request.app.state.store


def get_tenant_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> TenantContext:
    """Self-hosted callers act for no tenant; SaaS callers for their token's subject."""
    if not settings.is_saas:
        return SingleTenantContext()
    token = credentials.credentials if credentials else None
    return MultiTenantContext(
        BearerTokenTenantProvider(token, settings.jwt_secret, settings.jwt_algorithm)
    )


def get_sync_service(
    request: Request,
    store: DeviceStore = Depends(get_store),
    tenants: TenantContext = Depends(get_tenant_context),
    settings: Settings = Depends(get_settings),
) -> WarrantySyncService:
    return WarrantySyncService(
        store,
        tenants,
        request.app.state.manufacturer_connectors,
        request.app.state.platform_connectors,
        concurrency=settings.lookup_concurrency,
    )
