"""Embedded single-tenant engine (self-hosted mode)."""

import logging
from typing import Optional

from warrantywatch.services.tenancy import TenantId
from warrantywatch.store.sql_store import SQLDeviceStore

logger = logging.getLogger(__name__)


class SingleTenantDeviceStore(SQLDeviceStore):
    """SQLite-backed store with no tenant filtering.

    Any tenant id passed in is ignored; every caller sees the whole pool.
    """

    def _scoped(self, statement, tenant: TenantId):
        if tenant is not None:
            logger.debug("Single-tenant store ignoring tenant id %s", tenant)
        return statement

    def _owner_for(self, tenant: TenantId) -> Optional[str]:
        return None
