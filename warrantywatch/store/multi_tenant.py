"""Multi-tenant relational engine (SaaS mode)."""

from warrantywatch.errors import ConfigurationError
from warrantywatch.models.device import Device
from warrantywatch.services.tenancy import TenantId
from warrantywatch.store.sql_store import SQLDeviceStore


class MultiTenantDeviceStore(SQLDeviceStore):
    """Store where every statement is predicated on the owning tenant.

    Serial numbers are unique per tenant, so two tenants can hold the same
    device without seeing each other's record. A missing tenant id is a
    configuration fault, never "all tenants".
    """

    def _require_tenant(self, tenant: TenantId) -> str:
        if tenant is None or not str(tenant).strip():
            raise ConfigurationError(
                "Multi-tenant store called without a tenant id; refusing to run an unscoped query"
            )
        return str(tenant)

    def _scoped(self, statement, tenant: TenantId):
        return statement.where(Device.owner_id == self._require_tenant(tenant))

    def _owner_for(self, tenant: TenantId) -> str:
        return self._require_tenant(tenant)
