"""Tenant context: who every store call acts for.

Self-hosted deployments have a single implicit tenant and resolve to
``NO_TENANT``. SaaS deployments must resolve an authenticated tenant or fail;
they never fall back to ``NO_TENANT``.
"""

from typing import Callable, Optional, Protocol

import jwt

from warrantywatch.errors import AuthenticationRequiredError
from warrantywatch.utils.security import decode_token

TenantId = Optional[str]

NO_TENANT: TenantId = None


class TenantContext(Protocol):
    def current(self) -> TenantId:
        ...


class SingleTenantContext:
    """Self-hosted mode: there is no tenant."""

    def current(self) -> TenantId:
        return NO_TENANT


class MultiTenantContext:
    """SaaS mode: resolve the tenant through a session provider.

    The provider returns the tenant id, returns None when the caller is not
    authenticated, or raises.
    """

    def __init__(self, provider: Callable[[], Optional[str]]):
        self._provider = provider

    def current(self) -> TenantId:
        try:
            tenant = self._provider()
        except AuthenticationRequiredError:
            raise
        except Exception as e:
            raise AuthenticationRequiredError(f"Authentication required: {e}") from e
        if not tenant:
            raise AuthenticationRequiredError(
                "No authenticated user found. Please log in to access this resource."
            )
        return tenant


class BearerTokenTenantProvider:
    """Session provider reading the tenant from a bearer JWT's ``sub`` claim."""

    def __init__(self, token: Optional[str], secret: str, algorithm: str = "HS256"):
        self._token = token
        self._secret = secret
        self._algorithm = algorithm

    def __call__(self) -> Optional[str]:
        if not self._token:
            return None
        try:
            payload = decode_token(self._token, self._secret, self._algorithm)
        except jwt.PyJWTError as e:
            raise AuthenticationRequiredError(f"Invalid or expired token: {e}") from e
        return payload.get("sub")
