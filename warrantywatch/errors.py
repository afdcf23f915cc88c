"""Error taxonomy for the sync pipeline.

Errors keyed to a single device (validation, lookup, write-back, credentials)
are recovered locally and reported on that device's result. Errors keyed to
the caller's identity or the store's configuration are fatal for the request.
"""


class WarrantyWatchError(Exception):
    """Base class for all WarrantyWatch errors."""


class ValidationError(WarrantyWatchError):
    """A device record is malformed (missing serial number or manufacturer)."""


class WarrantyLookupError(WarrantyWatchError):
    """A manufacturer connector failed or returned unusable data."""


class WriteBackError(WarrantyWatchError):
    """A platform connector failed to accept a warranty update."""


class CredentialsError(WarrantyWatchError):
    """Credentials were supplied in the wrong shape for a connector."""


class AuthenticationRequiredError(WarrantyWatchError):
    """Multi-tenant mode and no tenant could be resolved for the caller."""


class ConfigurationError(WarrantyWatchError):
    """The store engine or deployment is misconfigured."""
