"""Manufacturer and platform connectors and their default registries."""

from warrantywatch.connectors.base import ManufacturerConnector, PlatformConnector
from warrantywatch.connectors.manufacturers import dell_connector, hp_connector, lenovo_connector
from warrantywatch.connectors.platforms import datto_connector, halopsa_connector, ncentral_connector


def default_manufacturer_connectors() -> dict[str, ManufacturerConnector]:
    return {c.manufacturer: c for c in (dell_connector(), hp_connector(), lenovo_connector())}


def default_platform_connectors() -> dict[str, PlatformConnector]:
    return {c.platform: c for c in (datto_connector(), ncentral_connector(), halopsa_connector())}


__all__ = [
    "ManufacturerConnector",
    "PlatformConnector",
    "default_manufacturer_connectors",
    "default_platform_connectors",
]
