"""WarrantyWatch Database Models."""

from warrantywatch.models.device import Device, Manufacturer, Platform

__all__ = [
    "Device",
    "Manufacturer",
    "Platform",
]
