"""WarrantyWatch: device pool reconciliation and warranty sync."""

__version__ = "0.1.0"
