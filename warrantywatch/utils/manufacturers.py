"""Manufacturer detection from free-text vendor/model strings."""

from typing import Optional

from warrantywatch.models.device import Manufacturer

# Checked in order; first hit wins
_KEYWORDS: list[tuple[Manufacturer, tuple[str, ...]]] = [
    (Manufacturer.DELL, ("dell",)),
    (Manufacturer.HP, ("hewlett", "packard", "hp")),
    (Manufacturer.LENOVO, ("lenovo", "thinkpad", "thinkcentre", "ideapad")),
    (Manufacturer.APPLE, ("apple", "macbook", "imac", "mac")),
    (Manufacturer.MICROSOFT, ("microsoft", "surface")),
]


def determine_manufacturer(
    name: Optional[str],
    default: Optional[Manufacturer] = None,
) -> Optional[Manufacturer]:
    """Map a vendor string such as 'Dell Inc.' or 'Hewlett-Packard' to a Manufacturer."""
    if not name or not isinstance(name, str):
        return default

    normalized = name.lower().strip()
    for manufacturer, keywords in _KEYWORDS:
        if any(k in normalized for k in keywords):
            return manufacturer
    return default
