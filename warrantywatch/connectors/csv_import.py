"""Flat-file (CSV) device import.

The CSV pseudo-platform has no API: devices come from an uploaded sheet and
nothing is ever written back to it.
"""

import csv
import io
import logging

from warrantywatch.models.device import Device, Platform
from warrantywatch.utils.dates import parse_date
from warrantywatch.utils.manufacturers import determine_manufacturer

logger = logging.getLogger(__name__)

# Header aliases -> Device field
COLUMN_ALIASES = {
    "serial number": "serial_number",
    "serialnumber": "serial_number",
    "serial": "serial_number",
    "service tag": "serial_number",
    "servicetag": "serial_number",
    "asset tag": "serial_number",
    "assettag": "serial_number",
    "manufacturer": "manufacturer",
    "vendor": "manufacturer",
    "make": "manufacturer",
    "model": "model",
    "device model": "model",
    "model number": "model",
    "hostname": "hostname",
    "computer name": "hostname",
    "device name": "hostname",
    "name": "hostname",
    "client id": "client_id",
    "clientid": "client_id",
    "customer id": "client_id",
    "customerid": "client_id",
    "client name": "client_name",
    "clientname": "client_name",
    "client": "client_name",
    "customer": "client_name",
    "customer name": "client_name",
    "customername": "client_name",
    "device class": "device_class",
    "type": "device_class",
    "warranty start": "warranty_start_date",
    "warranty start date": "warranty_start_date",
    "warranty end": "warranty_end_date",
    "warranty end date": "warranty_end_date",
    "warranty expiry": "warranty_end_date",
}


def _header_key(header: str) -> str:
    return header.strip().strip("\"'").strip().lower()


def parse_csv_devices(content: str) -> list[Device]:
    """Parse CSV text into devices.

    Rows without a serial number or a recognizable manufacturer are dropped.
    """
    text = content.lstrip("\ufeff").strip()
    if not text:
        return []

    reader = csv.reader(io.StringIO(text))
    try:
        headers = next(reader)
    except StopIteration:
        return []
    fields = [COLUMN_ALIASES.get(_header_key(h)) for h in headers]

    devices: list[Device] = []
    dropped = 0
    for row in reader:
        if len([v for v in row if v.strip()]) <= 1:
            continue

        values: dict[str, str] = {}
        for field, raw in zip(fields, row):
            value = raw.strip().strip("\"'").strip()
            if field and value and field not in values:
                values[field] = value

        manufacturer = determine_manufacturer(values.get("manufacturer"))
        if not values.get("serial_number") or manufacturer is None:
            dropped += 1
            continue

        devices.append(Device(
            serial_number=values["serial_number"],
            manufacturer=manufacturer.value,
            model=values.get("model"),
            hostname=values.get("hostname"),
            client_id=values.get("client_id"),
            client_name=values.get("client_name"),
            device_class=values.get("device_class"),
            source_platform=Platform.CSV.value,
            warranty_start_date=parse_date(values.get("warranty_start_date")),
            warranty_end_date=parse_date(values.get("warranty_end_date")),
        ))

    if dropped:
        logger.warning("CSV import dropped %d rows without serial number or manufacturer", dropped)
    return devices
