"""CSV import and manufacturer detection tests."""

from datetime import date

import pytest

from warrantywatch.connectors.csv_import import parse_csv_devices
from warrantywatch.models.device import Manufacturer
from warrantywatch.utils.manufacturers import determine_manufacturer


@pytest.mark.parametrize("name, expected", [
    ("Dell Inc.", Manufacturer.DELL),
    ("Hewlett-Packard", Manufacturer.HP),
    ("HP", Manufacturer.HP),
    ("LENOVO", Manufacturer.LENOVO),
    ("ThinkPad T14", Manufacturer.LENOVO),
    ("Apple MacBook Pro", Manufacturer.APPLE),
    ("Microsoft Surface Laptop", Manufacturer.MICROSOFT),
    ("Acer", None),
    ("", None),
    (None, None),
])
def test_determine_manufacturer(name, expected):
    assert determine_manufacturer(name) == expected


def test_determine_manufacturer_default():
    assert determine_manufacturer("Acer", default=Manufacturer.DELL) == Manufacturer.DELL


def test_parse_csv_with_aliases():
    content = (
        "\ufeffService Tag,Vendor,Device Model,Computer Name,Customer,Warranty End Date\n"
        "JH2RRW1,Dell Inc.,OptiPlex 7070,HALO-001,Acme Dental,2026-06-04\n"
        "5CG1234XYZ,HP,ProBook 440,HALO-002,\"Mario and Luigi's, Inc\",\n"
    )

    devices = parse_csv_devices(content)

    assert [d.serial_number for d in devices] == ["JH2RRW1", "5CG1234XYZ"]
    first, second = devices
    assert first.manufacturer == "dell"
    assert first.model == "OptiPlex 7070"
    assert first.hostname == "HALO-001"
    assert first.client_name == "Acme Dental"
    assert first.warranty_end_date == date(2026, 6, 4)
    assert first.source_platform == "csv"
    assert second.manufacturer == "hp"
    assert second.client_name == "Mario and Luigi's, Inc"
    assert second.warranty_end_date is None


def test_parse_csv_drops_unusable_rows():
    content = (
        "serial,manufacturer,hostname\n"
        ",Dell,NO-SERIAL\n"
        "ACER123,Acer,UNKNOWN-VENDOR\n"
        "\n"
        "only-one-value\n"
        "LR0394B2,Lenovo,KEEP\n"
    )

    devices = parse_csv_devices(content)

    assert [(d.serial_number, d.manufacturer) for d in devices] == [("LR0394B2", "lenovo")]


@pytest.mark.parametrize("content", ["", "   ", "\ufeff", "serial,manufacturer\n"])
def test_parse_csv_empty(content):
    assert parse_csv_devices(content) == []
