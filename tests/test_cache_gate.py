"""Warranty cache gate tests."""

from datetime import date

from sqlalchemy.exc import OperationalError

from warrantywatch.services.cache_gate import WarrantyCacheGate


def _seed(store, make_device):
    store.upsert(make_device("FETCHED", warranty_end_date=date(2027, 1, 1)))
    store.record_warranty("FETCHED", date(2024, 1, 1), date(2027, 1, 1))
    # Has an imported end date but was never looked up
    store.upsert(make_device("IMPORTED", warranty_end_date=date(2026, 1, 1)))
    store.upsert(make_device("BARE"))


def test_skip_if_cached_false_returns_input_unchanged(single_store, tenants, make_device):
    _seed(single_store, make_device)
    devices = [make_device("FETCHED"), make_device("BARE"), make_device("UNKNOWN")]

    gate = WarrantyCacheGate(single_store, tenants)
    assert gate.filter_for_lookup(devices, skip_if_cached=False) == devices


def test_only_fetched_devices_are_skipped(single_store, tenants, make_device):
    _seed(single_store, make_device)
    devices = [make_device(s) for s in ("FETCHED", "IMPORTED", "BARE", "UNKNOWN")]

    gate = WarrantyCacheGate(single_store, tenants)
    remaining = gate.filter_for_lookup(devices, skip_if_cached=True)

    assert [d.serial_number for d in remaining] == ["IMPORTED", "BARE", "UNKNOWN"]


def test_partition_returns_stored_records(single_store, tenants, make_device):
    _seed(single_store, make_device)
    gate = WarrantyCacheGate(single_store, tenants)

    needs_lookup, cached = gate.partition([make_device("FETCHED"), make_device("BARE")], True)

    assert [d.serial_number for d in needs_lookup] == ["BARE"]
    assert [d.serial_number for d in cached] == ["FETCHED"]
    assert cached[0].warranty_start_date == date(2024, 1, 1)


def test_cached_results_are_marked_from_cache(single_store, tenants, make_device):
    _seed(single_store, make_device)
    gate = WarrantyCacheGate(single_store, tenants)

    results = gate.cached_results([make_device("FETCHED"), make_device("BARE")])

    assert len(results) == 1
    assert results[0].serial_number == "FETCHED"
    assert results[0].from_cache is True
    assert results[0].end_date == date(2027, 1, 1)


def test_storage_error_includes_device(single_store, tenants, make_device, monkeypatch):
    _seed(single_store, make_device)

    def broken(serial_number, tenant=None):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(single_store, "get_by_serial", broken)
    gate = WarrantyCacheGate(single_store, tenants)

    devices = [make_device("FETCHED")]
    assert gate.filter_for_lookup(devices, skip_if_cached=True) == devices
