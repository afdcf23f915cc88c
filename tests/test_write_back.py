"""Write-back coordinator tests."""

import asyncio
from datetime import date

import pytest

from warrantywatch.connectors.base import PlatformConnector
from warrantywatch.schemas.warranty import ResultError, WarrantyResult
from warrantywatch.services.write_back import WriteBackCoordinator, is_write_back_eligible
from warrantywatch.utils.dates import utcnow


class FakePlatformConnector(PlatformConnector):
    def __init__(self, platform="datto_rmm", accept=True, error=None):
        self.platform = platform
        self.accept = accept
        self.error = error
        self.updates = []

    async def fetch_devices(self, credentials):
        return []

    async def update_warranty(self, device_id, end_date, credentials):
        self.updates.append((device_id, end_date))
        if self.error:
            raise self.error
        return self.accept


def _fresh(serial_number, end_date=date(2027, 1, 1), **fields):
    return WarrantyResult(serial_number=serial_number, manufacturer="dell", end_date=end_date, **fields)


def _pool(store, make_device, fetched=True):
    store.upsert(make_device("DL123", source_platform="datto_rmm", source_device_id="dev-1"))
    store.upsert(make_device("CSV1", source_platform="csv"))
    store.upsert(make_device("NC1", source_platform="ncentral", source_device_id="1001"))
    if fetched:
        for serial_number in ("DL123", "CSV1", "NC1"):
            store.record_warranty(serial_number, None, date(2027, 1, 1))


@pytest.mark.parametrize("result, eligible", [
    (_fresh("A"), True),
    (_fresh("A", end_date=None), False),
    (_fresh("A", from_cache=True), False),
    (_fresh("A", skipped=True), False),
    (_fresh("A", written_back=True), False),
    (_fresh("A", error=ResultError(kind="lookup", message="boom")), False),
])
def test_eligibility(result, eligible):
    assert is_write_back_eligible(result) is eligible


def test_writes_back_and_stamps_store(single_store, tenants, make_device):
    _pool(single_store, make_device)
    datto = FakePlatformConnector()
    coordinator = WriteBackCoordinator(single_store, tenants, {"datto_rmm": datto})

    report = asyncio.run(coordinator.write_back([_fresh("DL123")], []))

    assert datto.updates == [("dev-1", date(2027, 1, 1))]
    assert report.written == 1 and report.failed == 0 and report.skipped == 0
    assert report.results[0].written_back is True
    assert report.outcomes[0].status == "written"

    stored = single_store.get_by_serial("DL123")
    assert stored.warranty_written_back_at is not None
    assert stored.warranty_written_back_at >= stored.warranty_fetched_at
    assert report.results[0].written_back_at == stored.warranty_written_back_at


def test_input_results_are_not_mutated(single_store, tenants, make_device):
    _pool(single_store, make_device)
    coordinator = WriteBackCoordinator(single_store, tenants, {"datto_rmm": FakePlatformConnector()})
    results = [_fresh("DL123")]

    asyncio.run(coordinator.write_back(results, []))

    assert results[0].written_back is False


def test_original_devices_take_precedence(single_store, tenants, make_device):
    _pool(single_store, make_device)
    datto = FakePlatformConnector()
    coordinator = WriteBackCoordinator(single_store, tenants, {"datto_rmm": datto})
    original = make_device("DL123", id="dev-99", source_platform="datto_rmm")

    asyncio.run(coordinator.write_back([_fresh("DL123")], [original]))

    assert datto.updates == [("dev-99", date(2027, 1, 1))]


def test_csv_source_is_skipped(single_store, tenants, make_device):
    _pool(single_store, make_device)
    coordinator = WriteBackCoordinator(single_store, tenants, {})

    report = asyncio.run(coordinator.write_back([_fresh("CSV1")], []))

    assert report.skipped == 1
    assert report.outcomes[0].status == "skipped"
    assert report.results[0].error is None
    assert single_store.get_by_serial("CSV1").warranty_written_back_at is None


def test_rejected_update_fails_item_only(single_store, tenants, make_device):
    _pool(single_store, make_device)
    connectors = {
        "datto_rmm": FakePlatformConnector(accept=False),
        "ncentral": FakePlatformConnector("ncentral"),
    }
    coordinator = WriteBackCoordinator(single_store, tenants, connectors)

    report = asyncio.run(coordinator.write_back([_fresh("DL123"), _fresh("NC1")], []))

    by_serial = {r.serial_number: r for r in report.results}
    assert by_serial["DL123"].error.kind == "write_back"
    assert by_serial["DL123"].written_back is False
    assert by_serial["NC1"].written_back is True
    assert report.failed == 1 and report.written == 1
    # The lookup itself stays persisted
    assert single_store.get_by_serial("DL123").warranty_fetched_at is not None
    assert single_store.get_by_serial("DL123").warranty_written_back_at is None


def test_connector_exception_fails_item(single_store, tenants, make_device):
    _pool(single_store, make_device)
    datto = FakePlatformConnector(error=RuntimeError("Datto API timeout"))
    coordinator = WriteBackCoordinator(single_store, tenants, {"datto_rmm": datto})

    report = asyncio.run(coordinator.write_back([_fresh("DL123")], []))

    assert report.results[0].error.message == "Datto API timeout"
    assert report.outcomes[0].status == "failed"


def test_unresolvable_device_or_connector_fails(single_store, tenants, make_device):
    _pool(single_store, make_device)
    coordinator = WriteBackCoordinator(single_store, tenants, {"datto_rmm": FakePlatformConnector()})

    report = asyncio.run(coordinator.write_back([_fresh("GHOST"), _fresh("NC1")], []))

    assert [o.status for o in report.outcomes] == ["failed", "failed"]
    assert "not found" in report.results[0].error.message
    assert "not supported" in report.results[1].error.message


def test_only_eligible_items_are_processed(single_store, tenants, make_device):
    _pool(single_store, make_device)
    datto = FakePlatformConnector()
    coordinator = WriteBackCoordinator(single_store, tenants, {"datto_rmm": datto})
    results = [
        _fresh("DL123", from_cache=True, fetched_at=utcnow()),
        _fresh("DL123", end_date=None),
        WarrantyResult(serial_number="", skipped=True, skip_reason="missing serial number"),
    ]
    progress = []

    report = asyncio.run(
        coordinator.write_back(results, [], on_progress=lambda done, total: progress.append(done))
    )

    assert datto.updates == []
    assert report.eligible == 0
    assert report.outcomes == []
    assert progress == []


def test_progress_after_each_item(single_store, tenants, make_device):
    _pool(single_store, make_device)
    connectors = {"datto_rmm": FakePlatformConnector(), "ncentral": FakePlatformConnector("ncentral")}
    coordinator = WriteBackCoordinator(single_store, tenants, connectors)
    progress = []

    asyncio.run(coordinator.write_back(
        [_fresh("DL123"), _fresh("CSV1"), _fresh("NC1")],
        [],
        on_progress=lambda done, total: progress.append((done, total)),
    ))

    assert progress == [(1, 3), (2, 3), (3, 3)]


def test_store_primary_key_is_never_sent_as_platform_id(single_store, tenants, make_device):
    single_store.upsert(make_device("NOID", source_platform="datto_rmm"))
    single_store.record_warranty("NOID", None, date(2027, 1, 1))
    datto = FakePlatformConnector()
    coordinator = WriteBackCoordinator(single_store, tenants, {"datto_rmm": datto})

    report = asyncio.run(coordinator.write_back([_fresh("NOID")], []))
    from_pool = asyncio.run(coordinator.write_back([_fresh("NOID")], single_store.list_all()))

    assert datto.updates == []
    for outcome in (report, from_pool):
        assert outcome.outcomes[0].status == "failed"
        assert "No platform-native device id" in outcome.results[0].error.message
    assert single_store.get_by_serial("NOID").warranty_written_back_at is None


def test_raw_platform_device_is_completed_from_store(single_store, tenants, make_device):
    single_store.upsert(make_device("DL9", source_platform="datto_rmm", source_device_id="dev-9"))
    single_store.record_warranty("DL9", None, date(2027, 1, 1))
    datto = FakePlatformConnector()
    coordinator = WriteBackCoordinator(single_store, tenants, {"datto_rmm": datto})
    # As fetch_devices reports it: native id, no provenance
    raw = make_device("DL9", id="dev-9")

    report = asyncio.run(coordinator.write_back([_fresh("DL9")], [raw]))

    assert report.outcomes[0].status == "written"
    assert report.outcomes[0].platform == "datto_rmm"
    assert datto.updates == [("dev-9", date(2027, 1, 1))]
