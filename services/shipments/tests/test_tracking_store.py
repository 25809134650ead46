"""
Tests for the in-memory tracking record store
"""

import threading

import pytest

from services.common.test_utils import FakeClock
from services.shipments.schemas import TrackingRecord
from services.shipments.store import TrackingStore

DAY = 24 * 60 * 60


def make_record(tracking_id: str, shipment_id: str = "S1", **overrides) -> TrackingRecord:
    data = {
        "tracking_id": tracking_id,
        "carrier_id": "C1",
        "location": "LAX",
        "shipment_id": shipment_id,
        "status": "in_transit",
        "timestamp": "2024-01-01T00:00:00Z",
    }
    data.update(overrides)
    return TrackingRecord(**data)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return TrackingStore(ttl_seconds=DAY, clock=clock)


class TestPutAndRead:
    def test_put_then_get(self, store):
        record = make_record("t1")
        store.put(record)

        assert store.get("t1") == record
        assert store.get("missing") is None

    def test_put_overwrites_existing_key(self, store):
        store.put(make_record("t1", status="picked_up"))
        store.put(make_record("t1", status="delivered"))

        assert len(store) == 1
        assert store.get("t1").status == "delivered"

    def test_list_all_returns_every_record(self, store):
        for i in range(3):
            store.put(make_record(f"t{i}", shipment_id=f"S{i}"))

        assert [r.tracking_id for r in store.list_all()] == ["t0", "t1", "t2"]
        assert sorted(store.keys()) == ["t0", "t1", "t2"]

    def test_empty_store(self, store):
        assert store.list_all() == []
        assert store.find_by_shipment("S1") == []
        assert len(store) == 0


class TestFindByShipment:
    def test_filters_by_shipment(self, store):
        store.put(make_record("a", shipment_id="S1"))
        store.put(make_record("b", shipment_id="S2"))
        store.put(make_record("c", shipment_id="S1"))

        result = store.find_by_shipment("S1")

        assert {r.tracking_id for r in result} == {"a", "c"}
        assert all(r.shipment_id == "S1" for r in result)

    def test_match_is_exact(self, store):
        store.put(make_record("a", shipment_id="S1"))
        store.put(make_record("b", shipment_id="S10"))

        assert [r.tracking_id for r in store.find_by_shipment("S1")] == ["a"]
        assert store.find_by_shipment("s1") == []

    def test_unknown_shipment_is_empty(self, store):
        store.put(make_record("a", shipment_id="S1"))
        assert store.find_by_shipment("nope") == []

    def test_repeated_reads_are_identical(self, store):
        store.put(make_record("a"))
        store.put(make_record("b"))

        assert store.find_by_shipment("S1") == store.find_by_shipment("S1")


class TestExpiry:
    def test_visible_until_just_before_ttl(self, store, clock):
        store.put(make_record("t1"))

        clock.advance(DAY - 0.001)

        assert [r.tracking_id for r in store.find_by_shipment("S1")] == ["t1"]
        assert store.get("t1") is not None

    def test_gone_at_exactly_ttl(self, store, clock):
        store.put(make_record("t1"))

        clock.advance(DAY)

        assert store.find_by_shipment("S1") == []
        assert store.list_all() == []
        assert store.get("t1") is None

    def test_gone_after_ttl(self, store, clock):
        store.put(make_record("t1"))

        clock.advance(DAY + 3600)

        assert store.find_by_shipment("S1") == []

    def test_reads_do_not_refresh_expiry(self, store, clock):
        store.put(make_record("t1"))

        for _ in range(4):
            clock.advance(DAY / 4 - 1)
            assert store.get("t1") is not None

        clock.advance(4)
        assert store.get("t1") is None

    def test_expiry_is_per_entry(self, store, clock):
        store.put(make_record("old"))
        clock.advance(DAY / 2)
        store.put(make_record("new"))
        clock.advance(DAY / 2)

        assert [r.tracking_id for r in store.find_by_shipment("S1")] == ["new"]

    def test_reinsert_restarts_ttl(self, store, clock):
        store.put(make_record("t1"))
        clock.advance(DAY - 10)
        store.put(make_record("t1"))
        clock.advance(20)

        assert store.get("t1") is not None

    def test_purge_removes_only_expired(self, store, clock):
        store.put(make_record("old"))
        clock.advance(DAY / 2)
        store.put(make_record("new"))
        clock.advance(DAY / 2)

        assert store.purge_expired() == 1
        assert store.keys() == ["new"]
        assert store.purge_expired() == 0

    def test_reinsert_moves_record_to_end(self, store, clock):
        store.put(make_record("a"))
        store.put(make_record("b"))
        clock.advance(10)
        store.put(make_record("a", status="delivered"))

        assert store.keys() == ["b", "a"]

    def test_custom_ttl(self, clock):
        store = TrackingStore(ttl_seconds=60, clock=clock)
        store.put(make_record("t1"))

        clock.advance(59)
        assert len(store) == 1
        clock.advance(1)
        assert len(store) == 0

    @pytest.mark.parametrize("ttl", [0, -1])
    def test_non_positive_ttl_rejected(self, ttl):
        with pytest.raises(ValueError):
            TrackingStore(ttl_seconds=ttl)


class TestStats:
    def test_stats_counts_hits_and_misses(self, store):
        store.put(make_record("t1"))
        store.get("t1")
        store.get("t2")
        store.get("t3")

        assert store.stats() == {"keys": 1, "hits": 1, "misses": 2}

    def test_stats_counts_shipment_lookups(self, store):
        store.put(make_record("t1", shipment_id="S1"))
        store.find_by_shipment("S1")
        store.find_by_shipment("S2")

        assert store.stats() == {"keys": 1, "hits": 1, "misses": 1}

    def test_stats_keys_exclude_expired(self, store, clock):
        store.put(make_record("t1"))
        clock.advance(DAY)

        assert store.stats()["keys"] == 0


class TestConcurrentWrites:
    def test_parallel_puts_are_all_stored(self, store):
        def writer(prefix: str) -> None:
            for i in range(200):
                store.put(make_record(f"{prefix}-{i}", shipment_id=prefix))

        threads = [threading.Thread(target=writer, args=(f"S{n}",)) for n in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(store) == 1000
        assert len(store.find_by_shipment("S3")) == 200
