"""AttitudeService integration tests (in-memory SQLite + EventBus)"""

import math
import threading

import pytest

from companion_bonds.core.attitude.classifier import classify
from companion_bonds.core.attitude.models import RelationshipLabel, TargetType
from companion_bonds.core.errors import InvalidDimensionError, NotFoundError, ValidationError
from companion_bonds.core.event_bus import EventBus
from companion_bonds.core.event_types import EventTypes
from companion_bonds.db.database import make_engine, make_session_factory
from companion_bonds.db.models import AttitudeMemoryModel, AttitudeModel, Base
from companion_bonds.services.attitude_service import AttitudeService


def _collect(bus: EventBus, event_type: str) -> list:
    events = []
    bus.subscribe(event_type, events.append)
    return events


# ── upsert / get ─────────────────────────────────────────────


class TestUpsertAndGet:
    def test_round_trip(self, attitude_service):
        created = attitude_service.upsert("c1", "u1", "user", {"trust": 40.0, "joy": 24.0})
        fetched = attitude_service.get("c1", "u1", "user")

        assert fetched.trust == 40.0
        assert fetched.joy == 24.0
        assert fetched.anger == 0.0
        assert fetched.relationship_score == 4.0
        assert fetched.relationship_score == created.relationship_score
        assert fetched.created_at is not None
        assert fetched.last_updated is not None

    def test_values_are_clamped(self, attitude_service):
        record = attitude_service.upsert("c1", "u1", TargetType.USER, {"trust": 250.0, "fear": -300.0})
        assert record.trust == 100.0
        assert record.fear == -100.0

    def test_overwrite_only_given_fields(self, attitude_service):
        attitude_service.upsert("c1", "u1", "user", {"trust": 40.0, "joy": 20.0})
        record = attitude_service.upsert("c1", "u1", "user", {"joy": 5.0})
        assert record.trust == 40.0
        assert record.joy == 5.0

    def test_one_record_per_triple(self, attitude_service, db_session):
        attitude_service.upsert("c1", "t1", "user", {"trust": 1.0})
        attitude_service.upsert("c1", "t1", "user", {"trust": 2.0})
        attitude_service.upsert("c1", "t1", "third_party", {"trust": 3.0})
        assert db_session.query(AttitudeModel).count() == 2

    def test_unknown_dimension(self, attitude_service):
        with pytest.raises(InvalidDimensionError):
            attitude_service.upsert("c1", "u1", "user", {"happiness": 10.0})

    def test_non_finite_value_is_rejected(self, attitude_service):
        with pytest.raises(ValidationError):
            attitude_service.upsert("c1", "u1", "user", {"trust": float("inf")})
        with pytest.raises(ValidationError):
            attitude_service.upsert("c1", "u1", "user", {"joy": float("nan")})
        assert attitude_service.find("c1", "u1", "user") is None

    def test_get_missing(self, attitude_service):
        with pytest.raises(NotFoundError):
            attitude_service.get("c1", "nobody", "user")
        assert attitude_service.find("c1", "nobody", "user") is None

    @pytest.mark.parametrize(
        "companion_id, target_id, target_type",
        [
            ("", "u1", "user"),
            ("c1", "x" * 65, "user"),
            ("c1", "bad id", "user"),
            ("c1", "u1", "npc"),
        ],
    )
    def test_validation(self, attitude_service, companion_id, target_id, target_type):
        with pytest.raises(ValidationError):
            attitude_service.upsert(companion_id, target_id, target_type, {"trust": 1.0})

    def test_list_for_companion_orders_by_score(self, attitude_service):
        attitude_service.upsert("c1", "low", "third_party", {"anger": 80.0})
        attitude_service.upsert("c1", "high", "third_party", {"love": 80.0})
        attitude_service.upsert("c1", "mid", "third_party", {})
        attitude_service.upsert("c2", "other", "third_party", {"love": 100.0})

        records = attitude_service.list_for_companion("c1")
        assert [r.target_id for r in records] == ["high", "mid", "low"]


# ── update_dimension ─────────────────────────────────────────


class TestUpdateDimension:
    def test_delta_is_applied_and_clamped(self, attitude_service):
        attitude_service.upsert("c1", "u1", "user", {"trust": 90.0})
        record = attitude_service.update_dimension("c1", "u1", "user", "trust", 30.0)
        assert record.trust == 100.0
        record = attitude_service.update_dimension("c1", "u1", "user", "trust", -50.0)
        assert record.trust == 50.0

    def test_missing_record(self, attitude_service):
        with pytest.raises(NotFoundError):
            attitude_service.update_dimension("c1", "u1", "user", "trust", 5.0)

    def test_unknown_dimension(self, attitude_service):
        attitude_service.upsert("c1", "u1", "user", {})
        with pytest.raises(InvalidDimensionError):
            attitude_service.update_dimension("c1", "u1", "user", "mood", 5.0)

    def test_emits_attitude_changed(self, attitude_service, bus):
        attitude_service.upsert("c1", "u1", "user", {"love": 100.0, "trust": 100.0, "joy": 100.0})
        events = _collect(bus, EventTypes.ATTITUDE_CHANGED)

        record = attitude_service.update_dimension("c1", "u1", "user", "love", -100.0)

        assert len(events) == 1
        data = events[0].data
        assert data["companion_id"] == "c1"
        assert data["target_id"] == "u1"
        assert data["old_score"] == 18.75
        assert data["new_score"] == record.relationship_score == 12.5
        assert data["old_label"] == data["new_label"] == RelationshipLabel.NEUTRAL.value

    def test_no_event_on_failure(self, attitude_service, bus):
        events = _collect(bus, EventTypes.ATTITUDE_CHANGED)
        with pytest.raises(NotFoundError):
            attitude_service.update_dimension("c1", "u1", "user", "trust", 5.0)
        assert events == []

    @pytest.mark.parametrize("delta", [math.nan, math.inf, -math.inf])
    def test_non_finite_delta_is_rejected(self, attitude_service, bus, delta):
        attitude_service.upsert("c1", "u1", "user", {"trust": 10.0})
        events = _collect(bus, EventTypes.ATTITUDE_CHANGED)

        with pytest.raises(ValidationError):
            attitude_service.update_dimension("c1", "u1", "user", "trust", delta)

        assert attitude_service.get("c1", "u1", "user").trust == 10.0
        assert events == []


# ── seeding ──────────────────────────────────────────────────


class TestSeed:
    def test_seed_creates_neutral_record(self, attitude_service):
        record = attitude_service.seed("c1", "p1", "third_party", "positive", "friend")
        assert classify(record.relationship_score) == RelationshipLabel.NEUTRAL
        assert record.trust > 5.0

    def test_seed_is_idempotent(self, attitude_service, bus):
        events = _collect(bus, EventTypes.ATTITUDE_CHANGED)
        first = attitude_service.seed("c1", "p1", "third_party")
        attitude_service.update_dimension("c1", "p1", "third_party", "joy", 10.0)
        second = attitude_service.seed("c1", "p1", "third_party", "negative")

        assert second.joy == first.joy + 10.0
        assert [e.data["reason"] for e in events] == ["seed", "joy delta"]

    def test_seed_rejects_unknown_valence(self, attitude_service):
        with pytest.raises(ValidationError):
            attitude_service.seed("c1", "p1", "third_party", "ecstatic")

    def test_seed_user(self, attitude_service):
        record = attitude_service.seed_user("c1", "u1", persona="flirty and curious")
        assert record.target_type == TargetType.USER
        assert record.lust == 45.0
        assert attitude_service.seed_user("c1", "u1", persona="cold") == record


# ── memories ─────────────────────────────────────────────────


class TestMemories:
    def test_large_change_is_remembered(self, attitude_service, bus, db_session):
        attitude_service.upsert("c1", "p1", "third_party", {"trust": 50.0})
        events = _collect(bus, EventTypes.ATTITUDE_MEMORY_RECORDED)

        attitude_service.apply_deltas(
            "c1", "p1", "third_party", {"trust": -30.0, "anger": 25.0}, context="argument"
        )

        memories = attitude_service.priority_memories("c1")
        assert len(memories) == 1
        assert memories[0].memory_type == "Betrayal"
        assert memories[0].context == "argument"
        assert len(events) == 1
        assert db_session.query(AttitudeMemoryModel).count() == 1

    def test_small_change_is_not_remembered(self, attitude_service):
        attitude_service.upsert("c1", "p1", "third_party", {})
        attitude_service.update_dimension("c1", "p1", "third_party", "joy", 2.0)
        assert attitude_service.priority_memories("c1") == []

    def test_priority_order_and_limit(self, attitude_service):
        attitude_service.upsert("c1", "p1", "third_party", {})
        attitude_service.apply_deltas("c1", "p1", "third_party", {"curiosity": 15.0})
        attitude_service.apply_deltas("c1", "p1", "third_party", {"trust": 30.0, "attraction": 20.0})

        memories = attitude_service.priority_memories("c1", limit=5)
        assert memories[0].memory_type == "BondingMoment"
        assert memories[0].priority_score >= memories[-1].priority_score
        assert len(attitude_service.priority_memories("c1", limit=1)) == 1


# ── concurrency ──────────────────────────────────────────────


class TestConcurrency:
    def test_concurrent_deltas_are_not_lost(self, tmp_path):
        engine = make_engine(f"sqlite:///{tmp_path / 'bonds.db'}")
        Base.metadata.create_all(engine)
        service = AttitudeService(make_session_factory(engine), EventBus(), retry_backoff=0.01)
        service.upsert("c1", "u1", "user", {})

        def worker():
            for _ in range(10):
                service.update_dimension("c1", "u1", "user", "trust", 1.0)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert service.get("c1", "u1", "user").trust == 80.0
        engine.dispose()
