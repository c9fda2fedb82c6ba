"""Attitude core tests: scoring, classification, seeding, memories"""

import pytest

from companion_bonds.core.attitude.classifier import classify
from companion_bonds.core.attitude.memories import (
    classify_memory_type,
    detect_significant_change,
    impact_score,
)
from companion_bonds.core.attitude.models import (
    DIMENSIONS,
    AttitudeRecord,
    RelationshipLabel,
    TargetType,
    Valence,
)
from companion_bonds.core.attitude.scoring import (
    NEGATIVE_DIMENSIONS,
    NEUTRAL_DIMENSIONS,
    POSITIVE_DIMENSIONS,
    apply_deltas,
    clamp_dimension,
    compute_relationship_score,
    net_impact,
    normalize_record,
)
from companion_bonds.core.attitude.seeding import (
    build_seed_record,
    build_user_record,
    seed_values,
)
from companion_bonds.core.errors import InvalidDimensionError, ValidationError


def _record(**values) -> AttitudeRecord:
    return normalize_record(
        AttitudeRecord(companion_id="c1", target_id="t1", target_type=TargetType.THIRD_PARTY, **values)
    )


# ── scoring ──────────────────────────────────────────────────


class TestScoring:
    def test_groups_cover_all_dimensions_once(self):
        groups = POSITIVE_DIMENSIONS + NEGATIVE_DIMENSIONS + NEUTRAL_DIMENSIONS
        assert sorted(groups) == sorted(DIMENSIONS)
        assert len(DIMENSIONS) == 20

    def test_baseline_scores_zero(self):
        assert compute_relationship_score({}) == 0.0

    def test_extremes_map_to_bounds(self):
        best = {name: 100.0 for name in POSITIVE_DIMENSIONS}
        best.update({name: -100.0 for name in NEGATIVE_DIMENSIONS})
        worst = {name: -100.0 for name in POSITIVE_DIMENSIONS}
        worst.update({name: 100.0 for name in NEGATIVE_DIMENSIONS})
        assert compute_relationship_score(best) == 100.0
        assert compute_relationship_score(worst) == -100.0

    def test_neutral_dimensions_do_not_move_score(self):
        values = {name: 100.0 for name in NEUTRAL_DIMENSIONS}
        assert compute_relationship_score(values) == 0.0

    def test_monotonic(self):
        low = compute_relationship_score({"trust": 10.0})
        high = compute_relationship_score({"trust": 20.0})
        assert high > low
        assert compute_relationship_score({"anger": 20.0}) < compute_relationship_score({"anger": 10.0})

    def test_formula(self):
        # (16 + 32) / 16 = 3.0 ; (16 - 32) / 16 = -1.0
        assert compute_relationship_score({"trust": 16.0, "joy": 32.0}) == 3.0
        assert compute_relationship_score({"trust": 16.0, "fear": 32.0}) == -1.0

    @pytest.mark.parametrize(
        "value, expected", [(150.0, 100.0), (-250.0, -100.0), (42.5, 42.5), (100.0, 100.0)]
    )
    def test_clamp(self, value, expected):
        assert clamp_dimension(value) == expected

    def test_clamping_law(self):
        """update(d) after update(d') == clamp(clamp(v + d') + d)"""
        record = _record(trust=90.0)
        once = apply_deltas(record, {"trust": 30.0})
        twice = apply_deltas(once, {"trust": -50.0})
        assert once.trust == 100.0
        assert twice.trust == 50.0

    def test_apply_deltas_recomputes_score(self):
        record = apply_deltas(_record(), {"joy": 32.0, "anger": 16.0})
        assert record.relationship_score == 1.0

    def test_apply_deltas_rejects_unknown_dimension(self):
        with pytest.raises(InvalidDimensionError):
            apply_deltas(_record(), {"happiness": 5.0})

    def test_invalid_dimension_is_value_error(self):
        with pytest.raises(ValueError):
            apply_deltas(_record(), {"bogus": 1.0})

    def test_apply_deltas_rejects_nan(self):
        with pytest.raises(ValidationError):
            apply_deltas(_record(), {"trust": float("nan")})

    def test_net_impact(self):
        assert net_impact({"joy": 7.5, "attraction": 2.5}) == 10.0
        assert net_impact({"trust": -12.0, "anger": 11.0}) == -23.0
        assert net_impact({"curiosity": 50.0}) == 0.0


# ── classifier ───────────────────────────────────────────────


class TestClassify:
    @pytest.mark.parametrize(
        "score, label",
        [
            (-100, RelationshipLabel.HOSTILE),
            (-61, RelationshipLabel.HOSTILE),
            (-60, RelationshipLabel.UNFRIENDLY),
            (-21, RelationshipLabel.UNFRIENDLY),
            (-20, RelationshipLabel.NEUTRAL),
            (0, RelationshipLabel.NEUTRAL),
            (20, RelationshipLabel.NEUTRAL),
            (21, RelationshipLabel.FRIENDLY),
            (60, RelationshipLabel.FRIENDLY),
            (61, RelationshipLabel.CLOSE),
            (80, RelationshipLabel.CLOSE),
            (81, RelationshipLabel.INTIMATE),
            (100, RelationshipLabel.INTIMATE),
        ],
    )
    def test_integer_boundaries(self, score, label):
        assert classify(score) == label

    @pytest.mark.parametrize(
        "score, label",
        [
            (20.5, RelationshipLabel.FRIENDLY),
            (-20.5, RelationshipLabel.UNFRIENDLY),
            (80.5, RelationshipLabel.INTIMATE),
            (60.01, RelationshipLabel.CLOSE),
            (-60.5, RelationshipLabel.HOSTILE),
        ],
    )
    def test_fractional_scores(self, score, label):
        assert classify(score) == label

    def test_out_of_range_is_clamped(self):
        assert classify(500) == RelationshipLabel.INTIMATE
        assert classify(-500) == RelationshipLabel.HOSTILE

    def test_total_over_range(self):
        for tenth in range(-1000, 1001):
            assert isinstance(classify(tenth / 10), RelationshipLabel)


# ── seeding ──────────────────────────────────────────────────


class TestSeeding:
    def test_third_party_baseline_is_neutral(self):
        record = build_seed_record("c1", "p1", TargetType.THIRD_PARTY)
        assert record.curiosity > 0
        assert classify(record.relationship_score) == RelationshipLabel.NEUTRAL

    @pytest.mark.parametrize("valence", [None, *Valence])
    @pytest.mark.parametrize(
        "relationship", [None, "friend", "best friend", "mother", "boss", "colleague", "wife", "stranger"]
    )
    def test_seeding_never_leaves_neutral_band(self, valence, relationship):
        record = build_seed_record("c1", "p1", TargetType.THIRD_PARTY, valence, relationship)
        assert classify(record.relationship_score) == RelationshipLabel.NEUTRAL

    def test_offsets_are_capped(self):
        # friend trust +15 and positive trust +5 combine but stay within the cap
        values = seed_values(TargetType.THIRD_PARTY, Valence.POSITIVE, "friend", max_offset=15.0)
        assert values["trust"] == 5.0 + 15.0
        assert values["joy"] == 15.0

    def test_negative_valence_lowers_score(self):
        neutral = build_seed_record("c1", "p1", TargetType.THIRD_PARTY)
        negative = build_seed_record("c1", "p1", TargetType.THIRD_PARTY, Valence.NEGATIVE)
        assert negative.relationship_score < neutral.relationship_score

    def test_family_hint_raises_trust(self):
        record = build_seed_record("c1", "p1", TargetType.THIRD_PARTY, relationship_hint="sister")
        assert record.trust > build_seed_record("c1", "p1", TargetType.THIRD_PARTY).trust

    def test_user_record_persona(self):
        plain = build_user_record("c1", "u1")
        shy = build_user_record("c1", "u1", persona="A shy librarian")
        assert plain.target_type == TargetType.USER
        assert shy.anxiety == plain.anxiety + 15.0
        assert shy.trust == plain.trust - 10.0

    def test_user_record_values_stay_non_negative(self):
        record = build_user_record("c1", "u1", persona="cold and distant, aggressive")
        assert all(0.0 <= value <= 100.0 for value in record.dimensions().values())


# ── memories ─────────────────────────────────────────────────


class TestMemories:
    def test_small_change_is_not_remembered(self):
        before = _record()
        after = apply_deltas(before, {"joy": 3.0})
        assert detect_significant_change(before, after, threshold=10.0) is None

    def test_bonding_moment(self):
        before = _record()
        after = apply_deltas(before, {"trust": 20.0, "attraction": 15.0})
        memory = detect_significant_change(before, after, threshold=10.0, context="dinner")
        assert memory is not None
        assert memory.memory_type == "BondingMoment"
        assert memory.context == "dinner"
        assert memory.delta == {"trust": 20.0, "attraction": 15.0}
        assert 0.0 < memory.priority_score <= 100.0

    def test_betrayal(self):
        before = _record(trust=50.0)
        after = apply_deltas(before, {"trust": -25.0})
        memory = detect_significant_change(before, after)
        assert memory.memory_type == "Betrayal"

    def test_power_shift_for_large_unclassified_change(self):
        delta = {name: 0.0 for name in DIMENSIONS}
        delta["curiosity"] = 40.0
        assert classify_memory_type(delta, impact_score(delta)) == "PowerShift"

    def test_impact_score_is_weighted(self):
        assert impact_score({"trust": 10.0}) == pytest.approx(15.0)
        assert impact_score({"joy": 10.0}) == pytest.approx(10.0)
