"""Significant attitude change detection

Turns a before/after pair into an AttitudeMemory when the change is large
enough to be worth recalling later.
"""

import math
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from companion_bonds.core.attitude.models import AttitudeMemory, AttitudeRecord
from companion_bonds.core.attitude.scoring import diff_dimensions

# ── Impact weights (weighted Euclidean distance) ─────────────
IMPACT_WEIGHTS: Dict[str, float] = {
    "attraction": 1.2,
    "trust": 1.5,
    "fear": 1.1,
    "anger": 1.3,
    "joy": 1.0,
    "sorrow": 1.0,
    "disgust": 1.1,
    "surprise": 0.8,
    "curiosity": 0.9,
    "respect": 1.4,
    "suspicion": 1.2,
    "gratitude": 1.1,
    "jealousy": 1.3,
    "empathy": 1.2,
    "lust": 1.0,
    "love": 1.3,
    "anxiety": 1.0,
    "butterflies": 0.9,
    "submissiveness": 0.8,
    "dominance": 0.8,
}

# ── Memory type rules, first match wins ──────────────────────
# (memory_type, predicate over delta)
_TYPE_RULES: List[Tuple[str, Callable[[Mapping[str, float]], bool]]] = [
    ("BondingMoment", lambda d: d["trust"] > 15 and d["attraction"] > 10),
    ("Betrayal", lambda d: d["trust"] < -20 or d["anger"] > 20),
    ("AttractionSpike", lambda d: d["attraction"] > 20),
    ("ThreatDetection", lambda d: d["fear"] > 15 and d["suspicion"] > 10),
    ("RespectGained", lambda d: d["respect"] > 15),
    ("RespectLost", lambda d: d["respect"] < -15),
    ("ConflictMoment", lambda d: d["anger"] > 15),
    ("JoyfulMemory", lambda d: d["joy"] > 15 and d["gratitude"] > 10),
    ("SadMoment", lambda d: d["sorrow"] > 15),
]
_POWER_SHIFT_IMPACT = 25.0

_TYPE_PRIORITY: Dict[str, float] = {
    "BondingMoment": 95.0,
    "Betrayal": 95.0,
    "PowerShift": 90.0,
    "AttractionSpike": 90.0,
    "ThreatDetection": 85.0,
    "ConflictMoment": 85.0,
    "RespectGained": 80.0,
    "RespectLost": 80.0,
    "JoyfulMemory": 70.0,
    "SadMoment": 70.0,
}
_DEFAULT_TYPE_PRIORITY = 60.0

_DESCRIPTIONS: Dict[str, str] = {
    "BondingMoment": "A bonding moment occurred (trust {trust:+.1f}, attraction {attraction:+.1f})",
    "Betrayal": "Trust was broken (trust {trust:+.1f}, anger {anger:+.1f})",
    "AttractionSpike": "Strong attraction developed ({attraction:+.1f})",
    "ThreatDetection": "Threat response triggered (fear {fear:+.1f}, suspicion {suspicion:+.1f})",
    "PowerShift": "Significant shift in the relationship (impact {impact:.1f})",
    "ConflictMoment": "Conflict arose (anger {anger:+.1f})",
    "RespectGained": "Respect increased ({respect:+.1f})",
    "RespectLost": "Respect was lost ({respect:+.1f})",
    "JoyfulMemory": "Joyful experience shared (joy {joy:+.1f}, gratitude {gratitude:+.1f})",
    "SadMoment": "Sadness experienced (sorrow {sorrow:+.1f})",
    "SignificantChange": "Significant attitude change (impact {impact:.1f})",
}


def impact_score(delta: Mapping[str, float]) -> float:
    """Weighted Euclidean length of a delta."""
    return math.sqrt(
        sum((float(delta.get(name, 0.0)) * w) ** 2 for name, w in IMPACT_WEIGHTS.items())
    )


def classify_memory_type(delta: Mapping[str, float], impact: float) -> str:
    for memory_type, rule in _TYPE_RULES:
        if rule(delta):
            return memory_type
    if impact > _POWER_SHIFT_IMPACT:
        return "PowerShift"
    return "SignificantChange"


def priority_score(delta: Mapping[str, float], impact: float, memory_type: str) -> float:
    """0..100 blend of recency, impact, type and relevance."""
    recency = 100.0
    impact_part = min(impact / 50.0 * 100.0, 100.0)
    type_part = _TYPE_PRIORITY.get(memory_type, _DEFAULT_TYPE_PRIORITY)
    critical = abs(delta["trust"]) + abs(delta["attraction"]) + abs(delta["respect"])
    relevance = min(critical / 30.0 * 100.0, 100.0)
    return round(
        recency * 0.25 + impact_part * 0.4 + type_part * 0.2 + relevance * 0.15, 2
    )


def detect_significant_change(
    before: AttitudeRecord,
    after: AttitudeRecord,
    threshold: float = 10.0,
    context: str = "",
) -> Optional[AttitudeMemory]:
    """AttitudeMemory for before → after, or None below threshold."""
    delta = diff_dimensions(before, after)
    impact = impact_score(delta)
    if impact <= threshold:
        return None

    memory_type = classify_memory_type(delta, impact)
    description = _DESCRIPTIONS[memory_type].format(impact=impact, **delta)
    return AttitudeMemory(
        companion_id=after.companion_id,
        target_id=after.target_id,
        target_type=after.target_type,
        memory_type=memory_type,
        description=description,
        impact_score=round(impact, 2),
        priority_score=priority_score(delta, impact, memory_type),
        delta={k: v for k, v in delta.items() if v != 0.0},
        context=context,
    )
