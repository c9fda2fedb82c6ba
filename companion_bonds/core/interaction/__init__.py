"""Interaction core package — public API"""

from companion_bonds.core.interaction.models import (
    Band,
    Intent,
    IntentKind,
    Interaction,
    InteractionStatus,
    Outcome,
)
from companion_bonds.core.interaction.intent import (
    detect_intent,
    extract_planned_date,
    guess_interaction_type,
)
from companion_bonds.core.interaction.outcomes import (
    band_for,
    family_for,
    generate,
)

__all__ = [
    "Band",
    "Intent",
    "IntentKind",
    "Interaction",
    "InteractionStatus",
    "Outcome",
    "detect_intent",
    "extract_planned_date",
    "guess_interaction_type",
    "band_for",
    "family_for",
    "generate",
]
