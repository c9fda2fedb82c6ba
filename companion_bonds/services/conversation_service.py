"""Conversation Service — one user message, end to end

detect persons → resolve in directory → seed attitudes for new people →
detect intent → plan or complete an interaction. A newly created person also
gets a "First mentioned" fact memory.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from companion_bonds.config import settings
from companion_bonds.core.attitude.models import AttitudeRecord, TargetType
from companion_bonds.core.errors import validate_id
from companion_bonds.core.interaction.intent import detect_intent
from companion_bonds.core.interaction.models import Intent, IntentKind, Interaction
from companion_bonds.core.logging import get_logger
from companion_bonds.core.person.detector import detect
from companion_bonds.core.person.models import (
    VALENCE_WEIGHTS,
    PersonMemoryType,
    ThirdPartyPerson,
)
from companion_bonds.services.attitude_service import AttitudeService
from companion_bonds.services.interaction_service import InteractionService
from companion_bonds.services.person_service import PersonService

logger = get_logger(__name__)

FIRST_MENTION_IMPORTANCE = 0.6


@dataclass
class TurnResult:
    """Everything one message changed or revealed"""

    persons: List[ThirdPartyPerson] = field(default_factory=list)
    attitudes: List[AttitudeRecord] = field(default_factory=list)
    intent: Intent = field(default_factory=Intent)
    interaction: Optional[Interaction] = None
    narrative: Optional[str] = None


class ConversationService:
    def __init__(
        self,
        attitude_service: AttitudeService,
        person_service: PersonService,
        interaction_service: InteractionService,
        user_name: Optional[str] = None,
    ) -> None:
        self._attitudes = attitude_service
        self._persons = person_service
        self._interactions = interaction_service
        self._user_name = user_name if user_name is not None else settings.USER_NAME

    def process_message(self, companion_id: str, text: str) -> TurnResult:
        validate_id(companion_id, "companion_id")
        result = TurnResult()
        if not isinstance(text, str) or not text.strip():
            return result

        exclude = [self._user_name] if self._user_name else []
        candidates = detect(
            text, known_names=self._persons.known_names(companion_id), exclude=exclude
        )

        for candidate in candidates:
            resolved = self._persons.resolve(companion_id, candidate)
            if resolved.created:
                self._attitudes.seed(
                    companion_id,
                    resolved.person.id,
                    TargetType.THIRD_PARTY,
                    valence_hint=candidate.emotional_valence_hint,
                    relationship_hint=candidate.relationship_hint,
                )
                self._persons.add_memory(
                    companion_id,
                    resolved.person.id,
                    PersonMemoryType.FACT,
                    f"First mentioned: {text.strip()}",
                    importance=FIRST_MENTION_IMPORTANCE,
                    emotional_valence=VALENCE_WEIGHTS.get(candidate.emotional_valence_hint, 0.0),
                )
            result.persons.append(resolved.person)

        result.intent = detect_intent(text, known_names=self._persons.known_names(companion_id))
        if result.intent.kind != IntentKind.NONE:
            result.interaction = self._interactions.handle_intent(companion_id, result.intent)
        if result.interaction is not None and result.interaction.is_completed:
            result.narrative = result.interaction.outcome

        for person in result.persons:
            record = self._attitudes.find(companion_id, person.id, TargetType.THIRD_PARTY)
            if record is not None:
                result.attitudes.append(record)

        logger.info(
            f"Turn for {companion_id}: {len(result.persons)} person(s), "
            f"intent={result.intent.kind.value}, "
            f"interaction={result.interaction.id if result.interaction else None}"
        )
        return result
