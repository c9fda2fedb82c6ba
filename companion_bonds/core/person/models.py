"""Person domain models"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from companion_bonds.core.attitude.models import Valence


def normalize_name(name: str) -> str:
    """Identity form of a name: casefolded, whitespace collapsed."""
    return " ".join(name.split()).casefold()


@dataclass
class Candidate:
    """A person detected in one piece of text"""

    name: str
    relationship_hint: Optional[str] = None
    occupation_hint: Optional[str] = None
    trait_hints: List[str] = field(default_factory=list)
    emotional_valence_hint: Optional[Valence] = None
    cues: List[str] = field(default_factory=list)
    importance_score: float = 0.5

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.name)


@dataclass
class ThirdPartyPerson:
    """Someone other than the user that the companion knows about"""

    id: str
    companion_id: str
    name: str
    normalized_name: str
    relationship_to_user: Optional[str] = None
    relationship_to_companion: Optional[str] = None
    occupation: Optional[str] = None
    personality_traits: List[str] = field(default_factory=list)
    physical_description: Optional[str] = None
    mention_count: int = 1
    importance_score: float = 0.5
    evidence: List[Dict[str, str]] = field(default_factory=list)
    first_mentioned: Optional[datetime] = None
    last_mentioned: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class ResolvedPerson:
    """Result of PersonService.resolve"""

    person: ThirdPartyPerson
    created: bool


class PersonMemoryType(str, Enum):
    FACT = "fact"
    EVENT = "event"
    OPINION = "opinion"
    RELATIONSHIP_CHANGE = "relationship_change"


# valence hint → stored emotional valence in [-1, 1]
VALENCE_WEIGHTS: Dict[Valence, float] = {
    Valence.POSITIVE: 0.5,
    Valence.NEGATIVE: -0.5,
    Valence.CONCERNED: -0.2,
}


@dataclass
class PersonMemory:
    """Something the companion remembers about a third party"""

    id: int
    person_id: str
    companion_id: str
    memory_type: PersonMemoryType
    content: str
    importance: float = 0.5
    emotional_valence: float = 0.0
    created_at: Optional[datetime] = None
