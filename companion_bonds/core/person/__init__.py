"""Person detection core package — public API"""

from companion_bonds.core.person.models import (
    Candidate,
    PersonMemory,
    PersonMemoryType,
    ResolvedPerson,
    ThirdPartyPerson,
    normalize_name,
)
from companion_bonds.core.person.matchers import (
    CueMatcher,
    KnownNameMatcher,
    TitleMatcher,
)
from companion_bonds.core.person.detector import detect

__all__ = [
    "Candidate",
    "PersonMemory",
    "PersonMemoryType",
    "ResolvedPerson",
    "ThirdPartyPerson",
    "normalize_name",
    "CueMatcher",
    "KnownNameMatcher",
    "TitleMatcher",
    "detect",
]
