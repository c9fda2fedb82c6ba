"""Person Service — third-party directory

Identity is (companion_id, normalized name). A re-mention bumps the count
and only fills fields that are still empty; hints that disagree with known
facts are kept as evidence instead of overwriting them.
"""

import uuid
from typing import Dict, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from companion_bonds.config import settings
from companion_bonds.core.attitude.scoring import check_value
from companion_bonds.core.errors import NotFoundError, ValidationError, validate_id
from companion_bonds.core.event_bus import EngineEvent, EventBus
from companion_bonds.core.event_types import EventTypes
from companion_bonds.core.locks import KeyedLock
from companion_bonds.core.logging import get_logger
from companion_bonds.core.person.models import (
    Candidate,
    PersonMemory,
    PersonMemoryType,
    ResolvedPerson,
    ThirdPartyPerson,
    normalize_name,
)
from companion_bonds.db.models import PersonMemoryModel, ThirdPartyPersonModel, utcnow
from companion_bonds.db.retry import run_in_transaction

logger = get_logger(__name__)

# candidate attribute → person column
_HINT_FIELDS = (
    ("relationship_hint", "relationship_to_user"),
    ("occupation_hint", "occupation"),
)


class PersonService:
    """Resolve, look up and list third parties"""

    def __init__(
        self,
        session_factory: sessionmaker,
        event_bus: EventBus,
        locks: Optional[KeyedLock] = None,
        retry_attempts: Optional[int] = None,
        retry_backoff: Optional[float] = None,
    ) -> None:
        self._sessions = session_factory
        self._bus = event_bus
        self._locks = locks or KeyedLock()
        self._attempts = retry_attempts or settings.PERSISTENCE_RETRY_ATTEMPTS
        self._backoff = (
            settings.PERSISTENCE_RETRY_BACKOFF if retry_backoff is None else retry_backoff
        )

    def _run(self, work, label: str):
        return run_in_transaction(
            self._sessions, work, attempts=self._attempts, backoff=self._backoff, label=label
        )

    @staticmethod
    def _row_by_name(
        session: Session, normalized: str, companion_id: Optional[str]
    ) -> Optional[ThirdPartyPersonModel]:
        query = select(ThirdPartyPersonModel).where(
            ThirdPartyPersonModel.normalized_name == normalized
        )
        if companion_id is not None:
            query = query.where(ThirdPartyPersonModel.companion_id == companion_id)
        query = query.order_by(ThirdPartyPersonModel.created_at)
        return session.execute(query).scalars().first()

    # ── resolve ──────────────────────────────────────────────

    def resolve(self, companion_id: str, candidate: Candidate) -> ResolvedPerson:
        """Find or create the person a candidate refers to."""
        validate_id(companion_id, "companion_id")
        display = " ".join((candidate.name or "").split())
        normalized = normalize_name(display)
        if not normalized:
            raise ValidationError("Person name must not be empty")

        def work(session: Session) -> ResolvedPerson:
            now = utcnow()
            row = self._row_by_name(session, normalized, companion_id)
            if row is None:
                row = ThirdPartyPersonModel(
                    id=str(uuid.uuid4()),
                    companion_id=companion_id,
                    name=display,
                    normalized_name=normalized,
                    relationship_to_user=candidate.relationship_hint,
                    occupation=candidate.occupation_hint,
                    personality_traits=list(candidate.trait_hints),
                    mention_count=1,
                    importance_score=_clamp_importance(candidate.importance_score),
                    evidence=[],
                    first_mentioned=now,
                    last_mentioned=now,
                    created_at=now,
                    updated_at=now,
                )
                session.add(row)
                session.flush()
                return ResolvedPerson(person=row.to_domain(), created=True)

            self._merge(row, candidate, now)
            session.flush()
            return ResolvedPerson(person=row.to_domain(), created=False)

        with self._locks.hold(("person", companion_id, normalized)):
            resolved = self._run(work, "person resolve")

        person = resolved.person
        if resolved.created:
            logger.info(f"Person created: {person.name} ({person.id}) for {companion_id}")
            event_type = EventTypes.PERSON_DETECTED
        else:
            logger.info(
                f"Person mentioned: {person.name} ({person.id}) count={person.mention_count}"
            )
            event_type = EventTypes.PERSON_MENTIONED
        self._bus.emit(
            EngineEvent(
                event_type=event_type,
                data={
                    "companion_id": companion_id,
                    "person_id": person.id,
                    "name": person.name,
                    "mention_count": person.mention_count,
                },
                source="person_service",
            )
        )
        return resolved

    @staticmethod
    def _merge(row: ThirdPartyPersonModel, candidate: Candidate, now) -> None:
        row.mention_count += 1
        row.last_mentioned = now
        row.updated_at = now
        row.importance_score = max(row.importance_score, _clamp_importance(candidate.importance_score))

        evidence: List[Dict[str, str]] = list(row.evidence or [])
        for hint_attr, column in _HINT_FIELDS:
            hint = getattr(candidate, hint_attr)
            if not hint:
                continue
            current = getattr(row, column)
            if current is None:
                setattr(row, column, hint)
            elif current != hint:
                evidence.append({"field": column, "value": hint, "observed_at": now.isoformat()})

        traits = list(row.personality_traits or [])
        for trait in candidate.trait_hints:
            if trait not in traits:
                traits.append(trait)

        # JSON columns need a new object to register as changed
        row.personality_traits = traits
        row.evidence = evidence

    # ── queries ──────────────────────────────────────────────

    def get(self, name: str, companion_id: Optional[str] = None) -> ThirdPartyPerson:
        """Look up by name, case-insensitively. Raises NotFoundError."""
        normalized = normalize_name(name or "")
        if companion_id is not None:
            validate_id(companion_id, "companion_id")

        def work(session: Session) -> ThirdPartyPerson:
            row = self._row_by_name(session, normalized, companion_id)
            if row is None:
                raise NotFoundError(f"Person not found: {name!r}")
            return row.to_domain()

        return self._run(work, "person get")

    def get_by_id(self, person_id: str) -> ThirdPartyPerson:
        validate_id(person_id, "person_id")

        def work(session: Session) -> ThirdPartyPerson:
            row = session.get(ThirdPartyPersonModel, person_id)
            if row is None:
                raise NotFoundError(f"Person not found: {person_id}")
            return row.to_domain()

        return self._run(work, "person get_by_id")

    def list(self, companion_id: str) -> List[ThirdPartyPerson]:
        """Most important people first"""
        validate_id(companion_id, "companion_id")

        def work(session: Session) -> List[ThirdPartyPerson]:
            rows = session.execute(
                select(ThirdPartyPersonModel)
                .where(ThirdPartyPersonModel.companion_id == companion_id)
                .order_by(
                    ThirdPartyPersonModel.importance_score.desc(),
                    ThirdPartyPersonModel.mention_count.desc(),
                    ThirdPartyPersonModel.name,
                )
            ).scalars()
            return [row.to_domain() for row in rows]

        return self._run(work, "person list")

    def known_names(self, companion_id: str) -> List[str]:
        validate_id(companion_id, "companion_id")

        def work(session: Session) -> List[str]:
            return list(
                session.execute(
                    select(ThirdPartyPersonModel.name).where(
                        ThirdPartyPersonModel.companion_id == companion_id
                    )
                ).scalars()
            )

        return self._run(work, "person names")

    def update_importance(
        self, person_id: str, importance: float, companion_id: Optional[str] = None
    ) -> ThirdPartyPerson:
        """Set importance, clamped to [0, 1]. companion_id scopes the lookup."""
        validate_id(person_id, "person_id")
        importance = check_value("importance", importance)

        def work(session: Session) -> ThirdPartyPerson:
            row = session.get(ThirdPartyPersonModel, person_id)
            if row is None or companion_id not in (None, row.companion_id):
                raise NotFoundError(f"Person not found: {person_id}")
            row.importance_score = _clamp_importance(importance)
            row.updated_at = utcnow()
            session.flush()
            return row.to_domain()

        person = self._run(work, "person importance")
        logger.info(f"Person importance: {person.name} → {person.importance_score}")
        return person

    # ── memories ─────────────────────────────────────────────

    def add_memory(
        self,
        companion_id: str,
        person_id: str,
        memory_type: Union[str, PersonMemoryType],
        content: str,
        importance: float = 0.5,
        emotional_valence: float = 0.0,
    ) -> PersonMemory:
        """Remember something about a person of this companion.

        Importance is clamped to [0, 1] and valence to [-1, 1].
        """
        validate_id(companion_id, "companion_id")
        validate_id(person_id, "person_id")
        try:
            kind = PersonMemoryType(memory_type)
        except ValueError:
            raise ValidationError(f"Unknown memory type: {memory_type!r}") from None
        text = (content or "").strip()
        if not text:
            raise ValidationError("Memory content must not be empty")
        importance = _clamp_importance(check_value("importance", importance))
        valence = max(-1.0, min(1.0, check_value("emotional_valence", emotional_valence)))

        def work(session: Session) -> PersonMemory:
            self._owned_row(session, companion_id, person_id)
            row = PersonMemoryModel(
                person_id=person_id,
                companion_id=companion_id,
                memory_type=kind.value,
                content=text,
                importance=importance,
                emotional_valence=valence,
                created_at=utcnow(),
            )
            session.add(row)
            session.flush()
            return row.to_domain()

        memory = self._run(work, "person memory")
        logger.info(f"Person memory: {person_id} [{memory.memory_type.value}] {memory.content[:60]}")
        self._bus.emit(
            EngineEvent(
                event_type=EventTypes.PERSON_MEMORY_RECORDED,
                data={
                    "companion_id": companion_id,
                    "person_id": person_id,
                    "memory_id": memory.id,
                    "memory_type": memory.memory_type.value,
                    "importance": memory.importance,
                },
                source="person_service",
            )
        )
        return memory

    def memories(
        self, companion_id: str, person_id: str, limit: Optional[int] = None
    ) -> List[PersonMemory]:
        """Most important first, newest first among equals."""
        validate_id(companion_id, "companion_id")
        validate_id(person_id, "person_id")

        def work(session: Session) -> List[PersonMemory]:
            self._owned_row(session, companion_id, person_id)
            query = (
                select(PersonMemoryModel)
                .where(PersonMemoryModel.person_id == person_id)
                .order_by(
                    PersonMemoryModel.importance.desc(),
                    PersonMemoryModel.created_at.desc(),
                    PersonMemoryModel.id.desc(),
                )
            )
            if limit is not None:
                query = query.limit(limit)
            return [row.to_domain() for row in session.execute(query).scalars()]

        return self._run(work, "person memories")

    @staticmethod
    def _owned_row(session: Session, companion_id: str, person_id: str) -> ThirdPartyPersonModel:
        row = session.get(ThirdPartyPersonModel, person_id)
        if row is None or row.companion_id != companion_id:
            raise NotFoundError(f"Person not found: {person_id}")
        return row


def _clamp_importance(value: float) -> float:
    return max(0.0, min(1.0, float(value)))
