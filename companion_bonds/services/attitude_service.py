"""Attitude Service — connects attitude core and DB

Every mutation runs as one transaction under the per-key lock for its
(companion, target, type). Events are published after commit.
"""

from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple, Union

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from companion_bonds.config import settings
from companion_bonds.core.attitude.classifier import classify
from companion_bonds.core.attitude.memories import detect_significant_change
from companion_bonds.core.attitude.models import (
    AttitudeMemory,
    AttitudeRecord,
    TargetType,
    Valence,
)
from companion_bonds.core.attitude.scoring import (
    apply_deltas as apply_record_deltas,
    check_dimension,
    check_value,
    normalize_record,
)
from companion_bonds.core.attitude.seeding import build_seed_record, build_user_record
from companion_bonds.core.errors import NotFoundError, ValidationError, validate_id
from companion_bonds.core.event_bus import EngineEvent, EventBus
from companion_bonds.core.event_types import EventTypes
from companion_bonds.core.locks import KeyedLock
from companion_bonds.core.logging import get_logger
from companion_bonds.db.models import AttitudeMemoryModel, AttitudeModel, utcnow
from companion_bonds.db.retry import run_in_transaction

logger = get_logger(__name__)

AttitudeKey = Tuple[str, str, TargetType]


@dataclass
class AttitudeChange:
    """Committed (or about to be committed) attitude mutation"""

    before: Optional[AttitudeRecord]
    after: AttitudeRecord
    memory: Optional[AttitudeMemory] = None


def coerce_target_type(target_type: Union[str, TargetType]) -> TargetType:
    try:
        return TargetType(target_type)
    except ValueError:
        raise ValidationError(f"Unknown target_type: {target_type!r}") from None


def coerce_valence(valence: Optional[Union[str, Valence]]) -> Optional[Valence]:
    if not valence:
        return None
    try:
        return Valence(valence)
    except ValueError:
        raise ValidationError(f"Unknown valence: {valence!r}") from None


class AttitudeService:
    """Attitude CRUD, dimension deltas, seeding and change memories"""

    def __init__(
        self,
        session_factory: sessionmaker,
        event_bus: EventBus,
        locks: Optional[KeyedLock] = None,
        retry_attempts: Optional[int] = None,
        retry_backoff: Optional[float] = None,
        seed_max_offset: Optional[float] = None,
        memory_threshold: Optional[float] = None,
    ) -> None:
        self._sessions = session_factory
        self._bus = event_bus
        self._locks = locks or KeyedLock()
        self._attempts = retry_attempts or settings.PERSISTENCE_RETRY_ATTEMPTS
        self._backoff = (
            settings.PERSISTENCE_RETRY_BACKOFF if retry_backoff is None else retry_backoff
        )
        self._seed_max_offset = (
            settings.SEED_MAX_OFFSET if seed_max_offset is None else seed_max_offset
        )
        self._memory_threshold = (
            settings.ATTITUDE_MEMORY_THRESHOLD if memory_threshold is None else memory_threshold
        )

    @property
    def locks(self) -> KeyedLock:
        return self._locks

    # ── helpers ──────────────────────────────────────────────

    def _run(self, work, label: str):
        return run_in_transaction(
            self._sessions, work, attempts=self._attempts, backoff=self._backoff, label=label
        )

    @staticmethod
    def key(companion_id: str, target_id: str, target_type: Union[str, TargetType]) -> AttitudeKey:
        """Validated identity triple"""
        return (
            validate_id(companion_id, "companion_id"),
            validate_id(target_id, "target_id"),
            coerce_target_type(target_type),
        )

    @staticmethod
    def lock_key(key: AttitudeKey) -> tuple:
        companion_id, target_id, target_type = key
        return ("attitude", companion_id, target_id, target_type.value)

    @staticmethod
    def _row(session: Session, key: AttitudeKey) -> Optional[AttitudeModel]:
        companion_id, target_id, target_type = key
        return session.execute(
            select(AttitudeModel).where(
                AttitudeModel.companion_id == companion_id,
                AttitudeModel.target_id == target_id,
                AttitudeModel.target_type == target_type.value,
            )
        ).scalar_one_or_none()

    @staticmethod
    def _insert(session: Session, record: AttitudeRecord) -> AttitudeRecord:
        now = utcnow()
        row = AttitudeModel(
            companion_id=record.companion_id,
            target_id=record.target_id,
            target_type=record.target_type.value,
            created_at=now,
            last_updated=now,
        )
        row.assign(record)
        session.add(row)
        session.flush()
        return row.to_domain()

    # ── queries ──────────────────────────────────────────────

    def get(
        self, companion_id: str, target_id: str, target_type: Union[str, TargetType]
    ) -> AttitudeRecord:
        """Raises NotFoundError if the record does not exist."""
        key = self.key(companion_id, target_id, target_type)

        def work(session: Session) -> AttitudeRecord:
            row = self._row(session, key)
            if row is None:
                raise NotFoundError(f"No attitude for {key[0]} → {key[2].value}:{key[1]}")
            return row.to_domain()

        return self._run(work, "attitude get")

    def find(
        self, companion_id: str, target_id: str, target_type: Union[str, TargetType]
    ) -> Optional[AttitudeRecord]:
        try:
            return self.get(companion_id, target_id, target_type)
        except NotFoundError:
            return None

    def list_for_companion(self, companion_id: str) -> List[AttitudeRecord]:
        """All records of a companion, best relationship first"""
        validate_id(companion_id, "companion_id")

        def work(session: Session) -> List[AttitudeRecord]:
            rows = session.execute(
                select(AttitudeModel)
                .where(AttitudeModel.companion_id == companion_id)
                .order_by(AttitudeModel.relationship_score.desc(), AttitudeModel.id)
            ).scalars()
            return [row.to_domain() for row in rows]

        return self._run(work, "attitude list")

    def priority_memories(self, companion_id: str, limit: int = 10) -> List[AttitudeMemory]:
        """Most important remembered changes, highest priority first"""
        validate_id(companion_id, "companion_id")

        def work(session: Session) -> List[AttitudeMemory]:
            rows = session.execute(
                select(AttitudeMemoryModel)
                .where(AttitudeMemoryModel.companion_id == companion_id)
                .order_by(
                    AttitudeMemoryModel.priority_score.desc(),
                    AttitudeMemoryModel.id.desc(),
                )
                .limit(max(0, limit))
            ).scalars()
            return [row.to_domain() for row in rows]

        return self._run(work, "attitude memories")

    # ── mutations ────────────────────────────────────────────

    def upsert(
        self,
        companion_id: str,
        target_id: str,
        target_type: Union[str, TargetType],
        values: Mapping[str, float],
    ) -> AttitudeRecord:
        """Create or overwrite the given dimensions; values are clamped."""
        key = self.key(companion_id, target_id, target_type)
        values = {
            check_dimension(name): check_value(name, value) for name, value in values.items()
        }

        def work(session: Session) -> AttitudeChange:
            row = self._row(session, key)
            if row is None:
                record = normalize_record(
                    AttitudeRecord(
                        companion_id=key[0], target_id=key[1], target_type=key[2], **values
                    )
                )
                return AttitudeChange(before=None, after=self._insert(session, record))

            before = row.to_domain()
            after = normalize_record(before.with_values(**values))
            return self._write(session, row, before, after, context="upsert")

        with self._locks.hold(self.lock_key(key)):
            change = self._run(work, "attitude upsert")
        self.publish(change, reason="upsert")
        return change.after

    def update_dimension(
        self,
        companion_id: str,
        target_id: str,
        target_type: Union[str, TargetType],
        dimension: str,
        delta: float,
    ) -> AttitudeRecord:
        """Atomic read-clamp-write of one dimension."""
        return self.apply_deltas(
            companion_id, target_id, target_type, {dimension: delta}, context=f"{dimension} delta"
        )

    def apply_deltas(
        self,
        companion_id: str,
        target_id: str,
        target_type: Union[str, TargetType],
        deltas: Mapping[str, float],
        context: str = "",
    ) -> AttitudeRecord:
        """Several dimension deltas in one transaction."""
        key = self.key(companion_id, target_id, target_type)
        for name, delta in deltas.items():
            check_dimension(name)
            check_value(name, delta)

        with self._locks.hold(self.lock_key(key)):
            change = self._run(
                lambda session: self.apply_in_session(session, key, deltas, context),
                "attitude delta",
            )
        self.publish(change, reason=context or "delta")
        return change.after

    def load_in_session(self, session: Session, key: AttitudeKey) -> AttitudeRecord:
        """Current record inside a caller's transaction. Raises NotFoundError."""
        row = self._row(session, key)
        if row is None:
            raise NotFoundError(f"No attitude for {key[0]} → {key[2].value}:{key[1]}")
        return row.to_domain()

    def apply_in_session(
        self,
        session: Session,
        key: AttitudeKey,
        deltas: Mapping[str, float],
        context: str = "",
    ) -> AttitudeChange:
        """Apply deltas inside a caller's transaction; nothing is committed.

        The caller holds the attitude lock and calls publish() after commit.
        """
        row = self._row(session, key)
        if row is None:
            raise NotFoundError(f"No attitude for {key[0]} → {key[2].value}:{key[1]}")
        before = row.to_domain()
        after = apply_record_deltas(before, deltas)
        return self._write(session, row, before, after, context=context)

    def _write(
        self,
        session: Session,
        row: AttitudeModel,
        before: AttitudeRecord,
        after: AttitudeRecord,
        context: str,
    ) -> AttitudeChange:
        row.assign(after)
        row.last_updated = utcnow()

        memory = detect_significant_change(before, after, self._memory_threshold, context)
        if memory is not None:
            memory_row = AttitudeMemoryModel(
                companion_id=memory.companion_id,
                target_id=memory.target_id,
                target_type=memory.target_type.value,
                memory_type=memory.memory_type,
                description=memory.description,
                impact_score=memory.impact_score,
                priority_score=memory.priority_score,
                delta=memory.delta,
                context=memory.context,
                created_at=utcnow(),
            )
            session.add(memory_row)
            session.flush()
            memory = memory_row.to_domain()
        else:
            session.flush()

        return AttitudeChange(before=before, after=row.to_domain(), memory=memory)

    def seed(
        self,
        companion_id: str,
        target_id: str,
        target_type: Union[str, TargetType],
        valence_hint: Optional[Union[str, Valence]] = None,
        relationship_hint: Optional[str] = None,
    ) -> AttitudeRecord:
        """Default record nudged by hints; an existing record is returned as is."""
        key = self.key(companion_id, target_id, target_type)
        valence = coerce_valence(valence_hint)

        def work(session: Session) -> AttitudeChange:
            row = self._row(session, key)
            if row is not None:
                existing = row.to_domain()
                return AttitudeChange(before=existing, after=existing)
            record = build_seed_record(
                key[0], key[1], key[2], valence, relationship_hint, self._seed_max_offset
            )
            return AttitudeChange(before=None, after=self._insert(session, record))

        with self._locks.hold(self.lock_key(key)):
            change = self._run(work, "attitude seed")
        if change.before is None:
            self.publish(change, reason="seed")
        return change.after

    def seed_user(self, companion_id: str, user_id: str, persona: str = "") -> AttitudeRecord:
        """Starting attitude toward the primary user, shaped by persona keywords"""
        key = self.key(companion_id, user_id, TargetType.USER)

        def work(session: Session) -> AttitudeChange:
            row = self._row(session, key)
            if row is not None:
                existing = row.to_domain()
                return AttitudeChange(before=existing, after=existing)
            record = build_user_record(key[0], key[1], persona)
            return AttitudeChange(before=None, after=self._insert(session, record))

        with self._locks.hold(self.lock_key(key)):
            change = self._run(work, "attitude seed user")
        if change.before is None:
            self.publish(change, reason="seed")
        return change.after

    # ── events ───────────────────────────────────────────────

    def publish(self, change: AttitudeChange, reason: str = "") -> None:
        """Emit attitude events for a committed change."""
        after = change.after
        old_score = change.before.relationship_score if change.before else None
        logger.info(
            f"Attitude {reason or 'changed'}: {after.companion_id} → "
            f"{after.target_type.value}:{after.target_id} "
            f"score {old_score} → {after.relationship_score}"
        )
        self._bus.emit(
            EngineEvent(
                event_type=EventTypes.ATTITUDE_CHANGED,
                data={
                    "companion_id": after.companion_id,
                    "target_id": after.target_id,
                    "target_type": after.target_type.value,
                    "old_score": old_score,
                    "new_score": after.relationship_score,
                    "old_label": classify(old_score).value if old_score is not None else None,
                    "new_label": classify(after.relationship_score).value,
                    "reason": reason,
                },
                source="attitude_service",
            )
        )
        if change.memory is not None:
            self._bus.emit(
                EngineEvent(
                    event_type=EventTypes.ATTITUDE_MEMORY_RECORDED,
                    data={
                        "companion_id": change.memory.companion_id,
                        "target_id": change.memory.target_id,
                        "memory_type": change.memory.memory_type,
                        "impact_score": change.memory.impact_score,
                        "priority_score": change.memory.priority_score,
                    },
                    source="attitude_service",
                )
            )

