"""Interaction Service — planning and completing interactions

Completion is the only path that writes an outcome and touches attitudes.
It runs as a single transaction holding the interaction lock, then the
attitude lock; either everything commits or nothing does.
"""

import uuid
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from companion_bonds.config import settings
from companion_bonds.core.attitude.models import TargetType
from companion_bonds.core.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    validate_id,
)
from companion_bonds.core.event_bus import EngineEvent, EventBus
from companion_bonds.core.event_types import EventTypes
from companion_bonds.core.interaction.intent import describe
from companion_bonds.core.interaction.models import (
    Intent,
    IntentKind,
    Interaction,
    InteractionStatus,
    Outcome,
)
from companion_bonds.core.interaction.outcomes import generate
from companion_bonds.core.locks import KeyedLock
from companion_bonds.core.logging import get_logger
from companion_bonds.db.models import InteractionModel, utcnow
from companion_bonds.db.retry import run_in_transaction
from companion_bonds.services.attitude_service import AttitudeChange, AttitudeService
from companion_bonds.services.person_service import PersonService

logger = get_logger(__name__)

DEFAULT_INTERACTION_TYPE = "meet"


class InteractionService:
    """Plan, complete and query interactions with third parties"""

    def __init__(
        self,
        session_factory: sessionmaker,
        event_bus: EventBus,
        attitude_service: AttitudeService,
        person_service: PersonService,
        locks: Optional[KeyedLock] = None,
        retry_attempts: Optional[int] = None,
        retry_backoff: Optional[float] = None,
    ) -> None:
        self._sessions = session_factory
        self._bus = event_bus
        self._attitudes = attitude_service
        self._persons = person_service
        # completion takes attitude locks too, so share the attitude service's table
        self._locks = locks or attitude_service.locks
        self._attempts = retry_attempts or settings.PERSISTENCE_RETRY_ATTEMPTS
        self._backoff = (
            settings.PERSISTENCE_RETRY_BACKOFF if retry_backoff is None else retry_backoff
        )

    def _run(self, work, label: str):
        return run_in_transaction(
            self._sessions, work, attempts=self._attempts, backoff=self._backoff, label=label
        )

    # ── plan ─────────────────────────────────────────────────

    def plan(
        self,
        third_party_id: str,
        companion_id: str,
        interaction_type: str,
        description: str = "",
        planned_date: Optional[str] = None,
    ) -> Interaction:
        """New interaction in status planned. Raises NotFoundError for unknown people."""
        validate_id(companion_id, "companion_id")
        validate_id(third_party_id, "third_party_id")
        interaction_type = (interaction_type or "").strip()
        if not interaction_type:
            raise ValidationError("interaction_type must not be empty")

        person = self._persons.get_by_id(third_party_id)
        if person.companion_id != companion_id:
            raise NotFoundError(f"Person {third_party_id} is not known to {companion_id}")

        def work(session: Session) -> Interaction:
            now = utcnow()
            row = InteractionModel(
                id=str(uuid.uuid4()),
                companion_id=companion_id,
                third_party_id=third_party_id,
                interaction_type=interaction_type,
                description=description or describe(interaction_type, person.name),
                planned_date=planned_date,
                status=InteractionStatus.PLANNED.value,
                deltas={},
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.flush()
            return row.to_domain()

        interaction = self._run(work, "interaction plan")
        logger.info(
            f"Interaction planned: {interaction.id} {interaction_type} with {person.name} "
            f"({planned_date or 'unscheduled'})"
        )
        self._bus.emit(
            EngineEvent(
                event_type=EventTypes.INTERACTION_PLANNED,
                data={
                    "interaction_id": interaction.id,
                    "companion_id": companion_id,
                    "third_party_id": third_party_id,
                    "interaction_type": interaction_type,
                },
                source="interaction_service",
            )
        )
        return interaction

    # ── complete ─────────────────────────────────────────────

    def complete(self, interaction_id: str, raise_on_conflict: bool = False) -> Interaction:
        """Generate the outcome and apply its deltas, exactly once.

        A second call is a no-op returning the stored record, or raises
        ConflictError when raise_on_conflict is set.
        """
        validate_id(interaction_id, "interaction_id")

        with self._locks.hold(("interaction", interaction_id)):
            current = self.get(interaction_id)
            if current.is_completed:
                return self._conflict(current, raise_on_conflict)

            person = self._persons.get_by_id(current.third_party_id)
            key = AttitudeService.key(
                current.companion_id, current.third_party_id, TargetType.THIRD_PARTY
            )

            def work(session: Session) -> Tuple[Interaction, Optional[AttitudeChange], Optional[Outcome]]:
                row = session.get(InteractionModel, interaction_id)
                if row is None:
                    raise NotFoundError(f"Interaction not found: {interaction_id}")
                if row.status == InteractionStatus.COMPLETED.value:
                    return row.to_domain(), None, None

                record = self._attitudes.load_in_session(session, key)
                outcome = generate(
                    record.relationship_score,
                    row.interaction_type,
                    interaction_id=row.id,
                    person_name=person.name,
                )
                change = self._attitudes.apply_in_session(
                    session, key, outcome.deltas, context=f"{row.interaction_type} with {person.name}"
                )

                now = utcnow()
                row.status = InteractionStatus.COMPLETED.value
                row.outcome = outcome.narrative
                row.impact_on_relationship = outcome.impact
                row.deltas = dict(outcome.deltas)
                row.completed_at = now
                row.updated_at = now
                session.flush()
                return row.to_domain(), change, outcome

            with self._locks.hold(AttitudeService.lock_key(key)):
                interaction, change, outcome = self._run(work, "interaction complete")

        if change is None:
            return self._conflict(interaction, raise_on_conflict)

        logger.info(
            f"Interaction completed: {interaction.id} ({outcome.template_family}/"
            f"{outcome.band.value}) impact={outcome.impact}"
        )
        self._attitudes.publish(change, reason="interaction")
        self._bus.emit(
            EngineEvent(
                event_type=EventTypes.INTERACTION_COMPLETED,
                data={
                    "interaction_id": interaction.id,
                    "companion_id": interaction.companion_id,
                    "third_party_id": interaction.third_party_id,
                    "band": outcome.band.value,
                    "impact": outcome.impact,
                },
                source="interaction_service",
            )
        )
        return interaction

    @staticmethod
    def _conflict(interaction: Interaction, raise_on_conflict: bool) -> Interaction:
        logger.info(f"Interaction already completed: {interaction.id}")
        if raise_on_conflict:
            raise ConflictError(
                f"Interaction already completed: {interaction.id}", existing=interaction
            )
        return interaction

    # ── intents ──────────────────────────────────────────────

    def handle_intent(self, companion_id: str, intent: Intent) -> Optional[Interaction]:
        """Plan or resolve an interaction for a detected intent.

        planning: plan with the named person.
        inquiry: complete the oldest planned interaction with that person,
        else return the latest completed one.
        """
        if intent.kind == IntentKind.NONE or not intent.person:
            return None
        try:
            person = self._persons.get(intent.person, companion_id)
        except NotFoundError:
            logger.debug(f"Intent for unknown person ignored: {intent.person}")
            return None

        if intent.kind == IntentKind.PLANNING:
            interaction_type = intent.interaction_type_guess or DEFAULT_INTERACTION_TYPE
            return self.plan(
                person.id,
                companion_id,
                interaction_type,
                description=intent.description or describe(interaction_type, person.name),
                planned_date=intent.planned_date,
            )

        pending = [i for i in self.planned(companion_id) if i.third_party_id == person.id]
        if pending:
            return self.complete(pending[0].id)
        for interaction in self.history(companion_id, person.id):
            if interaction.is_completed:
                return interaction
        return None

    # ── queries ──────────────────────────────────────────────

    def get(self, interaction_id: str) -> Interaction:
        validate_id(interaction_id, "interaction_id")

        def work(session: Session) -> Interaction:
            row = session.get(InteractionModel, interaction_id)
            if row is None:
                raise NotFoundError(f"Interaction not found: {interaction_id}")
            return row.to_domain()

        return self._run(work, "interaction get")

    def history(self, companion_id: str, third_party_id: str) -> List[Interaction]:
        """All interactions with one person, newest first"""
        validate_id(companion_id, "companion_id")
        validate_id(third_party_id, "third_party_id")

        def work(session: Session) -> List[Interaction]:
            rows = session.execute(
                select(InteractionModel)
                .where(
                    InteractionModel.companion_id == companion_id,
                    InteractionModel.third_party_id == third_party_id,
                )
                .order_by(InteractionModel.created_at.desc())
            ).scalars()
            return [row.to_domain() for row in rows]

        return self._run(work, "interaction history")

    def planned(self, companion_id: str, limit: Optional[int] = None) -> List[Interaction]:
        """Planned interactions, oldest first"""
        validate_id(companion_id, "companion_id")

        def work(session: Session) -> List[Interaction]:
            query = (
                select(InteractionModel)
                .where(
                    InteractionModel.companion_id == companion_id,
                    InteractionModel.status == InteractionStatus.PLANNED.value,
                )
                .order_by(InteractionModel.created_at)
            )
            if limit is not None:
                query = query.limit(max(0, limit))
            return [row.to_domain() for row in session.execute(query).scalars()]

        return self._run(work, "interaction planned")
