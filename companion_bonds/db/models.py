"""SQLAlchemy declarative models.

Each service owns one table; rows reference each other by id only.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import JSON

from companion_bonds.core.attitude.models import (
    DIMENSIONS,
    AttitudeMemory,
    AttitudeRecord,
    TargetType,
)
from companion_bonds.core.interaction.models import Interaction, InteractionStatus
from companion_bonds.core.person.models import PersonMemory, PersonMemoryType, ThirdPartyPerson


def utcnow() -> datetime:
    """Naive UTC timestamp, the form SQLite stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all database models."""


class AttitudeModel(Base):
    """One companion's attitude toward one target"""

    __tablename__ = "companion_attitudes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    companion_id: Mapped[str] = mapped_column(String(64), nullable=False)
    target_id: Mapped[str] = mapped_column(String(64), nullable=False)
    target_type: Mapped[str] = mapped_column(String(16), nullable=False)

    attraction: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    trust: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    fear: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    anger: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    joy: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    sorrow: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    disgust: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    surprise: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    curiosity: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    respect: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    suspicion: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    gratitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    jealousy: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    empathy: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    lust: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    love: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    anxiety: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    butterflies: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    submissiveness: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    dominance: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    relationship_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    last_updated: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("companion_id", "target_id", "target_type", name="uq_attitude_target"),
        Index("idx_attitude_companion", "companion_id"),
    )

    def to_domain(self) -> AttitudeRecord:
        return AttitudeRecord(
            companion_id=self.companion_id,
            target_id=self.target_id,
            target_type=TargetType(self.target_type),
            relationship_score=self.relationship_score,
            record_id=self.id,
            created_at=self.created_at,
            last_updated=self.last_updated,
            **{name: getattr(self, name) for name in DIMENSIONS},
        )

    def assign(self, record: AttitudeRecord) -> None:
        """Copy dimension values and score from a domain record."""
        for name in DIMENSIONS:
            setattr(self, name, getattr(record, name))
        self.relationship_score = record.relationship_score


class ThirdPartyPersonModel(Base):
    """A person other than the user, scoped to one companion"""

    __tablename__ = "third_party_persons"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    companion_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    normalized_name: Mapped[str] = mapped_column(String, nullable=False)
    relationship_to_user: Mapped[str | None] = mapped_column(String, nullable=True)
    relationship_to_companion: Mapped[str | None] = mapped_column(String, nullable=True)
    occupation: Mapped[str | None] = mapped_column(String, nullable=True)
    personality_traits: Mapped[list] = mapped_column(JSON, default=list)
    physical_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    mention_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    importance_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.5)
    evidence: Mapped[list] = mapped_column(JSON, default=list)
    first_mentioned: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    last_mentioned: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("companion_id", "normalized_name", name="uq_person_name"),
    )

    def to_domain(self) -> ThirdPartyPerson:
        return ThirdPartyPerson(
            id=self.id,
            companion_id=self.companion_id,
            name=self.name,
            normalized_name=self.normalized_name,
            relationship_to_user=self.relationship_to_user,
            relationship_to_companion=self.relationship_to_companion,
            occupation=self.occupation,
            personality_traits=list(self.personality_traits or []),
            physical_description=self.physical_description,
            mention_count=self.mention_count,
            importance_score=self.importance_score,
            evidence=list(self.evidence or []),
            first_mentioned=self.first_mentioned,
            last_mentioned=self.last_mentioned,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class InteractionModel(Base):
    """Planned or completed interaction with a third party"""

    __tablename__ = "interactions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    companion_id: Mapped[str] = mapped_column(String(64), nullable=False)
    third_party_id: Mapped[str] = mapped_column(String(36), nullable=False)
    interaction_type: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    planned_date: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="planned")
    outcome: Mapped[str | None] = mapped_column(Text, nullable=True)
    impact_on_relationship: Mapped[float | None] = mapped_column(Float, nullable=True)
    deltas: Mapped[dict] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        Index("idx_interaction_person", "companion_id", "third_party_id"),
        Index("idx_interaction_status", "companion_id", "status"),
    )

    def to_domain(self) -> Interaction:
        return Interaction(
            id=self.id,
            companion_id=self.companion_id,
            third_party_id=self.third_party_id,
            interaction_type=self.interaction_type,
            description=self.description,
            planned_date=self.planned_date,
            status=InteractionStatus(self.status),
            outcome=self.outcome,
            impact_on_relationship=self.impact_on_relationship,
            deltas=dict(self.deltas or {}),
            created_at=self.created_at,
            updated_at=self.updated_at,
            completed_at=self.completed_at,
        )


class AttitudeMemoryModel(Base):
    """A significant attitude change, kept for recall"""

    __tablename__ = "attitude_memories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    companion_id: Mapped[str] = mapped_column(String(64), nullable=False)
    target_id: Mapped[str] = mapped_column(String(64), nullable=False)
    target_type: Mapped[str] = mapped_column(String(16), nullable=False)
    memory_type: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    impact_score: Mapped[float] = mapped_column(Float, nullable=False)
    priority_score: Mapped[float] = mapped_column(Float, nullable=False)
    delta: Mapped[dict] = mapped_column(JSON, default=dict)
    context: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        Index("idx_memory_companion", "companion_id", "priority_score"),
    )

    def to_domain(self) -> AttitudeMemory:
        return AttitudeMemory(
            companion_id=self.companion_id,
            target_id=self.target_id,
            target_type=TargetType(self.target_type),
            memory_type=self.memory_type,
            description=self.description,
            impact_score=self.impact_score,
            priority_score=self.priority_score,
            delta=dict(self.delta or {}),
            context=self.context,
            memory_id=self.id,
            created_at=self.created_at,
        )


class PersonMemoryModel(Base):
    """A remembered fact, event or opinion about a third party"""

    __tablename__ = "third_party_memories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    person_id: Mapped[str] = mapped_column(String(36), nullable=False)
    companion_id: Mapped[str] = mapped_column(String(64), nullable=False)
    memory_type: Mapped[str] = mapped_column(String(32), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    importance: Mapped[float] = mapped_column(Float, nullable=False, default=0.5)
    emotional_valence: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        Index("idx_person_memory", "person_id", "importance"),
    )

    def to_domain(self) -> PersonMemory:
        return PersonMemory(
            id=self.id,
            person_id=self.person_id,
            companion_id=self.companion_id,
            memory_type=PersonMemoryType(self.memory_type),
            content=self.content,
            importance=self.importance,
            emotional_valence=self.emotional_valence,
            created_at=self.created_at,
        )
