"""PersonService integration tests (in-memory SQLite + EventBus)"""

import pytest

from companion_bonds.core.errors import NotFoundError, ValidationError
from companion_bonds.core.event_types import EventTypes
from companion_bonds.core.person.models import Candidate, PersonMemoryType


class TestResolve:
    def test_create(self, person_service, bus):
        detected = []
        bus.subscribe(EventTypes.PERSON_DETECTED, detected.append)

        resolved = person_service.resolve(
            "c1", Candidate(name="Alice", relationship_hint="friend", trait_hints=["kind"])
        )

        person = resolved.person
        assert resolved.created is True
        assert person.name == "Alice"
        assert person.normalized_name == "alice"
        assert person.relationship_to_user == "friend"
        assert person.personality_traits == ["kind"]
        assert person.mention_count == 1
        assert person.first_mentioned == person.last_mentioned
        assert len(detected) == 1
        assert detected[0].data["person_id"] == person.id

    def test_re_mention_increments_count(self, person_service, bus):
        mentioned = []
        bus.subscribe(EventTypes.PERSON_MENTIONED, mentioned.append)

        first = person_service.resolve("c1", Candidate(name="Alice")).person
        second = person_service.resolve("c1", Candidate(name="ALICE")).person

        assert second.id == first.id
        assert second.mention_count == 2
        assert second.name == "Alice"
        assert second.last_mentioned >= first.last_mentioned
        assert len(mentioned) == 1

    def test_fills_only_null_fields(self, person_service):
        person_service.resolve("c1", Candidate(name="Alice", relationship_hint="friend"))
        person = person_service.resolve(
            "c1", Candidate(name="Alice", relationship_hint="colleague", occupation_hint="nurse")
        ).person

        assert person.relationship_to_user == "friend"
        assert person.occupation == "nurse"
        assert person.evidence[0]["field"] == "relationship_to_user"
        assert person.evidence[0]["value"] == "colleague"

    def test_traits_merge(self, person_service):
        person_service.resolve("c1", Candidate(name="Bob", trait_hints=["funny"]))
        person = person_service.resolve(
            "c1", Candidate(name="Bob", trait_hints=["kind", "funny"])
        ).person
        assert person.personality_traits == ["funny", "kind"]

    def test_importance_keeps_maximum(self, person_service):
        person_service.resolve("c1", Candidate(name="Bob", importance_score=0.8))
        person = person_service.resolve("c1", Candidate(name="Bob", importance_score=0.5)).person
        assert person.importance_score == 0.8

    def test_scoped_per_companion(self, person_service):
        a = person_service.resolve("c1", Candidate(name="Alice")).person
        b = person_service.resolve("c2", Candidate(name="Alice")).person
        assert a.id != b.id
        assert b.mention_count == 1

    def test_empty_name(self, person_service):
        with pytest.raises(ValidationError):
            person_service.resolve("c1", Candidate(name="   "))

    def test_whitespace_is_collapsed(self, person_service):
        person = person_service.resolve("c1", Candidate(name="Mary   Jane")).person
        assert person.name == "Mary Jane"
        assert person_service.get("mary jane", "c1").id == person.id


class TestQueries:
    def test_get_case_insensitive(self, person_service):
        created = person_service.resolve("c1", Candidate(name="Alice")).person
        assert person_service.get("aLiCe").id == created.id
        assert person_service.get("Alice", "c1").id == created.id

    def test_get_missing(self, person_service):
        with pytest.raises(NotFoundError):
            person_service.get("Nobody")
        with pytest.raises(NotFoundError):
            person_service.get_by_id("no-such-id")

    def test_get_wrong_companion(self, person_service):
        person_service.resolve("c1", Candidate(name="Alice"))
        with pytest.raises(NotFoundError):
            person_service.get("Alice", "c2")

    def test_list_orders_by_importance_then_mentions(self, person_service):
        person_service.resolve("c1", Candidate(name="Carol", importance_score=0.5))
        person_service.resolve("c1", Candidate(name="Bob", importance_score=0.5))
        person_service.resolve("c1", Candidate(name="Bob", importance_score=0.5))
        person_service.resolve("c1", Candidate(name="Alice", importance_score=0.9))

        assert [p.name for p in person_service.list("c1")] == ["Alice", "Bob", "Carol"]
        assert sorted(person_service.known_names("c1")) == ["Alice", "Bob", "Carol"]
        assert person_service.list("c2") == []

    def test_update_importance_is_clamped(self, person_service):
        person = person_service.resolve("c1", Candidate(name="Alice")).person
        assert person_service.update_importance(person.id, 1.7).importance_score == 1.0
        assert person_service.update_importance(person.id, -0.2).importance_score == 0.0

    def test_update_importance_scoped_to_companion(self, person_service):
        person = person_service.resolve("c1", Candidate(name="Alice")).person
        with pytest.raises(NotFoundError):
            person_service.update_importance(person.id, 0.9, companion_id="c2")
        with pytest.raises(ValidationError):
            person_service.update_importance(person.id, float("nan"))
        assert person_service.get_by_id(person.id).importance_score == 0.5


class TestMemories:
    def _alice(self, person_service):
        return person_service.resolve("c1", Candidate(name="Alice")).person

    def test_add_memory(self, person_service, bus):
        recorded = []
        bus.subscribe(EventTypes.PERSON_MEMORY_RECORDED, recorded.append)
        alice = self._alice(person_service)

        memory = person_service.add_memory(
            "c1", alice.id, "event", "  Alice moved to Berlin  ", importance=0.7, emotional_valence=0.4
        )

        assert memory.id is not None
        assert memory.person_id == alice.id
        assert memory.memory_type == PersonMemoryType.EVENT
        assert memory.content == "Alice moved to Berlin"
        assert memory.importance == 0.7
        assert memory.emotional_valence == 0.4
        assert memory.created_at is not None
        assert len(recorded) == 1
        assert recorded[0].data["memory_id"] == memory.id
        assert recorded[0].data["memory_type"] == "event"

    def test_values_are_clamped(self, person_service):
        alice = self._alice(person_service)
        memory = person_service.add_memory(
            "c1", alice.id, PersonMemoryType.OPINION, "Alice is great", importance=3.0, emotional_valence=-5.0
        )
        assert memory.importance == 1.0
        assert memory.emotional_valence == -1.0

    def test_order_by_importance_then_newest(self, person_service):
        alice = self._alice(person_service)
        person_service.add_memory("c1", alice.id, "fact", "old minor", importance=0.3)
        person_service.add_memory("c1", alice.id, "fact", "major", importance=0.9)
        person_service.add_memory("c1", alice.id, "fact", "new minor", importance=0.3)

        contents = [m.content for m in person_service.memories("c1", alice.id)]
        assert contents == ["major", "new minor", "old minor"]
        limited = person_service.memories("c1", alice.id, limit=2)
        assert [m.content for m in limited] == ["major", "new minor"]

    def test_unknown_type_and_empty_content(self, person_service):
        alice = self._alice(person_service)
        with pytest.raises(ValidationError):
            person_service.add_memory("c1", alice.id, "rumour", "Alice is secretly a spy")
        with pytest.raises(ValidationError):
            person_service.add_memory("c1", alice.id, "fact", "   ")
        assert person_service.memories("c1", alice.id) == []

    def test_other_companion_cannot_see_memories(self, person_service):
        alice = self._alice(person_service)
        person_service.add_memory("c1", alice.id, "fact", "Alice likes tea")
        with pytest.raises(NotFoundError):
            person_service.memories("c2", alice.id)
        with pytest.raises(NotFoundError):
            person_service.add_memory("c2", alice.id, "fact", "Alice likes coffee")
        with pytest.raises(NotFoundError):
            person_service.memories("c1", "missing")
