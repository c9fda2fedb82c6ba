"""HTTP API tests (TestClient + in-memory services)"""

from unittest.mock import patch

from fastapi.testclient import TestClient

from companion_bonds.core.errors import PersistenceError


def _create_alice(client: TestClient) -> dict:
    response = client.post("/companions/c1/messages", json={"text": "My friend Alice called me today"})
    assert response.status_code == 200
    return response.json()["persons"][0]


# ── attitudes ────────────────────────────────────────────────


class TestAttitudeAPI:
    def test_upsert_and_get(self, client: TestClient) -> None:
        response = client.put(
            "/companions/c1/attitudes/user/u1", json={"values": {"trust": 40, "joy": 24}}
        )
        assert response.status_code == 200
        assert response.json()["relationship_score"] == 4.0

        data = client.get("/companions/c1/attitudes/user/u1").json()
        assert data["dimensions"]["trust"] == 40.0
        assert data["label"] == "neutral"
        assert len(data["dimensions"]) == 20

    def test_get_missing_is_404(self, client: TestClient) -> None:
        response = client.get("/companions/c1/attitudes/user/ghost")
        assert response.status_code == 404

    def test_bad_target_type_is_422(self, client: TestClient) -> None:
        response = client.put("/companions/c1/attitudes/npc/u1", json={"values": {}})
        assert response.status_code == 422

    def test_unknown_dimension_is_422(self, client: TestClient) -> None:
        response = client.put(
            "/companions/c1/attitudes/user/u1", json={"values": {"happiness": 10}}
        )
        assert response.status_code == 422
        assert "happiness" in response.json()["detail"]

    def test_delta(self, client: TestClient) -> None:
        client.put("/companions/c1/attitudes/user/u1", json={"values": {"trust": 90}})
        response = client.post(
            "/companions/c1/attitudes/user/u1/delta", json={"dimension": "trust", "delta": 30}
        )
        assert response.status_code == 200
        assert response.json()["dimensions"]["trust"] == 100.0

    def test_nan_delta_is_422(self, client: TestClient) -> None:
        client.put("/companions/c1/attitudes/user/u1", json={"values": {"trust": 10}})
        response = client.post(
            "/companions/c1/attitudes/user/u1/delta",
            content='{"dimension": "trust", "delta": NaN}',
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 422
        assert client.get("/companions/c1/attitudes/user/u1").json()["dimensions"]["trust"] == 10.0

    def test_seed_user(self, client: TestClient) -> None:
        response = client.post(
            "/companions/c1/attitudes/user/u1/seed", json={"persona": "flirty and curious"}
        )
        assert response.status_code == 200
        assert response.json()["dimensions"]["lust"] == 45.0

        again = client.post("/companions/c1/attitudes/user/u1/seed", json={"persona": "cold"})
        assert again.json() == response.json()

    def test_delta_on_missing_record_is_404(self, client: TestClient) -> None:
        response = client.post(
            "/companions/c1/attitudes/user/u1/delta", json={"dimension": "trust", "delta": 1}
        )
        assert response.status_code == 404

    def test_list_and_memories(self, client: TestClient) -> None:
        client.put("/companions/c1/attitudes/user/u1", json={"values": {"love": 50}})
        client.put("/companions/c1/attitudes/third_party/p1", json={"values": {}})
        client.post(
            "/companions/c1/attitudes/third_party/p1/delta",
            json={"dimension": "trust", "delta": 40},
        )

        listed = client.get("/companions/c1/attitudes").json()
        assert [a["target_id"] for a in listed] == ["u1", "p1"]

        memories = client.get("/companions/c1/attitude-memories").json()
        assert len(memories) == 1
        assert memories[0]["target_id"] == "p1"

    def test_storage_failure_is_503(self, client: TestClient) -> None:
        with patch(
            "companion_bonds.services.attitude_service.AttitudeService.list_for_companion",
            side_effect=PersistenceError("attitude list failed", 3),
        ):
            response = client.get("/companions/c1/attitudes")
        assert response.status_code == 503


# ── persons ──────────────────────────────────────────────────


class TestPersonAPI:
    def test_detect_does_not_store(self, client: TestClient) -> None:
        response = client.post(
            "/companions/c1/persons/detect", json={"text": "Dr. Smith said my friend Alice is kind"}
        )
        assert response.status_code == 200
        names = [c["name"] for c in response.json()]
        assert names == ["Smith", "Alice"]
        assert client.get("/companions/c1/persons").json() == []

    def test_list_and_get_by_name(self, client: TestClient) -> None:
        alice = _create_alice(client)

        listed = client.get("/companions/c1/persons").json()
        assert [p["id"] for p in listed] == [alice["id"]]

        fetched = client.get("/companions/c1/persons/by-name/alice")
        assert fetched.status_code == 200
        assert fetched.json()["relationship_to_user"] == "friend"

    def test_get_by_name_missing(self, client: TestClient) -> None:
        assert client.get("/companions/c1/persons/by-name/nobody").status_code == 404

    def test_set_importance(self, client: TestClient) -> None:
        alice = _create_alice(client)

        response = client.put(
            f"/companions/c1/persons/{alice['id']}/importance", json={"importance": 1.4}
        )
        assert response.status_code == 200
        assert response.json()["importance_score"] == 1.0

        other = client.put(
            f"/companions/c2/persons/{alice['id']}/importance", json={"importance": 0.1}
        )
        assert other.status_code == 404

    def test_memories(self, client: TestClient) -> None:
        alice = _create_alice(client)
        url = f"/companions/c1/persons/{alice['id']}/memories"

        created = client.post(
            url, json={"memory_type": "event", "content": "Alice got a new job", "importance": 0.9}
        )
        assert created.status_code == 201
        assert created.json()["memory_type"] == "event"

        listed = client.get(url).json()
        assert [m["content"] for m in listed] == [
            "Alice got a new job",
            "First mentioned: My friend Alice called me today",
        ]
        assert len(client.get(url, params={"limit": 1}).json()) == 1

    def test_memory_errors(self, client: TestClient) -> None:
        alice = _create_alice(client)
        url = f"/companions/c1/persons/{alice['id']}/memories"

        assert client.post(url, json={"memory_type": "rumour", "content": "x"}).status_code == 422
        assert client.get(f"/companions/c2/persons/{alice['id']}/memories").status_code == 404
        assert client.get("/companions/c1/persons/ghost/memories").status_code == 404


# ── interactions ─────────────────────────────────────────────


class TestInteractionAPI:
    def test_plan_complete_and_conflict(self, client: TestClient) -> None:
        alice = _create_alice(client)

        planned = client.post(
            "/companions/c1/interactions",
            json={"third_party_id": alice["id"], "interaction_type": "coffee"},
        )
        assert planned.status_code == 201
        interaction_id = planned.json()["id"]
        assert planned.json()["status"] == "planned"

        pending = client.get("/companions/c1/interactions/planned").json()
        assert [i["id"] for i in pending] == [interaction_id]

        done = client.post(f"/interactions/{interaction_id}/complete")
        assert done.status_code == 200
        assert done.json()["status"] == "completed"
        assert done.json()["outcome"]

        repeat = client.post(f"/interactions/{interaction_id}/complete")
        assert repeat.status_code == 200
        assert repeat.json() == done.json()

        conflict = client.post(
            f"/interactions/{interaction_id}/complete", json={"raise_on_conflict": True}
        )
        assert conflict.status_code == 409

        history = client.get(f"/companions/c1/persons/{alice['id']}/interactions").json()
        assert [i["id"] for i in history] == [interaction_id]

    def test_plan_unknown_person_is_404(self, client: TestClient) -> None:
        response = client.post(
            "/companions/c1/interactions",
            json={"third_party_id": "ghost", "interaction_type": "coffee"},
        )
        assert response.status_code == 404

    def test_complete_unknown_is_404(self, client: TestClient) -> None:
        assert client.post("/interactions/ghost/complete").status_code == 404

    def test_intent(self, client: TestClient) -> None:
        response = client.post(
            "/intent", json={"text": "I'm going to have lunch with Bob on Friday"}
        )
        assert response.json() == {
            "kind": "planning",
            "person": "Bob",
            "interaction_type_guess": "lunch",
            "planned_date": "Friday",
            "description": "Have lunch with Bob",
        }

    def test_message_turn(self, client: TestClient) -> None:
        _create_alice(client)
        client.post(
            "/companions/c1/messages", json={"text": "I'm going to have coffee with Alice tomorrow"}
        )

        response = client.post("/companions/c1/messages", json={"text": "How was coffee with Alice?"})
        data = response.json()
        assert response.status_code == 200
        assert data["intent"]["kind"] == "inquiry"
        assert data["interaction"]["status"] == "completed"
        assert data["narrative"] == data["interaction"]["outcome"]
        assert data["attitudes"][0]["target_type"] == "third_party"

    def test_bad_companion_id_is_422(self, client: TestClient) -> None:
        response = client.post("/companions/bad%20id/messages", json={"text": "hi"})
        assert response.status_code == 422
