"""Tests for the admin endpoints"""

import re

import pytest

from replay_proxy.api.v1.endpoints.admin import format_uptime

ALICE = b'{"name":"Alice"}'
ALICE_FINGERPRINT = "4b2c46e6f07d4da9e40dff77483d80e0940f8b0e1ae01b93c98681c5c8187b20"


class TestStatus:
    """Tests for GET /admin/status"""

    def test_initial_status(self, client):
        response = client.get("/admin/status")

        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "record"
        assert data["record_count"] == 0
        assert data["playback_hits"] == 0
        assert data["playback_misses"] == 0
        assert data["total_recordings"] == 0
        assert re.fullmatch(r"(\d+h)?(\d+m)?\d+s", data["uptime"])

    def test_counts_existing_recordings(self, client, repository, interaction_factory):
        """Test total_recordings reflects the store, not this process' counters"""
        repository.store(interaction_factory(target="api.example.com/users/1"))
        repository.store(interaction_factory(target="api.example.com/users/2"))

        data = client.get("/admin/status").json()
        assert data["total_recordings"] == 2
        assert data["record_count"] == 0


class TestFormatUptime:
    """Tests for format_uptime"""

    @pytest.mark.parametrize("seconds,expected", [
        (0, "0s"),
        (3, "3s"),
        (123, "2m3s"),
        (3723, "1h2m3s"),
        (7200, "2h0m0s"),
    ])
    def test_format(self, seconds, expected):
        assert format_uptime(seconds) == expected


class TestMode:
    """Tests for GET/POST /admin/mode"""

    def test_get_mode(self, client):
        response = client.get("/admin/mode")

        assert response.status_code == 200
        assert response.json() == {"mode": "record"}

    def test_switch_with_query(self, client):
        response = client.get("/admin/mode?mode=playback")

        assert response.status_code == 200
        assert response.json() == {"mode": "playback", "message": "Switched to playback mode"}
        assert client.get("/admin/mode").json()["mode"] == "playback"

    def test_switch_with_post(self, client):
        response = client.post("/admin/mode", json={"mode": "playback"})

        assert response.status_code == 200
        assert response.json()["mode"] == "playback"

    def test_switch_is_idempotent(self, client):
        """Test switching to the current mode succeeds and changes nothing"""
        first = client.post("/admin/mode", json={"mode": "record"})
        second = client.post("/admin/mode", json={"mode": "record"})

        assert first.status_code == second.status_code == 200
        assert client.get("/admin/mode").json()["mode"] == "record"

    @pytest.mark.parametrize("mode", ["replay", "RECORD", "spy"])
    def test_invalid_mode(self, client, mode):
        """Test invalid modes are rejected and the mode is left unchanged"""
        response = client.post("/admin/mode", json={"mode": mode})

        assert response.status_code == 400
        assert response.json() == {"error": f"invalid mode: {mode} (must be 'record' or 'playback')"}
        assert client.get("/admin/mode").json()["mode"] == "record"

    def test_invalid_mode_query(self, client):
        response = client.get("/admin/mode?mode=replay")

        assert response.status_code == 400
        assert "invalid mode" in response.json()["error"]

    @pytest.mark.parametrize("body", [b"not json", b"{}", b'["record"]'])
    def test_invalid_body(self, client, body):
        response = client.post(
            "/admin/mode",
            content=body,
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}


class TestHistory:
    """Tests for GET /admin/history"""

    def test_empty(self, client):
        response = client.get("/admin/history")

        assert response.status_code == 200
        assert response.json() == {"count": 0, "history": []}

    def test_entry_fields(self, client):
        client.post("/?target=api.example.com/users", content=ALICE)

        entry = client.get("/admin/history").json()["history"][0]
        assert entry["id"] == ALICE_FINGERPRINT
        assert entry["method"] == "POST"
        assert entry["url"] == "api.example.com/users"
        assert entry["target"] == "api.example.com/users"
        assert entry["status"] == 201
        assert entry["duration"] >= 0
        assert entry["saved"] is True
        assert "timestamp" in entry


class TestRecordings:
    """Tests for the recordings endpoints"""

    def test_list_empty(self, client):
        response = client.get("/admin/recordings")

        assert response.status_code == 200
        assert response.json() == {"count": 0, "recordings": []}

    def test_list(self, client):
        client.post("/?target=api.example.com/users", content=ALICE)
        client.get("/?target=http://localhost:3001/people/1")

        data = client.get("/admin/recordings").json()
        assert data["count"] == 2
        newest = data["recordings"][0]
        assert newest["method"] == "GET"
        assert newest["target"] == "http://localhost:3001/people/1"
        assert newest["status"] == 200
        assert set(newest) == {"id", "uuid", "timestamp", "method", "url", "target", "status", "duration"}

    def test_clear(self, client, repository):
        """Test clearing removes every recording so playback misses afterwards"""
        client.post("/?target=api.example.com/users", content=ALICE)

        response = client.delete("/admin/recordings")

        assert response.status_code == 200
        assert response.json() == {"message": "All recordings cleared successfully"}
        assert repository.count() == 0

        client.post("/admin/mode", json={"mode": "playback"})
        replay = client.post("/?target=api.example.com/users", content=ALICE)
        assert replay.status_code == 404

    def test_clear_empty(self, client):
        assert client.delete("/admin/recordings").status_code == 200

    def test_get_by_fingerprint(self, client):
        """Test a recording is returned in its stored JSON shape"""
        client.post("/?target=api.example.com/users", content=ALICE)

        response = client.get(f"/admin/recording?id={ALICE_FINGERPRINT}")

        assert response.status_code == 200
        data = response.json()
        assert data["request"]["method"] == "POST"
        assert data["request"]["url"] == "api.example.com/users"
        assert data["request"]["body"] == "eyJuYW1lIjoiQWxpY2UifQ=="
        assert data["response"]["status_code"] == 201
        assert data["metadata"]["target"] == "api.example.com/users"

    def test_get_by_uuid(self, client):
        client.post("/?target=api.example.com/users", content=ALICE)
        uuid = client.get("/admin/recordings").json()["recordings"][0]["uuid"]

        response = client.get(f"/admin/recording?id={uuid}")

        assert response.status_code == 200
        assert response.json()["id"] == uuid

    def test_get_missing_id(self, client):
        response = client.get("/admin/recording")

        assert response.status_code == 400
        assert response.json() == {"error": "Missing recording ID"}

    def test_get_unknown(self, client):
        response = client.get(f"/admin/recording?id={'0' * 64}")

        assert response.status_code == 404
        assert response.json() == {"error": f"Recording not found: {'0' * 64}"}


class TestHealth:
    """Tests for GET /health"""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "time" in data
