"""
test_api.py
-----------
End-to-end tests of the HTTP API.
"""
from datetime import date, timedelta
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from cyclejournal.api import app
from cyclejournal.preferences.actions import preference_upsert
from cyclejournal.preferences.data import PreferenceKeys
from cyclejournal.preferences.models import Preference
from cyclejournal.utils.settings import PASSCODE_HEADER


@pytest.fixture
def client(db_session):
    return TestClient(app)


class TestService:
    def test_ping(self, client):
        response = client.get("/ping")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_submodule_version(self, client):
        assert client.get("/journal/version").status_code == 200


class TestJournalApi:
    """Test answering and browsing through the API."""

    def test_first_use_starts_journal_today(self, client):
        response = client.get("/journal/today")
        assert response.status_code == 200
        body = response.json()
        assert body["position"]["day_number"] == 1
        assert body["position"]["cycle_number"] == 1
        assert body["question"]["id"] == 1
        assert body["has_journaled_today"] is False

        preferences = client.get("/preferences/").json()
        assert preferences["start_date"] == date.today().isoformat()

    def test_save_twice_in_a_day(self, client):
        first = client.post("/journal/entries", json={"answer": "draft"})
        assert first.status_code == 200
        second = client.post("/journal/entries", json={"answer": "final"})
        assert second.json()["id"] == first.json()["id"]

        entries = client.get("/journal/entries").json()["entries"]
        assert len(entries) == 1
        assert entries[0]["answer_text"] == "final"

        today = client.get("/journal/today").json()
        assert today["has_journaled_today"] is True
        assert today["entry"]["answer_text"] == "final"

    def test_empty_answer(self, client):
        response = client.post("/journal/entries", json={"answer": "   "})
        assert response.status_code == 400

    def test_edit_and_delete(self, client):
        entry_id = client.post("/journal/entries", json={"answer": "before"}).json()["id"]

        response = client.put(f"/journal/entries/{entry_id}", json={"answer": "after"})
        assert response.status_code == 200
        assert response.json()["answer_text"] == "after"

        assert client.delete(f"/journal/entries/{entry_id}").status_code == 200
        assert client.get(f"/journal/entries/{entry_id}").status_code == 404

    def test_missing_entry(self, client):
        assert client.get(f"/journal/entries/{uuid4()}").status_code == 404
        assert client.delete(f"/journal/entries/{uuid4()}").status_code == 404

    def test_position(self, client):
        client.post("/preferences/start_date", json={"start_date": "2026-01-01"})
        response = client.get("/journal/position", params={"target": "2026-01-31"})
        assert response.json()["day_number"] == 1
        assert response.json()["cycle_number"] == 2

    def test_history(self, client):
        client.post("/journal/entries", json={"answer": "today"})
        today = date.today()

        answers = client.get("/journal/questions/1/entries").json()["entries"]
        assert [answer["answer_text"] for answer in answers] == ["today"]

        previous = client.get(
            "/journal/questions/1/previous",
            params={"before": (today + timedelta(days=30)).isoformat()},
        )
        assert previous.json()["answer_text"] == "today"

        adjacent = client.get(
            "/journal/adjacent",
            params={"reference": (today + timedelta(days=5)).isoformat()},
        ).json()
        assert adjacent["journaled_date"] == today.isoformat()

        month = client.get(
            "/journal/calendar", params={"year": today.year, "month": today.month}
        ).json()
        assert month["journaled_days"] == [today.day]
        assert month["days_passed"] == today.day


class TestQuestionsApi:
    """Test question customization through the API."""

    def test_list(self, client):
        questions = client.get("/questions/").json()["questions"]
        assert [question["id"] for question in questions] == list(range(1, 31))

    def test_order(self, client):
        response = client.put("/questions/order", json={"order": [2, 1]})
        assert response.json()["order"][:3] == [2, 1, 3]

        questions = client.get("/questions/").json()["questions"]
        assert questions[0]["id"] == 2

        assert client.delete("/questions/order").json()["order"][:2] == [1, 2]

    def test_move(self, client):
        response = client.post("/questions/order/move", json={"source": 0, "destination": 1})
        assert response.json()["order"][:2] == [2, 1]

        response = client.post("/questions/order/move", json={"source": 40, "destination": 1})
        assert response.status_code == 400

    def test_edit_question_text(self, client):
        original = client.get("/questions/").json()["questions"][4]["text"]

        response = client.put("/questions/5", json={"text": "What made you laugh?"})
        assert response.json()["text"] == "What made you laugh?"

        response = client.delete("/questions/5")
        assert response.json()["text"] == original

        assert client.put("/questions/5", json={"text": " "}).status_code == 400

    def test_unknown_question(self, client):
        assert client.put("/questions/31", json={"text": "text"}).status_code == 404
        assert client.delete("/questions/0").status_code == 404

    def test_answer_counts(self, client):
        client.post("/journal/entries", json={"answer": "one"})
        counts = client.get("/questions/counts").json()["counts"]
        assert counts[0] == {"question_id": 1, "position": 1, "answers": 1}
        assert counts[1]["answers"] == 0


class TestPreferencesApi:
    """Test start date and passcode lock through the API."""

    def test_start_date_is_set_once(self, client):
        response = client.post("/preferences/start_date", json={"start_date": "2026-01-01"})
        assert response.json()["start_date"] == "2026-01-01"

        response = client.post("/preferences/start_date", json={"start_date": "2026-02-01"})
        assert response.status_code == 409

    def test_invalid_passcode(self, client):
        assert client.put("/preferences/passcode", json={"passcode": "12"}).status_code == 400

    def test_passcode_lock(self, client):
        assert client.put("/preferences/passcode", json={"passcode": "1234"}).status_code == 200

        assert client.get("/journal/today").status_code == 403
        assert (
            client.get("/journal/today", headers={PASSCODE_HEADER: "0000"}).status_code
            == 403
        )
        assert (
            client.get("/journal/today", headers={PASSCODE_HEADER: "1234"}).status_code
            == 200
        )
        assert client.get("/ping").status_code == 200
        assert client.get("/preferences/").status_code == 403

        verify = client.post("/preferences/passcode/verify", json={"passcode": "0000"})
        assert verify.json() == {"unlocked": False}
        verify = client.post("/preferences/passcode/verify", json={"passcode": "1234"})
        assert verify.json() == {"unlocked": True}

        response = client.delete("/preferences/passcode", headers={PASSCODE_HEADER: "1234"})
        assert response.status_code == 200
        assert client.get("/journal/today").status_code == 200

    def test_lock_holds_when_preferences_are_unreadable(self, client, monkeypatch):
        client.put("/preferences/passcode", json={"passcode": "1234"})
        query = Session.query

        def failing_query(self, *entities, **kwargs):
            if entities and entities[0] is Preference:
                raise OperationalError(
                    "SELECT preferences", {}, Exception("database is locked")
                )
            return query(self, *entities, **kwargs)

        monkeypatch.setattr(Session, "query", failing_query)

        assert client.get("/journal/entries").status_code == 503
        verify = client.post("/preferences/passcode/verify", json={"passcode": "0000"})
        assert verify.status_code == 503
        assert client.get("/ping").status_code == 200

    def test_unreadable_start_date(self, client, db_session):
        preference_upsert(db_session, PreferenceKeys.START_DATE, "not a date")
        assert client.get("/journal/today").status_code == 503
        assert client.post("/journal/entries", json={"answer": "text"}).status_code == 503

    def test_passcode_is_not_exposed(self, client):
        client.put("/preferences/passcode", json={"passcode": "1234"})
        preferences = client.get("/preferences/", headers={PASSCODE_HEADER: "1234"}).json()
        assert preferences["passcode_enabled"] is True
        assert "passcode" not in preferences


class TestWidgetApi:
    def test_summary(self, client):
        client.post("/journal/entries", json={"answer": "one"})
        summary = client.get("/widget/summary").json()
        assert summary["total_entries"] == 1
        assert summary["current_streak"] == 1
