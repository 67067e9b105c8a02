"""
HTTP tests for the workout log API.

Storage is in-memory and the clock is fixed at 2026-03-05 (see conftest).
"""

from unittest.mock import MagicMock

import pytest

from workout_log_api.api.routes import get_coach_service, get_sync_service
from workout_log_api.main import app
from workout_log_api.parsers.models import LoggedSet, WorkoutMetadata
from workout_log_api.services.coach_service import CoachError, CoachNotConfiguredError
from workout_log_api.services.sync_service import SyncError, SyncResult


def _reps(weight, reps):
    return LoggedSet(weight_text=weight, reps_or_duration=reps, recorded_at="2026-03-05T10:00:00")


@pytest.fixture
def squat_history(repository):
    repository.save_workout_logs(
        {
            "2026-02-10": {"Sentadilla": {1: _reps("80 kg", 6)}},
            "2026-02-03": {"Sentadilla": {1: _reps("70 kg", 8)}, "Remo": {1: _reps("PC", 10)}},
        }
    )
    return repository


# ---------------------------------------------------------------------------
# Health and import
# ---------------------------------------------------------------------------


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_validate(client, sample_motra_text):
    assert client.post("/import/validate", json={"text": sample_motra_text}).json() == {"valid": True}
    assert client.post("/import/validate", json={"text": "hola"}).json() == {"valid": False}


def test_preview_does_not_save(client, repository, sample_motra_text):
    resp = client.post("/import/preview", json={"text": sample_motra_text})

    assert resp.status_code == 200
    data = resp.json()
    assert data["detected_date"] == "2026-02-11"
    assert data["suggested_date"] == "2026-02-11"
    assert data["suggested_date_display"] == "miércoles, 11 de febrero de 2026"
    assert data["session"]["title"] == "Empuje fuerte"
    assert data["session"]["exercises"][2]["sets"][0] == {
        "kind": "time",
        "set_number": 1,
        "duration_text": "01:01",
        "weight_text": "PC",
    }
    assert repository.get_workout_logs() == {}


@pytest.mark.parametrize("text", ["", "Lista de la compra"])
def test_preview_rejects_bad_text(client, text):
    resp = client.post("/import/preview", json={"text": text})
    assert resp.status_code == 400


def test_import_saves_session(client, repository, sample_motra_text):
    resp = client.post("/import", json={"text": sample_motra_text})

    assert resp.status_code == 200
    data = resp.json()
    assert data["date"] == "2026-02-11"
    assert data["exercise_count"] == 4
    assert data["total_sets"] == 9
    assert "Press banca" in repository.get_workout_logs()["2026-02-11"]


def test_import_with_target_date(client, repository, sample_motra_text):
    resp = client.post("/import", json={"text": sample_motra_text, "target_date": "2026-02-12"})

    assert resp.status_code == 200
    assert list(repository.get_workout_logs()) == ["2026-02-12"]


def test_import_rejects_malformed_target_date(client, sample_motra_text):
    resp = client.post("/import", json={"text": sample_motra_text, "target_date": "11/02/2026"})
    assert resp.status_code == 422


def test_import_rejects_impossible_target_date(client, sample_motra_text):
    resp = client.post("/import", json={"text": sample_motra_text, "target_date": "2026-02-30"})
    assert resp.status_code == 400


# ---------------------------------------------------------------------------
# Log and progression
# ---------------------------------------------------------------------------


def test_workouts_after_import(client, sample_motra_text):
    client.post("/import", json={"text": sample_motra_text})

    data = client.get("/workouts").json()

    assert data["logs"]["2026-02-11"]["Press banca"]["1"]["reps_or_duration"] == 12
    assert data["metadata"]["2026-02-11"]["total_sets"] == 9


def test_exercises(client, squat_history):
    assert client.get("/exercises").json() == {"exercises": ["Remo", "Sentadilla"], "count": 2}


def test_exercise_history(client, squat_history):
    data = client.get("/exercises/Sentadilla/history").json()

    assert data["exercise"] == "Sentadilla"
    assert data["sufficient_data"] is True
    assert [e["date"] for e in data["entries"]] == ["2026-02-03", "2026-02-10"]
    assert data["entries"][1]["estimated_1rm"] == pytest.approx(96.0)


def test_history_without_numeric_sets(client, squat_history):
    data = client.get("/exercises/Remo/history").json()
    assert data["entries"] == []
    assert data["sufficient_data"] is False


def test_history_of_unknown_exercise(client):
    resp = client.get("/exercises/Dominadas/history")
    assert resp.status_code == 200
    assert resp.json()["entries"] == []


# ---------------------------------------------------------------------------
# Coach
# ---------------------------------------------------------------------------


@pytest.fixture
def coach():
    mock_coach = MagicMock()
    app.dependency_overrides[get_coach_service] = lambda: mock_coach
    yield mock_coach
    app.dependency_overrides.pop(get_coach_service, None)


def test_coach_chat(client, coach, squat_history):
    coach.ask.return_value = "Buen progreso en sentadilla."

    resp = client.post("/coach/chat", json={"message": "¿Cómo voy?", "provider": "openai"})

    assert resp.status_code == 200
    assert resp.json() == {"reply": "Buen progreso en sentadilla."}
    args, kwargs = coach.ask.call_args
    assert args[0] == "¿Cómo voy?"
    assert "Sentadilla" in args[1]["2026-02-10"]
    assert kwargs["provider"] == "openai"


@pytest.mark.parametrize(
    "error, status",
    [
        (ValueError("Unknown coach provider"), 400),
        (CoachNotConfiguredError("no key"), 503),
        (CoachError("upstream failed"), 502),
    ],
)
def test_coach_errors(client, coach, error, status):
    coach.ask.side_effect = error
    resp = client.post("/coach/chat", json={"message": "Hola"})
    assert resp.status_code == status


def test_coach_rejects_empty_message(client, coach):
    assert client.post("/coach/chat", json={"message": ""}).status_code == 422


# ---------------------------------------------------------------------------
# Remote mirror
# ---------------------------------------------------------------------------


def test_sync_not_configured(client):
    assert client.post("/sync/push").status_code == 503
    assert client.post("/sync/pull").status_code == 503


@pytest.fixture
def sync(client):
    mock_sync = MagicMock()
    app.dependency_overrides[get_sync_service] = lambda: mock_sync
    return mock_sync


def test_sync_push(client, sync, squat_history):
    sync.push.return_value = SyncResult(success=2)

    resp = client.post("/sync/push")

    assert resp.status_code == 200
    assert resp.json() == {"success": 2, "errors": 0, "skipped": 0}
    logs, metadata = sync.push.call_args[0]
    assert set(logs) == {"2026-02-03", "2026-02-10"}


def test_sync_pull_merges_remote_dates(client, sync, squat_history):
    sync.pull.return_value = (
        {"2026-02-10": {"Peso muerto": {1: _reps("120 kg", 5)}}, "2026-02-17": {}},
        {"2026-02-10": WorkoutMetadata(title="Remoto")},
    )

    resp = client.post("/sync/pull")

    assert resp.status_code == 200
    assert resp.json()["dates"] == 2
    logs = squat_history.get_workout_logs()
    assert set(logs) == {"2026-02-03", "2026-02-10", "2026-02-17"}
    assert list(logs["2026-02-10"]) == ["Peso muerto"]
    assert squat_history.get_workout_metadata()["2026-02-10"].title == "Remoto"


def test_sync_pull_failure(client, sync):
    sync.pull.side_effect = SyncError("unreachable")
    assert client.post("/sync/pull").status_code == 502


# ---------------------------------------------------------------------------
# Backup
# ---------------------------------------------------------------------------


def test_export_and_import(client, repository, squat_history):
    exported = client.get("/data/export").json()

    assert exported["export_date"].startswith("2026-03-05T10:00")
    assert set(exported["workout_logs"]) == {"2026-02-03", "2026-02-10"}

    repository.save_workout_logs({})
    resp = client.post("/data/import", json=exported)

    assert resp.status_code == 200
    assert set(repository.get_workout_logs()) == {"2026-02-03", "2026-02-10"}


def test_import_invalid_backup(client):
    resp = client.post("/data/import", json={"workout_logs": {"2026-02-11": "oops"}})
    assert resp.status_code == 400
