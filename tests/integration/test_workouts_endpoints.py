"""
Integration tests for /api/v1/workouts/*.

Covered:
- trainer creates a workout for their client; the workouts view is invalidated
- invalid drafts are rejected with the first problem and nothing is stored
- another trainer's client is reported as missing
- a client creates their own workout, only the author may edit
- listing a client's workouts
- a client logs a session; duplicate log keys conflict per client, also when the insert races
- listing logged sessions
"""

import pytest

from app.core.errors import AlreadyExists
from app.models.workout import Exercise, Workout
from app.models.workout_log import WorkoutLog
from app.services.query_cache import LOGS_VIEW, WORKOUTS_VIEW

pytestmark = pytest.mark.integration


def draft_json(**exercise_overrides) -> dict:
    exercise = {
        "name": "Bench Press",
        "muscle_group": "Chest",
        "sets": "3",
        "repetitions": "8",
        "set_weights": ["50", "50", "52.5"],
        "rest_times": ["90"],
    }
    exercise.update(exercise_overrides)
    return {"name": "Upper Body", "comments": "Keep the elbows tucked", "exercises": [exercise]}


def stored_workout(client_id, creator, name, exercises, comments) -> Workout:
    return Workout(
        id=77,
        client_id=client_id,
        creator=creator,
        name=name,
        comments=comments,
        exercises=[
            Exercise(position=i, name=e.name, sets=e.sets, repetitions=e.repetitions,
                     set_weights=e.set_weights, rest_time=e.rest_time)
            for i, e in enumerate(exercises)
        ],
    )


# ---------------------------------------------------------------------------
# Creating workouts
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_trainer_creates_workout_for_client(trainer_api, mock_clients, mock_workouts, client_fixture, cache):
    mock_clients.get_by_username.return_value = client_fixture
    mock_workouts.create.side_effect = stored_workout

    response = await trainer_api.post("/api/v1/workouts/clients/anna", json=draft_json())

    assert response.status_code == 200
    body = response.json()
    assert body["creator"] == "coach@example.com"
    assert body["client_username"] == "anna"
    assert body["exercises"] == [{
        "name": "Bench Press (Chest)", "sets": 3, "repetitions": 8,
        "set_weights": [50, 50, 53], "rest_time": 90,
    }]
    assert cache.invalidated == [("anna", (WORKOUTS_VIEW,))]


@pytest.mark.asyncio
async def test_invalid_draft_rejected_before_storage(trainer_api, mock_clients, mock_workouts, client_fixture, cache):
    mock_clients.get_by_username.return_value = client_fixture

    response = await trainer_api.post("/api/v1/workouts/clients/anna",
                                      json=draft_json(set_weights=["50", "", "52.5"]))

    assert response.status_code == 400
    assert response.json() == {"kind": "validation", "detail": "Exercise 1: Weight for Set 2 is required"}
    mock_workouts.create.assert_not_awaited()
    assert cache.invalidated == []


@pytest.mark.asyncio
async def test_other_trainers_client_not_found(trainer_api, mock_clients, mock_workouts, foreign_client_fixture):
    mock_clients.get_by_username.return_value = foreign_client_fixture
    response = await trainer_api.post("/api/v1/workouts/clients/bruno", json=draft_json())
    assert response.status_code == 404
    mock_workouts.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_client_cannot_use_trainer_route(client_api):
    response = await client_api.post("/api/v1/workouts/clients/anna", json=draft_json())
    assert response.status_code == 403
    assert response.json()["kind"] == "forbidden"


@pytest.mark.asyncio
async def test_client_creates_own_workout(client_api, mock_clients, mock_workouts, client_fixture):
    mock_clients.get_by_username.return_value = client_fixture
    mock_workouts.create.side_effect = stored_workout

    response = await client_api.post("/api/v1/workouts/own", json=draft_json())

    assert response.status_code == 200
    assert response.json()["creator"] == "anna"


# ---------------------------------------------------------------------------
# Updating workouts
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_trainer_updates_workout(trainer_api, mock_clients, mock_workouts, client_fixture, workout_fixture, cache):
    mock_workouts.get_by_id.return_value = workout_fixture
    mock_clients.get_by_id.return_value = client_fixture

    async def update(workout, exercises, comments):
        return stored_workout(workout.client_id, workout.creator, workout.name, exercises, comments)

    mock_workouts.update.side_effect = update

    response = await trainer_api.put("/api/v1/workouts/5", json={
        "comments": "Slower tempo",
        "exercises": draft_json(sets="2", set_weights=["60"], rest_times=[])["exercises"],
    })

    assert response.status_code == 200
    body = response.json()
    assert body["comments"] == "Slower tempo"
    assert body["exercises"][0]["set_weights"] == [60, 60]
    assert body["exercises"][0]["rest_time"] == 60
    assert cache.invalidated == [("anna", (WORKOUTS_VIEW,))]


@pytest.mark.asyncio
async def test_client_cannot_edit_trainers_workout(client_api, mock_clients, mock_workouts, client_fixture, workout_fixture):
    mock_workouts.get_by_id.return_value = workout_fixture
    mock_clients.get_by_id.return_value = client_fixture
    response = await client_api.put("/api/v1/workouts/5", json={"comments": "", "exercises": draft_json()["exercises"]})
    assert response.status_code == 403
    mock_workouts.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_unknown_workout(trainer_api, mock_workouts):
    mock_workouts.get_by_id.return_value = None
    response = await trainer_api.put("/api/v1/workouts/999", json={"exercises": draft_json()["exercises"]})
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Listing workouts
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_workouts_for_client(client_api, mock_clients, mock_workouts, client_fixture, workout_fixture):
    mock_clients.get_by_username.return_value = client_fixture
    mock_workouts.list_for_client.return_value = [workout_fixture]

    response = await client_api.get("/api/v1/workouts/clients/anna")

    assert response.status_code == 200
    [workout] = response.json()
    assert workout["name"] == "Upper Body"
    assert [e["rest_time"] for e in workout["exercises"]] == [90, 60]
    mock_workouts.list_for_client.assert_awaited_once_with(client_fixture.id)


@pytest.mark.asyncio
async def test_client_cannot_list_other_clients(client_api, mock_clients, foreign_client_fixture):
    mock_clients.get_by_username.return_value = foreign_client_fixture
    response = await client_api.get("/api/v1/workouts/clients/bruno")
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Logging sessions
# ---------------------------------------------------------------------------

def log_json() -> dict:
    return {
        "entries": [
            {"actual_sets": "3", "actual_reps": "8", "actual_weight": "50"},
            {"actual_sets": "3", "actual_reps": "10", "actual_weight": "40"},
        ],
        "client_notes": "Felt strong",
        "completed": True,
    }


@pytest.mark.asyncio
async def test_client_logs_session(client_api, mock_clients, mock_workouts, client_fixture, workout_fixture, cache):
    mock_workouts.get_by_id.return_value = workout_fixture
    mock_clients.get_by_id.return_value = client_fixture
    mock_workouts.get_log_by_key.return_value = None

    async def add_log(client_id, log_key, log):
        return WorkoutLog(
            id=1, log_key=log_key, client_id=client_id, workout_name=log.workout_name, date=log.date,
            completed=log.completed, client_notes=log.client_notes, comments=log.comments,
            exercises=[e.model_dump() for e in log.exercises],
        )

    mock_workouts.add_log.side_effect = add_log

    response = await client_api.post("/api/v1/workouts/5/logs", json=log_json())

    assert response.status_code == 200
    body = response.json()
    assert body["log_key"].startswith("Upper Body-")
    assert body["completed"] is True
    assert body["exercises"][1]["actual_set_weights"] == [40, 40, 40]
    assert cache.invalidated == [("anna", (LOGS_VIEW,))]
    assert mock_workouts.get_log_by_key.await_args.args == (client_fixture.id, body["log_key"])


@pytest.mark.asyncio
async def test_log_with_missing_fields_rejected(client_api, mock_clients, mock_workouts, client_fixture, workout_fixture):
    mock_workouts.get_by_id.return_value = workout_fixture
    mock_clients.get_by_id.return_value = client_fixture
    payload = log_json()
    payload["entries"][1]["actual_weight"] = ""

    response = await client_api.post("/api/v1/workouts/5/logs", json=payload)

    assert response.status_code == 400
    assert response.json()["detail"] == "Please fill in all exercise fields (sets, reps, and weight)."
    mock_workouts.add_log.assert_not_awaited()


@pytest.mark.asyncio
async def test_duplicate_log_key_conflicts(client_api, mock_clients, mock_workouts, client_fixture, workout_fixture):
    mock_workouts.get_by_id.return_value = workout_fixture
    mock_clients.get_by_id.return_value = client_fixture
    mock_workouts.get_log_by_key.return_value = WorkoutLog(id=1, log_key="taken")

    response = await client_api.post("/api/v1/workouts/5/logs", json=log_json())

    assert response.status_code == 409
    mock_workouts.add_log.assert_not_awaited()


@pytest.mark.asyncio
async def test_log_key_taken_during_insert_conflicts(
    client_api, mock_clients, mock_workouts, client_fixture, workout_fixture, cache
):
    mock_workouts.get_by_id.return_value = workout_fixture
    mock_clients.get_by_id.return_value = client_fixture
    mock_workouts.get_log_by_key.return_value = None
    mock_workouts.add_log.side_effect = AlreadyExists("This session has already been logged")

    response = await client_api.post("/api/v1/workouts/5/logs", json=log_json())

    assert response.status_code == 409
    assert response.json()["kind"] == "already_exists"
    assert cache.invalidated == []


@pytest.mark.asyncio
async def test_trainer_cannot_log_sessions(trainer_api):
    response = await trainer_api.post("/api/v1/workouts/5/logs", json=log_json())
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_trainer_lists_client_logs(trainer_api, mock_clients, mock_workouts, client_fixture):
    mock_clients.get_by_username.return_value = client_fixture
    mock_workouts.list_logs_for_client.return_value = [
        WorkoutLog(id=1, log_key="Upper Body-1", client_id=10, workout_name="Upper Body", date="2026-03-14",
                   completed=False, client_notes=None, comments="", exercises=[]),
    ]

    response = await trainer_api.get("/api/v1/workouts/logs/anna")

    assert response.status_code == 200
    assert response.json()[0]["log_key"] == "Upper Body-1"
