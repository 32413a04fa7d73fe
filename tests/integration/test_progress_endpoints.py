"""
Integration tests for /api/v1/progress/*.

Covered:
- body weight entries: add and history, for the client and their trainer
- exercise performance entries
- workout progress: adding invalidates the progress view
- clients outside the caller's reach are reported as missing
"""

import pytest

from app.models.progress import BodyWeightEntry, ExercisePerformance, WorkoutProgress
from app.services.query_cache import PROGRESS_VIEW

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_client_adds_body_weight(client_api, mock_clients, mock_progress, client_fixture):
    mock_clients.get_by_username.return_value = client_fixture
    mock_progress.add_body_weight.return_value = BodyWeightEntry(id=1, client_id=10, weight=72, date="2026-03-14")

    response = await client_api.post("/api/v1/progress/anna/body-weight", json={"weight": 72, "date": "2026-03-14"})

    assert response.status_code == 200
    assert response.json() == {"weight": 72, "date": "2026-03-14"}
    assert mock_progress.add_body_weight.await_args.args[0] == client_fixture.id


@pytest.mark.asyncio
async def test_negative_body_weight_rejected(client_api):
    response = await client_api.post("/api/v1/progress/anna/body-weight", json={"weight": -1, "date": "2026-03-14"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_trainer_reads_body_weight_history(trainer_api, mock_clients, mock_progress, client_fixture):
    mock_clients.get_by_username.return_value = client_fixture
    mock_progress.list_body_weights.return_value = [
        BodyWeightEntry(id=1, client_id=10, weight=74, date="2026-03-01"),
        BodyWeightEntry(id=2, client_id=10, weight=72, date="2026-03-14"),
    ]

    response = await trainer_api.get("/api/v1/progress/anna/body-weight")

    assert response.status_code == 200
    assert [entry["weight"] for entry in response.json()] == [74, 72]


@pytest.mark.asyncio
async def test_foreign_client_history_not_found(trainer_api, mock_clients, mock_progress, foreign_client_fixture):
    mock_clients.get_by_username.return_value = foreign_client_fixture
    response = await trainer_api.get("/api/v1/progress/bruno/body-weight")
    assert response.status_code == 404
    mock_progress.list_body_weights.assert_not_awaited()


@pytest.mark.asyncio
async def test_exercise_performance(client_api, mock_clients, mock_progress, client_fixture):
    mock_clients.get_by_username.return_value = client_fixture
    exercise = {"name": "Squat (Legs)", "sets": 5, "repetitions": 5, "set_weights": [80] * 5, "rest_time": 120}
    mock_progress.add_performance.return_value = ExercisePerformance(
        id=1, client_id=10, date="2026-03-14", exercise=exercise
    )
    mock_progress.list_performances.return_value = [mock_progress.add_performance.return_value]

    created = await client_api.post("/api/v1/progress/anna/performance",
                                    json={"date": "2026-03-14", "exercise": exercise})
    history = await client_api.get("/api/v1/progress/anna/performance")

    assert created.status_code == 200
    assert created.json()["exercise"]["set_weights"] == [80, 80, 80, 80, 80]
    assert history.json()[0]["exercise"]["name"] == "Squat (Legs)"


@pytest.mark.asyncio
async def test_workout_progress_invalidates_view(client_api, mock_clients, mock_progress, client_fixture, cache):
    mock_clients.get_by_username.return_value = client_fixture
    mock_progress.add_progress.return_value = WorkoutProgress(
        id=1, client_id=10, date="2026-03-14", exercises=[], comments="Deload week"
    )

    response = await client_api.post("/api/v1/progress/anna/workouts",
                                     json={"date": "2026-03-14", "comments": "Deload week"})

    assert response.status_code == 200
    assert cache.invalidated == [("anna", (PROGRESS_VIEW,))]


@pytest.mark.asyncio
async def test_workout_progress_history(trainer_api, mock_clients, mock_progress, client_fixture):
    mock_clients.get_by_username.return_value = client_fixture
    mock_progress.list_progress.return_value = [
        WorkoutProgress(id=1, client_id=10, date="2026-03-14", exercises=[], comments=""),
    ]

    response = await trainer_api.get("/api/v1/progress/anna/workouts")

    assert response.status_code == 200
    assert response.json() == [{"date": "2026-03-14", "exercises": [], "comments": ""}]
