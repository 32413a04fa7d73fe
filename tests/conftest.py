"""
Shared fixtures for the PT Coach backend tests.

Strategy:
- The test FastAPI app is built without the lifespan hook (no database).
- Every repository is replaced with an AsyncMock(spec=...) via dependency_overrides.
- get_current_session is overridden with the SessionContext of the role under test;
  the anonymous client keeps the real bearer-token check.
- The query cache is a disabled QueryCache that records invalidations.
"""

import pytest
from datetime import datetime
from typing import AsyncGenerator, Optional
from unittest.mock import AsyncMock

from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from app.api.router import api_router
from app.core.dependencies import (
    get_booking_repository,
    get_client_repository,
    get_current_session,
    get_progress_repository,
    get_query_cache,
    get_trainer_repository,
    get_workout_repository,
)
from app.core.errors import register_exception_handlers
from app.core.session import AuthType, SessionContext
from app.models.client import Client
from app.models.trainer import Trainer
from app.models.workout import Exercise, Workout
from app.repositories.booking_repository import BookingRepository
from app.repositories.client_repository import ClientRepository
from app.repositories.progress_repository import ProgressRepository
from app.repositories.trainer_repository import TrainerRepository
from app.repositories.workout_repository import WorkoutRepository
from app.services.auth_service import auth_service
from app.services.query_cache import QueryCache


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class RecordingCache(QueryCache):
    """Never caches, remembers what was invalidated."""

    def __init__(self):
        super().__init__(url="", ttl=60)
        self.invalidated = []

    async def invalidate(self, username: str, *views: str) -> None:
        self.invalidated.append((username, views))


def create_test_app() -> FastAPI:
    """Test FastAPI app without the startup hook."""
    test_app = FastAPI(title="PT Coach Test App")
    register_exception_handlers(test_app)
    test_app.include_router(api_router, prefix="/api/v1")
    return test_app


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def trainer_fixture() -> Trainer:
    return Trainer(
        id=1,
        email="coach@example.com",
        password=auth_service.hash_password("coachpass"),
        pt_code=123456,
        first_name=None,
        last_name=None,
        created_at=datetime.utcnow(),
    )


@pytest.fixture
def other_trainer_fixture() -> Trainer:
    return Trainer(id=2, email="other@example.com", password="x", pt_code=654321)


@pytest.fixture
def client_fixture(trainer_fixture) -> Client:
    return Client(
        id=10,
        username="anna",
        code=auth_service.hash_password("4321"),
        email_or_nickname="anna@example.com",
        trainer_id=trainer_fixture.id,
        trainer=trainer_fixture,
        height=None,
        created_at=datetime.utcnow(),
    )


@pytest.fixture
def foreign_client_fixture(other_trainer_fixture) -> Client:
    return Client(
        id=20,
        username="bruno",
        code="x",
        trainer_id=other_trainer_fixture.id,
        trainer=other_trainer_fixture,
    )


@pytest.fixture
def workout_fixture(client_fixture, trainer_fixture) -> Workout:
    return Workout(
        id=5,
        client_id=client_fixture.id,
        creator=trainer_fixture.email,
        name="Upper Body",
        comments="Keep the elbows tucked",
        exercises=[
            Exercise(id=1, position=0, name="Bench Press (Chest)", sets=3, repetitions=8,
                     set_weights=[50, 50, 55], rest_time=90),
            Exercise(id=2, position=1, name="Row (Back)", sets=3, repetitions=10,
                     set_weights=[], rest_time=60),
        ],
    )


@pytest.fixture
def trainer_session(trainer_fixture) -> SessionContext:
    return auth_service.trainer_session(trainer_fixture)


@pytest.fixture
def client_session(client_fixture) -> SessionContext:
    return auth_service.client_session(client_fixture)


@pytest.fixture
def admin_session() -> SessionContext:
    return SessionContext(auth_type=AuthType.admin, username="admin")


# ---------------------------------------------------------------------------
# Dependency mocks
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_trainers() -> AsyncMock:
    return AsyncMock(spec=TrainerRepository)


@pytest.fixture
def mock_clients() -> AsyncMock:
    return AsyncMock(spec=ClientRepository)


@pytest.fixture
def mock_workouts() -> AsyncMock:
    return AsyncMock(spec=WorkoutRepository)


@pytest.fixture
def mock_progress() -> AsyncMock:
    return AsyncMock(spec=ProgressRepository)


@pytest.fixture
def mock_bookings() -> AsyncMock:
    return AsyncMock(spec=BookingRepository)


@pytest.fixture
def cache() -> RecordingCache:
    return RecordingCache()


@pytest.fixture
def make_api(mock_trainers, mock_clients, mock_workouts, mock_progress, mock_bookings, cache):
    """Factory of HTTP clients bound to the test app, optionally logged in."""

    def _make(session: Optional[SessionContext] = None) -> AsyncClient:
        app = create_test_app()
        app.dependency_overrides[get_trainer_repository] = lambda: mock_trainers
        app.dependency_overrides[get_client_repository] = lambda: mock_clients
        app.dependency_overrides[get_workout_repository] = lambda: mock_workouts
        app.dependency_overrides[get_progress_repository] = lambda: mock_progress
        app.dependency_overrides[get_booking_repository] = lambda: mock_bookings
        app.dependency_overrides[get_query_cache] = lambda: cache
        if session is not None:
            app.dependency_overrides[get_current_session] = lambda: session
        client = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        return client

    return _make


# ---------------------------------------------------------------------------
# HTTP clients
# ---------------------------------------------------------------------------

@pytest.fixture
async def anon_api(make_api) -> AsyncGenerator[AsyncClient, None]:
    """Not logged in: the real bearer-token check applies."""
    async with make_api() as ac:
        yield ac


@pytest.fixture
async def trainer_api(make_api, trainer_session) -> AsyncGenerator[AsyncClient, None]:
    async with make_api(trainer_session) as ac:
        yield ac


@pytest.fixture
async def client_api(make_api, client_session) -> AsyncGenerator[AsyncClient, None]:
    async with make_api(client_session) as ac:
        yield ac


@pytest.fixture
async def admin_api(make_api, admin_session) -> AsyncGenerator[AsyncClient, None]:
    async with make_api(admin_session) as ac:
        yield ac
