import logging
from typing import List

from fastapi import APIRouter, Depends

from app.core.dependencies import (
    get_client_repository,
    get_current_session,
    get_query_cache,
    get_workout_repository,
)
from app.core.errors import AlreadyExists, Forbidden, NotFound
from app.core.rbac import can_access_client, load_client_for, require_client, require_trainer
from app.core.session import SessionContext
from app.models.client import Client
from app.models.workout import Workout
from app.models.workout_log import WorkoutLog
from app.repositories.client_repository import ClientRepository
from app.repositories.workout_repository import WorkoutRepository
from app.schemas.workout import (
    ExerciseIn,
    ExerciseOut,
    WorkoutDraft,
    WorkoutLogDraft,
    WorkoutLogResponse,
    WorkoutResponse,
    WorkoutUpdateDraft,
)
from app.services.query_cache import LOGS_VIEW, WORKOUTS_VIEW, QueryCache
from app.services.workout_builder import workout_builder, workout_log_builder

logger = logging.getLogger(__name__)

router = APIRouter(tags=["workouts"])


# ==========================
# HELPERS
# ==========================

def to_workout_response(workout: Workout, client_username: str) -> WorkoutResponse:
    return WorkoutResponse(
        id=workout.id,
        creator=workout.creator,
        name=workout.name,
        client_username=client_username,
        comments=workout.comments or "",
        exercises=[ExerciseOut.model_validate(exercise) for exercise in workout.exercises],
    )


def to_log_response(log: WorkoutLog, client_username: str) -> WorkoutLogResponse:
    return WorkoutLogResponse(
        log_key=log.log_key,
        workout_name=log.workout_name,
        client_username=client_username,
        date=log.date,
        completed=log.completed,
        client_notes=log.client_notes,
        comments=log.comments or "",
        exercises=log.exercises or [],
    )


async def _create_workout(
    draft: WorkoutDraft,
    client: Client,
    creator: str,
    workouts: WorkoutRepository,
    cache: QueryCache,
) -> WorkoutResponse:
    async def submit(name: str, exercises: List[ExerciseIn], comments: str) -> Workout:
        return await workouts.create(client.id, creator, name, exercises, comments)

    async def invalidate() -> None:
        await cache.invalidate(client.username, WORKOUTS_VIEW)

    workout = await workout_builder.submit(draft, submit, invalidate)
    return to_workout_response(workout, client.username)


async def _load_workout_for(
    session: SessionContext,
    workout_id: int,
    workouts: WorkoutRepository,
    clients: ClientRepository,
):
    workout = await workouts.get_by_id(workout_id)
    if workout is None:
        raise NotFound("Workout not found")
    client = await clients.get_by_id(workout.client_id)
    if client is None or not can_access_client(session, client):
        raise NotFound("Workout not found")
    return workout, client


# ==========================
# ENDPOINTS
# ==========================

@router.post("/clients/{username}", response_model=WorkoutResponse)
async def create_workout_for_client(
    username: str,
    draft: WorkoutDraft,
    session: SessionContext = Depends(require_trainer),
    clients: ClientRepository = Depends(get_client_repository),
    workouts: WorkoutRepository = Depends(get_workout_repository),
    cache: QueryCache = Depends(get_query_cache),
):
    client = await load_client_for(session, username, clients)
    return await _create_workout(draft, client, session.username, workouts, cache)


@router.post("/own", response_model=WorkoutResponse)
async def create_own_workout(
    draft: WorkoutDraft,
    session: SessionContext = Depends(require_client),
    clients: ClientRepository = Depends(get_client_repository),
    workouts: WorkoutRepository = Depends(get_workout_repository),
    cache: QueryCache = Depends(get_query_cache),
):
    client = await load_client_for(session, session.username, clients)
    return await _create_workout(draft, client, session.username, workouts, cache)


@router.put("/{workout_id}", response_model=WorkoutResponse)
async def update_workout(
    workout_id: int,
    draft: WorkoutUpdateDraft,
    session: SessionContext = Depends(get_current_session),
    clients: ClientRepository = Depends(get_client_repository),
    workouts: WorkoutRepository = Depends(get_workout_repository),
    cache: QueryCache = Depends(get_query_cache),
):
    """Replace a workout's exercises and comments."""
    workout, client = await _load_workout_for(session, workout_id, workouts, clients)
    if session.is_client and workout.creator != session.username:
        raise Forbidden("Only the author can edit this workout")

    exercises = workout_builder.build_exercises(draft.exercises)
    workout = await workouts.update(workout, exercises, draft.comments.strip())
    await cache.invalidate(client.username, WORKOUTS_VIEW)
    return to_workout_response(workout, client.username)


@router.get("/clients/{username}", response_model=List[WorkoutResponse])
async def get_workouts_for_client(
    username: str,
    session: SessionContext = Depends(get_current_session),
    clients: ClientRepository = Depends(get_client_repository),
    workouts: WorkoutRepository = Depends(get_workout_repository),
    cache: QueryCache = Depends(get_query_cache),
):
    client = await load_client_for(session, username, clients)

    async def load():
        rows = await workouts.list_for_client(client.id)
        return [to_workout_response(row, client.username).model_dump() for row in rows]

    return await cache.get_or_load(WORKOUTS_VIEW, client.username, load)


@router.post("/{workout_id}/logs", response_model=WorkoutLogResponse)
async def log_workout_completion(
    workout_id: int,
    draft: WorkoutLogDraft,
    session: SessionContext = Depends(require_client),
    clients: ClientRepository = Depends(get_client_repository),
    workouts: WorkoutRepository = Depends(get_workout_repository),
    cache: QueryCache = Depends(get_query_cache),
):
    """Record what the client actually did for one of their workouts."""
    workout, client = await _load_workout_for(session, workout_id, workouts, clients)
    planned = [ExerciseOut.model_validate(exercise) for exercise in workout.exercises]
    log = workout_log_builder.build(workout.name, client.username, workout.comments or "", planned, draft)

    log_key = workout_log_builder.log_key(workout.name)
    if await workouts.get_log_by_key(client.id, log_key) is not None:
        raise AlreadyExists("This session has already been logged")

    entry = await workouts.add_log(client.id, log_key, log)
    await cache.invalidate(client.username, LOGS_VIEW)
    logger.info("Client %s logged '%s' (completed=%s)", client.username, workout.name, log.completed)
    return to_log_response(entry, client.username)


@router.get("/logs/{username}", response_model=List[WorkoutLogResponse])
async def get_workout_logs_for_client(
    username: str,
    session: SessionContext = Depends(get_current_session),
    clients: ClientRepository = Depends(get_client_repository),
    workouts: WorkoutRepository = Depends(get_workout_repository),
    cache: QueryCache = Depends(get_query_cache),
):
    client = await load_client_for(session, username, clients)

    async def load():
        rows = await workouts.list_logs_for_client(client.id)
        return [to_log_response(row, client.username).model_dump() for row in rows]

    return await cache.get_or_load(LOGS_VIEW, client.username, load)
