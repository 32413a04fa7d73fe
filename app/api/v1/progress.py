from typing import List

from fastapi import APIRouter, Depends

from app.core.dependencies import (
    get_client_repository,
    get_current_session,
    get_progress_repository,
    get_query_cache,
)
from app.core.rbac import load_client_for
from app.core.session import SessionContext
from app.repositories.client_repository import ClientRepository
from app.repositories.progress_repository import ProgressRepository
from app.schemas.progress import (
    BodyWeightEntryOut,
    BodyWeightIn,
    ExercisePerformanceIn,
    ExercisePerformanceOut,
    WorkoutProgressIn,
    WorkoutProgressOut,
)
from app.services.query_cache import PROGRESS_VIEW, QueryCache

router = APIRouter(tags=["progress"])


# ==========================
# BODY WEIGHT
# ==========================

@router.post("/{username}/body-weight", response_model=BodyWeightEntryOut)
async def add_body_weight_entry(
    username: str,
    entry: BodyWeightIn,
    session: SessionContext = Depends(get_current_session),
    clients: ClientRepository = Depends(get_client_repository),
    progress: ProgressRepository = Depends(get_progress_repository),
):
    client = await load_client_for(session, username, clients)
    row = await progress.add_body_weight(client.id, entry)
    return BodyWeightEntryOut.model_validate(row)


@router.get("/{username}/body-weight", response_model=List[BodyWeightEntryOut])
async def get_body_weight_history(
    username: str,
    session: SessionContext = Depends(get_current_session),
    clients: ClientRepository = Depends(get_client_repository),
    progress: ProgressRepository = Depends(get_progress_repository),
):
    client = await load_client_for(session, username, clients)
    return [BodyWeightEntryOut.model_validate(row) for row in await progress.list_body_weights(client.id)]


# ==========================
# EXERCISE PERFORMANCE
# ==========================

@router.post("/{username}/performance", response_model=ExercisePerformanceOut)
async def add_exercise_performance(
    username: str,
    entry: ExercisePerformanceIn,
    session: SessionContext = Depends(get_current_session),
    clients: ClientRepository = Depends(get_client_repository),
    progress: ProgressRepository = Depends(get_progress_repository),
):
    client = await load_client_for(session, username, clients)
    row = await progress.add_performance(client.id, entry)
    return ExercisePerformanceOut.model_validate(row)


@router.get("/{username}/performance", response_model=List[ExercisePerformanceOut])
async def get_exercise_performance_history(
    username: str,
    session: SessionContext = Depends(get_current_session),
    clients: ClientRepository = Depends(get_client_repository),
    progress: ProgressRepository = Depends(get_progress_repository),
):
    client = await load_client_for(session, username, clients)
    return [ExercisePerformanceOut.model_validate(row) for row in await progress.list_performances(client.id)]


# ==========================
# WORKOUT PROGRESS
# ==========================

@router.post("/{username}/workouts", response_model=WorkoutProgressOut)
async def add_workout_progress(
    username: str,
    entry: WorkoutProgressIn,
    session: SessionContext = Depends(get_current_session),
    clients: ClientRepository = Depends(get_client_repository),
    progress: ProgressRepository = Depends(get_progress_repository),
    cache: QueryCache = Depends(get_query_cache),
):
    client = await load_client_for(session, username, clients)
    row = await progress.add_progress(client.id, entry)
    await cache.invalidate(client.username, PROGRESS_VIEW)
    return WorkoutProgressOut.model_validate(row)


@router.get("/{username}/workouts", response_model=List[WorkoutProgressOut])
async def get_client_progress(
    username: str,
    session: SessionContext = Depends(get_current_session),
    clients: ClientRepository = Depends(get_client_repository),
    progress: ProgressRepository = Depends(get_progress_repository),
    cache: QueryCache = Depends(get_query_cache),
):
    client = await load_client_for(session, username, clients)

    async def load():
        rows = await progress.list_progress(client.id)
        return [WorkoutProgressOut.model_validate(row).model_dump() for row in rows]

    return await cache.get_or_load(PROGRESS_VIEW, client.username, load)
