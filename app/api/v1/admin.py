from typing import List

from fastapi import APIRouter, Depends

from app.core.dependencies import (
    get_booking_repository,
    get_client_repository,
    get_trainer_repository,
    get_workout_repository,
)
from app.core.rbac import require_admin
from app.core.session import SessionContext
from app.repositories.booking_repository import BookingRepository
from app.repositories.client_repository import ClientRepository
from app.repositories.trainer_repository import TrainerRepository
from app.repositories.workout_repository import WorkoutRepository
from app.schemas.admin import AdminTrainerOverview, PlatformStats, TrainerDetails
from app.schemas.client import ClientProfile

router = APIRouter(tags=["admin"])


@router.get("/overview", response_model=List[AdminTrainerOverview])
async def get_admin_overview(
    session: SessionContext = Depends(require_admin),
    trainers: TrainerRepository = Depends(get_trainer_repository),
):
    """Every trainer with their PT code and client roster."""
    return [
        AdminTrainerOverview(
            trainer_id=trainer.id,
            email=trainer.email,
            pt_code=trainer.pt_code,
            clients=[ClientProfile.model_validate(client) for client in trainer.clients],
        )
        for trainer in await trainers.list_with_clients()
    ]


@router.get("/trainers", response_model=List[TrainerDetails])
async def get_all_trainers(
    session: SessionContext = Depends(require_admin),
    trainers: TrainerRepository = Depends(get_trainer_repository),
):
    return [TrainerDetails.model_validate(trainer) for trainer in await trainers.list_all()]


@router.get("/stats", response_model=PlatformStats)
async def get_platform_stats(
    session: SessionContext = Depends(require_admin),
    trainers: TrainerRepository = Depends(get_trainer_repository),
    clients: ClientRepository = Depends(get_client_repository),
    workouts: WorkoutRepository = Depends(get_workout_repository),
    bookings: BookingRepository = Depends(get_booking_repository),
):
    return PlatformStats(
        trainers=await trainers.count(),
        clients=await clients.count(),
        workouts=await workouts.count(),
        workout_logs=await workouts.count_logs(),
        bookings=await bookings.count(),
    )
