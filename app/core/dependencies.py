from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.session import SessionContext
from app.repositories.booking_repository import BookingRepository
from app.repositories.client_repository import ClientRepository
from app.repositories.progress_repository import ProgressRepository
from app.repositories.trainer_repository import TrainerRepository
from app.repositories.workout_repository import WorkoutRepository
from app.services.auth_service import auth_service
from app.services.query_cache import QueryCache, query_cache


security = HTTPBearer()


def get_trainer_repository(db: AsyncSession = Depends(get_db)) -> TrainerRepository:
    """Repository factories are injected into endpoints through Depends."""
    return TrainerRepository(db)


def get_client_repository(db: AsyncSession = Depends(get_db)) -> ClientRepository:
    return ClientRepository(db)


def get_workout_repository(db: AsyncSession = Depends(get_db)) -> WorkoutRepository:
    return WorkoutRepository(db)


def get_progress_repository(db: AsyncSession = Depends(get_db)) -> ProgressRepository:
    return ProgressRepository(db)


def get_booking_repository(db: AsyncSession = Depends(get_db)) -> BookingRepository:
    return BookingRepository(db)


def get_query_cache() -> QueryCache:
    return query_cache


async def get_current_session(
        credentials: HTTPAuthorizationCredentials = Depends(security),
) -> SessionContext:
    session = auth_service.decode_access_token(credentials.credentials)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid access token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session
