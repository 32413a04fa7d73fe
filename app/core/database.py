import logging

from app.core.config import settings
from app.core.base import Base
from app.core.db import engine

# Every model has to be imported before create_all
from app.models.trainer import Trainer
from app.models.client import Client
from app.models.workout import Workout, Exercise
from app.models.workout_log import WorkoutLog
from app.models.progress import BodyWeightEntry, ExercisePerformance, WorkoutProgress
from app.models.booking import Booking

logger = logging.getLogger(__name__)


async def init_database():
    """Create (and optionally drop first) all tables."""
    async with engine.begin() as conn:
        if settings.RESET_DATABASE:
            logger.warning("RESET_DATABASE=true - dropping all tables")
            await conn.run_sync(Base.metadata.drop_all)

        await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created/verified")
