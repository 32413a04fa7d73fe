from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AlreadyExists
from app.models.workout import Workout, Exercise
from app.models.workout_log import WorkoutLog
from app.schemas.workout import ExerciseIn, WorkoutLogIn


def _exercise_rows(exercises: List[ExerciseIn]) -> List[Exercise]:
    return [
        Exercise(
            position=position,
            name=exercise.name,
            sets=exercise.sets,
            repetitions=exercise.repetitions,
            set_weights=list(exercise.set_weights),
            rest_time=exercise.rest_time,
        )
        for position, exercise in enumerate(exercises)
    ]


class WorkoutRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, workout_id: int) -> Optional[Workout]:
        result = await self.db.execute(select(Workout).where(Workout.id == workout_id))
        return result.scalar_one_or_none()

    async def create(
        self, client_id: int, creator: str, name: str, exercises: List[ExerciseIn], comments: str
    ) -> Workout:
        workout = Workout(
            client_id=client_id,
            creator=creator,
            name=name,
            comments=comments,
            exercises=_exercise_rows(exercises),
        )
        self.db.add(workout)
        await self.db.commit()
        await self.db.refresh(workout, attribute_names=["exercises"])
        return workout

    async def update(self, workout: Workout, exercises: List[ExerciseIn], comments: str) -> Workout:
        """Replace the exercises and comments wholesale."""
        workout.exercises = _exercise_rows(exercises)
        workout.comments = comments
        await self.db.commit()
        await self.db.refresh(workout, attribute_names=["exercises"])
        return workout

    async def list_for_client(self, client_id: int) -> List[Workout]:
        result = await self.db.execute(
            select(Workout).where(Workout.client_id == client_id).order_by(Workout.id)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Workout))
        return result.scalar_one()

    # ------------------------------------------------------------------
    # Logged sessions (append only)
    # ------------------------------------------------------------------

    async def get_log_by_key(self, client_id: int, log_key: str) -> Optional[WorkoutLog]:
        result = await self.db.execute(
            select(WorkoutLog).where(WorkoutLog.client_id == client_id, WorkoutLog.log_key == log_key)
        )
        return result.scalar_one_or_none()

    async def add_log(self, client_id: int, log_key: str, log: WorkoutLogIn) -> WorkoutLog:
        entry = WorkoutLog(
            log_key=log_key,
            client_id=client_id,
            workout_name=log.workout_name,
            date=log.date,
            completed=log.completed,
            client_notes=log.client_notes,
            comments=log.comments,
            exercises=[exercise.model_dump() for exercise in log.exercises],
        )
        self.db.add(entry)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise AlreadyExists("This session has already been logged") from e
        await self.db.refresh(entry)
        return entry

    async def list_logs_for_client(self, client_id: int) -> List[WorkoutLog]:
        result = await self.db.execute(
            select(WorkoutLog).where(WorkoutLog.client_id == client_id).order_by(WorkoutLog.id)
        )
        return list(result.scalars().all())

    async def count_logs(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(WorkoutLog))
        return result.scalar_one()
