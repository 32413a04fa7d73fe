from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.progress import BodyWeightEntry, ExercisePerformance, WorkoutProgress
from app.schemas.progress import BodyWeightIn, ExercisePerformanceIn, WorkoutProgressIn


class ProgressRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _add(self, row):
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        return row

    async def add_body_weight(self, client_id: int, entry: BodyWeightIn) -> BodyWeightEntry:
        return await self._add(BodyWeightEntry(client_id=client_id, weight=entry.weight, date=entry.date))

    async def list_body_weights(self, client_id: int) -> List[BodyWeightEntry]:
        result = await self.db.execute(
            select(BodyWeightEntry)
            .where(BodyWeightEntry.client_id == client_id)
            .order_by(BodyWeightEntry.date, BodyWeightEntry.id)
        )
        return list(result.scalars().all())

    async def add_performance(self, client_id: int, entry: ExercisePerformanceIn) -> ExercisePerformance:
        return await self._add(
            ExercisePerformance(client_id=client_id, date=entry.date, exercise=entry.exercise.model_dump())
        )

    async def list_performances(self, client_id: int) -> List[ExercisePerformance]:
        result = await self.db.execute(
            select(ExercisePerformance)
            .where(ExercisePerformance.client_id == client_id)
            .order_by(ExercisePerformance.date, ExercisePerformance.id)
        )
        return list(result.scalars().all())

    async def add_progress(self, client_id: int, entry: WorkoutProgressIn) -> WorkoutProgress:
        return await self._add(
            WorkoutProgress(
                client_id=client_id,
                date=entry.date,
                exercises=[exercise.model_dump() for exercise in entry.exercises],
                comments=entry.comments,
            )
        )

    async def list_progress(self, client_id: int) -> List[WorkoutProgress]:
        result = await self.db.execute(
            select(WorkoutProgress)
            .where(WorkoutProgress.client_id == client_id)
            .order_by(WorkoutProgress.date, WorkoutProgress.id)
        )
        return list(result.scalars().all())
