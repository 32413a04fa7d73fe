from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.trainer import Trainer


class TrainerRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, trainer_id: int) -> Optional[Trainer]:
        result = await self.db.execute(select(Trainer).where(Trainer.id == trainer_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[Trainer]:
        result = await self.db.execute(select(Trainer).where(Trainer.email == email))
        return result.scalar_one_or_none()

    async def get_by_pt_code(self, pt_code: int) -> Optional[Trainer]:
        result = await self.db.execute(select(Trainer).where(Trainer.pt_code == pt_code))
        return result.scalar_one_or_none()

    async def create(self, trainer: Trainer) -> Trainer:
        self.db.add(trainer)
        await self.db.commit()
        await self.db.refresh(trainer)
        return trainer

    async def set_identity(self, trainer: Trainer, first_name: str, last_name: str) -> Trainer:
        trainer.first_name = first_name
        trainer.last_name = last_name
        await self.db.commit()
        return trainer

    async def save_refresh_token(self, trainer: Trainer, refresh_token: Optional[str], expires: Optional[datetime]) -> None:
        trainer.refresh_token = refresh_token
        trainer.refresh_token_expires = expires
        await self.db.commit()

    async def list_all(self) -> List[Trainer]:
        result = await self.db.execute(select(Trainer).order_by(Trainer.id))
        return list(result.scalars().all())

    async def list_with_clients(self) -> List[Trainer]:
        result = await self.db.execute(
            select(Trainer).options(selectinload(Trainer.clients)).order_by(Trainer.id)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Trainer))
        return result.scalar_one()
