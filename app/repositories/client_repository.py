from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.client import Client


class ClientRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, client_id: int) -> Optional[Client]:
        result = await self.db.execute(select(Client).where(Client.id == client_id))
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[Client]:
        result = await self.db.execute(
            select(Client).options(selectinload(Client.trainer)).where(Client.username == username)
        )
        return result.scalar_one_or_none()

    async def create(self, client: Client) -> Client:
        self.db.add(client)
        await self.db.commit()
        await self.db.refresh(client)
        return client

    async def list_for_trainer(self, trainer_id: int) -> List[Client]:
        result = await self.db.execute(
            select(Client).where(Client.trainer_id == trainer_id).order_by(Client.username)
        )
        return list(result.scalars().all())

    async def update_code(self, client: Client, code_hash: str) -> None:
        client.code = code_hash
        await self.db.commit()

    async def set_height(self, client: Client, height: int) -> None:
        client.height = height
        await self.db.commit()

    async def update_email(self, client: Client, email_or_nickname: Optional[str]) -> None:
        client.email_or_nickname = email_or_nickname
        await self.db.commit()

    async def save_refresh_token(self, client: Client, refresh_token: Optional[str], expires: Optional[datetime]) -> None:
        client.refresh_token = refresh_token
        client.refresh_token_expires = expires
        await self.db.commit()

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Client))
        return result.scalar_one()
