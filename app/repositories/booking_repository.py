from typing import List, Optional

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.booking import Booking
from app.schemas.booking import BookingUpdate


class BookingRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, booking_id: int) -> Optional[Booking]:
        result = await self.db.execute(select(Booking).where(Booking.id == booking_id))
        return result.scalar_one_or_none()

    async def create(self, trainer_id: int, data: BookingUpdate) -> Booking:
        booking = Booking(trainer_id=trainer_id, **data.model_dump())
        self.db.add(booking)
        await self.db.commit()
        await self.db.refresh(booking)
        return booking

    async def update(self, booking: Booking, data: BookingUpdate) -> Booking:
        for field, value in data.model_dump().items():
            setattr(booking, field, value)
        await self.db.commit()
        return booking

    async def delete(self, booking: Booking) -> None:
        await self.db.delete(booking)
        await self.db.commit()

    async def list_in_range(self, trainer_id: int, start: int, end: int) -> List[Booking]:
        result = await self.db.execute(
            select(Booking)
            .where(
                Booking.trainer_id == trainer_id,
                Booking.date_time >= start,
                Booking.date_time <= end,
            )
            .order_by(Booking.date_time)
        )
        return list(result.scalars().all())

    async def list_confirmed_for_client(
        self, trainer_id: int, username: str, email: Optional[str]
    ) -> List[Booking]:
        matches = [Booking.client_name == username]
        if email:
            matches.append(Booking.client_email == email)
        result = await self.db.execute(
            select(Booking)
            .where(
                Booking.trainer_id == trainer_id,
                Booking.is_confirmed.is_(True),
                or_(*matches),
            )
            .order_by(Booking.date_time)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Booking))
        return result.scalar_one()
