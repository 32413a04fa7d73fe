from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.core.dependencies import get_booking_repository, get_client_repository
from app.core.errors import NotFound, ValidationFailed
from app.core.rbac import require_client, require_trainer
from app.core.session import SessionContext
from app.models.booking import Booking
from app.repositories.booking_repository import BookingRepository
from app.repositories.client_repository import ClientRepository
from app.schemas.booking import AppointmentRequest, BookingCreated, BookingOut, BookingUpdate
from app.services.booking_time import day_bounds_nanos

router = APIRouter(tags=["bookings"])


async def _own_booking(session: SessionContext, booking_id: int, bookings: BookingRepository) -> Booking:
    booking = await bookings.get_by_id(booking_id)
    if booking is None or booking.trainer_id != session.trainer_id:
        raise NotFound("Booking not found")
    return booking


@router.post("", response_model=BookingCreated)
async def create_booking(
    data: BookingUpdate,
    session: SessionContext = Depends(require_trainer),
    bookings: BookingRepository = Depends(get_booking_repository),
):
    booking = await bookings.create(session.trainer_id, data)
    return BookingCreated(id=booking.id)


@router.put("/{booking_id}", response_model=BookingOut)
async def update_booking(
    booking_id: int,
    data: BookingUpdate,
    session: SessionContext = Depends(require_trainer),
    bookings: BookingRepository = Depends(get_booking_repository),
):
    booking = await _own_booking(session, booking_id, bookings)
    booking = await bookings.update(booking, data)
    return BookingOut.model_validate(booking)


@router.delete("/{booking_id}")
async def delete_booking(
    booking_id: int,
    session: SessionContext = Depends(require_trainer),
    bookings: BookingRepository = Depends(get_booking_repository),
):
    booking = await _own_booking(session, booking_id, bookings)
    await bookings.delete(booking)
    return {"message": "Booking deleted"}


@router.get("", response_model=List[BookingOut])
async def get_bookings_by_date_range(
    start: Optional[int] = Query(None, ge=0, description="Range start, ns since epoch"),
    end: Optional[int] = Query(None, ge=0, description="Range end, ns since epoch"),
    day: Optional[date] = Query(None, description="Whole UTC day instead of start/end"),
    session: SessionContext = Depends(require_trainer),
    bookings: BookingRepository = Depends(get_booking_repository),
):
    if day is not None:
        start, end = day_bounds_nanos(day)
    if start is None or end is None:
        raise ValidationFailed("Either a day or both start and end are required")
    if start > end:
        raise ValidationFailed("Range start must be before range end")

    rows = await bookings.list_in_range(session.trainer_id, start, end)
    return [BookingOut.model_validate(row) for row in rows]


@router.post("/appointments", response_model=BookingCreated)
async def request_appointment(
    data: AppointmentRequest,
    session: SessionContext = Depends(require_client),
    bookings: BookingRepository = Depends(get_booking_repository),
):
    """A client asks their trainer for a slot; the trainer confirms it later."""
    booking = await bookings.create(
        session.trainer_id,
        BookingUpdate(**data.model_dump(), is_confirmed=False),
    )
    return BookingCreated(id=booking.id)


@router.get("/appointments/confirmed", response_model=List[BookingOut])
async def get_confirmed_appointments_for_client(
    session: SessionContext = Depends(require_client),
    clients: ClientRepository = Depends(get_client_repository),
    bookings: BookingRepository = Depends(get_booking_repository),
):
    client = await clients.get_by_id(session.subject_id)
    if client is None:
        raise NotFound("Client not found")
    rows = await bookings.list_confirmed_for_client(
        client.trainer_id, client.username, client.email_or_nickname
    )
    return [BookingOut.model_validate(row) for row in rows]
