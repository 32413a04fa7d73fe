"""
Integration tests for /api/v1/bookings/*.

Covered:
- trainer creates, updates and deletes their own bookings
- another trainer's booking is reported as missing
- range queries by start/end or by day, bad ranges rejected
- clients request appointments (unconfirmed) and list their confirmed ones
"""

from datetime import date

import pytest

from app.models.booking import Booking
from app.services.booking_time import day_bounds_nanos

pytestmark = pytest.mark.integration

NINE_AM = 1_773_478_800_000_000_000  # 2026-03-14 09:00 UTC


def booking_json(**overrides) -> dict:
    data = {
        "client_name": "anna",
        "client_email": "anna@example.com",
        "date_time": NINE_AM,
        "duration_minutes": 60,
        "notes": "",
        "is_confirmed": True,
    }
    data.update(overrides)
    return data


def make_booking(booking_id=3, trainer_id=1, **overrides) -> Booking:
    return Booking(id=booking_id, trainer_id=trainer_id, **booking_json(**overrides))


@pytest.mark.asyncio
async def test_create_booking(trainer_api, mock_bookings):
    mock_bookings.create.return_value = make_booking()

    response = await trainer_api.post("/api/v1/bookings", json=booking_json())

    assert response.status_code == 200
    assert response.json() == {"id": 3}
    trainer_id, data = mock_bookings.create.await_args.args
    assert trainer_id == 1
    assert data.date_time == NINE_AM


@pytest.mark.asyncio
async def test_create_booking_requires_duration(trainer_api, mock_bookings):
    response = await trainer_api.post("/api/v1/bookings", json=booking_json(duration_minutes=0))
    assert response.status_code == 422
    mock_bookings.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_own_booking(trainer_api, mock_bookings):
    mock_bookings.get_by_id.return_value = make_booking()
    mock_bookings.update.return_value = make_booking(notes="Bring a towel")

    response = await trainer_api.put("/api/v1/bookings/3", json=booking_json(notes="Bring a towel"))

    assert response.status_code == 200
    assert response.json()["notes"] == "Bring a towel"


@pytest.mark.asyncio
async def test_other_trainers_booking_not_found(trainer_api, mock_bookings):
    mock_bookings.get_by_id.return_value = make_booking(trainer_id=2)

    update = await trainer_api.put("/api/v1/bookings/3", json=booking_json())
    delete = await trainer_api.delete("/api/v1/bookings/3")

    assert update.status_code == 404
    assert delete.status_code == 404
    mock_bookings.delete.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_booking(trainer_api, mock_bookings):
    booking = make_booking()
    mock_bookings.get_by_id.return_value = booking
    response = await trainer_api.delete("/api/v1/bookings/3")
    assert response.status_code == 200
    mock_bookings.delete.assert_awaited_once_with(booking)


@pytest.mark.asyncio
async def test_bookings_in_range(trainer_api, mock_bookings):
    mock_bookings.list_in_range.return_value = [make_booking()]

    response = await trainer_api.get("/api/v1/bookings", params={"start": 0, "end": NINE_AM})

    assert response.status_code == 200
    assert response.json()[0]["date_time"] == NINE_AM
    mock_bookings.list_in_range.assert_awaited_once_with(1, 0, NINE_AM)


@pytest.mark.asyncio
async def test_bookings_for_day(trainer_api, mock_bookings):
    mock_bookings.list_in_range.return_value = []
    response = await trainer_api.get("/api/v1/bookings", params={"day": "2026-03-14"})
    assert response.status_code == 200
    mock_bookings.list_in_range.assert_awaited_once_with(1, *day_bounds_nanos(date(2026, 3, 14)))


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{}, {"start": 10}, {"start": 10, "end": 5}])
async def test_bad_range_rejected(trainer_api, mock_bookings, params):
    response = await trainer_api.get("/api/v1/bookings", params=params)
    assert response.status_code == 400
    assert response.json()["kind"] == "validation"
    mock_bookings.list_in_range.assert_not_awaited()


@pytest.mark.asyncio
async def test_clients_cannot_manage_bookings(client_api):
    response = await client_api.post("/api/v1/bookings", json=booking_json())
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_client_requests_appointment(client_api, mock_bookings):
    mock_bookings.create.return_value = make_booking(booking_id=8, is_confirmed=False)
    payload = booking_json()
    del payload["is_confirmed"]

    response = await client_api.post("/api/v1/bookings/appointments", json=payload)

    assert response.status_code == 200
    assert response.json() == {"id": 8}
    trainer_id, data = mock_bookings.create.await_args.args
    assert trainer_id == 1
    assert data.is_confirmed is False


@pytest.mark.asyncio
async def test_client_confirmed_appointments(client_api, mock_clients, mock_bookings, client_fixture):
    mock_clients.get_by_id.return_value = client_fixture
    mock_bookings.list_confirmed_for_client.return_value = [make_booking()]

    response = await client_api.get("/api/v1/bookings/appointments/confirmed")

    assert response.status_code == 200
    assert len(response.json()) == 1
    mock_bookings.list_confirmed_for_client.assert_awaited_once_with(1, "anna", "anna@example.com")
