"""Conversions between calendar inputs and the nanosecond timestamps bookings use."""
from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple

NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_MICROSECOND = 1_000
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def build_datetime_from_inputs(date_str: str, time_str: str) -> datetime:
    """``YYYY-MM-DD`` + ``HH:MM`` -> aware UTC datetime."""
    year, month, day = (int(part) for part in date_str.split("-"))
    hours, minutes = (int(part) for part in time_str.split(":")[:2])
    return datetime(year, month, day, hours, minutes, tzinfo=timezone.utc)


def compute_duration_minutes(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() // 60)


def datetime_to_nanos(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    delta = moment - EPOCH
    seconds = delta.days * 86400 + delta.seconds
    return seconds * NANOS_PER_SECOND + delta.microseconds * NANOS_PER_MICROSECOND


def nanos_to_datetime(nanos: int) -> datetime:
    return EPOCH + timedelta(microseconds=nanos // NANOS_PER_MICROSECOND)


def format_date_for_input(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d")


def format_time_for_input(moment: datetime) -> str:
    return moment.strftime("%H:%M")


def format_booking_time(nanos: int) -> str:
    return format_time_for_input(nanos_to_datetime(nanos))


def day_bounds_nanos(day: date) -> Tuple[int, int]:
    """First and last nanosecond of a UTC day, for range queries."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    end = start + timedelta(days=1)
    return datetime_to_nanos(start), datetime_to_nanos(end) - 1


def booking_end_nanos(start_nanos: int, duration_minutes: int) -> int:
    return start_nanos + duration_minutes * 60 * NANOS_PER_SECOND
