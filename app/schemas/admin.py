from pydantic import BaseModel
from typing import List, Optional

from app.schemas.client import ClientProfile


class TrainerDetails(BaseModel):
    pt_code: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    class Config:
        from_attributes = True


class AdminTrainerOverview(BaseModel):
    trainer_id: int
    email: str
    pt_code: int
    clients: List[ClientProfile]


class PlatformStats(BaseModel):
    trainers: int
    clients: int
    workouts: int
    workout_logs: int
    bookings: int
