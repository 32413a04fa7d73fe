from pydantic import BaseModel, Field
from typing import List

from app.schemas.workout import ExerciseIn


class BodyWeightIn(BaseModel):
    weight: int = Field(ge=0)
    date: str


class BodyWeightEntryOut(BodyWeightIn):
    class Config:
        from_attributes = True


class ExercisePerformanceIn(BaseModel):
    date: str
    exercise: ExerciseIn


class ExercisePerformanceOut(ExercisePerformanceIn):
    class Config:
        from_attributes = True


class WorkoutProgressIn(BaseModel):
    date: str
    exercises: List[ExerciseIn] = Field(default_factory=list)
    comments: str = ""


class WorkoutProgressOut(WorkoutProgressIn):
    class Config:
        from_attributes = True
