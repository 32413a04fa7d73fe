from app.models.trainer import Trainer
from app.models.client import Client
from app.models.workout import Workout, Exercise
from app.models.workout_log import WorkoutLog
from app.models.progress import BodyWeightEntry, ExercisePerformance, WorkoutProgress
from app.models.booking import Booking

__all__ = [
    "Trainer", "Client",
    "Workout", "Exercise",
    "WorkoutLog",
    "BodyWeightEntry", "ExercisePerformance", "WorkoutProgress",
    "Booking",
]
