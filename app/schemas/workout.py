from pydantic import BaseModel, Field
from typing import Optional, List


class ExerciseIn(BaseModel):
    """An exercise as the storage layer keeps it: whole kg and whole seconds."""
    name: str
    sets: int = Field(ge=1)
    repetitions: int = Field(ge=1)
    set_weights: List[int] = Field(default_factory=list)
    rest_time: int = Field(default=60, ge=0)


class ExerciseOut(ExerciseIn):
    class Config:
        from_attributes = True


class ExerciseDraft(BaseModel):
    """An exercise exactly as typed into the authoring form."""
    name: str = ""
    muscle_group: str = ""
    sets: str = ""
    repetitions: str = ""
    set_weights: List[str] = Field(default_factory=list)
    rest_times: List[str] = Field(default_factory=list)


class WorkoutDraft(BaseModel):
    name: str = ""
    comments: str = ""
    exercises: List[ExerciseDraft] = Field(default_factory=list)


class WorkoutUpdateDraft(BaseModel):
    comments: str = ""
    exercises: List[ExerciseDraft] = Field(default_factory=list)


class WorkoutResponse(BaseModel):
    id: int
    creator: str
    name: str
    client_username: str
    comments: str
    exercises: List[ExerciseOut]


class ExerciseLogIn(ExerciseIn):
    actual_sets: int = Field(ge=0)
    actual_repetitions: int = Field(ge=0)
    actual_set_weights: List[int] = Field(default_factory=list)


class WorkoutLogIn(BaseModel):
    workout_name: str
    client_username: str
    date: str
    completed: bool = False
    client_notes: Optional[str] = None
    comments: str = ""
    exercises: List[ExerciseLogIn]


class WorkoutLogResponse(WorkoutLogIn):
    log_key: str


class ExerciseLogDraft(BaseModel):
    """Actual performance for one planned exercise, as typed."""
    actual_sets: str = ""
    actual_reps: str = ""
    actual_weight: str = ""


class WorkoutLogDraft(BaseModel):
    entries: List[ExerciseLogDraft] = Field(default_factory=list)
    client_notes: str = ""
    completed: bool = False
