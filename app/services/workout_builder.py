"""
Turns authoring-form drafts into stored workouts and logged sessions.

Both builders check the whole draft before anything is sent anywhere and stop
at the first problem, reporting it as a single sentence the form can show.
"""
import logging
from datetime import date, datetime, timezone
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple, TypeVar

from app.core.errors import ValidationFailed
from app.services.countdown_timer import DEFAULT_REST_SECONDS
from app.services.set_values import REST_TIMES, SET_WEIGHTS, parse_number, round_half_up
from app.schemas.workout import (
    ExerciseDraft,
    ExerciseIn,
    ExerciseLogDraft,
    ExerciseLogIn,
    WorkoutDraft,
    WorkoutLogDraft,
    WorkoutLogIn,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WorkoutValidationError(ValidationFailed):
    pass


def _positive_int(text: str) -> Optional[int]:
    try:
        value = int(text.strip())
    except ValueError:
        return None
    return value if value > 0 else None


def _non_negative_weight(text: str) -> Optional[int]:
    """Logged weight in whole kg; decimals are rounded like authored weights."""
    number = parse_number(text.strip())
    if number is None or number < 0:
        return None
    return round_half_up(number)


def _per_set_lists(exercise: ExerciseDraft, sets: int) -> Tuple[List[str], List[str]]:
    """Weights and rest times cut or padded to the set count; empty lists stay empty."""
    weights = SET_WEIGHTS.normalize(exercise.set_weights, sets) if exercise.set_weights else []
    rest_times = REST_TIMES.normalize(exercise.rest_times, sets) if exercise.rest_times else []
    return weights, rest_times


class WorkoutBuilder:
    def validate_exercises(self, exercises: Sequence[ExerciseDraft]) -> None:
        if not exercises:
            raise WorkoutValidationError("At least one exercise is required")

        for number, exercise in enumerate(exercises, start=1):
            label = f"Exercise {number}"
            if not exercise.name.strip():
                raise WorkoutValidationError(f"{label}: Name is required")
            if not exercise.muscle_group.strip():
                raise WorkoutValidationError(f"{label}: Muscle group is required")
            if _positive_int(exercise.sets) is None:
                raise WorkoutValidationError(f"{label}: Sets must be a positive number")
            if _positive_int(exercise.repetitions) is None:
                raise WorkoutValidationError(f"{label}: Repetitions must be a positive number")

            weights, rest_times = _per_set_lists(exercise, _positive_int(exercise.sets))
            error = SET_WEIGHTS.validate(weights, label)
            if error is None:
                error = REST_TIMES.validate(rest_times, label)
            if error:
                raise WorkoutValidationError(error)

    def validate(self, draft: WorkoutDraft) -> None:
        if not draft.name.strip():
            raise WorkoutValidationError("Workout name is required")
        self.validate_exercises(draft.exercises)

    def build_exercise(self, exercise: ExerciseDraft, number: int) -> ExerciseIn:
        label = f"Exercise {number}"
        sets = int(exercise.sets.strip())
        weights, rest_times = _per_set_lists(exercise, sets)
        rest_times = REST_TIMES.to_stored(rest_times, label)
        rest_time = round(sum(rest_times) / len(rest_times)) if rest_times else DEFAULT_REST_SECONDS

        return ExerciseIn(
            name=f"{exercise.name.strip()} ({exercise.muscle_group.strip()})",
            sets=sets,
            repetitions=int(exercise.repetitions.strip()),
            set_weights=SET_WEIGHTS.to_stored(weights, label),
            rest_time=rest_time,
        )

    def build_exercises(self, exercises: Sequence[ExerciseDraft]) -> List[ExerciseIn]:
        self.validate_exercises(exercises)
        return [self.build_exercise(exercise, number) for number, exercise in enumerate(exercises, start=1)]

    def build(self, draft: WorkoutDraft) -> List[ExerciseIn]:
        self.validate(draft)
        return [self.build_exercise(exercise, number) for number, exercise in enumerate(draft.exercises, start=1)]

    async def submit(
        self,
        draft: WorkoutDraft,
        submit: Callable[[str, List[ExerciseIn], str], Awaitable[T]],
        invalidate: Optional[Callable[[], Awaitable[None]]] = None,
    ) -> T:
        """Validate, package and hand the workout to ``submit``.

        Nothing is submitted when validation fails. Errors raised by
        ``submit`` reach the caller untouched; there is no retry here.
        """
        exercises = self.build(draft)
        result = await submit(draft.name.strip(), exercises, draft.comments.strip())
        if invalidate is not None:
            await invalidate()
        logger.info("Workout '%s' submitted with %d exercises", draft.name.strip(), len(exercises))
        return result


class WorkoutLogBuilder:
    """Packages what the client actually did against the planned exercises."""

    def validate(self, planned: Sequence[ExerciseIn], draft: WorkoutLogDraft) -> None:
        if len(draft.entries) != len(planned):
            raise WorkoutValidationError("Please fill in all exercise fields (sets, reps, and weight).")

        for exercise, entry in zip(planned, draft.entries):
            if not (entry.actual_sets.strip() and entry.actual_reps.strip() and entry.actual_weight.strip()):
                raise WorkoutValidationError("Please fill in all exercise fields (sets, reps, and weight).")
            if _positive_int(entry.actual_sets) is None:
                raise WorkoutValidationError(
                    f"Invalid sets value for {exercise.name}. Must be a positive number."
                )
            if _positive_int(entry.actual_reps) is None:
                raise WorkoutValidationError(
                    f"Invalid reps value for {exercise.name}. Must be a positive number."
                )
            if _non_negative_weight(entry.actual_weight) is None:
                raise WorkoutValidationError(
                    f"Invalid weight value for {exercise.name}. Must be a non-negative number."
                )

    @staticmethod
    def _exercise_log(exercise: ExerciseIn, entry: ExerciseLogDraft) -> ExerciseLogIn:
        actual_sets = int(entry.actual_sets.strip())
        actual_weight = _non_negative_weight(entry.actual_weight)
        return ExerciseLogIn(
            name=exercise.name,
            sets=exercise.sets,
            repetitions=exercise.repetitions,
            set_weights=list(exercise.set_weights or []),
            rest_time=exercise.rest_time or DEFAULT_REST_SECONDS,
            actual_sets=actual_sets,
            actual_repetitions=int(entry.actual_reps.strip()),
            actual_set_weights=[actual_weight] * actual_sets,
        )

    def build(
        self,
        workout_name: str,
        client_username: str,
        comments: str,
        planned: Sequence[ExerciseIn],
        draft: WorkoutLogDraft,
        on_date: Optional[date] = None,
    ) -> WorkoutLogIn:
        self.validate(planned, draft)
        return WorkoutLogIn(
            workout_name=workout_name,
            client_username=client_username,
            date=(on_date or datetime.now(timezone.utc).date()).isoformat(),
            completed=draft.completed,
            client_notes=draft.client_notes.strip() or None,
            comments=comments,
            exercises=[self._exercise_log(ex, entry) for ex, entry in zip(planned, draft.entries)],
        )

    @staticmethod
    def log_key(workout_name: str, at: Optional[datetime] = None) -> str:
        moment = at or datetime.now(timezone.utc)
        return f"{workout_name}-{int(moment.timestamp() * 1000)}"


workout_builder = WorkoutBuilder()
workout_log_builder = WorkoutLogBuilder()
