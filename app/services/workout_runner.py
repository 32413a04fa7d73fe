from typing import Any, Optional, Sequence

from app.services.countdown_timer import CountdownTimer, DEFAULT_REST_SECONDS


def format_clock(seconds: int) -> str:
    minutes, secs = divmod(max(seconds, 0), 60)
    return f"{minutes}:{secs:02d}"


class WorkoutRunner:
    """Steps through a workout one exercise at a time.

    Each exercise gets the rest countdown configured to its own rest time.
    Nothing is persisted here; logging the session is up to the caller.
    """

    def __init__(self, exercises: Sequence[Any], default_rest_seconds: int = DEFAULT_REST_SECONDS):
        if not exercises:
            raise ValueError("A workout needs at least one exercise to run")
        self.exercises = list(exercises)
        self.default_rest_seconds = default_rest_seconds
        self._index = 0
        self.timer = CountdownTimer(self.rest_seconds_for(0))

    def rest_seconds_for(self, index: int) -> int:
        rest_time = getattr(self.exercises[index], "rest_time", None)
        return int(rest_time) if rest_time else self.default_rest_seconds

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_exercise(self) -> Any:
        return self.exercises[self._index]

    @property
    def total(self) -> int:
        return len(self.exercises)

    @property
    def is_first(self) -> bool:
        return self._index == 0

    @property
    def is_last(self) -> bool:
        return self._index == self.total - 1

    def _move_to(self, index: int) -> None:
        self._index = min(max(index, 0), self.total - 1)
        self.timer.set_initial_seconds(self.rest_seconds_for(self._index))

    def next(self) -> Any:
        self._move_to(self._index + 1)
        return self.current_exercise

    def previous(self) -> Any:
        self._move_to(self._index - 1)
        return self.current_exercise

    def exit(self) -> int:
        """Stop the run and rewind so the next run starts from the top."""
        reached = self._index
        self._move_to(0)
        return reached

    def progress_label(self, exercise_name: Optional[str] = None) -> str:
        name = exercise_name or getattr(self.current_exercise, "name", "")
        return f"Exercise {self._index + 1} of {self.total}: {name}"
