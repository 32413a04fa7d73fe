"""
Rest-between-sets countdown.

The timer never reads a clock itself: whoever displays it calls ``tick()`` once
per elapsed second while it is shown. That keeps it deterministic and lets the
owner decide what "a second" is.
"""

DEFAULT_REST_SECONDS = 60


class CountdownTimer:
    def __init__(self, initial_seconds: int = DEFAULT_REST_SECONDS):
        self._check(initial_seconds)
        self._initial_seconds = initial_seconds
        self._remaining_seconds = initial_seconds
        self._running = False

    @staticmethod
    def _check(seconds: int) -> None:
        if seconds < 0:
            raise ValueError(f"Countdown duration must be non-negative, got {seconds}")

    @property
    def initial_seconds(self) -> int:
        return self._initial_seconds

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_finished(self) -> bool:
        return self._remaining_seconds == 0

    def start(self) -> None:
        if self._remaining_seconds > 0:
            self._running = True

    def pause(self) -> None:
        self._running = False

    def reset(self) -> None:
        self._running = False
        self._remaining_seconds = self._initial_seconds

    def set_initial_seconds(self, seconds: int) -> None:
        """Reconfigure for a new exercise: never carries a stale countdown over."""
        self._check(seconds)
        self._initial_seconds = seconds
        self._remaining_seconds = seconds
        self._running = False

    def tick(self, seconds: int = 1) -> int:
        """Advance by ``seconds`` one-second ticks and return what is left."""
        for _ in range(seconds):
            if not self._running:
                break
            if self._remaining_seconds <= 1:
                self._remaining_seconds = 0
                self._running = False
            else:
                self._remaining_seconds -= 1
        return self._remaining_seconds

    def __repr__(self) -> str:
        return (
            f"CountdownTimer(initial={self._initial_seconds}, "
            f"remaining={self._remaining_seconds}, running={self._running})"
        )
