"""
Per-set values of an exercise: target weights (kg) and rest times (seconds).

Authoring forms keep these as the text the user typed, one entry per set, and
the set count can change while the user edits. The helpers here keep the list
the same length as the set count, check it before submission and turn it into
the integers the storage layer expects.
"""
import math
from typing import List, Optional, Sequence

from app.core.errors import ValidationFailed


class SetValueError(ValidationFailed):
    pass


def parse_number(value: str) -> Optional[float]:
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def round_half_up(number: float) -> int:
    return int(math.floor(number + 0.5))


class PerSetField:
    """How one kind of per-set value is padded, checked, stored and shown."""

    def __init__(self, noun: str, unit: str, default: str, whole_numbers: bool):
        self.noun = noun
        self.unit = unit
        self.default = default
        self.whole_numbers = whole_numbers

    def normalize(self, values: List[str], target_count: int) -> List[str]:
        target_count = max(target_count, 0)
        if len(values) == target_count:
            return values
        if len(values) < target_count:
            filler = values[-1] if values else self.default
            return list(values) + [filler] * (target_count - len(values))
        return list(values[:target_count])

    def _error_for(self, value: Optional[str], label: str, set_number: int) -> Optional[str]:
        prefix = f"{label}: {self.noun} for Set {set_number}"
        text = (value or "").strip()
        if not text:
            return f"{prefix} is required"

        number = parse_number(text)
        if not self.whole_numbers:
            if number is None or number < 0:
                return f"{prefix} must be a non-negative number"
            return None

        if number is None or number < 0:
            return f"{prefix} must be a non-negative integer"
        if "." in text:
            return f"{prefix} must be a whole number (no decimals)"
        try:
            int(text)
        except ValueError:
            return f"{prefix} must be a non-negative integer"
        return None

    def validate(self, values: Sequence[str], label: str) -> Optional[str]:
        """Message for the first bad entry, or None when every entry is fine."""
        for index, value in enumerate(values):
            error = self._error_for(value, label, index + 1)
            if error:
                return error
        return None

    def to_stored(self, values: Sequence[str], label: str = "Exercise") -> List[int]:
        error = self.validate(values, label)
        if error:
            raise SetValueError(error)
        if self.whole_numbers:
            return [int(value.strip()) for value in values]
        return [round_half_up(float(value)) for value in values]

    def format_for_display(self, values: Sequence[int]) -> str:
        if not values:
            return ""
        return ", ".join(
            f"Set {index + 1}: {value}{self.unit}" for index, value in enumerate(values)
        )

    @staticmethod
    def has_per_set_values(values: Optional[Sequence]) -> bool:
        return values is not None and len(values) > 0


SET_WEIGHTS = PerSetField(noun="Weight", unit="kg", default="", whole_numbers=False)
REST_TIMES = PerSetField(noun="Rest time", unit="s", default="60", whole_numbers=True)


def normalize_set_weights(weights: List[str], target_count: int) -> List[str]:
    return SET_WEIGHTS.normalize(weights, target_count)


def validate_set_weights(weights: Sequence[str], label: str) -> Optional[str]:
    return SET_WEIGHTS.validate(weights, label)


def convert_set_weights(weights: Sequence[str], label: str = "Exercise") -> List[int]:
    return SET_WEIGHTS.to_stored(weights, label)


def format_set_weights(weights: Sequence[int]) -> str:
    return SET_WEIGHTS.format_for_display(weights)


def has_per_set_weights(weights: Optional[Sequence[int]]) -> bool:
    return SET_WEIGHTS.has_per_set_values(weights)


def normalize_rest_times(rest_times: List[str], target_count: int) -> List[str]:
    return REST_TIMES.normalize(rest_times, target_count)


def validate_rest_times(rest_times: Sequence[str], label: str) -> Optional[str]:
    return REST_TIMES.validate(rest_times, label)


def convert_rest_times(rest_times: Sequence[str], label: str = "Exercise") -> List[int]:
    return REST_TIMES.to_stored(rest_times, label)


def format_rest_times(rest_times: Sequence[int]) -> str:
    return REST_TIMES.format_for_display(rest_times)


def has_per_set_rest_times(rest_times: Optional[Sequence[int]]) -> bool:
    return REST_TIMES.has_per_set_values(rest_times)
