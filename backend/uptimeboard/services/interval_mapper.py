"""Interval mapper - converts check intervals to and from slider positions.

The slider covers 30 seconds to 24 hours. Presets sit at evenly spaced
positions 0..100 and values between two presets are interpolated in log
space, so every stretch of the slider feels equally fine-grained.
"""
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..exceptions import FieldError, MonitorValidationError
from ..schemas.monitor import IntervalSetting, MAX_INTERVAL_SECONDS, MIN_INTERVAL_SECONDS


@dataclass(frozen=True)
class IntervalPreset:
    """A named anchor point on the interval slider."""
    label: str
    seconds: int
    position: float


_PRESET_LADDER = [
    ("30s", 30),
    ("1m", 60),
    ("5m", 300),
    ("30m", 1800),
    ("1h", 3600),
    ("12h", 43200),
    ("24h", 86400),
]

PRESETS: List[IntervalPreset] = [
    IntervalPreset(label, seconds, index / (len(_PRESET_LADDER) - 1) * 100)
    for index, (label, seconds) in enumerate(_PRESET_LADDER)
]

DEFAULT_INTERVAL_SECONDS = 300


def _bracket_by_seconds(seconds: float) -> Tuple[IntervalPreset, IntervalPreset]:
    for lower, upper in zip(PRESETS, PRESETS[1:]):
        if lower.seconds <= seconds <= upper.seconds:
            return lower, upper
    raise ValueError(f"{seconds} is outside the preset ladder")


def _bracket_by_position(position: float) -> Tuple[IntervalPreset, IntervalPreset]:
    for lower, upper in zip(PRESETS, PRESETS[1:]):
        if lower.position <= position <= upper.position:
            return lower, upper
    raise ValueError(f"{position} is outside the slider range")


def seconds_to_position(seconds: float) -> float:
    """Map an interval in seconds to a slider position in [0, 100]."""
    if not MIN_INTERVAL_SECONDS <= seconds <= MAX_INTERVAL_SECONDS:
        raise ValueError(
            f"interval must be between {MIN_INTERVAL_SECONDS} and {MAX_INTERVAL_SECONDS} seconds"
        )

    for preset in PRESETS:
        if preset.seconds == seconds:
            return preset.position

    lower, upper = _bracket_by_seconds(seconds)
    t = (math.log(seconds) - math.log(lower.seconds)) / (math.log(upper.seconds) - math.log(lower.seconds))
    return lower.position + t * (upper.position - lower.position)


def position_to_seconds(position: float) -> int:
    """Map a slider position back to whole seconds within [30, 86400]."""
    position = min(100.0, max(0.0, float(position)))

    for preset in PRESETS:
        if math.isclose(preset.position, position, abs_tol=1e-9):
            return preset.seconds

    lower, upper = _bracket_by_position(position)
    t = (position - lower.position) / (upper.position - lower.position)
    log_seconds = math.log(lower.seconds) + t * (math.log(upper.seconds) - math.log(lower.seconds))
    seconds = round(math.exp(log_seconds))
    return min(MAX_INTERVAL_SECONDS, max(MIN_INTERVAL_SECONDS, seconds))


def format_interval(seconds: int) -> str:
    """Human label for an interval, e.g. '5 minutes'."""
    if seconds < 60:
        return f"{seconds} seconds"
    elif seconds < 3600:
        return f"{seconds // 60} minutes"
    elif seconds < 86400:
        return f"{seconds // 3600} hours"
    return f"{seconds // 86400} days"


def normalize_interval(
    seconds: Optional[object] = None,
    position: Optional[object] = None,
) -> IntervalSetting:
    """Build an IntervalSetting from either seconds or a slider position.

    Seconds win when both are given. Out of range seconds are rejected, not
    clamped; positions are clamped the way the slider clamps them.
    """
    if seconds is not None and seconds != "":
        try:
            if isinstance(seconds, float) and not seconds.is_integer():
                raise ValueError(seconds)
            value = int(seconds)
        except (TypeError, ValueError):
            raise MonitorValidationError([
                FieldError("intervalSeconds", "interval must be a whole number of seconds")
            ])
        if not MIN_INTERVAL_SECONDS <= value <= MAX_INTERVAL_SECONDS:
            raise MonitorValidationError([
                FieldError(
                    "intervalSeconds",
                    f"interval must be between {MIN_INTERVAL_SECONDS} and {MAX_INTERVAL_SECONDS} seconds",
                )
            ])
        return IntervalSetting(seconds=value, slider_position=seconds_to_position(value))

    if position is not None and position != "":
        try:
            raw_position = float(position)
        except (TypeError, ValueError):
            raise MonitorValidationError([
                FieldError("intervalPosition", "slider position must be a number")
            ])
        if math.isnan(raw_position):
            raise MonitorValidationError([
                FieldError("intervalPosition", "slider position must be a number")
            ])
        value = position_to_seconds(raw_position)
        return IntervalSetting(seconds=value, slider_position=seconds_to_position(value))

    return IntervalSetting(
        seconds=DEFAULT_INTERVAL_SECONDS,
        slider_position=seconds_to_position(DEFAULT_INTERVAL_SECONDS),
    )
