"""Tests for the logarithmic interval slider mapping."""

from __future__ import annotations

import math

import pytest

from uptimeboard.exceptions import MonitorValidationError
from uptimeboard.services.interval_mapper import (
    PRESETS,
    format_interval,
    normalize_interval,
    position_to_seconds,
    seconds_to_position,
)


# ── Presets ───────────────────────────────────────────────────


class TestPresets:
    def test_ladder_values(self) -> None:
        assert [p.seconds for p in PRESETS] == [30, 60, 300, 1800, 3600, 43200, 86400]
        assert [p.label for p in PRESETS] == ["30s", "1m", "5m", "30m", "1h", "12h", "24h"]

    def test_positions_evenly_spaced(self) -> None:
        assert PRESETS[0].position == 0
        assert PRESETS[-1].position == 100
        for index, preset in enumerate(PRESETS):
            assert preset.position == pytest.approx(index * 100 / 6)

    @pytest.mark.parametrize("preset", PRESETS, ids=lambda p: p.label)
    def test_preset_maps_to_exact_position(self, preset) -> None:
        assert seconds_to_position(preset.seconds) == preset.position

    @pytest.mark.parametrize("preset", PRESETS, ids=lambda p: p.label)
    def test_preset_round_trip_is_exact(self, preset) -> None:
        assert position_to_seconds(seconds_to_position(preset.seconds)) == preset.seconds


# ── Interpolation ─────────────────────────────────────────────


class TestInterpolation:
    def test_geometric_midpoint_lands_halfway(self) -> None:
        midpoint = math.sqrt(30 * 60)
        assert seconds_to_position(midpoint) == pytest.approx(100 / 12)

    def test_position_halfway_gives_geometric_midpoint(self) -> None:
        # halfway between 1h and 12h
        position = (PRESETS[4].position + PRESETS[5].position) / 2
        assert position_to_seconds(position) == round(math.sqrt(3600 * 43200))

    def test_every_second_round_trips_within_one(self) -> None:
        for seconds in range(30, 86401):
            back = position_to_seconds(seconds_to_position(seconds))
            assert abs(back - seconds) <= 1, seconds

    def test_positions_increase_with_seconds(self) -> None:
        positions = [seconds_to_position(s) for s in range(30, 86401, 97)]
        assert positions == sorted(positions)

    def test_position_is_clamped(self) -> None:
        assert position_to_seconds(-10) == 30
        assert position_to_seconds(250) == 86400

    def test_seconds_out_of_range_rejected(self) -> None:
        with pytest.raises(ValueError):
            seconds_to_position(29)
        with pytest.raises(ValueError):
            seconds_to_position(86401)


# ── Labels ────────────────────────────────────────────────────


class TestFormatInterval:
    @pytest.mark.parametrize(
        ("seconds", "label"),
        [
            (30, "30 seconds"),
            (59, "59 seconds"),
            (60, "1 minutes"),
            (300, "5 minutes"),
            (3599, "59 minutes"),
            (7200, "2 hours"),
            (43200, "12 hours"),
            (86400, "1 days"),
        ],
    )
    def test_labels(self, seconds: int, label: str) -> None:
        assert format_interval(seconds) == label


# ── Normalization ─────────────────────────────────────────────


class TestNormalizeInterval:
    def test_defaults_to_five_minutes(self) -> None:
        interval = normalize_interval()
        assert interval.seconds == 300
        assert interval.slider_position == pytest.approx(200 / 6)

    def test_seconds_from_form_string(self) -> None:
        interval = normalize_interval("3600")
        assert interval.seconds == 3600
        assert interval.slider_position == pytest.approx(400 / 6)

    def test_position_is_converted(self) -> None:
        interval = normalize_interval(position=100)
        assert interval.seconds == 86400
        assert interval.slider_position == 100

    def test_seconds_win_over_position(self) -> None:
        interval = normalize_interval(seconds=60, position=100)
        assert interval.seconds == 60

    @pytest.mark.parametrize("seconds", [10, 29, 86401, "100000"])
    def test_out_of_range_seconds_rejected(self, seconds) -> None:
        with pytest.raises(MonitorValidationError) as exc_info:
            normalize_interval(seconds)
        assert exc_info.value.errors[0].field == "intervalSeconds"

    @pytest.mark.parametrize("seconds", ["soon", 45.5])
    def test_non_integer_seconds_rejected(self, seconds) -> None:
        with pytest.raises(MonitorValidationError) as exc_info:
            normalize_interval(seconds)
        assert exc_info.value.errors[0].field == "intervalSeconds"

    def test_bad_position_rejected(self) -> None:
        with pytest.raises(MonitorValidationError) as exc_info:
            normalize_interval(position="left")
        assert exc_info.value.errors[0].field == "intervalPosition"
