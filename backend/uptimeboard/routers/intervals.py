"""Check interval slider endpoints."""
from typing import List

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from ..schemas.monitor import MAX_INTERVAL_SECONDS, MIN_INTERVAL_SECONDS
from ..services.interval_mapper import (
    PRESETS,
    format_interval,
    position_to_seconds,
    seconds_to_position,
)

router = APIRouter(prefix="/api/intervals", tags=["intervals"])


class IntervalPresetResponse(BaseModel):
    """A preset button on the interval slider."""
    label: str
    seconds: int
    position: float


class IntervalValue(BaseModel):
    """An interval with its slider position and display label."""
    seconds: int
    position: float
    label: str


@router.get("/presets", response_model=List[IntervalPresetResponse])
async def list_presets():
    """Preset ladder in slider order."""
    return [
        IntervalPresetResponse(label=p.label, seconds=p.seconds, position=p.position)
        for p in PRESETS
    ]


@router.get("/position", response_model=IntervalValue)
async def get_position(seconds: int = Query(...)):
    """Slider position for an interval in seconds."""
    if not MIN_INTERVAL_SECONDS <= seconds <= MAX_INTERVAL_SECONDS:
        raise HTTPException(
            status_code=422,
            detail=f"seconds must be between {MIN_INTERVAL_SECONDS} and {MAX_INTERVAL_SECONDS}",
        )
    return IntervalValue(
        seconds=seconds,
        position=seconds_to_position(seconds),
        label=format_interval(seconds),
    )


@router.get("/seconds", response_model=IntervalValue)
async def get_seconds(position: float = Query(..., ge=0, le=100)):
    """Interval in seconds for a slider position."""
    seconds = position_to_seconds(position)
    return IntervalValue(
        seconds=seconds,
        position=seconds_to_position(seconds),
        label=format_interval(seconds),
    )
