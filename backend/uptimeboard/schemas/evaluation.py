"""Schemas for feeding check outcomes through the alert state machine."""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from .monitor import AlertPolicy, CamelModel, MonitorLifecycleState, MonitorStatus, Severity


CheckOutcome = Literal["success", "failure"]
AlertEventKind = Literal["alert_raise", "alert_clear"]


class AlertEvent(CamelModel):
    """An alert raised or cleared by a threshold-crossing transition."""
    kind: AlertEventKind
    monitor_id: Optional[str] = None
    severity: Severity
    status: MonitorStatus
    consecutive_count: int  # failures for a raise, successes for a clear
    occurred_at: datetime


class Transition(CamelModel):
    """Result of applying one check outcome."""
    outcome: CheckOutcome
    previous_status: MonitorStatus
    status: MonitorStatus
    lifecycle: MonitorLifecycleState
    event: Optional[AlertEvent] = None
    suppressed: bool = False  # an event was due but maintenance withheld it


class EvaluateRequest(CamelModel):
    """A batch of outcomes to apply in order."""
    monitor_id: Optional[str] = None
    alert_policy: AlertPolicy = Field(default_factory=AlertPolicy)
    lifecycle: MonitorLifecycleState = Field(default_factory=MonitorLifecycleState)
    outcomes: List[CheckOutcome] = Field(default_factory=list)
    now: Optional[datetime] = None


class EvaluateResponse(CamelModel):
    """Final lifecycle plus everything that happened on the way."""
    lifecycle: MonitorLifecycleState
    transitions: List[Transition]
    events: List[AlertEvent]
