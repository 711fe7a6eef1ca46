"""Alert hysteresis engine - decides when a monitor goes down or recovers.

A monitor only goes Down after ``alert_after_failures`` consecutive failed
checks and only comes back Up after ``alert_recovery_threshold`` consecutive
successes, so a single flaky check never flaps the status. Threshold-crossing
transitions emit an alert-raise or alert-clear event unless the monitor is in
maintenance, in which case the transition still happens but the event is
withheld and never replayed.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from ..exceptions import InvalidTransitionError
from ..schemas.evaluation import AlertEvent, EvaluateResponse, Transition
from ..schemas.monitor import AlertPolicy, MonitorLifecycleState, OVERLAY_STATUSES
from ..utils.dates import ensure_utc

logger = logging.getLogger(__name__)

CHECK_OUTCOMES = ("success", "failure")


def _utc(moment: Optional[datetime]) -> datetime:
    if moment is None:
        return datetime.now(timezone.utc)
    return ensure_utc(moment)


def _end_elapsed_maintenance(state: MonitorLifecycleState, now: datetime) -> MonitorLifecycleState:
    if state.maintenance_mode and state.maintenance_until is not None:
        if now >= _utc(state.maintenance_until):
            logger.info(f"Maintenance window ended at {state.maintenance_until.isoformat()}")
            return state.model_copy(update={"maintenance_mode": False, "maintenance_until": None})
    return state


def evaluate(
    policy: AlertPolicy,
    state: MonitorLifecycleState,
    outcome: str,
    now: Optional[datetime] = None,
    monitor_id: Optional[str] = None,
) -> Transition:
    """Apply one check outcome and return the resulting transition.

    Raises InvalidTransitionError (after logging) for outcomes delivered to an
    inactive monitor or outcomes that are neither success nor failure.
    """
    label = monitor_id or "monitor"

    if outcome not in CHECK_OUTCOMES:
        logger.warning(f"Rejected check outcome {outcome!r} for {label}")
        raise InvalidTransitionError(f"Unknown check outcome: {outcome!r}")

    if not state.active:
        logger.warning(f"Rejected {outcome} for {label}: monitor is inactive")
        raise InvalidTransitionError("Check outcome delivered to an inactive monitor")

    now = _utc(now)
    state = _end_elapsed_maintenance(state, now)

    previous_status = state.status
    status = previous_status
    failures = state.consecutive_failures
    successes = state.consecutive_successes
    event_kind = None

    if outcome == "failure":
        failures += 1
        successes = 0
        if previous_status != "down" and failures >= policy.alert_after_failures:
            status = "down"
            event_kind = "alert_raise"
    else:
        successes += 1
        failures = 0
        if previous_status == "pending":
            status = "up"
        elif previous_status == "down" and successes >= policy.alert_recovery_threshold:
            status = "up"
            event_kind = "alert_clear"

    new_state = state.model_copy(update={
        "status": status,
        "consecutive_failures": failures,
        "consecutive_successes": successes,
    })

    event = None
    suppressed = False
    if event_kind is not None:
        if new_state.maintenance_in_effect(now):
            suppressed = True
            logger.info(f"Suppressed {event_kind} for {label}: maintenance mode")
        else:
            event = AlertEvent(
                kind=event_kind,
                monitor_id=monitor_id,
                severity=policy.severity,
                status=status,
                consecutive_count=failures if event_kind == "alert_raise" else successes,
                occurred_at=now,
            )
            logger.info(f"{event_kind} for {label}: {previous_status} -> {status}")

    return Transition(
        outcome=outcome,
        previous_status=previous_status,
        status=status,
        lifecycle=new_state,
        event=event,
        suppressed=suppressed,
    )


def evaluate_batch(
    policy: AlertPolicy,
    state: MonitorLifecycleState,
    outcomes: Iterable[str],
    now: Optional[datetime] = None,
    monitor_id: Optional[str] = None,
) -> EvaluateResponse:
    """Apply outcomes in order. A rejected outcome rejects the whole batch."""
    transitions: List[Transition] = []
    for outcome in outcomes:
        transition = evaluate(policy, state, outcome, now=now, monitor_id=monitor_id)
        transitions.append(transition)
        state = transition.lifecycle

    return EvaluateResponse(
        lifecycle=state,
        transitions=transitions,
        events=[t.event for t in transitions if t.event is not None],
    )


def set_active(state: MonitorLifecycleState, active: bool) -> MonitorLifecycleState:
    """Start or stop scheduling. Counters and status are kept as they are."""
    return state.model_copy(update={"active": active})


def set_maintenance(
    state: MonitorLifecycleState,
    maintenance_mode: bool,
    maintenance_until: Optional[datetime] = None,
) -> MonitorLifecycleState:
    """Enter or leave maintenance. Leaving drops any end time."""
    return state.model_copy(update={
        "maintenance_mode": maintenance_mode,
        "maintenance_until": _utc(maintenance_until) if maintenance_mode and maintenance_until else None,
    })


def apply_overlay(state: MonitorLifecycleState, status: str) -> MonitorLifecycleState:
    """Store a warning/degraded overlay from the external evaluator.

    Overlays only sit on top of an Up monitor; ``up`` removes the overlay.
    """
    if status not in ("up",) + OVERLAY_STATUSES:
        logger.warning(f"Rejected overlay status {status!r}")
        raise InvalidTransitionError(f"'{status}' is not an overlay status")
    if not state.active:
        logger.warning(f"Rejected overlay {status!r}: monitor is inactive")
        raise InvalidTransitionError("Overlay applied to an inactive monitor")
    if state.status not in ("up",) + OVERLAY_STATUSES:
        logger.warning(f"Rejected overlay {status!r} on a {state.status} monitor")
        raise InvalidTransitionError(f"Cannot mark a {state.status} monitor as {status}")
    return state.model_copy(update={"status": status})


class MonitorStateMachine:
    """Holds one monitor's lifecycle and feeds outcomes through ``evaluate``."""

    def __init__(
        self,
        policy: AlertPolicy,
        lifecycle: Optional[MonitorLifecycleState] = None,
        monitor_id: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.policy = policy
        self.monitor_id = monitor_id
        self._state = lifecycle or MonitorLifecycleState()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def state(self) -> MonitorLifecycleState:
        """Current lifecycle (immutable snapshot)."""
        return self._state

    def record(self, outcome: str) -> Optional[AlertEvent]:
        """Apply one outcome; return the emitted event, if any."""
        transition = evaluate(
            self.policy, self._state, outcome, now=self._clock(), monitor_id=self.monitor_id
        )
        self._state = transition.lifecycle
        return transition.event

    def set_active(self, active: bool):
        self._state = set_active(self._state, active)

    def set_maintenance(self, maintenance_mode: bool, maintenance_until: Optional[datetime] = None):
        self._state = set_maintenance(self._state, maintenance_mode, maintenance_until)

    def apply_overlay(self, status: str):
        self._state = apply_overlay(self._state, status)
