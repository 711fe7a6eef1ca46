"""Monitor definition API endpoints."""
import logging

from fastapi import APIRouter, Depends

from ..schemas.evaluation import EvaluateRequest, EvaluateResponse
from ..schemas.monitor import (
    ActiveUpdate,
    MaintenanceUpdate,
    Monitor,
    MonitorDraftRequest,
    StoreOutcome,
)
from ..services.aggregate import build_monitor_from_request
from ..services.hysteresis import evaluate_batch
from ..services.submitter import MonitorSubmitter
from ..store import get_submitter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/monitors", tags=["monitors"])


@router.post("/validate", response_model=Monitor, response_model_by_alias=True)
async def validate_monitor(draft: MonitorDraftRequest):
    """Validate a monitor form and return the payload that would be submitted."""
    return build_monitor_from_request(draft)


@router.post("", response_model=StoreOutcome, status_code=201)
async def create_monitor(
    draft: MonitorDraftRequest,
    submitter: MonitorSubmitter = Depends(get_submitter),
):
    """Build a new monitor and submit it to the store."""
    monitor = build_monitor_from_request(draft)
    return await submitter.submit(monitor)


@router.put("/{monitor_id}", response_model=StoreOutcome)
async def update_monitor(
    monitor_id: str,
    draft: MonitorDraftRequest,
    submitter: MonitorSubmitter = Depends(get_submitter),
):
    """Rebuild an existing monitor from the full form and submit it."""
    monitor = build_monitor_from_request(draft, monitor_id=monitor_id)
    return await submitter.submit(monitor)


@router.put("/{monitor_id}/active", response_model=StoreOutcome)
async def set_monitor_active(
    monitor_id: str,
    update: ActiveUpdate,
    submitter: MonitorSubmitter = Depends(get_submitter),
):
    """Start or stop checks without resubmitting the monitor."""
    return await submitter.set_active(monitor_id, update.active)


@router.put("/{monitor_id}/maintenance", response_model=StoreOutcome)
async def set_monitor_maintenance(
    monitor_id: str,
    update: MaintenanceUpdate,
    submitter: MonitorSubmitter = Depends(get_submitter),
):
    """Enter or leave maintenance without resubmitting the monitor."""
    return await submitter.set_maintenance(
        monitor_id, update.maintenance_mode, update.maintenance_until
    )


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate_outcomes(request: EvaluateRequest):
    """Run check outcomes through the alert state machine."""
    return evaluate_batch(
        request.alert_policy,
        request.lifecycle,
        request.outcomes,
        now=request.now,
        monitor_id=request.monitor_id,
    )
