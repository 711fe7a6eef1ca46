"""Monitor type catalog endpoints."""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException

from ..schemas.monitor_type import MonitorTypeResponse
from ..services.config_builders import BUILDERS
from ..services.registry import MonitorTypeRegistry
from ..store import get_entitlement, get_registry

router = APIRouter(prefix="/api/monitor-types", tags=["monitor-types"])


@router.get("", response_model=List[MonitorTypeResponse])
async def list_monitor_types(
    registry: MonitorTypeRegistry = Depends(get_registry),
    entitled: bool = Depends(get_entitlement),
):
    """List monitor types; empty when the catalog is unavailable."""
    return await registry.list_for_account(entitled)


@router.get("/{type_id}/defaults", response_model=Dict[str, Any])
async def get_type_defaults(type_id: str):
    """Initial form values for a new monitor of the given type."""
    builder = BUILDERS.get(type_id)
    if builder is None:
        raise HTTPException(status_code=404, detail="Monitor type not found")
    return builder.default_fields()
