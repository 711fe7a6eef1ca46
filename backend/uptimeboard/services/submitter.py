"""Submitter service - hands built monitors to the store one at a time."""
import asyncio
import logging
from datetime import datetime
from typing import Dict, Optional

from ..exceptions import SubmissionInProgressError
from ..schemas.monitor import Monitor, StoreOutcome
from .store_client import StoreClient

logger = logging.getLogger(__name__)


class MonitorSubmitter:
    """Submits monitors and lifecycle toggles to the store.

    Only one submission per monitor may be outstanding. A second submit for
    the same monitor is rejected rather than queued; the lock is released when
    the store answers or the call fails.
    """

    def __init__(self, store: StoreClient):
        self._store = store
        self._locks: Dict[str, asyncio.Lock] = {}

    @staticmethod
    def _lock_key(monitor: Monitor) -> str:
        return monitor.id or f"new:{monitor.name}"

    def is_submitting(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    async def submit(self, monitor: Monitor) -> StoreOutcome:
        """Create the monitor, or update it when it already has an id."""
        key = self._lock_key(monitor)
        lock = self._locks.setdefault(key, asyncio.Lock())
        if lock.locked():
            logger.warning(f"Rejected submission for {key}: one is already in flight")
            raise SubmissionInProgressError(
                "A submission for this monitor is already in progress"
            )

        async with lock:
            try:
                if monitor.id:
                    outcome = await self._store.update_monitor(monitor.id, monitor)
                else:
                    outcome = await self._store.create_monitor(monitor)
            finally:
                self._locks.pop(key, None)

        logger.info(f"Submitted monitor {monitor.name} ({outcome.id or monitor.id})")
        return outcome

    async def set_active(self, monitor_id: str, active: bool) -> StoreOutcome:
        outcome = await self._store.set_active(monitor_id, active)
        logger.info(f"Monitor {monitor_id} {'activated' if active else 'deactivated'}")
        return outcome

    async def set_maintenance(
        self,
        monitor_id: str,
        maintenance_mode: bool,
        maintenance_until: Optional[datetime] = None,
    ) -> StoreOutcome:
        outcome = await self._store.set_maintenance(monitor_id, maintenance_mode, maintenance_until)
        state = "on" if maintenance_mode else "off"
        logger.info(f"Maintenance {state} for monitor {monitor_id}")
        return outcome
