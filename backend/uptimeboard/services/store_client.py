"""Store client - talks to the external monitor store over HTTP."""
import logging
from datetime import datetime
from typing import List, Optional

import httpx
from pydantic import ValidationError

from ..config import settings, get_store_headers
from ..exceptions import RegistryUnavailable, SubmissionError
from ..schemas.monitor import Monitor, StoreOutcome
from ..schemas.monitor_type import MonitorTypeDescriptor
from ..utils.dates import ensure_utc

logger = logging.getLogger(__name__)


class StoreClient:
    """Thin async client for the store's monitor endpoints.

    No retries are attempted; a failed call surfaces immediately.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.store_url,
            timeout=timeout if timeout is not None else settings.store_timeout_seconds,
            headers=get_store_headers(),
            transport=transport,
        )

    async def close(self):
        await self._client.aclose()

    async def list_monitor_types(self) -> List[MonitorTypeDescriptor]:
        """Fetch the monitor type catalog."""
        try:
            response = await self._client.get("/monitor-types")
        except httpx.HTTPError as e:
            raise RegistryUnavailable(f"Failed to fetch monitor types: {e}") from e

        if response.status_code >= 400:
            raise RegistryUnavailable(
                f"Monitor types returned {response.status_code}: {response.text}"
            )

        try:
            data = response.json()
            if not isinstance(data, list):
                raise ValueError("expected a list of monitor types")
            return [MonitorTypeDescriptor.model_validate(item) for item in data]
        except (ValueError, ValidationError) as e:
            raise RegistryUnavailable(f"Malformed monitor type catalog: {e}") from e

    async def create_monitor(self, monitor: Monitor) -> StoreOutcome:
        return await self._mutate("POST", "/monitors", monitor.to_store_payload())

    async def update_monitor(self, monitor_id: str, monitor: Monitor) -> StoreOutcome:
        return await self._mutate("PUT", f"/monitors/{monitor_id}", monitor.to_store_payload())

    async def set_active(self, monitor_id: str, active: bool) -> StoreOutcome:
        return await self._mutate("PUT", f"/monitors/{monitor_id}/active", {"active": active})

    async def set_maintenance(
        self,
        monitor_id: str,
        maintenance_mode: bool,
        maintenance_until: Optional[datetime] = None,
    ) -> StoreOutcome:
        payload = {
            "maintenanceMode": maintenance_mode,
            "maintenanceUntil": ensure_utc(maintenance_until).isoformat() if maintenance_until else None,
        }
        return await self._mutate("PUT", f"/monitors/{monitor_id}/maintenance", payload)

    async def _mutate(self, method: str, path: str, payload: dict) -> StoreOutcome:
        """Send a mutation; raise SubmissionError unless the store reports success."""
        try:
            response = await self._client.request(method, path, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Store request {method} {path} failed: {e}")
            raise SubmissionError(f"Store request failed: {e}") from e

        try:
            outcome = StoreOutcome.model_validate(response.json())
        except (ValueError, ValidationError):
            outcome = None

        if outcome is None:
            message = response.text or f"Store returned {response.status_code}"
            logger.error(f"Store {method} {path} returned {response.status_code}: {message}")
            raise SubmissionError(message)

        if response.status_code >= 400 or not outcome.success:
            message = outcome.message or f"Store returned {response.status_code}"
            logger.error(f"Store {method} {path} rejected: {message}")
            raise SubmissionError(message)

        return outcome
