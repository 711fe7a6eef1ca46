"""Monitor type registry - the catalog of check kinds a monitor can use."""
import logging
from typing import Awaitable, Callable, List, Optional

from ..exceptions import RegistryUnavailable
from ..schemas.monitor_type import MonitorTypeDescriptor, MonitorTypeResponse
from .config_builders import BUILDERS

logger = logging.getLogger(__name__)


def _builtin(type_id: str, name: str, description: str, category: str, icon: str) -> MonitorTypeDescriptor:
    model = BUILDERS[type_id].model
    return MonitorTypeDescriptor(
        id=type_id,
        name=name,
        description=description,
        category=category,
        configuration_schema=model.model_json_schema(by_alias=True),
        is_premium=False,
        icon=icon,
        icon_color="#4f46e5",
    )


BUILTIN_MONITOR_TYPES: List[MonitorTypeDescriptor] = [
    _builtin("http", "HTTP(S)", "Request a URL and check the status code and content", "web", "Globe"),
    _builtin("ping", "Ping", "Send ICMP echo requests and check latency and packet loss", "network", "Activity"),
    _builtin("port", "TCP Port", "Open a TCP connection and optionally exchange a string", "network", "Plug"),
    _builtin("dns", "DNS", "Resolve a record and compare it with the expected answer", "network", "Server"),
]


def is_selectable(descriptor: MonitorTypeDescriptor, entitled: bool) -> bool:
    """Premium types need an entitlement; everything else is always selectable."""
    return not descriptor.is_premium or entitled


class MonitorTypeRegistry:
    """Loads the type catalog once and serves it for the session.

    A failed fetch degrades to an empty catalog instead of failing the caller.
    """

    def __init__(self, fetch: Optional[Callable[[], Awaitable[List[MonitorTypeDescriptor]]]] = None):
        self._fetch = fetch
        self._types: Optional[List[MonitorTypeDescriptor]] = None

    async def list_types(self) -> List[MonitorTypeDescriptor]:
        """Ordered catalog; empty when the store is unavailable."""
        if self._types is not None:
            return list(self._types)

        if self._fetch is None:
            self._types = list(BUILTIN_MONITOR_TYPES)
            return list(self._types)

        try:
            types = await self._fetch()
        except RegistryUnavailable as e:
            logger.error(f"Monitor types unavailable: {e}")
            return []

        self._types = list(types)
        logger.info(f"Loaded {len(self._types)} monitor types")
        return list(self._types)

    async def get_type(self, type_id: str) -> Optional[MonitorTypeDescriptor]:
        for descriptor in await self.list_types():
            if descriptor.id == type_id:
                return descriptor
        return None

    async def list_for_account(self, entitled: bool) -> List[MonitorTypeResponse]:
        """Catalog with the ``selectable`` flag worked out for the caller."""
        return [
            MonitorTypeResponse(**descriptor.model_dump(), selectable=is_selectable(descriptor, entitled))
            for descriptor in await self.list_types()
        ]

    def invalidate(self):
        """Forget the cached catalog so the next call fetches again."""
        self._types = None
