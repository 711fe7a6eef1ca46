"""Store connection setup and dependency providers.

The external monitor store owns all persistence. This module keeps one
shared client for it, plus the registry and submitter built on top.
"""
import logging
from typing import Optional

from .config import settings
from .services.registry import MonitorTypeRegistry
from .services.store_client import StoreClient
from .services.submitter import MonitorSubmitter

logger = logging.getLogger(__name__)

_store_client: Optional[StoreClient] = None
_registry: Optional[MonitorTypeRegistry] = None
_submitter: Optional[MonitorSubmitter] = None


def init_store():
    """Create the store client and the services that use it."""
    global _store_client, _registry, _submitter

    _store_client = StoreClient()
    _submitter = MonitorSubmitter(_store_client)

    if settings.monitor_types_source == "builtin":
        _registry = MonitorTypeRegistry()
        logger.info("Using built-in monitor type catalog")
    else:
        _registry = MonitorTypeRegistry(fetch=_store_client.list_monitor_types)
        logger.info(f"Using monitor type catalog from {settings.store_url}")


async def close_store():
    """Close store connections."""
    global _store_client, _registry, _submitter
    if _store_client is not None:
        await _store_client.close()
    _store_client = None
    _registry = None
    _submitter = None


def get_registry() -> MonitorTypeRegistry:
    """Dependency to get the monitor type registry."""
    if _registry is None:
        init_store()
    return _registry


def get_submitter() -> MonitorSubmitter:
    """Dependency to get the monitor submitter."""
    if _submitter is None:
        init_store()
    return _submitter


def get_entitlement() -> bool:
    """Dependency for premium entitlement; decided outside this service."""
    return settings.premium_entitled
