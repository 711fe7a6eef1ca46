"""Services for building, evaluating and submitting monitor definitions."""
from .aggregate import MonitorDraft, build_monitor
from .config_builders import ConfigurationBuilder, get_builder
from .hysteresis import MonitorStateMachine, evaluate
from .registry import MonitorTypeRegistry
from .store_client import StoreClient
from .submitter import MonitorSubmitter

__all__ = [
    "MonitorDraft",
    "build_monitor",
    "ConfigurationBuilder",
    "get_builder",
    "MonitorStateMachine",
    "evaluate",
    "MonitorTypeRegistry",
    "StoreClient",
    "MonitorSubmitter",
]
