"""Pydantic schemas for the monitor definition model and API bodies."""
from .configuration import (
    HttpConfig,
    PingConfig,
    PortConfig,
    DnsConfig,
    MonitorConfiguration,
    CONFIGURATION_TYPES,
)
from .monitor import (
    IntervalSetting,
    AlertPolicy,
    MonitorSettings,
    MonitorLifecycleState,
    Monitor,
    MonitorDraftRequest,
    StoreOutcome,
    ActiveUpdate,
    MaintenanceUpdate,
)
from .monitor_type import (
    MonitorTypeDescriptor,
    MonitorTypeResponse,
)
from .evaluation import (
    AlertEvent,
    Transition,
    EvaluateRequest,
    EvaluateResponse,
)

__all__ = [
    "HttpConfig",
    "PingConfig",
    "PortConfig",
    "DnsConfig",
    "MonitorConfiguration",
    "CONFIGURATION_TYPES",
    "IntervalSetting",
    "AlertPolicy",
    "MonitorSettings",
    "MonitorLifecycleState",
    "Monitor",
    "MonitorDraftRequest",
    "StoreOutcome",
    "ActiveUpdate",
    "MaintenanceUpdate",
    "MonitorTypeDescriptor",
    "MonitorTypeResponse",
    "AlertEvent",
    "Transition",
    "EvaluateRequest",
    "EvaluateResponse",
]
