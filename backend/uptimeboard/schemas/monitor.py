"""Monitor aggregate schemas."""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .configuration import CONFIGURATION_TYPES, MonitorConfiguration
from ..utils.dates import ensure_utc


Severity = Literal["low", "medium", "high", "critical"]
MonitorStatus = Literal["pending", "up", "down", "warning", "degraded"]

# Statuses the external evaluator may lay over an Up monitor
OVERLAY_STATUSES = ("warning", "degraded")

MIN_INTERVAL_SECONDS = 30
MAX_INTERVAL_SECONDS = 86400


class CamelModel(BaseModel):
    """Base for schemas exchanged in camelCase with the store and dashboard."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class IntervalSetting(CamelModel):
    """Check interval in seconds plus its slider position."""
    seconds: int = Field(..., ge=MIN_INTERVAL_SECONDS, le=MAX_INTERVAL_SECONDS)
    slider_position: float = Field(..., ge=0, le=100)


class AlertPolicy(CamelModel):
    """Hysteresis thresholds and severity for alerting."""
    alert_after_failures: int = Field(1, ge=1)
    alert_recovery_threshold: int = Field(1, ge=1)
    severity: Severity = "medium"


class MonitorSettings(CamelModel):
    """Notification and retry settings submitted with every monitor."""
    notification_delay: int = Field(0, ge=0, le=3600)
    retry_count: int = Field(0, ge=0, le=10)
    retry_interval: int = Field(30, ge=1, le=3600)


class MonitorLifecycleState(CamelModel):
    """Scheduling flags, hysteresis counters and display status."""
    active: bool = True
    maintenance_mode: bool = False
    maintenance_until: Optional[datetime] = None
    consecutive_failures: int = Field(0, ge=0)
    consecutive_successes: int = Field(0, ge=0)
    status: MonitorStatus = "pending"

    @field_validator("maintenance_until")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    def maintenance_in_effect(self, now: datetime) -> bool:
        """True while alert emission is suppressed."""
        if not self.maintenance_mode:
            return False
        if self.maintenance_until is None:
            return True
        return now < self.maintenance_until


class Monitor(CamelModel):
    """A fully validated monitor, ready to be handed to the store."""
    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=500)
    monitor_type_id: str
    configuration: MonitorConfiguration
    interval: IntervalSetting
    timeout_seconds: int = Field(30, ge=1, le=300)
    alert_policy: AlertPolicy = Field(default_factory=AlertPolicy)
    lifecycle: MonitorLifecycleState = Field(default_factory=MonitorLifecycleState)
    settings: MonitorSettings = Field(default_factory=MonitorSettings)
    tags: Tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _select_configuration_variant(cls, data):
        # Parse configuration with the variant named by the type id, never by shape
        if isinstance(data, dict):
            type_id = data.get("monitorTypeId", data.get("monitor_type_id"))
            config = data.get("configuration")
            config_cls = CONFIGURATION_TYPES.get(type_id)
            if config_cls is None:
                raise ValueError(f"Unknown monitor type: {type_id}")
            if isinstance(config, dict):
                data = dict(data)
                data["configuration"] = config_cls.model_validate(config)
        return data

    @model_validator(mode="after")
    def _configuration_matches_type(self):
        expected = CONFIGURATION_TYPES.get(self.monitor_type_id)
        if expected is None:
            raise ValueError(f"Unknown monitor type: {self.monitor_type_id}")
        if type(self.configuration) is not expected:
            raise ValueError(
                f"configuration is {type(self.configuration).__name__}, "
                f"expected {expected.__name__} for type '{self.monitor_type_id}'"
            )
        return self

    def to_store_payload(self) -> dict:
        """Serialize to the JSON object submitted to the store."""
        return self.model_dump(by_alias=True, mode="json", exclude={"id"})


class MonitorDraftRequest(CamelModel):
    """Raw monitor form as posted by the dashboard.

    Values are left loosely typed; the aggregate builder validates them so
    every problem is reported in one field-scoped error list.
    """
    name: Any = None
    description: Any = None
    monitor_type_id: Any = "http"
    configuration: Dict[str, Any] = Field(default_factory=dict)
    interval_seconds: Any = None
    interval_position: Any = None
    timeout_seconds: Any = None
    alert_after_failures: Any = None
    alert_recovery_threshold: Any = None
    severity: Any = None
    active: Any = None
    maintenance_mode: Any = None
    maintenance_until: Any = None
    settings: Dict[str, Any] = Field(default_factory=dict)
    tags: Union[str, List[Any], None] = None


class StoreOutcome(CamelModel):
    """Outcome reported by the store for a mutation."""
    success: bool
    id: Optional[str] = None
    message: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        # Stores hand back integer or uuid keys
        if value is not None and not isinstance(value, str):
            return str(value)
        return value


class ActiveUpdate(CamelModel):
    """Request to start or stop scheduling checks."""
    active: bool


class MaintenanceUpdate(CamelModel):
    """Request to enter or leave maintenance mode."""
    maintenance_mode: bool
    maintenance_until: Optional[datetime] = None

    @field_validator("maintenance_until")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)
