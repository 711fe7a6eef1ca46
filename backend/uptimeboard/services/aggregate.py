"""Monitor aggregate builder - turns one monitor form into a Monitor record.

Every part of the form is validated before anything is assembled and all
problems are reported together. Either a complete, immutable Monitor comes
out or MonitorValidationError is raised; nothing partial is ever returned.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from ..exceptions import FieldError, MonitorValidationError
from ..schemas.monitor import (
    AlertPolicy,
    Monitor,
    MonitorDraftRequest,
    MonitorLifecycleState,
    MonitorSettings,
)
from ..utils.validation import drop_blank, field_errors_from_pydantic
from .config_builders import get_builder
from .interval_mapper import normalize_interval, position_to_seconds

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30
MAX_TIMEOUT_SECONDS = 300
MAX_TAG_LENGTH = 50


def normalize_tags(value: Any) -> List[str]:
    """Accept a comma-separated string or a list; strip, drop blanks, dedupe."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")

    tags: List[str] = []
    errors = []
    for index, tag in enumerate(value):
        if not isinstance(tag, str):
            errors.append(FieldError(f"tags.{index}", "tags must be strings"))
            continue
        tag = tag.strip()
        if not tag or tag in tags:
            continue
        if len(tag) > MAX_TAG_LENGTH:
            errors.append(FieldError(f"tags.{index}", f"tags are limited to {MAX_TAG_LENGTH} characters"))
            continue
        tags.append(tag)

    if errors:
        raise MonitorValidationError(errors)
    return tags


def _validate_model(model, fields: Mapping[str, Any], errors: List[FieldError], prefix: str = ""):
    try:
        return model.model_validate(drop_blank(fields))
    except ValidationError as e:
        errors.extend(field_errors_from_pydantic(e, prefix))
        return None


def _validate_timeout(value: Any, interval_seconds: Optional[int], errors: List[FieldError]) -> Optional[int]:
    if value is None or value == "":
        timeout = DEFAULT_TIMEOUT_SECONDS
    else:
        try:
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(value)
            timeout = int(value)
        except (TypeError, ValueError):
            errors.append(FieldError("timeoutSeconds", "timeout must be a whole number of seconds"))
            return None
    if not 1 <= timeout <= MAX_TIMEOUT_SECONDS:
        errors.append(FieldError("timeoutSeconds", f"timeout must be between 1 and {MAX_TIMEOUT_SECONDS} seconds"))
        return None
    if interval_seconds is not None and timeout > interval_seconds:
        errors.append(FieldError("timeoutSeconds", "timeout cannot be longer than the check interval"))
        return None
    return timeout


def build_monitor(
    type_id: str,
    raw_config_fields: Mapping[str, Any],
    name: Any,
    interval_seconds: Any = None,
    interval_position: Any = None,
    alert_policy: Optional[Mapping[str, Any]] = None,
    lifecycle: Optional[Mapping[str, Any]] = None,
    tags: Any = None,
    description: Any = None,
    timeout_seconds: Any = None,
    settings: Optional[Mapping[str, Any]] = None,
    monitor_id: Optional[str] = None,
) -> Monitor:
    """Validate every part of a monitor form and assemble the Monitor.

    Raises MonitorValidationError carrying all field errors found.
    """
    errors: List[FieldError] = []

    configuration = None
    try:
        configuration = get_builder(type_id).validate(raw_config_fields or {})
    except MonitorValidationError as e:
        if any(err.field == "monitorTypeId" for err in e.errors):
            errors.extend(e.errors)
        else:
            errors.extend(e.prefixed("configuration").errors)

    interval = None
    try:
        interval = normalize_interval(interval_seconds, interval_position)
    except MonitorValidationError as e:
        errors.extend(e.errors)

    policy = _validate_model(AlertPolicy, alert_policy or {}, errors)
    # A new aggregate always starts Pending with zeroed counters
    lifecycle_fields = {
        key: value for key, value in (lifecycle or {}).items()
        if key in ("active", "maintenanceMode", "maintenance_mode", "maintenanceUntil", "maintenance_until")
    }
    lifecycle_state = _validate_model(MonitorLifecycleState, lifecycle_fields, errors)
    monitor_settings = _validate_model(MonitorSettings, settings or {}, errors, prefix="settings")

    timeout = _validate_timeout(timeout_seconds, interval.seconds if interval else None, errors)

    if not isinstance(name, str) or not name.strip():
        errors.append(FieldError("name", "name is required"))
    elif len(name.strip()) > 255:
        errors.append(FieldError("name", "name is limited to 255 characters"))

    if description is not None and not isinstance(description, str):
        errors.append(FieldError("description", "description must be text"))
    elif description and len(description.strip()) > 500:
        errors.append(FieldError("description", "description is limited to 500 characters"))

    tag_list: List[str] = []
    try:
        tag_list = normalize_tags(tags)
    except MonitorValidationError as e:
        errors.extend(e.errors)

    if errors:
        logger.debug(f"Monitor rejected with {len(errors)} validation errors")
        raise MonitorValidationError(errors)

    try:
        return Monitor(
            id=monitor_id,
            name=name.strip(),
            description=description.strip() if description and description.strip() else None,
            monitor_type_id=type_id,
            configuration=configuration,
            interval=interval,
            timeout_seconds=timeout,
            alert_policy=policy,
            lifecycle=lifecycle_state,
            settings=monitor_settings,
            tags=tag_list,
        )
    except ValidationError as e:
        raise MonitorValidationError(field_errors_from_pydantic(e))


def build_monitor_from_request(request: MonitorDraftRequest, monitor_id: Optional[str] = None) -> Monitor:
    """Build a Monitor from the dashboard's form body."""
    return build_monitor(
        type_id=request.monitor_type_id,
        raw_config_fields=request.configuration,
        name=request.name,
        interval_seconds=request.interval_seconds,
        interval_position=request.interval_position,
        alert_policy={
            "alertAfterFailures": request.alert_after_failures,
            "alertRecoveryThreshold": request.alert_recovery_threshold,
            "severity": request.severity,
        },
        lifecycle={
            "active": request.active,
            "maintenanceMode": request.maintenance_mode,
            "maintenanceUntil": request.maintenance_until,
        },
        tags=request.tags,
        description=request.description,
        timeout_seconds=request.timeout_seconds,
        settings=request.settings,
        monitor_id=monitor_id,
    )


class MonitorDraft:
    """One in-progress monitor form.

    Holds raw values only; nothing is validated until ``build``. Selecting a
    different type replaces the configuration fields with that type's
    defaults so no field from the previous type survives.
    """

    def __init__(self, monitor_type_id: str = "http", monitor_id: Optional[str] = None):
        self.monitor_id = monitor_id
        self.monitor_type_id = monitor_type_id
        self.configuration: Dict[str, Any] = get_builder(monitor_type_id).default_fields()
        self.name: Any = ""
        self.description: Any = None
        self.interval_seconds: Any = None
        self.timeout_seconds: Any = None
        self.alert_policy: Dict[str, Any] = {}
        self.lifecycle: Dict[str, Any] = {}
        self.settings: Dict[str, Any] = {}
        self.tags: Any = []

    def select_type(self, monitor_type_id: str):
        """Switch type, discarding the previous type's configuration."""
        if monitor_type_id == self.monitor_type_id:
            return
        self.configuration = get_builder(monitor_type_id).default_fields()
        self.monitor_type_id = monitor_type_id

    def update_configuration(self, **fields):
        self.configuration.update(fields)

    def set_interval_position(self, position: float):
        """Move the interval slider."""
        self.interval_seconds = position_to_seconds(position)

    def build(self) -> Monitor:
        return build_monitor(
            type_id=self.monitor_type_id,
            raw_config_fields=self.configuration,
            name=self.name,
            interval_seconds=self.interval_seconds,
            alert_policy=self.alert_policy,
            lifecycle=self.lifecycle,
            tags=self.tags,
            description=self.description,
            timeout_seconds=self.timeout_seconds,
            settings=self.settings,
            monitor_id=self.monitor_id,
        )
