"""Configuration builders - validate raw form fields into typed configurations.

One builder per monitor type. Field-level shape (types, ranges, URL and host
syntax) is enforced by the pydantic variant; rules that span several fields
live in the builder's ``check``. Builders are pure and never call the store.
"""
import ipaddress
import re
from typing import Any, Dict, List, Mapping, Type

from pydantic import ValidationError

from ..exceptions import FieldError, MonitorValidationError
from ..schemas.configuration import (
    BODY_METHODS,
    REGEX_MATCH_MODES,
    ConfigurationBase,
    DnsConfig,
    HttpConfig,
    MonitorConfiguration,
    PingConfig,
    PortConfig,
)
from ..utils.validation import field_errors_from_pydantic


def _regex_errors(pattern: str, field: str) -> List[FieldError]:
    try:
        re.compile(pattern)
    except re.error as e:
        return [FieldError(field, f"invalid regular expression: {e}")]
    return []


class ConfigurationBuilder:
    """Base builder: parse with the variant model, then run cross-field checks."""

    type_id: str = ""
    model: Type[ConfigurationBase] = ConfigurationBase
    default_overrides: Dict[str, Any] = {}

    def validate(self, raw_fields: Mapping[str, Any]) -> MonitorConfiguration:
        """Return a validated configuration or raise MonitorValidationError."""
        try:
            config = self.model.model_validate(dict(raw_fields))
        except ValidationError as e:
            raise MonitorValidationError(field_errors_from_pydantic(e))

        errors = self.check(config)
        if errors:
            raise MonitorValidationError(errors)
        return config

    def check(self, config) -> List[FieldError]:
        return []

    def default_fields(self) -> Dict[str, Any]:
        """Initial form values for a new monitor of this type."""
        fields = {}
        for name, info in self.model.model_fields.items():
            key = info.alias or name
            if info.default_factory is not None:
                fields[key] = info.default_factory()
            elif info.is_required() or info.default is None:
                fields[key] = ""
            elif isinstance(info.default, tuple):
                fields[key] = list(info.default)
            else:
                fields[key] = info.default
        fields.update(self.default_overrides)
        return fields


class HttpConfigBuilder(ConfigurationBuilder):
    type_id = "http"
    model = HttpConfig

    def check(self, config: HttpConfig) -> List[FieldError]:
        errors = []
        if config.body is not None and config.method not in BODY_METHODS:
            errors.append(FieldError(
                "body", f"a request body is only allowed for POST and PUT, not {config.method}"
            ))
        if config.content_match is not None and config.content_match_mode in REGEX_MATCH_MODES:
            errors.extend(_regex_errors(config.content_match, "contentMatch"))
        if config.basic_auth_password is not None and config.basic_auth_user is None:
            errors.append(FieldError(
                "basicAuthUser", "a username is required when a basic auth password is set"
            ))
        return errors


class PingConfigBuilder(ConfigurationBuilder):
    type_id = "ping"
    model = PingConfig


class PortConfigBuilder(ConfigurationBuilder):
    type_id = "port"
    model = PortConfig
    default_overrides = {"port": 80}

    def check(self, config: PortConfig) -> List[FieldError]:
        if config.expected_response is not None and config.expect_string_match_mode in REGEX_MATCH_MODES:
            return _regex_errors(config.expected_response, "expectedResponse")
        return []


class DnsConfigBuilder(ConfigurationBuilder):
    type_id = "dns"
    model = DnsConfig
    default_overrides = {"recordType": "A"}

    _ADDRESS_TYPES = {
        "A": (ipaddress.IPv4Address, "IPv4"),
        "AAAA": (ipaddress.IPv6Address, "IPv6"),
    }

    def check(self, config: DnsConfig) -> List[FieldError]:
        errors = []
        address = self._ADDRESS_TYPES.get(config.record_type)

        if address is None:
            if config.expected_ip:
                errors.append(FieldError(
                    "expectedIp",
                    f"expected IPs only apply to A and AAAA records, use expectedValue for {config.record_type}",
                ))
            return errors

        address_cls, family = address
        for index, entry in enumerate(config.expected_ip):
            try:
                address_cls(entry)
            except ValueError:
                errors.append(FieldError(
                    f"expectedIp.{index}", f"'{entry}' is not a valid {family} address"
                ))
        if config.expected_value is not None:
            errors.append(FieldError(
                "expectedValue",
                f"{config.record_type} records are matched with expectedIp, not expectedValue",
            ))
        return errors


BUILDERS: Dict[str, ConfigurationBuilder] = {
    builder.type_id: builder
    for builder in (
        HttpConfigBuilder(),
        PingConfigBuilder(),
        PortConfigBuilder(),
        DnsConfigBuilder(),
    )
}


def get_builder(type_id: str) -> ConfigurationBuilder:
    """Look up the builder for a monitor type."""
    builder = BUILDERS.get(type_id)
    if builder is None:
        raise MonitorValidationError([
            FieldError("monitorTypeId", f"unsupported monitor type '{type_id}'")
        ])
    return builder


def validate_configuration(type_id: str, raw_fields: Mapping[str, Any]) -> MonitorConfiguration:
    """Validate raw fields for the given type."""
    return get_builder(type_id).validate(raw_fields)
