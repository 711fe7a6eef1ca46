"""Type-specific monitor configuration schemas.

Each monitor type has its own flat configuration shape. The variant that goes
with a monitor is chosen by the monitor's ``monitorTypeId``; there is no shared
"bag of optional fields". Keys are serialized in camelCase for the store.
"""
import ipaddress
import json
import re
from functools import lru_cache
from types import MappingProxyType
from typing import Annotated, Literal, Mapping, Optional, Tuple, Union

from pydantic import (
    AfterValidator,
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from ..utils.validation import drop_blank


MatchMode = Literal["contains", "not_contains", "regex", "not_regex"]
HttpMethod = Literal["GET", "POST", "HEAD", "PUT", "DELETE", "OPTIONS"]
DnsRecordType = Literal["A", "AAAA", "CNAME", "MX", "TXT", "NS", "SOA", "SRV"]

MATCH_MODES = ("contains", "not_contains", "regex", "not_regex")
REGEX_MATCH_MODES = ("regex", "not_regex")
BODY_METHODS = ("POST", "PUT")

_HOSTNAME_RE = re.compile(
    r"^(?=.{1,253}\.?$)(?!-)[A-Za-z0-9-]{1,63}(?<!-)(\.(?!-)[A-Za-z0-9-]{1,63}(?<!-))*\.?$"
)

# DNS owner names may carry underscore labels (_sip._tcp, _dmarc)
_DNS_NAME_RE = re.compile(
    r"^(?=.{1,253}\.?$)(?!-)[A-Za-z0-9_-]{1,63}(?<!-)(\.(?!-)[A-Za-z0-9_-]{1,63}(?<!-))*\.?$"
)

_HTTP_URL = TypeAdapter(AnyHttpUrl)


def check_host(value: str) -> str:
    """Accept a hostname or an IP literal, reject anything URL-shaped."""
    value = value.strip()
    if "://" in value or "/" in value:
        raise PydanticCustomError(
            "host_is_url", "must be a hostname or IP address, not a URL"
        )
    try:
        ipaddress.ip_address(value)
        return value
    except ValueError:
        pass
    if not _HOSTNAME_RE.match(value):
        raise PydanticCustomError(
            "invalid_host",
            "'{value}' is not a valid hostname or IP address",
            {"value": value},
        )
    return value


Host = Annotated[str, AfterValidator(check_host)]


def check_dns_name(value: str) -> str:
    """Accept a DNS owner name, including underscore service labels."""
    value = value.strip()
    if "://" in value or "/" in value:
        raise PydanticCustomError(
            "host_is_url", "must be a DNS name, not a URL"
        )
    if not _DNS_NAME_RE.match(value):
        raise PydanticCustomError(
            "invalid_dns_name",
            "'{value}' is not a valid DNS name",
            {"value": value},
        )
    return value


DnsName = Annotated[str, AfterValidator(check_dns_name)]


def _field_keys(model) -> set:
    keys = set()
    for name, info in model.model_fields.items():
        keys.update((name, info.alias or to_camel(name)))
    return keys


class ConfigurationBase(BaseModel):
    """Shared behaviour for all configuration variants."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_fields(cls, data):
        # Form posts send "" for untouched inputs; treat them as not set.
        # Keys owned by another monitor type are left over from a type switch.
        if isinstance(data, dict):
            foreign = _foreign_keys(cls)
            return {key: value for key, value in drop_blank(data).items() if key not in foreign}
        return data

    def to_payload(self) -> dict:
        """Serialize to the flat camelCase object sent to the store."""
        return self.model_dump(by_alias=True, mode="json")


class HttpConfig(ConfigurationBase):
    """HTTP(S) endpoint check."""
    url: str
    method: HttpMethod = "GET"
    headers: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    body: Optional[str] = None
    expected_status_code: int = Field(200, ge=100, le=599)
    verify_ssl: bool = Field(True, alias="verifySSL")
    follow_redirects: bool = True
    max_redirects: int = Field(5, ge=0, le=20)
    content_match_mode: MatchMode = "contains"
    content_match: Optional[str] = None
    basic_auth_user: Optional[str] = None
    basic_auth_password: Optional[str] = None

    @field_validator("url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        value = value.strip()
        try:
            _HTTP_URL.validate_python(value)
        except ValidationError:
            raise PydanticCustomError(
                "invalid_url", "must be an absolute http:// or https:// URL with a host"
            )
        # Stored as typed, without normalisation
        return value

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("headers", mode="before")
    @classmethod
    def _parse_headers(cls, value):
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError as e:
                raise PydanticCustomError(
                    "invalid_headers_json",
                    "headers must be valid JSON: {error}",
                    {"error": e.msg},
                )
        if not isinstance(value, Mapping):
            raise PydanticCustomError(
                "invalid_headers", "headers must be an object of header names to values"
            )
        return value

    @field_validator("headers")
    @classmethod
    def _freeze_headers(cls, value):
        return MappingProxyType(dict(value))

    @field_serializer("headers")
    def _serialize_headers(self, value) -> dict:
        return dict(value)


class PingConfig(ConfigurationBase):
    """ICMP ping check."""
    host: Host
    packet_count: int = Field(4, ge=1, le=10)
    packet_size: int = Field(56, ge=1, le=65500)
    max_latency_ms: int = Field(500, ge=1, le=60000)
    max_packet_loss_percent: int = Field(10, ge=0, le=100)


class PortConfig(ConfigurationBase):
    """TCP port check with optional send/expect exchange."""
    host: Host
    port: int = Field(..., ge=1, le=65535)
    send_string: Optional[str] = None
    expect_string_match_mode: MatchMode = "contains"
    expected_response: Optional[str] = None


class DnsConfig(ConfigurationBase):
    """DNS record check."""
    hostname: DnsName
    record_type: DnsRecordType
    nameserver: Optional[Host] = None
    expected_ip: Tuple[str, ...] = ()
    expected_value: Optional[str] = None
    check_propagation: bool = False

    @field_validator("record_type", mode="before")
    @classmethod
    def _upper_record_type(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("expected_ip", mode="before")
    @classmethod
    def _split_expected_ip(cls, value):
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple, set, frozenset)):
            entries = []
            for entry in value:
                entry = entry.strip() if isinstance(entry, str) else entry
                if entry == "" or entry in entries:
                    continue
                entries.append(entry)
            return entries
        return value


MonitorConfiguration = Union[HttpConfig, PingConfig, PortConfig, DnsConfig]

CONFIGURATION_TYPES = {
    "http": HttpConfig,
    "ping": PingConfig,
    "port": PortConfig,
    "dns": DnsConfig,
}


@lru_cache(maxsize=None)
def _foreign_keys(model) -> frozenset:
    """Keys that only other configuration variants accept."""
    others = set()
    for variant in CONFIGURATION_TYPES.values():
        if variant is not model:
            others |= _field_keys(variant)
    return frozenset(others - _field_keys(model))
