"""
Compat Status Data Models

Hosts, services and groups are owned by the object store; the exporter only
reads them. Derived models (DerivedServiceStatus, ExportSnapshot,
ExportResult) live for a single export run.
"""

from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator


# === Enums ===

class ServiceState(IntEnum):
    """Service check state. Values are written verbatim into status.dat."""
    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3
    UNCHECKABLE = 4  # internal only, clamped to UNKNOWN on export


class StateType(IntEnum):
    """Whether a state has passed the retry threshold."""
    SOFT = 0
    HARD = 1


class HostState(IntEnum):
    """Derived host tri-state."""
    UP = 0
    DOWN = 1
    UNREACHABLE = 2


class ExporterState(str, Enum):
    """Lifecycle of the snapshot exporter."""
    IDLE = "idle"
    EXPORTING = "exporting"


# Timestamp used for "never happened" in check results.
UNKNOWN_TIMESTAMP = -1.0


def _to_name_set(v: Any) -> Any:
    """Accept None or any iterable of names for set-valued fields."""
    if v is None:
        return set()
    if isinstance(v, str):
        return {v}
    return v


def _check_tokens(v: Any) -> Any:
    """Names end up in comma-joined member lists, so they may not contain commas."""
    names = [v] if isinstance(v, str) else v
    for name in names:
        if "," in name:
            raise ValueError(f"name must not contain a comma: {name!r}")
    return v


# === Check Results ===

class CheckResult(BaseModel):
    """Latest result produced by the check engine for one service."""
    model_config = {"allow_inf_nan": False}

    output: str = ""
    performance_data_raw: str = ""
    schedule_start: float = UNKNOWN_TIMESTAMP
    schedule_end: float = UNKNOWN_TIMESTAMP
    execution_start: float = UNKNOWN_TIMESTAMP
    execution_end: float = UNKNOWN_TIMESTAMP


# === Configuration Objects ===

class Host(BaseModel):
    """
    A monitored host.

    The up/down/unreachable state is never stored here; it is derived from
    object store queries at export time.
    """
    name: str = Field(min_length=1)
    alias: str = ""
    parents: set[str] = Field(default_factory=set)
    groups: set[str] = Field(default_factory=set)
    hostcheck: str | None = Field(
        default=None,
        description="Alias of the service on this host that decides up/down"
    )

    @field_validator("parents", "groups", mode="before")
    @classmethod
    def convert_to_set(cls, v: Any) -> Any:
        return _to_name_set(v)

    @field_validator("name", "parents", "groups")
    @classmethod
    def reject_commas(cls, v: Any) -> Any:
        return _check_tokens(v)

    @property
    def display_alias(self) -> str:
        """Alias falling back to the host name."""
        return self.alias or self.name


class Service(BaseModel):
    """A service check bound to a host by name."""
    model_config = {"allow_inf_nan": False}

    host_name: str = Field(min_length=1)
    alias: str = Field(min_length=1)
    check_interval: float = Field(default=300, ge=0, description="Seconds")
    retry_interval: float = Field(default=60, ge=0, description="Seconds")
    max_check_attempts: int = Field(default=3, ge=1)
    current_check_attempt: int = Field(default=1, ge=1)
    state: ServiceState = ServiceState.UNKNOWN
    state_type: StateType = StateType.SOFT
    last_state_change: float = 0
    last_hard_state_change: float = 0
    next_check: float = 0
    groups: set[str] = Field(default_factory=set)
    parents: set[str] = Field(
        default_factory=set,
        description="Aliases of services on the same host this one depends on"
    )
    last_check_result: CheckResult | None = None

    @field_validator("groups", "parents", mode="before")
    @classmethod
    def convert_to_set(cls, v: Any) -> Any:
        return _to_name_set(v)

    @field_validator("host_name", "alias", "groups", "parents")
    @classmethod
    def reject_commas(cls, v: Any) -> Any:
        return _check_tokens(v)

    @property
    def has_been_checked(self) -> bool:
        return self.last_check_result is not None


class HostGroup(BaseModel):
    """Optional metadata for a host group; membership lives on the hosts."""
    name: str = Field(min_length=1)
    alias: str = ""
    notes_url: str = ""
    action_url: str = ""


class ServiceGroup(BaseModel):
    """Optional metadata for a service group; membership lives on the services."""
    name: str = Field(min_length=1)
    alias: str = ""
    notes_url: str = ""
    action_url: str = ""


class ObjectGraph(BaseModel):
    """Serialized form of a complete object population."""
    hosts: list[Host] = Field(default_factory=list)
    services: list[Service] = Field(default_factory=list)
    hostgroups: list[HostGroup] = Field(default_factory=list)
    servicegroups: list[ServiceGroup] = Field(default_factory=list)


# === Derived Data (per export run) ===

class DerivedServiceStatus(BaseModel):
    """Status fields reconstructed from a service and its last check result."""
    has_been_checked: bool
    execution_time: float
    latency: float
    state: ServiceState
    output: str
    performance_data: str
    last_check: float


class ExportSnapshot(BaseModel):
    """Group membership indices built during one export run."""
    host_groups: dict[str, list[str]] = Field(default_factory=dict)
    service_groups: dict[str, list[tuple[str, str]]] = Field(default_factory=dict)


class ExportResult(BaseModel):
    """Outcome of one export run."""
    success: bool
    started_at: float
    duration: float = 0.0
    hosts: int = 0
    services: int = 0
    host_groups: int = 0
    service_groups: int = 0
    committed: list[str] = Field(default_factory=list)
    skipped: bool = False
    error: str | None = None
