"""
Legacy Format Serializer

Renders entities into the block layout read by classic status.dat /
objects.cache consumers:

    hoststatus {
    	host_name=web01
    	...
    	}

    define host {
    	host_name	web01
    	...
    	}

Status blocks use ``key=value``; definition blocks use ``key<TAB>value``.
Field order is fixed per block kind.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from compatstatus.models import (
    DerivedServiceStatus,
    Host,
    HostGroup,
    HostState,
    Service,
    ServiceGroup,
)

FORMAT_VERSION = "2.0"
CHECK_COMMAND = "check_i2"
AUTOGENERATED_NOTICE = "# This file is auto-generated. Do not modify this file."

Field = tuple[str, Any]


def format_number(value: int | float) -> str:
    """
    Render a number the way legacy readers parse it.

    Integral values lose their fractional part (300/60 -> "5"); others are
    written fixed-point with at most six decimals (90/60 -> "1.5").
    """
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(int(value))
    if float(value).is_integer():
        return str(int(value))
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def format_timestamp(value: float) -> str:
    """Whole seconds since the epoch (legacy time_t)."""
    return str(int(value))


def escape_value(text: str) -> str:
    """Keep a value on a single line."""
    return (
        text.replace("\\", "\\\\")
        .replace("\r", "\\r")
        .replace("\n", "\\n")
    )


def format_list(values: Iterable[str]) -> str:
    """Comma-joined tokens with no surrounding whitespace."""
    return ",".join(escape_value(str(v)) for v in values)


def render_value(value: Any) -> str:
    if isinstance(value, (bool, int, float)):
        return format_number(value)
    if isinstance(value, (list, tuple)):
        return format_list(value)
    return escape_value(str(value))


def format_status_block(name: str, fields: Sequence[Field]) -> str:
    lines = [f"{name} {{"]
    lines.extend(f"\t{key}={render_value(value)}" for key, value in fields)
    lines.append("\t}")
    return "\n".join(lines) + "\n\n"


def format_definition_block(kind: str, fields: Sequence[Field]) -> str:
    lines = [f"define {kind} {{"]
    lines.extend(f"\t{key}\t{render_value(value)}" for key, value in fields)
    lines.append("\t}")
    return "\n".join(lines) + "\n\n"


def format_header(title: str) -> str:
    return f"# {title}\n{AUTOGENERATED_NOTICE}\n\n"


def _minutes(seconds: float) -> float:
    return seconds / 60.0


class LegacyFormatSerializer:
    """
    Produce the exact text of every block kind.

    Pure formatting: all values (including "now") are supplied by the caller.
    """

    STATUS_TITLE = "Status file"
    OBJECTS_TITLE = "Object cache file"

    # === Headers & preamble ===

    def status_header(self) -> str:
        return format_header(self.STATUS_TITLE)

    def objects_header(self) -> str:
        return format_header(self.OBJECTS_TITLE)

    def info(self, now: float) -> str:
        return format_status_block("info", [
            ("created", format_timestamp(now)),
            ("version", FORMAT_VERSION),
        ])

    def program_status(
        self,
        program_start: float,
        check_stats: Sequence[int]
    ) -> str:
        """
        Args:
            program_start: Program start time
            check_stats: Completed checks over the 1, 5 and 15 minute windows
        """
        return format_status_block("programstatus", [
            ("daemon_mode", 1),
            ("program_start", format_timestamp(program_start)),
            ("active_service_checks_enabled", 1),
            ("passive_service_checks_enabled", 1),
            ("active_host_checks_enabled", 0),
            ("passive_host_checks_enabled", 0),
            ("check_service_freshness", 0),
            ("check_host_freshness", 0),
            ("enable_flap_detection", 1),
            ("enable_failure_prediction", 0),
            ("active_scheduled_service_check_stats",
             [format_number(v) for v in check_stats]),
        ])

    # === Hosts ===

    def host_status(
        self,
        host: Host,
        state: HostState,
        has_been_checked: bool,
        now: float
    ) -> str:
        # Host checks are not scheduled individually; timing fields are fixed.
        ts = format_timestamp(now)
        return format_status_block("hoststatus", [
            ("host_name", host.name),
            ("has_been_checked", has_been_checked),
            ("should_be_scheduled", 1),
            ("check_execution_time", 0),
            ("check_latency", 0),
            ("current_state", int(state)),
            ("state_type", 1),
            ("last_check", ts),
            ("next_check", ts),
            ("current_attempt", 1),
            ("max_attempts", 1),
            ("active_checks_enabled", 1),
            ("passive_checks_enabled", 1),
            ("last_update", ts),
        ])

    def host_definition(self, host: Host) -> str:
        fields: list[Field] = [
            ("host_name", host.name),
            ("alias", host.display_alias),
            ("check_interval", 1),
            ("retry_interval", 1),
            ("max_check_attempts", 1),
            ("active_checks_enabled", 1),
            ("passive_checks_enabled", 1),
        ]
        if host.parents:
            fields.append(("parents", sorted(host.parents)))
        return format_definition_block("host", fields)

    def host_group_definition(
        self,
        name: str,
        members: Sequence[str],
        group: HostGroup | None
    ) -> str:
        fields: list[Field] = [("hostgroup_name", name)]
        if group is not None:
            fields.extend([
                ("alias", group.alias),
                ("notes_url", group.notes_url),
                ("action_url", group.action_url),
            ])
        fields.append(("members", list(members)))
        return format_definition_block("hostgroup", fields)

    # === Services ===

    def service_status(
        self,
        service: Service,
        derived: DerivedServiceStatus,
        now: float
    ) -> str:
        return format_status_block("servicestatus", [
            ("host_name", service.host_name),
            ("service_description", service.alias),
            ("check_interval", _minutes(service.check_interval)),
            ("retry_interval", _minutes(service.retry_interval)),
            ("has_been_checked", derived.has_been_checked),
            ("should_be_scheduled", 1),
            ("check_execution_time", derived.execution_time),
            ("check_latency", derived.latency),
            ("current_state", int(derived.state)),
            ("state_type", int(service.state_type)),
            ("plugin_output", derived.output),
            ("performance_data", derived.performance_data),
            ("last_check", format_timestamp(derived.last_check)),
            ("next_check", format_timestamp(service.next_check)),
            ("current_attempt", service.current_check_attempt),
            ("max_attempts", service.max_check_attempts),
            ("last_state_change", format_timestamp(service.last_state_change)),
            ("last_hard_state_change", format_timestamp(service.last_hard_state_change)),
            ("last_update", format_timestamp(now)),
            ("active_checks_enabled", 1),
            ("passive_checks_enabled", 1),
        ])

    def service_definition(self, service: Service) -> str:
        return format_definition_block("service", [
            ("host_name", service.host_name),
            ("service_description", service.alias),
            ("check_command", CHECK_COMMAND),
            ("check_interval", _minutes(service.check_interval)),
            ("retry_interval", _minutes(service.retry_interval)),
            ("max_check_attempts", 1),
            ("active_checks_enabled", 1),
            ("passive_checks_enabled", 1),
        ])

    def service_group_definition(
        self,
        name: str,
        members: Sequence[tuple[str, str]],
        group: ServiceGroup | None
    ) -> str:
        fields: list[Field] = [("servicegroup_name", name)]
        if group is not None:
            fields.extend([
                ("alias", group.alias),
                ("notes_url", group.notes_url),
                ("action_url", group.action_url),
            ])
        tokens = [token for pair in members for token in pair]
        fields.append(("members", tokens))
        return format_definition_block("servicegroup", fields)
