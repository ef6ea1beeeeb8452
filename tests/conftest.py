"""
Shared fixtures: a small monitoring population.
"""

import pytest

from compatstatus.context import ApplicationContext
from compatstatus.models import (
    CheckResult,
    Host,
    HostGroup,
    Service,
    ServiceGroup,
    ServiceState,
    StateType,
)
from compatstatus.store import InMemoryObjectStore

FIXED_NOW = 1_700_000_000.0


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def context():
    return ApplicationContext(start_time=1_699_990_000.0)


@pytest.fixture
def example_store():
    """h1 (never checked, group linux) with a CRITICAL/HARD ping service."""
    h1 = Host(name="h1", groups={"linux"})
    ping = Service(
        host_name="h1",
        alias="ping",
        check_interval=300,
        retry_interval=60,
        state=ServiceState.CRITICAL,
        state_type=StateType.HARD,
        groups={"network"},
    )
    return InMemoryObjectStore(hosts=[h1], services=[ping])


@pytest.fixture
def populated_store():
    """Gateway, two web hosts behind it, services with check results."""
    gw = Host(name="gw", alias="Gateway", groups={"network"}, hostcheck="ping")
    web1 = Host(name="web1", parents={"gw"}, groups={"linux", "web"}, hostcheck="ping")
    web2 = Host(name="web2", parents={"gw"}, groups={"linux"})

    cr = CheckResult(
        output="PING OK - rtt 0.4ms",
        performance_data_raw="rta=0.4ms;100;200;0",
        schedule_start=1_699_999_990.0,
        schedule_end=1_699_999_992.0,
        execution_start=1_699_999_990.5,
        execution_end=1_699_999_991.75,
    )
    services = [
        Service(host_name="gw", alias="ping", state=ServiceState.OK,
                state_type=StateType.HARD, last_check_result=cr),
        Service(host_name="web1", alias="ping", state=ServiceState.OK,
                last_check_result=cr, groups={"pings"}),
        Service(host_name="web1", alias="http", state=ServiceState.WARNING,
                parents={"ping"}, groups={"web-services"}),
        Service(host_name="web2", alias="http", state=ServiceState.OK,
                groups={"web-services"}),
    ]
    return InMemoryObjectStore(
        hosts=[gw, web1, web2],
        services=services,
        host_groups=[HostGroup(name="linux", alias="Linux Servers",
                               notes_url="http://wiki/linux", action_url="http://act/linux")],
        service_groups=[ServiceGroup(name="web-services", alias="Web")],
    )
