"""
Group Aggregator

Group membership is declared on hosts and services, not on the groups.
The aggregator folds the population into name -> members indices once per
export run.
"""

from collections import defaultdict

from compatstatus.models import ExportSnapshot, Host, Service


class GroupAggregator:
    """
    Collect group memberships during one forward pass.

    Group names and members come out sorted so that two runs over the same
    population produce identical text.
    """

    def __init__(self):
        self._host_groups: defaultdict[str, set[str]] = defaultdict(set)
        self._service_groups: defaultdict[str, set[tuple[str, str]]] = defaultdict(set)

    def add_host(self, host: Host) -> None:
        for group in host.groups:
            self._host_groups[group].add(host.name)

    def add_service(self, service: Service) -> None:
        member = (service.host_name, service.alias)
        for group in service.groups:
            self._service_groups[group].add(member)

    def host_groups(self) -> dict[str, list[str]]:
        return {
            name: sorted(members)
            for name, members in sorted(self._host_groups.items())
        }

    def service_groups(self) -> dict[str, list[tuple[str, str]]]:
        return {
            name: sorted(members)
            for name, members in sorted(self._service_groups.items())
        }

    def snapshot(self) -> ExportSnapshot:
        return ExportSnapshot(
            host_groups=self.host_groups(),
            service_groups=self.service_groups(),
        )
