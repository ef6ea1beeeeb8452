"""
Object Store Interface

The exporter reads the monitoring population exclusively through
ObjectStore. InMemoryObjectStore is the reference implementation used by the
CLI (loaded from a JSON object graph) and by the tests.
"""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from pathlib import Path

from pydantic import ValidationError

from compatstatus.models import (
    Host,
    HostGroup,
    ObjectGraph,
    Service,
    ServiceGroup,
    ServiceState,
)

logger = logging.getLogger(__name__)

# States that count as "available" for dependency purposes.
AVAILABLE_STATES = frozenset({ServiceState.OK, ServiceState.WARNING})


class ObjectGraphError(Exception):
    """Raised when an object graph document cannot be loaded."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class ObjectStore(ABC):
    """
    Read-only query interface over the monitoring population.

    Implementations must answer from a consistent-enough view for one export
    pass; the exporter performs no locking of its own.
    """

    @abstractmethod
    def list_hosts(self) -> Sequence[Host]:
        """Return every host in a stable iteration order."""

    @abstractmethod
    def list_services(self) -> Sequence[Service]:
        """Return every service in a stable iteration order."""

    @abstractmethod
    def get_host_group(self, name: str) -> HostGroup | None:
        """Return the host group entity, or None if only referenced."""

    @abstractmethod
    def get_service_group(self, name: str) -> ServiceGroup | None:
        """Return the service group entity, or None if only referenced."""

    @abstractmethod
    def is_host_up(self, host: Host) -> bool:
        """Whether the host's own check says it is up."""

    @abstractmethod
    def is_host_reachable(self, host: Host) -> bool:
        """Whether every ancestor host is up."""

    @abstractmethod
    def is_service_reachable(self, service: Service) -> bool:
        """Whether the service's dependency chain is available."""

    @abstractmethod
    def has_host_been_checked(self, host: Host) -> bool:
        """Whether the host check has produced a result yet."""


class InMemoryObjectStore(ObjectStore):
    """Dictionary backed object store."""

    def __init__(
        self,
        hosts: Iterable[Host] = (),
        services: Iterable[Service] = (),
        host_groups: Iterable[HostGroup] = (),
        service_groups: Iterable[ServiceGroup] = (),
    ):
        self._hosts: dict[str, Host] = {}
        self._services: dict[tuple[str, str], Service] = {}
        self._host_groups: dict[str, HostGroup] = {}
        self._service_groups: dict[str, ServiceGroup] = {}

        for host in hosts:
            self.add_host(host)
        for service in services:
            self.add_service(service)
        for group in host_groups:
            self._host_groups[group.name] = group
        for group in service_groups:
            self._service_groups[group.name] = group

    # ----- construction -----

    @classmethod
    def from_graph(cls, graph: ObjectGraph) -> "InMemoryObjectStore":
        return cls(
            hosts=graph.hosts,
            services=graph.services,
            host_groups=graph.hostgroups,
            service_groups=graph.servicegroups,
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "InMemoryObjectStore":
        """
        Load a JSON object graph.

        Raises:
            ObjectGraphError: If the file is missing, not JSON, or invalid.
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            graph = ObjectGraph.model_validate(data)
        except FileNotFoundError as e:
            raise ObjectGraphError(f"Object graph not found: {path}", str(path)) from e
        except json.JSONDecodeError as e:
            raise ObjectGraphError(f"Object graph is not valid JSON: {e}", str(path)) from e
        except ValidationError as e:
            raise ObjectGraphError(
                f"Object graph failed validation ({e.error_count()} errors)", str(path)
            ) from e

        store = cls.from_graph(graph)
        logger.debug(
            f"Loaded object graph from {path}: "
            f"{len(store._hosts)} hosts, {len(store._services)} services"
        )
        return store

    def add_host(self, host: Host) -> None:
        self._hosts[host.name] = host

    def add_service(self, service: Service) -> None:
        self._services[(service.host_name, service.alias)] = service

    # ----- lookups -----

    def get_host(self, name: str) -> Host | None:
        return self._hosts.get(name)

    def get_service(self, host_name: str, alias: str) -> Service | None:
        return self._services.get((host_name, alias))

    def list_hosts(self) -> list[Host]:
        return list(self._hosts.values())

    def list_services(self) -> list[Service]:
        return list(self._services.values())

    def get_host_group(self, name: str) -> HostGroup | None:
        return self._host_groups.get(name)

    def get_service_group(self, name: str) -> ServiceGroup | None:
        return self._service_groups.get(name)

    # ----- reachability -----

    def _hostcheck_service(self, host: Host) -> Service | None:
        if not host.hostcheck:
            return None
        return self._services.get((host.name, host.hostcheck))

    def has_host_been_checked(self, host: Host) -> bool:
        service = self._hostcheck_service(host)
        return service is not None and service.has_been_checked

    def is_host_up(self, host: Host) -> bool:
        service = self._hostcheck_service(host)
        # Hosts without a host check are assumed up.
        if service is None:
            return True
        return service.state in AVAILABLE_STATES

    def is_host_reachable(self, host: Host) -> bool:
        return self._parents_available(host, visited={host.name})

    def _parents_available(self, host: Host, visited: set[str]) -> bool:
        for parent_name in sorted(host.parents):
            if parent_name in visited:
                continue
            parent = self._hosts.get(parent_name)
            if parent is None:
                logger.debug(f"Host {host.name}: unknown parent {parent_name} ignored")
                continue
            visited.add(parent_name)
            if not self.is_host_up(parent):
                return False
            if not self._parents_available(parent, visited):
                return False
        return True

    def is_service_reachable(self, service: Service) -> bool:
        host = self._hosts.get(service.host_name)
        if host is not None and not self.is_host_reachable(host):
            return False

        for parent_alias in service.parents:
            parent = self._services.get((service.host_name, parent_alias))
            if parent is not None and parent.state not in AVAILABLE_STATES:
                return False
        return True
