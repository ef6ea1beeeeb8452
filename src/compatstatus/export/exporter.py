"""
Status Snapshot Exporter

Invoked by the timer. Walks the object graph once, renders status.dat and
objects.cache into memory and commits both files through atomic_commit.

Run layout:
├─ status.dat:    header, info, programstatus, hoststatus*, servicestatus*
└─ objects.cache: header, host*, hostgroup*, service*, servicegroup*
"""

import io
import logging
import time
from collections.abc import Callable
from pathlib import Path

from compatstatus.context import STATISTICS_WINDOWS, ProgramContext
from compatstatus.export.atomic import atomic_commit
from compatstatus.export.groups import GroupAggregator
from compatstatus.export.serializer import LegacyFormatSerializer
from compatstatus.models import ExporterState, ExportResult, ExportSnapshot
from compatstatus.status.calculator import StatusCalculator
from compatstatus.store import ObjectStore

logger = logging.getLogger(__name__)


class StatusSnapshotExporter:
    """
    Orchestrates one full export per call to ``run()``.

    Every run re-derives everything from the store; nothing is carried over
    between runs except the Idle/Exporting state. A call that arrives while a
    run is still in progress is skipped.
    """

    def __init__(
        self,
        store: ObjectStore | Callable[[], ObjectStore],
        context: ProgramContext,
        status_path: str | Path = "status.dat",
        objects_path: str | Path = "objects.cache",
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            store: Object store, or a factory called at the start of every
                run (used when the population is reloaded per tick)
            context: Program start time and task statistics
            status_path: Destination of the status document
            objects_path: Destination of the object definition document
            clock: Source of "now" for created/last_update fields
        """
        self._store = store
        self.context = context
        self.status_path = Path(status_path)
        self.objects_path = Path(objects_path)
        self.clock = clock

        self.serializer = LegacyFormatSerializer()
        self.calculator = StatusCalculator()
        self.state = ExporterState.IDLE
        self.last_result: ExportResult | None = None
        self.last_snapshot: ExportSnapshot | None = None

    def _resolve_store(self) -> ObjectStore:
        if isinstance(self._store, ObjectStore):
            return self._store
        return self._store()

    def run(self) -> ExportResult:
        """
        Execute one export. Never raises; failures are logged and reported
        in the returned ExportResult.
        """
        started = self.clock()

        if self.state is ExporterState.EXPORTING:
            logger.warning("⏭️ Export still in progress, skipping this tick")
            return ExportResult(success=False, started_at=started, skipped=True)

        self.state = ExporterState.EXPORTING
        t0 = time.monotonic()
        try:
            result = self._export(started)
        except Exception as e:
            logger.exception(f"❌ Status export failed: {e}")
            result = ExportResult(success=False, started_at=started, error=str(e))
        finally:
            self.state = ExporterState.IDLE

        result.duration = time.monotonic() - t0
        self.last_result = result

        if result.success:
            logger.info(
                f"✅ Status export complete: {result.hosts} hosts, "
                f"{result.services} services, {result.host_groups} hostgroups, "
                f"{result.service_groups} servicegroups ({result.duration:.3f}s)"
            )
        return result

    def _export(self, now: float) -> ExportResult:
        store = self._resolve_store()
        serializer = self.serializer
        groups = GroupAggregator()

        status_doc = io.StringIO()
        host_defs = io.StringIO()
        service_defs = io.StringIO()

        # Step 1-2: headers and program preamble
        status_doc.write(serializer.status_header())
        status_doc.write(serializer.info(now))
        status_doc.write(serializer.program_status(
            self.context.start_time(),
            [self.context.task_statistics(w) for w in STATISTICS_WINDOWS],
        ))

        # Step 3: hosts
        hosts = store.list_hosts()
        for host in hosts:
            state = self.calculator.compute_host_state(
                reachable=store.is_host_reachable(host),
                up=store.is_host_up(host),
            )
            status_doc.write(serializer.host_status(
                host, state, store.has_host_been_checked(host), now
            ))
            host_defs.write(serializer.host_definition(host))
            groups.add_host(host)

        # Step 4: services
        services = store.list_services()
        for service in services:
            derived = self.calculator.compute_service_status(
                service, reachable=store.is_service_reachable(service)
            )
            status_doc.write(serializer.service_status(service, derived, now))
            service_defs.write(serializer.service_definition(service))
            groups.add_service(service)

        # Step 5: object cache in host, hostgroup, service, servicegroup order
        snapshot = groups.snapshot()
        objects_doc = io.StringIO()
        objects_doc.write(serializer.objects_header())
        objects_doc.write(host_defs.getvalue())
        for name, members in snapshot.host_groups.items():
            objects_doc.write(serializer.host_group_definition(
                name, members, store.get_host_group(name)
            ))
        objects_doc.write(service_defs.getvalue())
        for name, members in snapshot.service_groups.items():
            objects_doc.write(serializer.service_group_definition(
                name, members, store.get_service_group(name)
            ))
        self.last_snapshot = snapshot

        logger.debug(
            f"Rendered snapshot: {len(hosts)} hosts, {len(services)} services"
        )

        # Step 6: commit, status first
        committed = []
        for path, doc in ((self.status_path, status_doc), (self.objects_path, objects_doc)):
            text = doc.getvalue()
            atomic_commit(path, lambda f, text=text: f.write(text))
            committed.append(str(path))

        return ExportResult(
            success=True,
            started_at=now,
            hosts=len(hosts),
            services=len(services),
            host_groups=len(snapshot.host_groups),
            service_groups=len(snapshot.service_groups),
            committed=committed,
        )
