"""
Status Calculator - Reconstruct legacy status fields

Derives execution time, latency, effective state and output text for a
service from its last check result, and the tri-state of a host.
"""

from compatstatus.models import (
    UNKNOWN_TIMESTAMP,
    CheckResult,
    DerivedServiceStatus,
    HostState,
    Service,
    ServiceState,
)

UNREACHABLE_OUTPUT = "One or more parent services are unavailable."


class StatusCalculator:
    """
    Compute derived status fields.

    Nothing here raises: a service that was never checked gets the sentinel
    timestamps (-1) and therefore zero execution time and latency.
    """

    # Highest state the legacy format knows about.
    MAX_STATE = ServiceState.UNKNOWN

    def compute_execution_time(self, cr: CheckResult | None) -> float:
        """
        Time the check took to execute.

        Definition: execution_end - execution_start
        """
        if cr is None:
            return UNKNOWN_TIMESTAMP - UNKNOWN_TIMESTAMP
        return cr.execution_end - cr.execution_start

    def compute_latency(self, cr: CheckResult | None) -> float:
        """
        Scheduling overhead around the execution.

        Definition: (schedule_end - schedule_start) - execution_time
        """
        if cr is None:
            schedule_start = schedule_end = UNKNOWN_TIMESTAMP
        else:
            schedule_start, schedule_end = cr.schedule_start, cr.schedule_end
        return (schedule_end - schedule_start) - self.compute_execution_time(cr)

    def clamp_state(self, state: int) -> ServiceState:
        """Cap a raw state at UNKNOWN."""
        if state > self.MAX_STATE:
            return self.MAX_STATE
        return ServiceState(state)

    def compute_service_status(
        self,
        service: Service,
        reachable: bool
    ) -> DerivedServiceStatus:
        """
        Build the derived status of one service.

        Args:
            service: Service as held by the object store
            reachable: Whether the service's parents are available

        Returns:
            DerivedServiceStatus with every field populated
        """
        cr = service.last_check_result

        output = cr.output if cr is not None else ""
        perfdata = cr.performance_data_raw if cr is not None else ""
        last_check = cr.schedule_end if cr is not None else UNKNOWN_TIMESTAMP

        state = int(service.state)

        if not reachable:
            state = ServiceState.CRITICAL
            if output:
                output = f"{UNREACHABLE_OUTPUT} ({output})"
            else:
                output = UNREACHABLE_OUTPUT

        return DerivedServiceStatus(
            has_been_checked=cr is not None,
            execution_time=self.compute_execution_time(cr),
            latency=self.compute_latency(cr),
            state=self.clamp_state(state),
            output=output,
            performance_data=perfdata,
            last_check=last_check,
        )

    def compute_host_state(self, reachable: bool, up: bool) -> HostState:
        """
        Host tri-state.

        UNREACHABLE wins over DOWN: a host behind a failed parent cannot be
        judged by its own check.
        """
        if not reachable:
            return HostState.UNREACHABLE
        if not up:
            return HostState.DOWN
        return HostState.UP
