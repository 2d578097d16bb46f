"""
This module defines the PipelineCoordinator, which runs the two stages of a job
as concurrent processes and reaps them.

The stages are coupled through a blocking pipe. If one of them dies, the other
can stay blocked on the conduit forever (the encoder waiting for frames from a
decoder that never opened its end, or the decoder stuck writing to an encoder
that is gone). Waiting on the stages one after the other would hang on exactly
that sibling, so the coordinator waits for whichever stage exits first, and
terminates the sibling as soon as a failure is seen.
"""

import os
import selectors
import signal
import time
from typing import Dict, List, Optional, Sequence

from loguru import logger

from ..config.common import DECODE_STAGE, ENCODE_STAGE, REAP_POLL_INTERVAL
from ..domain.process import ExitStatus, PipelineOutcome, StageHandle
from ..services.stage_supervisor import StageSupervisor


class PipelineCoordinator:
    """
    Launches the decode and encode stages and reaps both.

    Args:
        supervisor: Used to launch, poll, wait on and terminate the stages.
        grace_signal: Signal sent to the sibling of a failed stage.
        poll_interval: Sleep between polls on hosts without process descriptors.
    """

    def __init__(
        self,
        supervisor: Optional[StageSupervisor] = None,
        grace_signal: int = signal.SIGTERM,
        poll_interval: float = REAP_POLL_INTERVAL,
    ):
        self.supervisor = supervisor or StageSupervisor()
        self.grace_signal = grace_signal
        self.poll_interval = poll_interval

    def run(self, decode_argv: Sequence[str], encode_argv: Sequence[str]) -> PipelineOutcome:
        """
        Runs both stages to completion and returns their joint outcome.

        Both stages are started before anything is awaited, since each may block
        on the conduit until the other opens it. Stage failures are not raised;
        they are reported in the returned `PipelineOutcome`.

        Raises:
            LaunchError: If a stage cannot be started. A stage that was already
                         started is terminated and reaped first.
        """
        decode = self.supervisor.launch(DECODE_STAGE, decode_argv)
        try:
            encode = self.supervisor.launch(ENCODE_STAGE, encode_argv)
        except BaseException:
            self._abort([decode])
            raise

        first_failure = self._reap([decode, encode])
        outcome = PipelineOutcome(decode=decode.status, encode=encode.status, first_failure=first_failure)
        logger.debug(f"Pipeline outcome: {outcome.describe()}")
        return outcome

    def _reap(self, handles: List[StageHandle]) -> Optional[str]:
        """
        Waits until every handle has a status, reacting to each exit as it happens.

        Returns:
            The name of the first stage seen failing, or None.
        """
        pending = list(handles)
        first_failure: Optional[str] = None
        try:
            while pending:
                exited = [h for h in pending if self.supervisor.poll(h) is not None]
                if not exited:
                    self._wait_for_any(pending)
                    continue

                for handle in exited:
                    pending.remove(handle)
                    status = handle.status
                    logger.info(f"{handle.name} stage (pid {handle.pid}) {status.describe()}")
                    if status.success:
                        continue
                    if first_failure is None:
                        first_failure = handle.name
                    for sibling in pending:
                        logger.warning(f"{handle.name} stage failed; terminating {sibling.name} stage")
                        self.supervisor.terminate(sibling, self.grace_signal)
        except BaseException:
            self._abort(pending)
            raise
        return first_failure

    def _wait_for_any(self, pending: List[StageHandle]):
        """
        Blocks until at least one pending stage has exited.

        Uses Linux process descriptors when available, so the wait is a single
        blocking select. Elsewhere it sleeps for one poll interval.
        """
        pidfd_open = getattr(os, "pidfd_open", None)
        if pidfd_open is None:
            time.sleep(self.poll_interval)
            return

        fds: Dict[int, StageHandle] = {}
        try:
            for handle in pending:
                fds[pidfd_open(handle.pid)] = handle
        except OSError as e:
            # pidfd support missing in the kernel or the process was reaped elsewhere.
            logger.trace(f"pidfd_open unavailable ({e}); polling instead")
            for fd in fds:
                os.close(fd)
            time.sleep(self.poll_interval)
            return

        try:
            with selectors.DefaultSelector() as selector:
                for fd in fds:
                    selector.register(fd, selectors.EVENT_READ)
                selector.select()
        finally:
            for fd in fds:
                os.close(fd)

    def _abort(self, handles: List[StageHandle]):
        """Terminates and reaps every handle that has not exited yet."""
        for handle in handles:
            self.supervisor.terminate(handle, self.grace_signal)
        for handle in handles:
            status: ExitStatus = self.supervisor.wait(handle)
            logger.debug(f"{handle.name} stage reaped after abort: {status.describe()}")
