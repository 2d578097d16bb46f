"""
This module defines the JobRunner, which converts one source file into one
destination file.

A job runs through a fixed sequence: open a tracked scope for its temporaries,
create the conduit, run the decode and encode stages, and multiplex only if both
stages succeeded. The scope removes the conduit and the intermediate on the way
out, whether the job succeeded or not.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from ..config.common import (
    CONDUIT_EXTENSION,
    INTERMEDIATE_EXTENSION,
    JOB_STATE_CREATED,
    JOB_STATE_DONE,
    JOB_STATE_FAILED,
    JOB_STATE_MULTIPLEX_RUNNING,
    JOB_STATE_RESOURCES_OPENED,
    JOB_STATE_STAGES_RUNNING,
    JOB_STATE_STAGES_TERMINATED,
    OUTPUT_EXTENSION,
)
from ..domain.exceptions import StageFailure
from ..domain.job import Job
from ..domain.process import PipelineOutcome
from ..domain.temp_models import TransientResources
from ..pipeline.coordinator import PipelineCoordinator
from ..utils.format_utils import unique_filename_for
from .multiplexer import MultiplexStep
from .stream_conduit import create_conduit
from .transcode_profile import IPodProfile, TranscodeProfile


def destination_for(title: str, output_dir: Path, overwrite: bool = False) -> Path:
    """
    Returns the final artifact path for `title`.

    With `overwrite`, this is always `<title>.m4v`. Otherwise the first of
    `<title>.m4v`, `<title>-1.m4v`, `<title>-2.m4v`... that does not exist yet.
    """
    if overwrite:
        return output_dir / f"{title}.{OUTPUT_EXTENSION}"
    return unique_filename_for(title, OUTPUT_EXTENSION, output_dir)


class JobRunner:
    """
    Runs a single job through the transcode pipeline.

    Attributes:
        state (str): The job's current state. See `config.common` for the
                     `JOB_STATE_*` constants.
        outcome (Optional[PipelineOutcome]): The stages' joint outcome, once known.
        destination (Optional[Path]): The destination chosen for the job.
    """

    def __init__(
        self,
        profile: Optional[TranscodeProfile] = None,
        coordinator: Optional[PipelineCoordinator] = None,
        multiplexer: Optional[MultiplexStep] = None,
    ):
        self.profile = profile or IPodProfile()
        self.coordinator = coordinator or PipelineCoordinator()
        self.multiplexer = multiplexer or MultiplexStep(self.profile)
        self.state = JOB_STATE_CREATED
        self.outcome: Optional[PipelineOutcome] = None
        self.destination: Optional[Path] = None

    def _set_state(self, state: str):
        logger.debug(f"Job state: {self.state} -> {state}")
        self.state = state

    def run(self, job: Job) -> Path:
        """
        Encodes `job` and returns the path of the written destination.

        Raises:
            ResourceCreationError: If the conduit cannot be created.
            LaunchError: If a stage process cannot be started.
            StageFailure: If a stage exited unsuccessfully. No destination is written.
            MultiplexError: If the final combine step fails.
        """
        self.state = JOB_STATE_CREATED
        self.outcome = None
        self.destination = destination_for(job.title, job.output_dir, job.options.overwrite)
        logger.info(f"Encoding '{job.source}' to '{self.destination}'")

        try:
            with TransientResources() as tracked:
                return self._run_in_scope(job, tracked)
        except BaseException:
            self._set_state(JOB_STATE_FAILED)
            raise

    def _run_in_scope(self, job: Job, tracked: TransientResources) -> Path:
        # Temporaries are always uniquely named, whatever job.options.overwrite says.
        conduit_path = unique_filename_for(job.source_name, CONDUIT_EXTENSION, job.work_dir)
        conduit = create_conduit(conduit_path)
        tracked.append(conduit.path)
        intermediate = tracked.append(unique_filename_for(job.source_name, INTERMEDIATE_EXTENSION, job.work_dir))
        self._set_state(JOB_STATE_RESOURCES_OPENED)

        decode_argv = self.profile.decode_cmd(job.source, conduit.path)
        encode_argv = self.profile.encode_cmd(conduit.path, intermediate, job.options.vbitrate)

        self._set_state(JOB_STATE_STAGES_RUNNING)
        self.outcome = self.coordinator.run(decode_argv, encode_argv)
        self._set_state(JOB_STATE_STAGES_TERMINATED)

        if not self.outcome.succeeded:
            logger.warning(f"Not multiplexing, as an earlier phase failed ({self.outcome.describe()})")
            raise StageFailure(self.outcome)

        self._set_state(JOB_STATE_MULTIPLEX_RUNNING)
        self.multiplexer.run(job.source, intermediate, self.destination, job.title)
        self._set_state(JOB_STATE_DONE)
        return self.destination
