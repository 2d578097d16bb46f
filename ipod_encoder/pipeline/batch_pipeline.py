import argparse
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from loguru import logger

from ..config.common import ERROR_DIR_NAME
from ..domain.exceptions import IPodEncoderException
from ..domain.job import EncodeOptions, Job
from ..services.job_runner import JobRunner
from ..services.logging_service import ErrorLog, SuccessLog
from ..services.title_service import (
    GeneratedNumberExtractor,
    NumberedTitleStrategy,
    PatternNumberExtractor,
    StandaloneTitleStrategy,
    TitleStrategy,
)
from ..services.transcode_profile import IPodProfile, TranscodeProfile


@dataclass
class BatchResult:
    completed: List[Path] = field(default_factory=list)
    failures: List[Tuple[Job, IPodEncoderException]] = field(default_factory=list)
    not_attempted: List[Job] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures and not self.not_attempted


def title_strategy_from_args(args: argparse.Namespace) -> TitleStrategy:
    if getattr(args, "standalone", False):
        return StandaloneTitleStrategy()
    if getattr(args, "sequential_numbers", False):
        return NumberedTitleStrategy(GeneratedNumberExtractor())
    return NumberedTitleStrategy(PatternNumberExtractor(getattr(args, "number_pattern", None)))


class BatchPipeline:
    """
    Encodes a list of source files one after another.

    All titles are assembled before the first encode starts, so a file whose
    episode number cannot be found stops the batch before any work is done
    rather than halfway through. Jobs never overlap, and a failed job does not
    affect the ones after it. With `fail_fast` the first failure ends the batch
    and the remaining jobs are reported as not attempted.
    """

    def __init__(
        self,
        sources: Sequence[Path],
        title: str,
        title_strategy: Optional[TitleStrategy] = None,
        options: Optional[EncodeOptions] = None,
        output_dir: Optional[Path] = None,
        work_dir: Optional[Path] = None,
        fail_fast: bool = False,
        profile: Optional[TranscodeProfile] = None,
        runner_factory: Optional[Callable[[], JobRunner]] = None,
        write_logs: bool = True,
    ):
        self.sources = [Path(s) for s in sources]
        self.title = title
        self.title_strategy = title_strategy or NumberedTitleStrategy()
        self.options = options or EncodeOptions()
        self.output_dir = (output_dir or Path.cwd()).resolve()
        self.work_dir = (work_dir or Path.cwd()).resolve()
        self.fail_fast = fail_fast
        self.profile = profile
        self.runner_factory = runner_factory or self._default_runner
        self.write_logs = write_logs

        if isinstance(self.title_strategy, StandaloneTitleStrategy) and len(self.sources) > 1:
            raise ValueError("--standalone can only be used with a single input file.")

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "BatchPipeline":
        return cls(
            sources=args.inputs,
            title=args.title,
            title_strategy=title_strategy_from_args(args),
            options=EncodeOptions.from_text(args.vbitrate, args.overwrite),
            output_dir=args.output_dir,
            work_dir=args.temp_work_dir,
            fail_fast=args.fail_fast,
        )

    def _default_runner(self) -> JobRunner:
        if self.profile is None:
            self.profile = IPodProfile()
        return JobRunner(profile=self.profile)

    def build_jobs(self) -> List[Job]:
        """
        Creates one job per source, in argument order.

        Raises:
            TitleGenerationError: If a title cannot be built for any source.
        """
        return [
            Job(
                source=source,
                title=self.title_strategy.title_for(self.title, source),
                options=self.options,
                work_dir=self.work_dir,
                output_dir=self.output_dir,
            )
            for source in self.sources
        ]

    def run(self) -> BatchResult:
        jobs = self.build_jobs()
        result = BatchResult()
        success_log = SuccessLog(self.output_dir) if self.write_logs else None

        logger.info(f"[{self.__class__.__name__}] {len(jobs)} job(s) to encode.")
        for i, job in enumerate(jobs):
            logger.info(f"[{i + 1}/{len(jobs)}] {job.source.name} -> '{job.title}'")
            started = datetime.now()
            try:
                destination = self.runner_factory().run(job)
            except IPodEncoderException as e:
                logger.error(f"Encoding '{job.source}' failed: {e}")
                result.failures.append((job, e))
                self._write_error(job, e)
                if self.fail_fast:
                    result.not_attempted.extend(jobs[i + 1:])
                    if result.not_attempted:
                        logger.warning(f"Stopping batch; {len(result.not_attempted)} job(s) not attempted.")
                    break
                continue

            result.completed.append(destination)
            logger.success(f"Encoded '{job.source.name}' to '{destination.name}'")
            if success_log is not None:
                success_log.record(job, destination, started)

        logger.info(
            f"[{self.__class__.__name__}] Finished: {len(result.completed)} done, "
            f"{len(result.failures)} failed, {len(result.not_attempted)} not attempted."
        )
        return result

    def _write_error(self, job: Job, error: IPodEncoderException):
        if not self.write_logs:
            return
        ErrorLog(self.output_dir / ERROR_DIR_NAME).record(job, error)
