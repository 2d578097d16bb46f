"""
Defines custom exception types for the iPod encoder.

These exceptions allow for specific and expressive error handling throughout the
transcode pipeline. The batch pipeline catches `IPodEncoderException` per job, so
a failure in one job is reported with enough detail (which stage, which status)
without affecting the jobs that follow.

All custom exceptions inherit from the base `IPodEncoderException`.
"""


class IPodEncoderException(Exception):
    """Base class for all custom exceptions in the iPod encoder."""

    pass


class ResourceCreationError(IPodEncoderException):
    """
    Raised when a filesystem resource of a job cannot be established.

    Typical causes are an existing object at the conduit path, a host without
    named pipe support, or a permission problem in the work directory.
    """

    pass


class LaunchError(IPodEncoderException):
    """
    Raised when a stage process could not be started.

    The executable may be missing from the PATH (and from the configured tools
    directory) or may not be executable.
    """

    def __init__(self, stage: str, argv, reason: str):
        self.stage = stage
        self.argv = list(argv)
        executable = self.argv[0] if self.argv else "<empty command>"
        super().__init__(f"Could not launch {stage} stage '{executable}': {reason}")


class StageFailure(IPodEncoderException):
    """
    Raised when one or both pipeline stages exited unsuccessfully.

    The exception carries the full `PipelineOutcome`, so callers can attribute
    the failure to the stage that caused it and see how the sibling ended.
    """

    def __init__(self, outcome):
        self.outcome = outcome
        super().__init__(f"Transcode pipeline failed: {outcome.describe()}")


class MultiplexError(IPodEncoderException):
    """
    Raised when the final combine of source audio and encoded video fails.

    Both stages succeeded by the time this is raised. The intermediate file is
    left in place for the job's cleanup scope to remove.
    """

    def __init__(self, message: str, returncode: int | None = None):
        self.returncode = returncode
        super().__init__(message)


class TitleGenerationError(IPodEncoderException):
    """
    Raised when a per-file title cannot be built.

    With the default numbering strategy this means no episode number could be
    found in the file's name using the configured pattern.
    """

    pass
