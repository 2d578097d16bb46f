"""
This package contains the core domain models of the iPod encoder.

The domain layer describes what the application works with, independently of
how processes are launched or how files are named.

Modules:
    exceptions.py: The exception hierarchy, rooted at `IPodEncoderException`.
    job.py: `Job` and `EncodeOptions`, the immutable description of one encode.
    process.py: `ExitStatus`, `StageHandle` and `PipelineOutcome`, which model the
                external stage processes and their joint result.
    temp_models.py: `TransientResources`, the scoped tracker that removes a job's
                    temporary files however the job ends.
"""
