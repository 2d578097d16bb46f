import signal

from ipod_encoder.domain.process import ExitStatus, PipelineOutcome


def test_exit_status():
    assert ExitStatus(0).success
    assert ExitStatus(0).describe() == "succeeded"
    assert ExitStatus(3).exit_code == 3
    assert ExitStatus(3).signal is None
    assert ExitStatus(3).describe() == "exited with status 3"
    killed = ExitStatus(-signal.SIGTERM)
    assert not killed.success
    assert killed.signal == signal.SIGTERM
    assert killed.exit_code is None
    assert killed.describe() == "terminated by signal SIGTERM"


def test_pipeline_outcome():
    ok = PipelineOutcome(decode=ExitStatus(0), encode=ExitStatus(0))
    assert ok.succeeded
    assert ok.failed_stages == []

    failed = PipelineOutcome(decode=ExitStatus(2), encode=ExitStatus(-signal.SIGTERM), first_failure="decode")
    assert not failed.succeeded
    assert failed.failed_stages == ["decode", "encode"]
    assert failed.describe() == (
        "decode stage exited with status 2; encode stage terminated by signal SIGTERM (first failure: decode stage)"
    )
