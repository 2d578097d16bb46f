import signal

import pytest

from conftest import DECODE_OK, ENCODE_OK, FAIL_NOW, SLEEP, py, requires_fifo
from ipod_encoder.domain.exceptions import LaunchError
from ipod_encoder.pipeline import coordinator as coordinator_module
from ipod_encoder.pipeline.coordinator import PipelineCoordinator
from ipod_encoder.services.stage_supervisor import StageSupervisor
from ipod_encoder.services.stream_conduit import create_conduit


class RecordingSupervisor(StageSupervisor):
    def __init__(self):
        self.handles = []
        self.terminated = []

    def launch(self, name, argv):
        handle = super().launch(name, argv)
        self.handles.append(handle)
        return handle

    def terminate(self, handle, grace_signal=signal.SIGTERM):
        self.terminated.append(handle.name)
        super().terminate(handle, grace_signal)


@pytest.fixture
def conduit(tmp_path):
    if not hasattr(coordinator_module.os, "mkfifo"):
        pytest.skip("named pipes not supported")
    return create_conduit(tmp_path / "clip.avi.fifo").path


@requires_fifo
def test_both_stages_succeed(tmp_path, conduit):
    intermediate = tmp_path / "clip.avi.avi"
    outcome = PipelineCoordinator().run(py(DECODE_OK, conduit), py(ENCODE_OK, conduit, intermediate))
    assert outcome.succeeded
    assert outcome.first_failure is None
    assert outcome.failed_stages == []
    assert intermediate.read_bytes() == b"FRAME" * 4096


@requires_fifo
def test_decode_failure_terminates_blocked_encoder(tmp_path, conduit):
    supervisor = RecordingSupervisor()
    outcome = PipelineCoordinator(supervisor).run(
        py(FAIL_NOW, conduit, 1),
        py(ENCODE_OK, conduit, tmp_path / "out.avi"),
    )
    assert not outcome.succeeded
    assert outcome.decode.exit_code == 1
    assert outcome.encode.signal == signal.SIGTERM
    assert outcome.first_failure == "decode"
    assert supervisor.terminated == ["encode"]
    # Every child has been reaped.
    assert all(h.process.returncode is not None for h in supervisor.handles)
    assert "decode stage exited with status 1" in outcome.describe()
    assert "encode stage terminated by signal SIGTERM" in outcome.describe()


@requires_fifo
def test_encode_failure_terminates_blocked_decoder(tmp_path, conduit):
    supervisor = RecordingSupervisor()
    outcome = PipelineCoordinator(supervisor).run(
        py(DECODE_OK, conduit),
        py(FAIL_NOW, conduit, 2),
    )
    assert outcome.encode.exit_code == 2
    assert outcome.decode.signal == signal.SIGTERM
    assert outcome.first_failure == "encode"
    assert supervisor.terminated == ["decode"]
    assert outcome.failed_stages == ["decode", "encode"]


def test_stages_already_dead_are_processed_without_blocking(monkeypatch):
    supervisor = StageSupervisor()
    coordinator = PipelineCoordinator(supervisor)
    handles = [supervisor.launch("decode", py("pass")), supervisor.launch("encode", py(FAIL_NOW, 4))]
    for handle in handles:
        handle.process.wait()

    def must_not_block(pending):
        raise AssertionError("reap loop blocked although both stages were dead")

    monkeypatch.setattr(coordinator, "_wait_for_any", must_not_block)
    assert coordinator._reap(handles) == "encode"
    assert handles[0].status.success
    assert handles[1].status.exit_code == 4


def test_reap_loop_falls_back_to_polling(monkeypatch):
    monkeypatch.delattr(coordinator_module.os, "pidfd_open", raising=False)
    outcome = PipelineCoordinator(poll_interval=0.01).run(py("pass"), py("import time; time.sleep(0.2)"))
    assert outcome.succeeded


def test_encode_launch_error_reaps_decoder(tmp_path):
    supervisor = RecordingSupervisor()
    with pytest.raises(LaunchError):
        PipelineCoordinator(supervisor).run(py(SLEEP), [str(tmp_path / "missing-ffmpeg")])
    (decode,) = supervisor.handles
    assert decode.status.signal == signal.SIGTERM
    assert decode.process.returncode is not None


def test_decode_launch_error_launches_nothing(tmp_path):
    supervisor = RecordingSupervisor()
    with pytest.raises(LaunchError, match="decode"):
        PipelineCoordinator(supervisor).run([str(tmp_path / "missing-mplayer")], py(SLEEP))
    assert supervisor.handles == []


def test_interrupted_reap_loop_terminates_pending_stages(monkeypatch):
    supervisor = RecordingSupervisor()
    coordinator = PipelineCoordinator(supervisor)

    def interrupt(pending):
        raise KeyboardInterrupt

    monkeypatch.setattr(coordinator, "_wait_for_any", interrupt)
    with pytest.raises(KeyboardInterrupt):
        coordinator.run(py(SLEEP), py(SLEEP))
    assert sorted(supervisor.terminated) == ["decode", "encode"]
    assert all(h.status.signal == signal.SIGTERM for h in supervisor.handles)
