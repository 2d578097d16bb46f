import stat

import pytest

from conftest import requires_fifo
from ipod_encoder.domain.exceptions import ResourceCreationError
from ipod_encoder.services import stream_conduit
from ipod_encoder.services.stream_conduit import create_conduit


@requires_fifo
def test_create_conduit_makes_a_named_pipe(tmp_path):
    handle = create_conduit(tmp_path / "clip.avi.fifo")
    assert handle.path == tmp_path / "clip.avi.fifo"
    mode = handle.path.stat().st_mode
    assert stat.S_ISFIFO(mode)
    assert stat.S_IMODE(mode) & 0o077 == 0


@requires_fifo
def test_create_conduit_refuses_existing_path(tmp_path):
    path = tmp_path / "taken.fifo"
    path.write_text("")
    with pytest.raises(ResourceCreationError, match="already exists"):
        create_conduit(path)


@requires_fifo
def test_create_conduit_reports_os_errors(tmp_path):
    with pytest.raises(ResourceCreationError):
        create_conduit(tmp_path / "missing-dir" / "x.fifo")


def test_create_conduit_without_fifo_support(tmp_path, monkeypatch):
    monkeypatch.delattr(stream_conduit.os, "mkfifo", raising=False)
    with pytest.raises(ResourceCreationError, match="not supported"):
        create_conduit(tmp_path / "x.fifo")
