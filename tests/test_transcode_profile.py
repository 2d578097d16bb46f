from pathlib import Path

import pytest

from ipod_encoder.services import transcode_profile
from ipod_encoder.services.transcode_profile import IPodProfile, TranscodeProfile


def has_pair(cmd, flag, value):
    return any(cmd[i] == flag and cmd[i + 1] == value for i in range(len(cmd) - 1))


@pytest.fixture
def profile():
    return IPodProfile(decoder_cmd="/opt/bin/mplayer", encoder_cmd="/opt/bin/ffmpeg")


def test_decode_cmd_writes_yuv4mpeg_into_conduit(profile):
    cmd = profile.decode_cmd(Path("/videos/Video-01.avi"), Path("/tmp/Video-01.avi.fifo"))
    assert cmd[:2] == ["/opt/bin/mplayer", "/videos/Video-01.avi"]
    assert "-nosound" in cmd
    assert has_pair(cmd, "-vf", "scale=480:-10")
    assert has_pair(cmd, "-ass-font-scale", "1.3")
    assert cmd[-2:] == ["-vo", 'yuv4mpeg:file="/tmp/Video-01.avi.fifo"']


def test_encode_cmd_reads_conduit_and_writes_intermediate(profile):
    cmd = profile.encode_cmd(Path("/tmp/a.fifo"), Path("/tmp/a.avi"), 786432)
    assert cmd[0] == "/opt/bin/ffmpeg"
    assert has_pair(cmd, "-i", "/tmp/a.fifo")
    assert has_pair(cmd, "-vcodec", "libx264")
    assert has_pair(cmd, "-b:v", "786432")
    assert has_pair(cmd, "-profile:v", "baseline")
    assert has_pair(cmd, "-bf", "0")
    assert "/tmp/a.avi" in cmd
    assert "-y" in cmd


def test_multiplex_cmd_maps_source_audio_and_encoded_video(profile):
    cmd = profile.multiplex_cmd(Path("/videos/a.avi"), Path("/tmp/a.avi.avi"), Path("/out/Show-1.m4v"), "Show-1")
    assert cmd[0] == "/opt/bin/ffmpeg"
    inputs = [cmd[i + 1] for i in range(len(cmd) - 1) if cmd[i] == "-i"]
    assert inputs == ["/videos/a.avi", "/tmp/a.avi.avi"]
    assert has_pair(cmd, "-map", "0:a")
    assert has_pair(cmd, "-map", "1:v")
    assert has_pair(cmd, "-vcodec", "copy")
    assert has_pair(cmd, "-acodec", "aac")
    assert has_pair(cmd, "-b:a", "128k")
    assert has_pair(cmd, "-ac", "2")
    assert has_pair(cmd, "-f", "ipod")
    assert has_pair(cmd, "-metadata", "title=Show-1")
    assert "/out/Show-1.m4v" in cmd


def test_tools_default_to_configured_paths(monkeypatch):
    monkeypatch.setattr(transcode_profile.Modules, "get_tool_path", staticmethod(lambda name: f"/cfg/{name}"))
    profile = IPodProfile()
    assert profile.decoder_cmd == "/cfg/mplayer"
    assert profile.encoder_cmd == "/cfg/ffmpeg"


def test_base_profile_is_abstract():
    with pytest.raises(NotImplementedError):
        TranscodeProfile().decode_cmd(Path("a"), Path("b"))
