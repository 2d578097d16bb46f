"""Shared fixtures: a command profile whose stages are small Python scripts."""

import os
import sys
from pathlib import Path

import pytest
from loguru import logger

from ipod_encoder.services.transcode_profile import TranscodeProfile

requires_fifo = pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="named pipes not supported")

# Writes a few frames into the conduit, then exits.
DECODE_OK = "import sys\nwith open(sys.argv[1], 'wb') as f:\n    f.write(b'FRAME' * 4096)\n"
# Copies everything from the conduit into the intermediate.
ENCODE_OK = (
    "import sys\n"
    "with open(sys.argv[1], 'rb') as src, open(sys.argv[2], 'wb') as dst:\n"
    "    dst.write(src.read())\n"
)
# Exits before opening the conduit.
FAIL_NOW = "import sys\nsys.exit(int(sys.argv[-1]))\n"
# Writes destination = intermediate + title, like a container with metadata.
MUX_OK = (
    "import sys\n"
    "src, inter, dst, title = sys.argv[1:5]\n"
    "with open(inter, 'rb') as i, open(dst, 'wb') as o:\n"
    "    o.write(i.read())\n"
    "    o.write(title.encode())\n"
)
SLEEP = "import time\ntime.sleep(60)\n"


def py(code, *args):
    return [sys.executable, "-c", code, *[str(a) for a in args]]


class ScriptProfile(TranscodeProfile):
    """Stages that behave like mplayer/ffmpeg on the conduit, without the tools."""

    def __init__(self, decode_exit=0, encode_exit=0, mux_exit=0):
        self.decode_exit = decode_exit
        self.encode_exit = encode_exit
        self.mux_exit = mux_exit
        self.multiplex_calls = []

    def decode_cmd(self, source, conduit):
        if self.decode_exit:
            return py(FAIL_NOW, conduit, self.decode_exit)
        return py(DECODE_OK, conduit)

    def encode_cmd(self, conduit, intermediate, vbitrate):
        if self.encode_exit:
            return py(FAIL_NOW, conduit, intermediate, self.encode_exit)
        return py(ENCODE_OK, conduit, intermediate)

    def multiplex_cmd(self, source, intermediate, destination, title):
        self.multiplex_calls.append((Path(source), Path(intermediate), Path(destination), title))
        if self.mux_exit:
            return py(FAIL_NOW, self.mux_exit)
        return py(MUX_OK, source, intermediate, destination, title)


@pytest.fixture
def script_profile():
    return ScriptProfile()


@pytest.fixture
def sources(tmp_path):
    src_dir = tmp_path / "src"
    src_dir.mkdir()
    paths = []
    for name in ("Video-01.avi", "Video-02.avi"):
        path = src_dir / name
        path.write_bytes(b"source")
        paths.append(path)
    return paths


@pytest.fixture
def log_messages():
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
