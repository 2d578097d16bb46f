"""
This module builds the argument vectors of the three tool invocations of a job.

The decode stage is mplayer, which has no Python binding, so its command is a
plain list. The two ffmpeg invocations are described with the ffmpeg-python
stream API and compiled to argument lists; they are then run by the stage
supervisor and the multiplex step like any other command.
"""

from pathlib import Path
from typing import List, Optional

import ffmpeg

from ..config.video import (
    AUDIO_BITRATE,
    AUDIO_CHANNELS,
    AUDIO_CODEC,
    DECODER_NAME,
    DECODER_OPTIONS,
    ENCODER_NAME,
    MUX_FORMAT,
    VIDEO_CODEC,
    X264_BASELINE_OPTIONS,
)
from ..utils.module_updater import Modules


class TranscodeProfile:
    """
    Base class of a command set for the transcode pipeline.

    Subclasses define how the decode stage writes frames into the conduit, how
    the encode stage reads them and writes the intermediate, and how the
    intermediate is combined with the source audio.
    """

    def decode_cmd(self, source: Path, conduit: Path) -> List[str]:
        raise NotImplementedError("Subclasses must implement decode_cmd().")

    def encode_cmd(self, conduit: Path, intermediate: Path, vbitrate: int) -> List[str]:
        raise NotImplementedError("Subclasses must implement encode_cmd().")

    def multiplex_cmd(self, source: Path, intermediate: Path, destination: Path, title: str) -> List[str]:
        raise NotImplementedError("Subclasses must implement multiplex_cmd().")


class IPodProfile(TranscodeProfile):
    """
    Commands producing H.264 baseline video with AAC stereo audio in an iPod container.

    Args:
        decoder_cmd: mplayer executable. Defaults to the configured tools directory
                     or the system PATH.
        encoder_cmd: ffmpeg executable, resolved the same way.
    """

    def __init__(self, decoder_cmd: Optional[str] = None, encoder_cmd: Optional[str] = None):
        self.decoder_cmd = decoder_cmd or Modules.get_tool_path(DECODER_NAME)
        self.encoder_cmd = encoder_cmd or Modules.get_tool_path(ENCODER_NAME)

    def decode_cmd(self, source: Path, conduit: Path) -> List[str]:
        # mplayer's -vo suboption parser needs the quotes around the path.
        return [
            self.decoder_cmd,
            str(source),
            *DECODER_OPTIONS,
            "-vo", f'yuv4mpeg:file="{conduit}"',
        ]

    def encode_cmd(self, conduit: Path, intermediate: Path, vbitrate: int) -> List[str]:
        stream = (
            ffmpeg
            .input(str(conduit))
            .output(
                str(intermediate),
                vcodec=VIDEO_CODEC,
                **{"b:v": str(vbitrate)},
                **X264_BASELINE_OPTIONS,
            )
            .overwrite_output()
        )
        return stream.compile(cmd=self.encoder_cmd)

    def multiplex_cmd(self, source: Path, intermediate: Path, destination: Path, title: str) -> List[str]:
        source_input = ffmpeg.input(str(source))
        video_input = ffmpeg.input(str(intermediate))
        stream = ffmpeg.output(
            source_input.audio,
            video_input.video,
            str(destination),
            acodec=AUDIO_CODEC,
            ac=AUDIO_CHANNELS,
            vcodec="copy",
            f=MUX_FORMAT,
            metadata=f"title={title}",
            **{"b:a": AUDIO_BITRATE},
        ).overwrite_output()
        return stream.compile(cmd=self.encoder_cmd)
