"""
Defines the unit of work of the iPod encoder: one source file converted to one
destination file under a given title.
"""

from dataclasses import dataclass, field
from pathlib import Path

from ..config.common import DEFAULT_VIDEO_BITRATE
from ..utils.format_utils import parse_bitrate


@dataclass(frozen=True)
class EncodeOptions:
    """
    Per-job options consumed by the transcode pipeline.

    Attributes:
        vbitrate (int): The video bitrate of the encode stage in bits per second.
        overwrite (bool): If True, the destination is always `<title>.m4v`, replacing
                          any existing file. If False, a numeric suffix is added to
                          avoid collisions. Temporaries are always uniquely named,
                          whatever this flag says.
    """

    vbitrate: int = parse_bitrate(DEFAULT_VIDEO_BITRATE)
    overwrite: bool = False

    @classmethod
    def from_text(cls, vbitrate: str | None = None, overwrite: bool = False) -> "EncodeOptions":
        """Builds options from command-line style values, e.g. `vbitrate="1m"`."""
        return cls(
            vbitrate=parse_bitrate(vbitrate or DEFAULT_VIDEO_BITRATE),
            overwrite=overwrite,
        )


@dataclass(frozen=True)
class Job:
    """
    One source-file-to-destination-file conversion.

    A job is created for every input before any process is launched and is never
    modified afterwards. Its temporaries are created in `work_dir` and the final
    artifact in `output_dir`; both default to the current working directory.
    """

    source: Path
    title: str
    options: EncodeOptions = field(default_factory=EncodeOptions)
    work_dir: Path = field(default_factory=Path.cwd)
    output_dir: Path = field(default_factory=Path.cwd)

    @property
    def source_name(self) -> str:
        # Never the directory part, so temporaries land in work_dir.
        return self.source.name
