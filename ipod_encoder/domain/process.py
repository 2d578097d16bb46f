"""
Models of the external stage processes and of their combined result.

A `StageHandle` wraps a running `subprocess.Popen` for one logical stage. Its
`status` is set exactly once, when the process is reaped. Once both stages of a
job have a status, the coordinator freezes them into a `PipelineOutcome`, which is
the only input to the decision of whether to multiplex.
"""

import signal
import subprocess
from dataclasses import dataclass, field
from typing import List, Optional

from ..config.common import DECODE_STAGE, ENCODE_STAGE


@dataclass(frozen=True)
class ExitStatus:
    """
    The terminal status of a reaped process.

    Follows the `subprocess` convention: a negative return code `-N` means the
    process was killed by signal `N`.
    """

    returncode: int

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def signal(self) -> Optional[signal.Signals]:
        if self.returncode >= 0:
            return None
        try:
            return signal.Signals(-self.returncode)
        except ValueError:
            return None

    @property
    def exit_code(self) -> Optional[int]:
        return self.returncode if self.returncode >= 0 else None

    def describe(self) -> str:
        if self.returncode < 0:
            sig = self.signal
            name = sig.name if sig is not None else str(-self.returncode)
            return f"terminated by signal {name}"
        if self.returncode == 0:
            return "succeeded"
        return f"exited with status {self.returncode}"


@dataclass
class StageHandle:
    """A running (or reaped) stage process."""

    name: str
    argv: List[str]
    process: subprocess.Popen
    status: Optional[ExitStatus] = field(default=None)

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def finished(self) -> bool:
        return self.status is not None


@dataclass(frozen=True)
class PipelineOutcome:
    """
    Snapshot of both stage statuses once both have terminated.

    Attributes:
        decode (ExitStatus): Status of the decode/filter stage (mplayer).
        encode (ExitStatus): Status of the encode stage (ffmpeg).
        first_failure (Optional[str]): Name of the stage whose failure was observed
                                       first, i.e. the one that caused the sibling to
                                       be terminated. None when no stage failed.
    """

    decode: ExitStatus
    encode: ExitStatus
    first_failure: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.decode.success and self.encode.success

    @property
    def failed_stages(self) -> List[str]:
        failed = []
        if not self.decode.success:
            failed.append(DECODE_STAGE)
        if not self.encode.success:
            failed.append(ENCODE_STAGE)
        return failed

    def describe(self) -> str:
        text = f"decode stage {self.decode.describe()}; encode stage {self.encode.describe()}"
        if self.first_failure:
            text += f" (first failure: {self.first_failure} stage)"
        return text
