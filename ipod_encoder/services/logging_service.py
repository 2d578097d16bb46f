"""
Run logs written next to the encoded files.

`ErrorLog` keeps a plain text report per failed job, appended across runs, and
`SuccessLog` keeps a YAML list of the jobs finished by one run. Console output
goes through loguru independently of both.
"""

import random
import string
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

import yaml
from loguru import logger

from ..config.common import SUCCESS_LOG_RANDOM_LENGTH
from ..domain.exceptions import IPodEncoderException
from ..domain.job import Job
from ..utils.format_utils import format_timedelta, formatted_size


class RunLog:
    """Owns a log file inside `log_dir`, which is created on construction."""

    separator = "=" * 50

    def __init__(self, log_dir: Path):
        self.log_dir = log_dir.resolve()
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_file_path: Path = self.log_dir / self.file_name()

    def file_name(self) -> str:
        raise NotImplementedError

    @staticmethod
    def run_id(length: int = SUCCESS_LOG_RANDOM_LENGTH) -> str:
        return "".join(random.choices(string.ascii_uppercase + string.digits, k=length))


class ErrorLog(RunLog):
    """
    Appends one report per failed job to `error.txt`.

    A report is a few `key: value` lines closed by a separator line. When the file
    cannot be written the report goes to the console instead.
    """

    def __init__(self, log_dir: Path, filename: str = "error.txt"):
        self.filename = filename
        super().__init__(log_dir)

    def file_name(self) -> str:
        return self.filename

    def record(self, job: Job, error: IPodEncoderException):
        self.write(
            f"Encode error for: {job.source}",
            f"Title: {job.title}",
            f"Time: {datetime.now().isoformat()}",
            f"Error: {type(error).__name__} - {error}",
        )

    def write(self, *lines: str):
        if not lines:
            return
        report = "\n".join(lines) + "\n" + self.separator + "\n"
        try:
            with self.log_file_path.open("a", encoding="utf-8") as f:
                f.write(report)
        except OSError as e:
            logger.error(f"Could not append to {self.log_file_path}: {e}")
            for line in lines:
                logger.error(f"  {line}")


class SuccessLog(RunLog):
    """
    YAML list of the jobs finished in this run.

    Every run gets its own `log_YYYYMMDD_<run id>.yaml`, so concurrent runs into
    one output directory keep separate files. The whole list is rewritten on each
    entry, so the file parses even if the run is interrupted.
    """

    def __init__(self, log_dir: Path):
        super().__init__(log_dir)
        self.entries: List[Dict[str, Any]] = []

    def file_name(self) -> str:
        return f"log_{datetime.now():%Y%m%d}_{self.run_id()}.yaml"

    def record(self, job: Job, destination: Path, started: datetime):
        ended = datetime.now()
        self.write(
            {
                "source": str(job.source),
                "destination": str(destination),
                "title": job.title,
                "vbitrate": job.options.vbitrate,
                "size": formatted_size(destination.stat().st_size) if destination.exists() else "0 B",
                "elapsed": format_timedelta(ended - started),
                "ended_datetime": ended.isoformat(),
            }
        )

    def write(self, entry: Dict[str, Any]):
        if not isinstance(entry, dict):
            logger.error("SuccessLog.write expects a dictionary as a log entry.")
            return
        entry["index"] = len(self.entries) + 1
        self.entries.append(entry)
        try:
            with self.log_file_path.open("w", encoding="utf-8") as f:
                yaml.safe_dump(self.entries, f, sort_keys=False, allow_unicode=True, width=220)
        except OSError as e:
            logger.error(f"Could not write {self.log_file_path}: {e}")
