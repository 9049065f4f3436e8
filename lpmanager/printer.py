import logging
import re
from dataclasses import dataclass
from typing import Optional

from .config import Settings
from .executor import run_command
from .lines import split_lines
from .models import PrinterRecord
from .options import build_print_args

logger = logging.getLogger(__name__)

# lp prints: "request id is HP_LaserJet-12 (1 file(s))"
REQUEST_ID_PATTERN = re.compile(r'request id is (\S+)')


@dataclass(frozen=True)
class Job:
    id: str
    user: str
    size: int
    submitted: str


def parse_request_id(output: str) -> Optional[str]:
    match = REQUEST_ID_PATTERN.search(output)
    return match.group(1) if match else None


def parse_jobs(output: str) -> list[Job]:
    """
    Parses `lpstat -o` output.
    HP_LaserJet-12          alice           1024   Mon 01 Jan 2024 10:00:00 AM UTC
    """
    jobs = []
    for line in split_lines(output, trim=True):
        parts = line.split(None, 3)
        if len(parts) < 3 or not parts[2].isdigit():
            continue
        submitted = parts[3] if len(parts) > 3 else ""
        jobs.append(Job(id=parts[0], user=parts[1], size=int(parts[2]), submitted=submitted))
    return jobs


class Printer:
    """An installed print queue."""

    def __init__(self, record: PrinterRecord, settings: Settings = None, executor=None):
        self.record = record
        self.settings = settings or Settings()
        self._run = executor or run_command

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def connection(self) -> str:
        return self.record.connection

    @property
    def is_default(self) -> bool:
        return self.record.is_default

    def __repr__(self):
        return f"Printer({self.name!r}, {self.connection!r}, is_default={self.is_default})"

    def __eq__(self, other):
        if not isinstance(other, Printer):
            return NotImplemented
        return self.record == other.record

    def __hash__(self):
        return hash(self.record)

    def _lp_command(self, options):
        # The printer's own name wins over a destination passed in options
        options = {k: v for k, v in (options or {}).items() if k not in ("d", "destination")}
        return [self.settings.lp, "-d", self.name, *build_print_args(options)]

    async def print_file(self, path, options: dict = None) -> Optional[str]:
        """Submits a file and returns the job id lp reported."""
        cmd = self._lp_command(options)
        cmd.extend(["--", str(path)])
        result = await self._run(cmd)
        job_id = parse_request_id(result.text)
        logger.info("Sent %s to %s (job %s)", path, self.name, job_id)
        return job_id

    async def print_text(self, text: str, options: dict = None) -> Optional[str]:
        """Submits text through lp's standard input."""
        result = await self._run(self._lp_command(options), input=text.encode("utf-8"))
        job_id = parse_request_id(result.text)
        logger.info("Sent text to %s (job %s)", self.name, job_id)
        return job_id

    async def jobs(self) -> list[Job]:
        result = await self._run([self.settings.lpstat, "-o", self.name])
        return parse_jobs(result.text)

    async def cancel(self, job_id: str = None):
        """Cancels one job, or every job on this printer when no id is given."""
        if job_id:
            cmd = [self.settings.cancel, job_id]
        else:
            cmd = [self.settings.cancel, "-a", self.name]
        await self._run(cmd)
