import asyncio
import logging
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    stdout: bytes
    stderr: bytes
    returncode: int = 0

    @property
    def text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def error_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


async def run_command(cmd, input: bytes = None, check: bool = True) -> CommandResult:
    """
    Runs a command and collects its whole output.

    communicate() reads everything in one go, so multi-megabyte listings such
    as `lpinfo -l -m` are fine. Raises CalledProcessError on a non-zero exit
    when `check` is set; FileNotFoundError if the binary is missing.
    """
    cmd = [str(part) for part in cmd]
    logger.debug("Executing: %s", " ".join(cmd))

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdin=asyncio.subprocess.PIPE if input is not None else None,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE
    )
    stdout, stderr = await process.communicate(input)

    if check and process.returncode != 0:
        logger.error("Command failed with return code %s: %s", process.returncode, " ".join(cmd))
        if stdout:
            logger.error("STDOUT:\n%s", stdout.decode(errors="replace"))
        if stderr:
            logger.error("STDERR:\n%s", stderr.decode(errors="replace"))
        raise subprocess.CalledProcessError(process.returncode, cmd, stdout, stderr)

    return CommandResult(stdout=stdout or b"", stderr=stderr or b"", returncode=process.returncode)
