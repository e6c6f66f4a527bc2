# utils.py

import subprocess
import logging
from typing import List, NamedTuple, Optional

logger = logging.getLogger(__name__)


class CommandResult(NamedTuple):
    returncode: int
    stdout: str
    stderr: str


def run_command(command: List[str], cwd: Optional[str] = None) -> CommandResult:
    """
    Run an external command and capture its output streams separately.

    A non-zero exit status is reported through the result rather than raised;
    callers decide what a failure means. OSError (e.g. the binary is missing)
    propagates.
    """
    logger.debug(f"Executing command: {' '.join(command)} in {cwd or '.'}")
    result = subprocess.run(
        command,
        cwd=cwd,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True
    )
    stdout_decoded = result.stdout.strip()
    stderr_decoded = result.stderr.strip()

    if stdout_decoded:
        logger.debug(f"Command stdout: {stdout_decoded}")
    if stderr_decoded:
        logger.debug(f"Command stderr: {stderr_decoded}")

    logger.debug(f"Command exited with status {result.returncode}: {command[0]}")
    return CommandResult(result.returncode, stdout_decoded, stderr_decoded)
