"""Running external virtualization tools."""

import asyncio
import logging
import subprocess
from dataclasses import dataclass
from typing import List


logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result from running a command."""
    returncode: int
    stdout: str = ""
    stderr: str = ""


async def run_command(
    cmd: List[str],
    check: bool = True,
    capture_output: bool = True,
    **kwargs
) -> CommandResult:
    """Run a command asynchronously.

    There is no timeout: installs from network media take as long as
    they take. With check set, a non-zero exit raises CalledProcessError
    carrying the captured stdout and stderr.
    """
    logger.debug(f"Running command: {' '.join(cmd)}")

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE if capture_output else None,
        stderr=asyncio.subprocess.PIPE if capture_output else None,
        **kwargs
    )
    stdout, stderr = await process.communicate()

    result = CommandResult(
        returncode=process.returncode,
        stdout=stdout.decode() if stdout else "",
        stderr=stderr.decode() if stderr else "",
    )

    if check and process.returncode != 0:
        error = subprocess.CalledProcessError(
            process.returncode, cmd
        )
        error.stdout = result.stdout
        error.stderr = result.stderr
        raise error

    return result


def failure_detail(error: subprocess.CalledProcessError) -> str:
    """Captured stderr of a failed command, or its exit status if there is none."""
    stderr = (error.stderr or "").strip()
    if stderr:
        return stderr
    return f"{error.cmd[0]} exited with status {error.returncode}"
