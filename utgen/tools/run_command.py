import os
import subprocess
import logging
import time
from typing import Optional

from ..core.logging import log_command
from ..models import CommandResult

logger = logging.getLogger(__name__)


def run_command(command: str, cwd: Optional[str] = None) -> CommandResult:
    """Run a shell command to completion and capture its output.

    The call blocks until the command exits. A command that cannot be launched
    is reported with return code -1 and the launch error in ``stderr``.
    """
    env = os.environ.copy()
    env["CI"] = "true"
    env["PYTHONDONTWRITEBYTECODE"] = "1"

    logger.debug(f"Running command: '{command}' (cwd={cwd or '.'})")
    started_at = time.time()
    try:
        result = subprocess.run(
            command,
            cwd=cwd or None,
            shell=True,
            capture_output=True,
            text=True,
            env=env,
        )
    except OSError as e:
        logger.error(f"Failed to launch '{command}': {e}")
        return CommandResult(
            stdout="",
            stderr=str(e),
            returncode=-1,
            started_at=started_at,
            completed_at=time.time(),
        )

    completed_at = time.time()
    log_command(command, result.returncode, completed_at - started_at)
    return CommandResult(
        stdout=result.stdout or "",
        stderr=result.stderr or "",
        returncode=result.returncode,
        started_at=started_at,
        completed_at=completed_at,
    )
