"""Subprocess helpers for external collaborators.

Commands run without a shell, in their own process group, and are killed
as a group when the timeout expires so a hung child never outlives the CLI.
"""
from __future__ import annotations

import logging
import os
import shlex
import signal
import subprocess
from typing import Any, List, Optional, Sequence, Union

logger = logging.getLogger(__name__)


def split_command(cmd: Union[str, Sequence[str]]) -> List[str]:
    if isinstance(cmd, (list, tuple)):
        return [str(p) for p in cmd]
    return shlex.split(str(cmd))


def _popen_process_group_kwargs() -> dict[str, Any]:
    if os.name == "posix":
        return {"start_new_session": True}
    return {}


def _terminate_process_group(proc: subprocess.Popen[Any]) -> None:
    if proc.poll() is not None:
        return
    if os.name == "posix":
        try:
            os.killpg(proc.pid, signal.SIGTERM)
        except ProcessLookupError:
            return
        try:
            proc.wait(timeout=0.2)
        except subprocess.TimeoutExpired:
            try:
                os.killpg(proc.pid, signal.SIGKILL)
            except ProcessLookupError:
                return
            proc.wait(timeout=0.2)
        return
    proc.kill()
    proc.wait(timeout=0.2)


def run_with_timeout(
    cmd: Union[str, Sequence[str]],
    *,
    timeout: float,
    input: Optional[str] = None,
    cwd: Optional[str] = None,
    env: Optional[dict] = None,
) -> subprocess.CompletedProcess:
    """Run ``cmd`` capturing text output, killing its process group on timeout.

    Raises:
        FileNotFoundError: If the executable does not exist
        subprocess.TimeoutExpired: If the command runs longer than ``timeout``
    """
    argv = split_command(cmd)
    logger.debug("Running %s (timeout %.0fs)", argv, timeout)
    proc = subprocess.Popen(
        argv,
        cwd=cwd,
        env=env,
        stdin=subprocess.PIPE if input is not None else None,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        **_popen_process_group_kwargs(),
    )
    try:
        stdout, stderr = proc.communicate(input=input, timeout=timeout)
    except subprocess.TimeoutExpired:
        _terminate_process_group(proc)
        stdout, stderr = proc.communicate()
        raise subprocess.TimeoutExpired(argv, timeout, output=stdout, stderr=stderr) from None

    return subprocess.CompletedProcess(argv, proc.returncode, stdout=stdout, stderr=stderr)


__all__ = ["split_command", "run_with_timeout"]
