"""
Running bzr and wrapping its failures.

Shared by the driver and the downloader so every failed invocation
reaches the caller with the command line and the captured diagnostics.
"""

import logging
from typing import Optional

from .errors import CommandFailureError, ToolMissingError
from .interfaces import ProcessExecutorInterface

logger = logging.getLogger(__name__)


def build_command(binary: str, *parts: str) -> str:
    """Join a command line, skipping empty parts (e.g. an absent ``-r`` flag)."""
    return ' '.join(part for part in (binary,) + parts if part)


def run_checked(
    process: ProcessExecutorInterface,
    command: str,
    cwd: Optional[str] = None,
    binary: str = 'bzr',
    context: Optional[str] = None,
) -> str:
    """
    Run *command* and return its stdout.

    On a nonzero exit the tool itself is probed with ``--version``; only
    then can a missing client be told apart from a failing command.

    Args:
        process: Process collaborator
        command: Full command line
        cwd: Working directory
        binary: bzr executable, used for the probe
        context: Prefix for error messages, e.g. "Repository X could not be processed"

    Raises:
        ToolMissingError: bzr could not be run at all
        CommandFailureError: the command exited nonzero
    """
    output, code = process.execute(command, cwd=cwd)
    if code == 0:
        return output

    error_output = process.error_output
    logger.warning(f"Command failed with exit code {code}: {command}")

    _, version_code = process.execute(f"{binary} --version")
    if version_code != 0:
        subject = context or f"Failed to execute {command}"
        raise ToolMissingError(
            f"{subject}, {binary} was not found, check that it is installed and in your PATH env."
            + "\n\n" + process.error_output,
            error_output=process.error_output,
        )

    prefix = f"{context}, failed to execute " if context else "Failed to execute "
    raise CommandFailureError.from_command(command, error_output, code, prefix=prefix)
