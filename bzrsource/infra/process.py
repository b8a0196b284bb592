"""
Process execution infrastructure for bzrsource.

Every bzr invocation goes through ProcessExecutor, which makes the
driver and downloader:
- Easy to mock for testing
- Consistent in how output and diagnostics are captured
"""

import shlex
import subprocess
from typing import Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class ProcessExecutor:
    """
    Runs shell commands and captures their output.

    stdout is returned to the caller; stderr of the most recent command is
    kept in ``error_output``.

    Example:
        process = ProcessExecutor()
        output, code = process.execute("bzr tags -d lp:foo")
        if code != 0:
            print(process.error_output)
    """

    def __init__(self, timeout: Optional[int] = 300):
        """
        Initialize ProcessExecutor.

        Args:
            timeout: Command timeout in seconds, None to wait forever
        """
        self.timeout = timeout
        self.error_output = ""

    def execute(self, command: str, cwd: Optional[str] = None) -> Tuple[str, int]:
        """
        Run a command through the shell.

        Args:
            command: Full command line
            cwd: Working directory

        Returns:
            Tuple of (stdout, returncode)
        """
        logger.debug(f"Executing command ({cwd or 'CWD'}): {command}")
        self.error_output = ""

        try:
            result = subprocess.run(
                command,
                shell=True,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Command timed out: {command}")
            self.error_output = f"The command \"{command}\" exceeded the timeout of {self.timeout} seconds."
            return "", -1
        except OSError as e:
            logger.warning(f"Command could not be started: {command} - {e}")
            self.error_output = str(e)
            return "", -1

        self.error_output = result.stderr or ""
        if result.returncode != 0:
            logger.debug(f"Command exited with {result.returncode}: {command}")

        return result.stdout or "", result.returncode

    @staticmethod
    def escape(argument: str) -> str:
        """Quote a single argument for the shell."""
        return shlex.quote(str(argument))
