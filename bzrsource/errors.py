"""
Exit codes and error taxonomy for bzrsource.

Every failure of an external bzr invocation reaches the caller as one of
the typed errors below, wrapped with the command line and the captured
diagnostic stream. Absent data (no manifest, no local changes) is never
an error.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes
CONFIG_ERROR = 66        # Configuration file error
NETWORK_ERROR = 68       # Network or authentication failure talking to a repository
DATA_ERROR = 70          # Malformed manifest or tool output
TOOL_MISSING = 127       # bzr is not installed / not on PATH
INTERRUPTED = 130        # User aborted (prompt or Ctrl+C)

EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'PermissionError': GENERAL_ERROR,
    'ValueError': DATA_ERROR,
    'JSONDecodeError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: Exception) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, VcsError):
        return exc.exit_code
    return EXCEPTION_EXIT_CODES.get(exc.__class__.__name__, GENERAL_ERROR)


class VcsError(Exception):
    """
    Base class for every error raised by the driver and downloader.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class CommandFailureError(VcsError):
    """Raised when an invoked bzr command exits nonzero."""
    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        error_output: str = "",
        exit_status: Optional[int] = None,
    ):
        super().__init__(message, GENERAL_ERROR)
        self.command = command
        self.error_output = error_output
        self.exit_status = exit_status

    @classmethod
    def from_command(cls, command: str, error_output: str, exit_status: Optional[int] = None,
                     prefix: str = 'Failed to execute ') -> 'CommandFailureError':
        """Build the standard "Failed to execute <cmd>" error."""
        message = prefix + command
        if error_output:
            message += "\n\n" + error_output
        return cls(message, command=command, error_output=error_output, exit_status=exit_status)


class TransportError(VcsError):
    """
    Raised when a manifest could not be fetched for a network or
    authentication reason. Callers may retry once credentials are fixed.
    """
    def __init__(self, message: str, command: Optional[str] = None, error_output: str = ""):
        super().__init__(message, NETWORK_ERROR)
        self.command = command
        self.error_output = error_output


class ToolMissingError(VcsError):
    """Raised when the bzr client cannot be run at all."""
    def __init__(self, message: str, error_output: str = ""):
        super().__init__(message, TOOL_MISSING)
        self.error_output = error_output


class UserAbortedError(VcsError):
    """Raised when the user declines to discard local changes."""
    def __init__(self, message: str = "Update aborted"):
        super().__init__(message, INTERRUPTED)


class UncommittedChangesError(VcsError):
    """Raised when a working copy has changes and nobody may discard them."""
    def __init__(self, path: str, changes: str = ""):
        super().__init__(f"Source directory {path} has uncommitted changes.", GENERAL_ERROR)
        self.path = path
        self.changes = changes


class ManifestParseError(VcsError):
    """Raised when a manifest read from the repository is not a JSON object."""
    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message, DATA_ERROR)
        self.source = source
