"""
Tests for the error taxonomy and exit codes.
"""

import json

import pytest

from bzrsource import errors
from bzrsource.errors import (
    CommandFailureError,
    ManifestParseError,
    ToolMissingError,
    TransportError,
    UncommittedChangesError,
    UserAbortedError,
    VcsError,
    get_exit_code_for_exception,
)


class TestExitCodes:
    """Each error kind maps to its own exit code."""

    @pytest.mark.parametrize('exc,code', [
        (TransportError('offline'), errors.NETWORK_ERROR),
        (ToolMissingError('no bzr'), errors.TOOL_MISSING),
        (CommandFailureError('failed'), errors.GENERAL_ERROR),
        (UserAbortedError(), errors.INTERRUPTED),
        (UncommittedChangesError('/tmp/wc'), errors.GENERAL_ERROR),
        (ManifestParseError('bad json'), errors.DATA_ERROR),
        (ValueError('bad'), errors.DATA_ERROR),
        (KeyboardInterrupt(), errors.INTERRUPTED),
        (RuntimeError('other'), errors.GENERAL_ERROR),
    ])
    def test_exit_code(self, exc, code):
        assert get_exit_code_for_exception(exc) == code

    def test_json_decode_error(self):
        with pytest.raises(json.JSONDecodeError) as exc_info:
            json.loads('{')
        assert get_exit_code_for_exception(exc_info.value) == errors.DATA_ERROR


class TestErrors:
    """Tests for error attributes and messages."""

    def test_all_derive_from_vcs_error(self):
        for cls in (TransportError, ToolMissingError, CommandFailureError,
                    UserAbortedError, UncommittedChangesError, ManifestParseError):
            assert issubclass(cls, VcsError)

    def test_kinds_are_distinct(self):
        assert not issubclass(TransportError, CommandFailureError)
        assert not issubclass(UserAbortedError, CommandFailureError)

    def test_from_command(self):
        error = CommandFailureError.from_command('bzr revert', 'bzr: ERROR: locked', 3)

        assert str(error) == 'Failed to execute bzr revert\n\nbzr: ERROR: locked'
        assert error.command == 'bzr revert'
        assert error.error_output == 'bzr: ERROR: locked'
        assert error.exit_status == 3

    def test_from_command_without_diagnostics(self):
        assert str(CommandFailureError.from_command('bzr revert', '')) == 'Failed to execute bzr revert'

    def test_uncommitted_changes(self):
        error = UncommittedChangesError('/tmp/wc', 'M  a.php')

        assert str(error) == 'Source directory /tmp/wc has uncommitted changes.'
        assert error.changes == 'M  a.php'
