"""
Tests for the infrastructure collaborators.
"""

import os
import sys

import pytest
from unittest.mock import patch
from rich.console import Console

from bzrsource.infra.cache import Cache
from bzrsource.infra.console import ConsoleIO, NullIO
from bzrsource.infra.filesystem import Filesystem
from bzrsource.infra.process import ProcessExecutor
from bzrsource.interfaces import CacheInterface


class TestProcessExecutor:
    """Tests for ProcessExecutor against a real shell."""

    def test_stdout_and_exit_code(self):
        process = ProcessExecutor()
        output, code = process.execute('echo hello')

        assert code == 0
        assert output == 'hello\n'
        assert process.error_output == ''

    def test_stderr_is_kept(self):
        process = ProcessExecutor()
        output, code = process.execute('echo oops >&2; exit 3')

        assert code == 3
        assert output == ''
        assert process.error_output == 'oops\n'

    def test_error_output_is_reset(self):
        process = ProcessExecutor()
        process.execute('echo oops >&2; exit 3')
        process.execute('true')

        assert process.error_output == ''

    def test_working_directory(self, tmp_path):
        output, code = ProcessExecutor().execute('pwd', cwd=str(tmp_path))

        assert code == 0
        assert os.path.realpath(output.strip()) == os.path.realpath(str(tmp_path))

    def test_timeout(self):
        process = ProcessExecutor(timeout=0.2)
        output, code = process.execute('sleep 5')

        assert code == -1
        assert 'exceeded the timeout' in process.error_output

    def test_escape(self):
        assert ProcessExecutor.escape('42') == '42'
        assert ProcessExecutor.escape("it's here") == "'it'\"'\"'s here'"


class TestCache:
    """Tests for the per-repository metadata cache."""

    def test_write_and_read(self, tmp_path):
        cache = Cache(tmp_path / 'repo')

        assert cache.write('tip.json', '{"name": "foo/bar"}')
        assert cache.read('tip.json') == '{"name": "foo/bar"}'

    def test_satisfies_cache_interface(self, tmp_path):
        assert isinstance(Cache(tmp_path / 'repo'), CacheInterface)

    def test_miss(self, tmp_path):
        assert Cache(tmp_path / 'repo').read('nothing.json') is None

    def test_keys_are_sanitized(self, tmp_path):
        cache = Cache(tmp_path / 'repo')
        cache.write('tag:1.0/../x.json', 'data')

        assert (tmp_path / 'repo' / 'tag-1.0-..-x.json').read_text() == 'data'
        assert cache.read('tag:1.0/../x.json') == 'data'

    def test_overwrite(self, tmp_path):
        cache = Cache(tmp_path / 'repo')
        cache.write('a', 'one')
        cache.write('a', 'two')

        assert cache.read('a') == 'two'
        assert [p.name for p in (tmp_path / 'repo').iterdir()] == ['a']

    def test_disabled(self, tmp_path):
        cache = Cache(tmp_path / 'repo', enabled=False)

        assert cache.write('a', 'one') is False
        assert cache.read('a') is None
        assert not (tmp_path / 'repo').exists()

    def test_unwritable_root_disables_cache(self, tmp_path):
        blocker = tmp_path / 'file'
        blocker.write_text('not a directory')

        cache = Cache(blocker / 'repo')

        assert cache.enabled is False
        assert cache.read('a') is None


class TestFilesystem:
    """Tests for Filesystem helpers."""

    @pytest.mark.parametrize('path,expected', [
        ('/home/jdoe/repo', True),
        ('C:\\repo', True),
        ('c:/repo', True),
        ('\\\\server\\share', True),
        ('relative/path', False),
        ('file:///home/jdoe', False),
        ('bzr+ssh://host/path', False),
    ])
    def test_is_absolute_path(self, path, expected):
        assert Filesystem.is_absolute_path(path) is expected

    def test_ensure_directory(self, tmp_path):
        fs = Filesystem()
        target = tmp_path / 'a' / 'b'

        fs.ensure_directory_exists(str(target))
        assert target.is_dir()
        fs.ensure_directory_exists(str(target))

    def test_ensure_directory_over_file(self, tmp_path):
        blocker = tmp_path / 'file'
        blocker.write_text('x')

        with pytest.raises(NotADirectoryError):
            Filesystem().ensure_directory_exists(str(blocker))


class TestConsoleIO:
    """Tests for the rich-backed console."""

    def make(self, **kwargs):
        console = Console(record=True, width=120, force_terminal=False)
        return ConsoleIO(console=console, **kwargs), console

    def test_write_single_and_many(self):
        io, console = self.make()
        io.write('    [red]The package has modified files:[/red]')
        io.write(['    M  a.php', '    M  b.php'])

        text = console.export_text()
        assert 'The package has modified files:' in text
        assert '[red]' not in text
        assert '    M  b.php' in text

    def test_ask_returns_answer(self):
        io, _ = self.make()
        with patch('bzrsource.infra.console.Prompt.ask', return_value=' y '):
            assert io.ask('Discard changes?', '?') == 'y'

    def test_ask_falls_back_to_default(self):
        io, _ = self.make()
        with patch('bzrsource.infra.console.Prompt.ask', return_value=''):
            assert io.ask('Discard changes?', '?') == '?'

    def test_interactive_override(self):
        assert self.make(interactive=True)[0].is_interactive() is True
        assert self.make(interactive=False)[0].is_interactive() is False

    def test_interactive_follows_stdin(self):
        io, _ = self.make()
        with patch.object(sys, 'stdin') as stdin:
            stdin.isatty.return_value = True
            assert io.is_interactive() is True

    def test_verbose(self):
        assert self.make(verbose=True)[0].is_verbose() is True
        assert self.make()[0].is_verbose() is False


class TestNullIO:
    """NullIO never prompts."""

    def test_defaults(self):
        io = NullIO()
        io.write(['ignored'])

        assert io.ask('Discard changes?', '?') == '?'
        assert io.is_interactive() is False
        assert io.is_verbose() is False
