"""
Shared fixtures for bzrsource tests.
"""

from pathlib import Path

import pytest

from bzrsource.config import Config, get_default_config, merge_configs

FIXTURES = Path(__file__).parent / 'fixtures'


class FakeProcess:
    """
    Scripted stand-in for ProcessExecutor.

    Each response is (stdout, exit_code, stderr); once they run out every
    command succeeds with empty output. Executed commands are recorded as
    (command, cwd) pairs.
    """

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.commands = []
        self.error_output = ""

    def execute(self, command, cwd=None):
        self.commands.append((command, cwd))
        if self.responses:
            output, code, error_output = self.responses.pop(0)
        else:
            output, code, error_output = "", 0, ""
        self.error_output = error_output
        return output, code

    @property
    def command_lines(self):
        return [command for command, _ in self.commands]


@pytest.fixture
def fixture_text():
    """Read a literal bzr output fixture."""
    def _read(name):
        return (FIXTURES / name).read_text()
    return _read


@pytest.fixture
def fake_process():
    """Factory for scripted process collaborators."""
    return FakeProcess


@pytest.fixture
def config(tmp_path):
    """Config with the metadata cache under a temp dir."""
    data = merge_configs(get_default_config(), {
        'cache': {'repo_dir': str(tmp_path / 'cache')},
    })
    return Config(data)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep config files and caches out of the real home directory."""
    home = tmp_path / 'home'
    home.mkdir()
    monkeypatch.setenv('HOME', str(home))
    monkeypatch.delenv('BZRSOURCE_CONFIG', raising=False)
    return home
