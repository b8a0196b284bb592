"""
Working copy downloaders for bzrsource.

A downloader materializes a package's source reference as a local
checkout and later switches it to another reference. Anything that
would overwrite uncommitted work goes through clean_changes() first.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from rich.markup import escape

from .config import Config
from .domain.reference import range_endpoint, revision_flag
from .errors import CommandFailureError, UncommittedChangesError, UserAbortedError
from .execution import build_command, run_checked
from .infra.filesystem import Filesystem
from .infra.process import ProcessExecutor
from .interfaces import ConfigInterface, IOInterface, PackageInterface, ProcessExecutorInterface
from .parsing import split_changes

logger = logging.getLogger(__name__)

MAX_LISTED_CHANGES = 10


class VcsDownloader(ABC):
    """
    Base class for source downloaders.

    Subclasses implement the VCS commands (do_download, do_update,
    get_local_changes, get_commit_logs, discard_changes).
    """

    def __init__(
        self,
        io: IOInterface,
        config: Optional[ConfigInterface] = None,
        process: Optional[ProcessExecutorInterface] = None,
        filesystem: Optional[Filesystem] = None,
    ):
        self.io = io
        self.config = config or Config()
        self.process = process or ProcessExecutor(timeout=self.config.get('process-timeout'))
        self.filesystem = filesystem or Filesystem()

    def get_installation_source(self) -> str:
        return 'source'

    def download(self, package: PackageInterface, path: str) -> None:
        """Check out *package* into *path*."""
        if not package.source_reference:
            raise ValueError('Package has no source reference, cannot download it')

        logger.info(f"Downloading {package.source_url} ({package.source_reference}) to {path}")
        self.filesystem.ensure_directory_exists(str(Path(path).parent))
        self.do_download(package, path)

    def update(self, initial: PackageInterface, target: PackageInterface, path: str) -> None:
        """
        Switch the working copy at *path* from *initial* to *target*.

        Local changes are resolved first; in verbose mode the commits
        between the two references are shown afterwards.
        """
        if not target.source_reference:
            raise ValueError('Package has no source reference, cannot update it')

        logger.info(f"Updating {path} from {initial.source_reference} to {target.source_reference}")
        self.clean_changes(path, True)
        self.do_update(initial, target, path)

        if self.io.is_verbose():
            logs = self.get_commit_logs(initial.source_reference, target.source_reference, path)
            if logs.strip():
                self.io.write(['    ' + escape(line) for line in logs.splitlines()])

    def clean_changes(self, path: str, is_update: bool) -> None:
        """
        Make sure *path* can be overwritten.

        Raises:
            UncommittedChangesError: the working copy has local changes
        """
        changes = self.get_local_changes(path)
        if changes:
            self.reject_changes(path, changes)

    def reject_changes(self, path: str, changes: str) -> None:
        """Refuse to touch a working copy that has local changes."""
        raise UncommittedChangesError(path, changes)

    @abstractmethod
    def do_download(self, package: PackageInterface, path: str) -> None: ...

    @abstractmethod
    def do_update(self, initial: PackageInterface, target: PackageInterface, path: str) -> None: ...

    @abstractmethod
    def get_local_changes(self, path: str) -> Optional[str]: ...

    @abstractmethod
    def get_commit_logs(self, from_reference: str, to_reference: str, path: str) -> str: ...

    @abstractmethod
    def discard_changes(self, path: str) -> None: ...


class BzrDownloader(VcsDownloader):
    """
    Bazaar working copy downloader.

    Uses lightweight checkouts; updates are ``bzr switch``.

    Example:
        downloader = BzrDownloader(ConsoleIO(), Config())
        downloader.download(Package("lp:foo", "42"), "vendor/foo")
    """

    def __init__(self, io, config=None, process=None, filesystem=None):
        super().__init__(io, config, process, filesystem)
        self.binary = self.config.get('bzr-binary') or 'bzr'

    def do_download(self, package: PackageInterface, path: str) -> None:
        reference = package.source_reference
        self.io.write(f"    Checking out {escape(reference)}")

        command = build_command(
            self.binary, 'checkout', '--lightweight', revision_flag(reference),
            ProcessExecutor.escape(package.source_url), ProcessExecutor.escape(path),
        )
        self._execute(command)

    def do_update(self, initial: PackageInterface, target: PackageInterface, path: str) -> None:
        reference = target.source_reference
        self.io.write(f"    Checking out {escape(reference)}")

        command = build_command(
            self.binary, 'switch', revision_flag(reference), ProcessExecutor.escape(target.source_url)
        )
        self._execute(command, cwd=path)

    def get_local_changes(self, path: str) -> Optional[str]:
        """
        Changes to versioned files in the working copy at *path*.

        Returns:
            Trimmed ``bzr status`` output, or None when clean or not a checkout
        """
        if not (Path(path) / '.bzr').is_dir():
            return None

        command = build_command(self.binary, 'status', '--short', '--versioned')
        output = self._execute(command, cwd=path)
        return output.strip() or None

    def clean_changes(self, path: str, is_update: bool) -> None:
        changes = self.get_local_changes(path)
        if not changes:
            return

        if not self.io.is_interactive():
            if self.config.get('discard-changes') is True:
                logger.info(f"Discarding local changes in {path}")
                self.discard_changes(path)
                return
            self.reject_changes(path, changes)
            return

        lines = ['    ' + escape(line) for line in split_changes(changes)]
        self.io.write('    [red]The package has modified files:[/red]')
        self.io.write(lines[:MAX_LISTED_CHANGES])
        if len(lines) > MAX_LISTED_CHANGES:
            remainder = len(lines) - MAX_LISTED_CHANGES
            self.io.write(f'    [green]{remainder} more files modified, choose "v" to view the full list[/green]')

        action = 'update' if is_update else 'uninstall'
        while True:
            answer = self.io.ask(f'    [green]Discard changes {escape("[y,n,v,?]")}?[/green] ', '?')
            answer = (answer or '?').strip().lower()[:1]

            if answer == 'y':
                self.discard_changes(path)
                return

            if answer == 'n':
                raise UserAbortedError('Update aborted' if is_update else 'Uninstall aborted')

            if answer == 'v':
                self.io.write(lines)
                continue

            self.io.write([
                f'    y - discard changes and apply the {action}',
                f'    n - abort the {action} and let you manually clean things up',
                '    v - view modified files',
                '    ? - print help',
            ])

    def get_commit_logs(self, from_reference: str, to_reference: str, path: str) -> str:
        """Raw ``bzr log`` output for the inclusive range, for display."""
        revisions = f"-r{range_endpoint(from_reference)}..{range_endpoint(to_reference)}"
        command = build_command(self.binary, 'log', ProcessExecutor.escape(revisions))
        return self._execute(command, cwd=path)

    def discard_changes(self, path: str) -> None:
        """
        Revert every local modification under *path*.

        Raises:
            CommandFailureError: the revert failed; the working copy state is unknown
        """
        command = build_command(self.binary, 'revert')
        output, code = self.process.execute(command, cwd=path)
        if code != 0:
            raise CommandFailureError(
                "Could not reset changes\n\n" + self.process.error_output,
                command=command,
                error_output=self.process.error_output,
                exit_status=code,
            )

    def _execute(self, command: str, cwd: Optional[str] = None) -> str:
        return run_checked(self.process, command, cwd=cwd, binary=self.binary)
