"""
Console collaborators for bzrsource.

ConsoleIO renders through rich and prompts with rich.prompt.Prompt;
NullIO is used when nobody is watching.
"""

import sys
from typing import Iterable, Optional, Union

from rich.console import Console
from rich.prompt import Prompt


class ConsoleIO:
    """
    Interactive console backed by rich.

    Messages may carry rich markup (``[red]...[/red]``).
    """

    def __init__(self, console: Optional[Console] = None, interactive: Optional[bool] = None,
                 verbose: bool = False):
        self.console = console or Console(highlight=False)
        self._interactive = interactive
        self._verbose = verbose

    def write(self, messages: Union[str, Iterable[str]]) -> None:
        if isinstance(messages, str):
            messages = [messages]
        for message in messages:
            self.console.print(message)

    def ask(self, question: str, default: Optional[str] = None) -> str:
        answer = Prompt.ask(question, console=self.console, default=default, show_default=False)
        return (answer or default or '').strip()

    def is_interactive(self) -> bool:
        if self._interactive is not None:
            return self._interactive
        return sys.stdin.isatty()

    def is_verbose(self) -> bool:
        return self._verbose


class NullIO:
    """Silent, non-interactive console."""

    def write(self, messages: Union[str, Iterable[str]]) -> None:
        pass

    def ask(self, question: str, default: Optional[str] = None) -> str:
        return default or ''

    def is_interactive(self) -> bool:
        return False

    def is_verbose(self) -> bool:
        return False
