"""Interactive REPL for syncbridge-cli."""

from __future__ import annotations

import logging
import sys
from typing import Callable, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from .commands import CommandTable
from .context import SyncContext
from .parser import split_command

LOGGER = logging.getLogger("syncbridge_cli.repl")


class SyncREPL:
    """prompt_toolkit REPL; reads plain lines when stdin is not a terminal."""

    def __init__(self, ctx: SyncContext, registry: CommandTable, *, prompt: str = "sync> ") -> None:
        self.ctx = ctx
        self.registry = registry
        self.prompt = prompt

    def run(self) -> int:
        if not sys.stdin.isatty():
            return self._loop(lambda: input())
        session: PromptSession[str] = PromptSession(
            self.prompt,
            history=InMemoryHistory(),
            completer=WordCompleter(self.registry.words(), sentence=True),
        )

        def read_line() -> str:
            with patch_stdout():
                return session.prompt()

        return self._loop(read_line)

    def _loop(self, read_line: Callable[[], str]) -> int:
        try:
            while True:
                try:
                    line = read_line()
                except (EOFError, KeyboardInterrupt):
                    print()
                    return 0
                self.dispatch(line)
        finally:
            self.ctx.disconnect()

    def dispatch(self, line: str) -> Optional[int]:
        argv = split_command(line.strip())
        if not argv:
            return None
        cmd_name, *cmd_args = argv
        if cmd_args and cmd_args[-1].startswith("#parse-error"):
            print(f"Parse error: {cmd_args[-1].split(':', 1)[-1]}")
            return 1
        command = self.registry.resolve(cmd_name)
        if not command:
            print(f"Unknown command: {cmd_name}")
            return 1
        try:
            return command.run(self.ctx, cmd_args)
        except SystemExit:
            raise
        except Exception as exc:
            LOGGER.exception("command failed")
            print(f"Command '{cmd_name}' failed: {exc}")
            return 1
