"""Help command."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List

from .base import Command
from ..context import SyncContext

if TYPE_CHECKING:  # pragma: no cover
    from . import CommandTable


class HelpCommand(Command):
    name = "help"
    summary = "List commands, or describe one"
    aliases = ("?",)

    def __init__(self, table: "CommandTable") -> None:
        self.table = table

    def run(self, ctx: SyncContext, argv: List[str]) -> int:
        if not argv:
            self._print(self.table)
            return 0
        command = self.table.resolve(argv[0])
        if command is None:
            print(f"Unknown command: {argv[0]}")
            return 1
        self._print([command])
        parser = getattr(command, "parser", None)
        if parser is not None:
            print(parser.format_usage().rstrip())
        return 0

    @staticmethod
    def _print(commands: Iterable[Command]) -> None:
        for command in commands:
            print(command.help_line())
