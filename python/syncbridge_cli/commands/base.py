"""Shared plumbing for REPL commands."""

from __future__ import annotations

import argparse
from typing import List, Tuple

from ..context import SyncContext


class Command:
    """One REPL verb.

    Subclasses set ``name``, ``summary`` and optionally ``aliases`` as class
    attributes and implement ``run``, which returns the command's exit code.
    """

    name = ""
    summary = ""
    aliases: Tuple[str, ...] = ()

    def run(self, ctx: SyncContext, argv: List[str]) -> int:
        raise NotImplementedError(f"{type(self).__name__} does not implement run()")

    def words(self) -> Tuple[str, ...]:
        return (self.name, *self.aliases)

    def help_line(self) -> str:
        line = f"  {self.name:<10}{self.summary}"
        if self.aliases:
            line += f" [{', '.join(self.aliases)}]"
        return line


class OptionCommand(Command):
    """Command whose argv goes through an argparse parser.

    ``add_arguments`` declares the options; ``execute`` receives the parsed
    namespace.  A parse error prints argparse's message and yields 1.
    """

    def __init__(self) -> None:
        self.parser = argparse.ArgumentParser(prog=self.name, description=self.summary, add_help=False)
        self.add_arguments(self.parser)

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        pass

    def run(self, ctx: SyncContext, argv: List[str]) -> int:
        try:
            args = self.parser.parse_args(argv)
        except SystemExit:
            return 1
        return self.execute(ctx, args)

    def execute(self, ctx: SyncContext, args: argparse.Namespace) -> int:
        raise NotImplementedError(f"{type(self).__name__} does not implement execute()")
