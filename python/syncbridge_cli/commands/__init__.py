"""REPL commands and the table the REPL dispatches through."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from .base import Command, OptionCommand
from .close import CloseCommand, ExitCommand
from .connect import ConnectCommand
from .help import HelpCommand
from .modules import ModulesCommand
from .rln import RlnCommand
from .status import StatusCommand
from .sync import SyncCommand


class CommandTable:
    """Maps every command name and alias to its command object.

    Iteration yields each command once, in the order it was added.
    """

    def __init__(self, commands: Iterable[Command] = ()) -> None:
        self._by_word: Dict[str, Command] = {}
        for command in commands:
            self.add(command)

    def add(self, command: Command) -> None:
        for word in command.words():
            if word in self._by_word:
                raise ValueError(f"command word {word!r} is already taken")
            self._by_word[word] = command

    def resolve(self, word: str) -> Optional[Command]:
        return self._by_word.get(word)

    def words(self) -> List[str]:
        return sorted(self._by_word)

    def __iter__(self) -> Iterator[Command]:
        return iter(dict.fromkeys(self._by_word.values()))

    def __len__(self) -> int:
        return len(dict.fromkeys(self._by_word.values()))


def build_registry() -> CommandTable:
    table = CommandTable(
        [
            ConnectCommand(),
            SyncCommand(),
            RlnCommand(),
            ModulesCommand(),
            StatusCommand(),
            CloseCommand(),
            ExitCommand(),
        ]
    )
    table.add(HelpCommand(table))
    return table


__all__ = ["Command", "OptionCommand", "CommandTable", "build_registry"]
