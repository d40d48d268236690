"""Close and exit commands."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import SyncContext
from ..output import emit


class CloseCommand(Command):
    name = "close"
    summary = "Send dbg_quit and close the tunnel"
    aliases = ("disconnect",)

    def run(self, ctx: SyncContext, argv: List[str]) -> int:
        ctx.disconnect()
        emit(ctx, f"Disconnected from {ctx.endpoint}", {"status": "disconnected"})
        return 0


class ExitCommand(CloseCommand):
    name = "exit"
    summary = "Close the tunnel and leave the REPL"
    aliases = ("quit", "q")

    def run(self, ctx: SyncContext, argv: List[str]) -> int:
        ctx.disconnect()
        raise SystemExit(0)
