"""Location report command."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import SyncContext
from ..output import emit, format_address
from ..parser import parse_address


class SyncCommand(Command):
    name = "sync"
    summary = "Report an address to the analysis tool"
    aliases = ("loc",)

    def run(self, ctx: SyncContext, argv: List[str]) -> int:
        if len(argv) != 1:
            emit(ctx, "usage: sync <address>", ok=False)
            return 1
        try:
            address = parse_address(argv[0])
        except ValueError as exc:
            emit(ctx, str(exc), ok=False)
            return 1
        tracker = ctx.ensure_tracker()
        tracker.report(address)
        if tracker.tunnel is None or not tracker.tunnel.is_up():
            emit(ctx, f"tunnel to {ctx.endpoint} is down", ok=False)
            return 2
        location = tracker.location
        if location.last_offset != address:
            emit(
                ctx,
                f"{format_address(address)}: no module",
                {"address": address, "module": None},
            )
            return 0
        module = ctx.module_map.find(address)
        path = module.path if module else "-"
        emit(
            ctx,
            f"{path} base={format_address(location.last_base)} offset={format_address(address)}",
            {"address": address, "module": path, "base": location.last_base},
        )
        return 0
