"""Tunnel status command."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import SyncContext
from ..output import emit, format_address


class StatusCommand(Command):
    name = "status"
    summary = "Show tunnel state and the last reported location"
    aliases = ("info",)

    def run(self, ctx: SyncContext, argv: List[str]) -> int:
        tracker = ctx.tracker
        if tracker is None:
            emit(ctx, f"Not connected (target {ctx.endpoint})", {"status": "disconnected"})
            return 0
        location = tracker.location
        data = {
            "status": tracker.state.value,
            "host": ctx.host,
            "port": ctx.port,
            "last_base": location.last_base,
            "last_offset": location.last_offset,
            "modules": len(ctx.module_map),
        }
        emit(
            ctx,
            (
                f"Tunnel: {tracker.state.value} host={ctx.host} port={ctx.port} "
                f"base={format_address(location.last_base)} offset={format_address(location.last_offset)}"
            ),
            data,
        )
        return 0
