"""Connect command implementation."""

from __future__ import annotations

import argparse

from .base import OptionCommand
from ..context import SyncContext
from ..output import emit


class ConnectCommand(OptionCommand):
    name = "connect"
    summary = "Open the sync tunnel now"
    aliases = ("open",)

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--host", type=str, help="Analysis tool host")
        parser.add_argument("--port", type=int, help="Analysis tool sync port")

    def execute(self, ctx: SyncContext, args: argparse.Namespace) -> int:
        if args.host is not None:
            ctx.host = args.host
        if args.port is not None:
            ctx.port = args.port
        tunnel = ctx.ensure_tracker().ensure_tunnel()
        target = {"host": ctx.host, "port": ctx.port}
        if tunnel is None:
            emit(ctx, f"connect to {ctx.endpoint} failed", target, ok=False)
            return 2
        emit(ctx, f"Connected to {ctx.endpoint}", {"result": "connected", **target})
        return 0
