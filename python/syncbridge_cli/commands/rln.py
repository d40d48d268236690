"""Remote line query command."""

from __future__ import annotations

import argparse

from .base import OptionCommand
from ..context import SyncContext
from ..output import emit, format_address
from ..parser import parse_address


class RlnCommand(OptionCommand):
    name = "rln"
    summary = "Ask the analysis tool for the symbol at an address"

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("address")
        parser.add_argument("--timeout", type=float, help="Seconds to wait for the answer")

    def execute(self, ctx: SyncContext, args: argparse.Namespace) -> int:
        try:
            address = parse_address(args.address)
        except ValueError as exc:
            emit(ctx, str(exc), ok=False)
            return 1
        answer = ctx.ensure_query().invoke(address, timeout=args.timeout)
        emit(ctx, f"{format_address(address)}: {answer}", {"raddr": address, "answer": answer})
        return 0
