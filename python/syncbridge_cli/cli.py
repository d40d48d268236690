"""syncbridge-cli entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from syncbridge import DEFAULT_PORT, LogConfig, ModuleMap, SessionConfig, TransportConfig
from syncbridge.config import DEFAULT_HOST

from .commands import build_registry
from .context import SyncContext
from .repl import SyncREPL

LOG = logging.getLogger("syncbridge_cli.cli")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Mirror debugger locations to a remote analysis tool")
    parser.add_argument("--host", default=os.environ.get("SYNCBRIDGE_HOST", DEFAULT_HOST), help="Analysis tool host")
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("SYNCBRIDGE_PORT", DEFAULT_PORT)),
        help=f"Analysis tool sync port (default {DEFAULT_PORT})",
    )
    parser.add_argument("--client-id", default=SessionConfig.client_id, help="Identifier sent in the handshake")
    parser.add_argument("--dialect", default=SessionConfig.dialect, help="Debugger dialect announced to the peer")
    parser.add_argument(
        "--timeout",
        type=float,
        default=SessionConfig.query_timeout,
        help="Default rln answer timeout in seconds",
    )
    parser.add_argument(
        "--connect-timeout",
        type=float,
        default=TransportConfig.connect_timeout,
        help="Seconds to wait for the TCP connect",
    )
    parser.add_argument("--pid", type=int, help="Load the module map from /proc/<pid>/maps")
    parser.add_argument("--json", action="store_true", help="Emit JSON output")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("SYNCBRIDGE_LOG", "INFO"),
        help="Logging level (default INFO)",
    )
    parser.add_argument("-v", "--verbose", action="count", default=1, help="Increase bridge verbosity")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log warnings from the bridge")
    parser.add_argument(
        "-c",
        "--command",
        action="append",
        help="Execute a command non-interactively (repeatable, runs in order)",
    )
    return parser


def build_context(args: argparse.Namespace) -> SyncContext:
    module_map = ModuleMap.for_pid(args.pid) if args.pid is not None else ModuleMap()
    return SyncContext(
        host=args.host,
        port=args.port,
        json_output=args.json,
        session_config=SessionConfig(client_id=args.client_id, dialect=args.dialect, query_timeout=args.timeout),
        transport_config=TransportConfig(connect_timeout=args.connect_timeout),
        log=LogConfig(verbosity=0 if args.quiet else args.verbose),
        module_map=module_map,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    try:
        ctx = build_context(args)
    except OSError as exc:
        LOG.error("cannot load module map for pid %s: %s", args.pid, exc)
        return 2
    registry = build_registry()
    repl = SyncREPL(ctx, registry)
    if args.command:
        return _run_commands(ctx, repl, args.command)
    try:
        return repl.run()
    except SystemExit as exc:
        return int(exc.code or 0)


def _run_commands(ctx: SyncContext, repl: SyncREPL, commands: List[str]) -> int:
    rc = 0
    try:
        for line in commands:
            result = repl.dispatch(line)
            if result:
                rc = result
                break
    except SystemExit as exc:
        rc = int(exc.code or 0)
    finally:
        ctx.disconnect()
    return rc


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
