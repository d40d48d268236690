"""Module map management command."""

from __future__ import annotations

from pathlib import Path
from typing import List

from syncbridge.modules import parse_proc_maps

from .base import Command
from ..context import SyncContext
from ..output import emit, format_address
from ..parser import parse_address

_USAGE = "usage: modules [list | add PATH BASE SIZE | remove PATH | pid PID | maps FILE | clear]"


class ModulesCommand(Command):
    name = "modules"
    summary = "Inspect or load the module map"
    aliases = ("mods",)

    def run(self, ctx: SyncContext, argv: List[str]) -> int:
        sub, *rest = argv or ["list"]
        module_map = ctx.module_map
        try:
            if sub == "list" and not rest:
                return self._list(ctx)
            if sub == "add" and len(rest) == 3:
                module = module_map.add(rest[0], parse_address(rest[1]), parse_address(rest[2]))
                emit(ctx, f"added {module.path} at {format_address(module.base)}")
                return 0
            if sub == "remove" and len(rest) == 1:
                if not module_map.remove(rest[0]):
                    emit(ctx, f"no module {rest[0]}", ok=False)
                    return 1
                emit(ctx, f"removed {rest[0]}")
                return 0
            if sub == "pid" and len(rest) == 1:
                module_map.pid = int(rest[0])
                module_map.update()
                emit(ctx, f"loaded {len(module_map)} modules from pid {module_map.pid}")
                return 0
            if sub == "maps" and len(rest) == 1:
                text = Path(rest[0]).expanduser().read_text(encoding="utf-8")
                module_map.pid = None
                module_map.clear()
                for module in parse_proc_maps(text):
                    module_map.add(module.path, module.base, module.size)
                emit(ctx, f"loaded {len(module_map)} modules from {rest[0]}")
                return 0
            if sub == "clear" and not rest:
                module_map.clear()
                emit(ctx, "module map cleared")
                return 0
        except (OSError, ValueError) as exc:
            emit(ctx, str(exc), ok=False)
            return 2
        emit(ctx, _USAGE, ok=False)
        return 1

    def _list(self, ctx: SyncContext) -> int:
        modules = ctx.module_map.modules()
        data = {
            "modules": [{"path": m.path, "base": m.base, "size": m.size} for m in modules],
        }
        if ctx.json_output:
            emit(ctx, "", data=data)
            return 0
        if not modules:
            print("  modules: (none)")
            return 0
        print("  modules:")
        for module in modules:
            print(f"    {format_address(module.base):>18}  {module.size:>10}  {module.path}")
        return 0
