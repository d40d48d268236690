"""Module lookup: map a runtime address to the loaded module that owns it."""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

LOGGER = logging.getLogger("syncbridge.modules")


@dataclass(frozen=True)
class ModuleInfo:
    path: str
    base: int
    size: int = 0

    @property
    def end(self) -> int:
        return self.base + self.size

    def contains(self, address: int) -> bool:
        return self.base <= address < self.end


class ModuleResolver(Protocol):
    def find(self, address: int) -> Optional[ModuleInfo]: ...


def parse_proc_maps(text: str) -> List[ModuleInfo]:
    """Collapse ``/proc/<pid>/maps`` lines into one entry per mapped file."""
    spans: Dict[str, Tuple[int, int]] = {}
    order: List[str] = []
    for raw in text.splitlines():
        parts = raw.split(maxsplit=5)
        if len(parts) < 6:
            continue
        path = parts[5].strip()
        if path.endswith(" (deleted)"):
            path = path[: -len(" (deleted)")]
        if not path.startswith("/"):
            continue
        try:
            start_text, end_text = parts[0].split("-", 1)
            start, end = int(start_text, 16), int(end_text, 16)
        except ValueError:
            LOGGER.debug("skipping malformed maps line: %s", raw)
            continue
        if path in spans:
            low, high = spans[path]
            spans[path] = (min(low, start), max(high, end))
        else:
            spans[path] = (start, end)
            order.append(path)
    return [ModuleInfo(path=path, base=spans[path][0], size=spans[path][1] - spans[path][0]) for path in order]


class ModuleMap:
    """Sorted range table of loaded modules."""

    def __init__(self, modules: Optional[Iterable[ModuleInfo]] = None, *, pid: Optional[int] = None) -> None:
        self.pid = pid
        self._bases: List[int] = []
        self._entries: List[ModuleInfo] = []
        for module in modules or ():
            self._insert(module)

    @classmethod
    def from_proc_maps(cls, text: str) -> "ModuleMap":
        return cls(parse_proc_maps(text))

    @classmethod
    def for_pid(cls, pid: int) -> "ModuleMap":
        module_map = cls(pid=pid)
        module_map.update()
        return module_map

    def update(self) -> None:
        """Reload the table from ``/proc/<pid>/maps`` when pid-backed."""
        if self.pid is None:
            return
        text = Path(f"/proc/{self.pid}/maps").read_text(encoding="utf-8")
        self.clear()
        for module in parse_proc_maps(text):
            self._insert(module)
        LOGGER.debug("loaded %d modules for pid %d", len(self._entries), self.pid)

    def add(self, path: str, base: int, size: int) -> ModuleInfo:
        if size <= 0:
            raise ValueError(f"module size must be positive: {size}")
        module = ModuleInfo(path=path, base=int(base), size=int(size))
        self._insert(module)
        return module

    def remove(self, path: str) -> bool:
        keep = [module for module in self._entries if module.path != path]
        removed = len(keep) != len(self._entries)
        self._entries = keep
        self._bases = [module.base for module in keep]
        return removed

    def clear(self) -> None:
        self._bases.clear()
        self._entries.clear()

    def find(self, address: int) -> Optional[ModuleInfo]:
        idx = bisect.bisect_right(self._bases, address) - 1
        if idx < 0:
            return None
        module = self._entries[idx]
        return module if module.contains(address) else None

    def modules(self) -> List[ModuleInfo]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def _insert(self, module: ModuleInfo) -> None:
        idx = bisect.bisect_right(self._bases, module.base)
        self._bases.insert(idx, module.base)
        self._entries.insert(idx, module)


__all__ = ["ModuleInfo", "ModuleResolver", "ModuleMap", "parse_proc_maps"]
