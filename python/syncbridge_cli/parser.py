"""Command-line token helpers for syncbridge-cli."""

from __future__ import annotations

import shlex
from typing import List


def split_command(line: str) -> List[str]:
    """Split a command line into argv tokens using shlex rules."""
    if not line:
        return []
    try:
        return shlex.split(line, comments=False, posix=True)
    except ValueError as exc:
        return [line.strip(), f"#parse-error:{exc}"]


def parse_address(text: str) -> int:
    """Accept ``0x1000``, ``4096``, ``0o10000`` style addresses."""
    try:
        value = int(text.replace("`", ""), 0)
    except ValueError:
        raise ValueError(f"invalid address: {text!r}") from None
    if value < 0:
        raise ValueError(f"invalid address: {text!r}")
    return value
