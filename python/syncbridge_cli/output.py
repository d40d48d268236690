"""Printing for syncbridge-cli: plain text, or one JSON object per line with --json."""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from .context import SyncContext


def emit(ctx: SyncContext, message: str, data: Optional[Mapping[str, Any]] = None, *, ok: bool = True) -> None:
    """Report a command outcome.

    Text mode prints ``message`` (prefixed with ``error:`` when ``ok`` is
    false).  JSON mode prints ``{"status": "ok", "result": ...}`` or
    ``{"status": "error", "error": ..., "details": ...}``; ``result`` falls
    back to ``{"message": message}`` when no data is given.
    """
    if not ctx.json_output:
        print(message if ok else f"error: {message}")
        return
    if ok:
        envelope = {"status": "ok", "result": dict(data) if data is not None else {"message": message}}
    else:
        envelope = {"status": "error", "error": message}
        if data:
            envelope["details"] = dict(data)
    print(json.dumps(envelope, sort_keys=True))


def format_address(value: Optional[int]) -> str:
    return "-" if value is None else f"0x{value:x}"


__all__ = ["emit", "format_address"]
