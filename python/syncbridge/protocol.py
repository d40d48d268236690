"""Wire encoding for the sync protocol.

Every message is one line: ``[<channel>]<json>\\n``.  Control messages use
the ``notice`` channel, location data and queries use ``sync``.  Addresses
are always emitted as plain decimal integers.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

JsonDict = Dict[str, Any]

NOTICE = "notice"
SYNC = "sync"

QUIT_MESSAGE = "dbg disconnected"

_LINE_RE = re.compile(r"^\[(?P<channel>[a-z_]+)\](?P<body>.*)$")


def _json_dumps(payload: JsonDict) -> str:
    return json.dumps(payload, separators=(",", ":"))


def format_address(address: int) -> int:
    value = int(address)
    if value < 0:
        raise ValueError(f"negative address: {address!r}")
    return value


def encode(channel: str, payload: JsonDict) -> str:
    return f"[{channel}]{_json_dumps(payload)}\n"


def new_session(client_id: str, dialect: str) -> str:
    return encode(NOTICE, {"type": "new_dbg", "msg": f"dbg connect - {client_id}", "dialect": dialect})


def session_quit(message: str = QUIT_MESSAGE) -> str:
    return encode(NOTICE, {"type": "dbg_quit", "msg": message})


def module_notice(path: str) -> str:
    return encode(NOTICE, {"type": "module", "path": path})


def location(base: int, offset: int) -> str:
    return encode(SYNC, {"type": "loc", "base": format_address(base), "offset": format_address(offset)})


def remote_query(raddr: int) -> str:
    return encode(SYNC, {"type": "rln", "raddr": format_address(raddr)})


@dataclass(frozen=True)
class Message:
    channel: str
    payload: JsonDict

    @property
    def type(self) -> str:
        return str(self.payload.get("type") or "")


def parse_line(line: str) -> Optional[Message]:
    """Decode one wire line, returning ``None`` for anything malformed."""
    match = _LINE_RE.match(line.strip())
    if not match:
        return None
    try:
        payload = json.loads(match.group("body"))
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    return Message(channel=match.group("channel"), payload=payload)


__all__ = [
    "NOTICE",
    "SYNC",
    "QUIT_MESSAGE",
    "Message",
    "encode",
    "format_address",
    "new_session",
    "session_quit",
    "module_notice",
    "location",
    "remote_query",
    "parse_line",
]
