"""
syncbridge - mirror a process's current location to a remote analysis tool.

The host reports addresses; the bridge resolves them to loaded modules and
forwards ``module``/``loc`` messages over a line-based TCP session.  Each
module lives in its own file:

    transport.py  -> TCP stream with bounded reads
    protocol.py   -> wire line encoding/decoding
    modules.py    -> address to module resolution (module map, /proc maps)
    tunnel.py     -> session lifecycle, handshake, serialized writes
    tracker.py    -> location tracking and reconnect-by-replacement
    query.py      -> bounded ``rln`` request/response
"""

from .config import DEFAULT_PORT, Endpoint, LogConfig, SessionConfig, TransportConfig  # noqa: F401
from .errors import QueryInProgressError, SyncBridgeError, TransportError  # noqa: F401
from .modules import ModuleInfo, ModuleMap, ModuleResolver  # noqa: F401
from .query import SENTINEL, PendingQuery, RemoteQuery  # noqa: F401
from .tracker import LocationState, LocationTracker  # noqa: F401
from .transport import SocketTransport, Transport  # noqa: F401
from .tunnel import SessionState, SessionTunnel  # noqa: F401

__all__ = [
    "DEFAULT_PORT",
    "Endpoint",
    "LogConfig",
    "SessionConfig",
    "TransportConfig",
    "SyncBridgeError",
    "TransportError",
    "QueryInProgressError",
    "ModuleInfo",
    "ModuleMap",
    "ModuleResolver",
    "SENTINEL",
    "PendingQuery",
    "RemoteQuery",
    "LocationState",
    "LocationTracker",
    "SocketTransport",
    "Transport",
    "SessionState",
    "SessionTunnel",
]

__version__ = "0.1.0"
