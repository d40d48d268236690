"""Session tunnel: one connection to the analysis tool and its lifecycle.

A tunnel is single-use.  ``connect`` may be attempted once; after the link
goes down (connect failure, read/write error, ``close``) the owner builds a
fresh tunnel instead of reviving this one.
"""

from __future__ import annotations

import enum
import threading
import time
from typing import Optional

from . import protocol
from .config import Endpoint, LogConfig, SessionConfig, TransportConfig
from .errors import TransportError
from .transport import SocketTransport, Transport

_DISCARD_LIMIT = 64


class SessionState(str, enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSING = "closing"


class SessionTunnel:
    """Line-oriented session over a transport with serialized writes."""

    def __init__(
        self,
        endpoint: Optional[Endpoint] = None,
        *,
        transport: Optional[Transport] = None,
        transport_config: Optional[TransportConfig] = None,
        session_config: Optional[SessionConfig] = None,
        log: Optional[LogConfig] = None,
    ) -> None:
        self.endpoint = endpoint or Endpoint()
        self.transport_config = transport_config or TransportConfig()
        self.transport: Transport = transport or SocketTransport(self.transport_config)
        self.session_config = session_config or SessionConfig()
        self.log = log or LogConfig()
        self._logger = self.log.child("tunnel")
        self._state = SessionState.DISCONNECTED
        self._attempted = False
        self._write_lock = threading.Lock()
        self._buffer = b""

    @property
    def state(self) -> SessionState:
        return self._state

    def is_up(self) -> bool:
        return self._state is SessionState.CONNECTED and self.transport.is_open

    #
    # Lifecycle
    #
    def connect(self, deadline: Optional[float] = None) -> bool:
        """Open the transport and send the session handshake.

        ``deadline`` is a ``time.monotonic()`` value; when given, neither the
        connect nor the handshake write may run past it.
        """
        if self._state is SessionState.CONNECTED:
            return self.is_up()
        if self._attempted:
            self._logger.warning("tunnel to %s was already used; create a new one", self.endpoint)
            return False
        self._attempted = True
        self._set_state(SessionState.CONNECTING)
        try:
            self.transport.connect(self.endpoint, timeout=_remaining(deadline))
        except TransportError as exc:
            self._set_state(SessionState.DISCONNECTED)
            self._logger.warning("sync failed: %s", exc)
            return False
        self._set_state(SessionState.CONNECTED)
        handshake = protocol.new_session(self.session_config.client_id, self.session_config.dialect)
        if not self.send(handshake, deadline=deadline):
            return False
        self.log.verbose(1, self._logger, "sync is now enabled with host %s", self.endpoint)
        return True

    def close(self) -> None:
        with self._write_lock:
            if not self.is_up():
                return
            self._set_state(SessionState.CLOSING)
            try:
                self.transport.write(protocol.session_quit().encode("utf-8"))
            except TransportError as exc:
                self._logger.warning("tunnel close error: %s", exc)
            self.transport.close()
            self._buffer = b""
            self._set_state(SessionState.DISCONNECTED)
        self.log.verbose(1, self._logger, "sync disabled for host %s", self.endpoint)

    #
    # I/O
    #
    def send(self, line: str, deadline: Optional[float] = None) -> bool:
        """Write one protocol line; ``False`` when nothing was written."""
        if not line.endswith("\n"):
            line += "\n"
        data = line.encode("utf-8")
        with self._write_lock:
            if not self.is_up():
                self._logger.warning("tunnel_send: tunnel is unavailable (did you forget to sync?)")
                return False
            try:
                self.transport.write(data, timeout=_remaining(deadline))
            except TransportError as exc:
                self._drop(f"tunnel_send error: {exc}")
                return False
        return True

    def poll(self, timeout: float) -> Optional[str]:
        """Wait up to ``timeout`` seconds for one line from the peer.

        Returns the decoded line, or ``None`` when nothing arrived or the
        tunnel dropped.  Use ``is_up()`` to tell the last two apart.  Data
        without a trailing newline is returned as-is once the peer has been
        quiet for ``read_settle`` seconds (or the timeout passes).
        """
        if not self.is_up():
            return None
        deadline = time.monotonic() + max(0.0, timeout)
        attempted = False
        while True:
            line = self._take_line()
            if line is not None:
                return line
            limit = deadline
            if self._buffer:
                limit = min(deadline, time.monotonic() + self.transport_config.read_settle)
            remaining = limit - time.monotonic()
            if attempted and remaining <= 0:
                break
            attempted = True
            try:
                chunk = self.transport.read(self.transport_config.read_size, max(0.0, remaining))
            except TransportError as exc:
                self._drop(f"error on poll: {exc}")
                return None
            if chunk:
                self._buffer += chunk
            elif self._buffer:
                break
        if not self._buffer:
            return None
        data, self._buffer = self._buffer, b""
        return data.decode("utf-8", errors="replace")

    def discard_input(self) -> None:
        """Drop buffered input and anything the peer already sent."""
        if not self.is_up():
            return
        self._buffer = b""
        for _ in range(_DISCARD_LIMIT):
            try:
                chunk = self.transport.read(self.transport_config.read_size, 0.0)
            except TransportError as exc:
                self._drop(f"error on poll: {exc}")
                return
            if not chunk:
                return

    #
    # Internal helpers
    #
    def _take_line(self) -> Optional[str]:
        if b"\n" not in self._buffer:
            return None
        line, self._buffer = self._buffer.split(b"\n", 1)
        return line.decode("utf-8", errors="replace") + "\n"

    def _drop(self, reason: str) -> None:
        self.transport.close()
        self._buffer = b""
        self._set_state(SessionState.DISCONNECTED)
        self._logger.warning("%s", reason)

    def _set_state(self, new_state: SessionState) -> None:
        if self._state is new_state:
            return
        self._logger.debug("tunnel %s: %s -> %s", self.endpoint, self._state.value, new_state.value)
        self._state = new_state


def _remaining(deadline: Optional[float]) -> Optional[float]:
    if deadline is None:
        return None
    return max(0.0, deadline - time.monotonic())


__all__ = ["SessionState", "SessionTunnel"]
