"""
Transport layer for syncbridge.

Responsibilities:
    * Open a TCP stream to the analysis tool's sync port.
    * Write whole byte strings and perform bounded reads.
    * Report every failure as ``TransportError`` so the tunnel can turn it
      into a state transition.

The tunnel owns exactly one transport.  Anything implementing the
``Transport`` protocol can stand in for ``SocketTransport`` (tests use an
in-memory fake).
"""

from __future__ import annotations

import socket
from dataclasses import dataclass, field
from typing import Optional, Protocol

from .config import Endpoint, TransportConfig
from .errors import TransportError


class Transport(Protocol):
    @property
    def is_open(self) -> bool: ...

    def connect(self, endpoint: Endpoint, timeout: Optional[float] = None) -> None: ...

    def write(self, data: bytes, timeout: Optional[float] = None) -> None: ...

    def read(self, size: int, timeout: float) -> Optional[bytes]: ...

    def close(self) -> None: ...


@dataclass
class SocketTransport:
    """Blocking TCP transport with per-operation timeouts."""

    config: TransportConfig = field(default_factory=TransportConfig)

    _sock: Optional[socket.socket] = field(init=False, default=None)

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    def connect(self, endpoint: Endpoint, timeout: Optional[float] = None) -> None:
        """Connect within ``timeout`` when given, never longer than ``connect_timeout``."""
        if self._sock:
            return
        try:
            self._sock = socket.create_connection(
                (endpoint.host, endpoint.port),
                timeout=self._bounded(self.config.connect_timeout, timeout),
            )
        except OSError as exc:
            raise TransportError(f"connect to {endpoint} failed: {exc}") from exc

    def write(self, data: bytes, timeout: Optional[float] = None) -> None:
        sock = self._require_socket()
        try:
            sock.settimeout(self._bounded(self.config.write_timeout, timeout))
            sock.sendall(data)
        except OSError as exc:
            raise TransportError(f"write failed: {exc}") from exc

    def read(self, size: int, timeout: float) -> Optional[bytes]:
        """Read up to ``size`` bytes; ``None`` when nothing arrived in time."""
        sock = self._require_socket()
        try:
            sock.settimeout(max(0.0, timeout))
            chunk = sock.recv(size)
        except (socket.timeout, BlockingIOError):
            return None
        except OSError as exc:
            raise TransportError(f"read failed: {exc}") from exc
        if not chunk:
            raise TransportError("connection closed by peer")
        return chunk

    def close(self) -> None:
        sock = self._sock
        self._sock = None
        if sock:
            try:
                sock.close()
            except OSError:
                pass

    @staticmethod
    def _bounded(limit: float, timeout: Optional[float]) -> float:
        if timeout is None:
            return limit
        return max(0.0, min(limit, timeout))

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise TransportError("transport closed")
        return self._sock


__all__ = ["Transport", "SocketTransport"]
