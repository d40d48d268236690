"""Location tracking: turn reported addresses into module/loc messages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from . import protocol
from .config import Endpoint, LogConfig, SessionConfig, TransportConfig
from .modules import ModuleResolver
from .tunnel import SessionState, SessionTunnel

TunnelFactory = Callable[[Endpoint], SessionTunnel]


@dataclass
class LocationState:
    last_base: Optional[int] = None
    last_offset: Optional[int] = None

    def clear(self) -> None:
        self.last_base = None
        self.last_offset = None


class LocationTracker:
    """Reports the host's current location over a lazily created tunnel.

    The tracker owns at most one tunnel at a time.  Whenever the current
    tunnel is missing or down, ``tunnel_factory`` builds a replacement and
    the tracker forgets the last module base so the new peer session gets a
    module notice before the first location.
    """

    def __init__(
        self,
        resolver: ModuleResolver,
        endpoint: Optional[Endpoint] = None,
        *,
        tunnel_factory: Optional[TunnelFactory] = None,
        transport_config: Optional[TransportConfig] = None,
        session_config: Optional[SessionConfig] = None,
        log: Optional[LogConfig] = None,
    ) -> None:
        self.resolver = resolver
        self.endpoint = endpoint or Endpoint()
        self.transport_config = transport_config or TransportConfig()
        self.session_config = session_config or SessionConfig()
        self.log = log or LogConfig()
        self._logger = self.log.child("tracker")
        self._tunnel_factory = tunnel_factory or self._default_tunnel
        self.tunnel: Optional[SessionTunnel] = None
        self.location = LocationState()

    @property
    def state(self) -> SessionState:
        if self.tunnel is None:
            return SessionState.DISCONNECTED
        return self.tunnel.state

    def report(self, address: Optional[int], deadline: Optional[float] = None) -> None:
        """Forward ``address`` to the peer; ``deadline`` bounds connect and writes."""
        if address is None:
            self._logger.info("<unknown offset>")
            return
        tunnel = self.ensure_tunnel(deadline)
        if tunnel is None:
            return
        self._locate(tunnel, int(address), deadline)

    def ensure_tunnel(self, deadline: Optional[float] = None) -> Optional[SessionTunnel]:
        """Return a live tunnel, replacing a missing or dead one first."""
        tunnel = self.tunnel
        if tunnel is not None and tunnel.is_up():
            self.log.verbose(2, self._logger, "(update)")
            return tunnel
        if tunnel is not None:
            self.log.verbose(1, self._logger, "tunnel to %s is down, reconnecting", self.endpoint)
        tunnel = self._tunnel_factory(self.endpoint)
        self.tunnel = tunnel
        self.location.clear()
        if not tunnel.connect(deadline):
            return None
        return tunnel

    def close(self) -> None:
        if self.tunnel is not None:
            self.tunnel.close()

    def _locate(self, tunnel: SessionTunnel, address: int, deadline: Optional[float]) -> None:
        module = self.resolver.find(address)
        if module is None:
            self.log.verbose(2, self._logger, "no module for %#x", address)
            self.location.clear()
            return
        self.log.verbose(2, self._logger, "mod found: %s [%#x]", module.path, module.base)
        if module.base != self.location.last_base:
            if not tunnel.send(protocol.module_notice(module.path), deadline):
                return
        if tunnel.send(protocol.location(module.base, address), deadline):
            self.location.last_base = module.base
            self.location.last_offset = address

    def _default_tunnel(self, endpoint: Endpoint) -> SessionTunnel:
        return SessionTunnel(
            endpoint,
            transport_config=self.transport_config,
            session_config=self.session_config,
            log=self.log,
        )


__all__ = ["LocationState", "LocationTracker", "TunnelFactory"]
