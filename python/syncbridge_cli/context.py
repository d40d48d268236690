"""CLI context: endpoint settings plus the lazily built tracker/query."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from syncbridge import (
    DEFAULT_PORT,
    Endpoint,
    LocationTracker,
    LogConfig,
    ModuleMap,
    RemoteQuery,
    SessionConfig,
    TransportConfig,
)
from syncbridge.config import DEFAULT_HOST

LOGGER = logging.getLogger("syncbridge_cli.context")


@dataclass
class SyncContext:
    """Holds shared CLI state."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    json_output: bool = False
    session_config: SessionConfig = field(default_factory=SessionConfig)
    transport_config: TransportConfig = field(default_factory=TransportConfig)
    log: LogConfig = field(default_factory=LogConfig)
    module_map: ModuleMap = field(default_factory=ModuleMap)
    _tracker: Optional[LocationTracker] = field(default=None, init=False, repr=False)
    _query: Optional[RemoteQuery] = field(default=None, init=False, repr=False)

    @property
    def endpoint(self) -> Endpoint:
        return Endpoint(self.host, self.port)

    @property
    def tracker(self) -> Optional[LocationTracker]:
        return self._tracker

    def ensure_tracker(self) -> LocationTracker:
        """Create the tracker, rebuilding it when the endpoint changed."""
        tracker = self._tracker
        if tracker is not None and tracker.endpoint == self.endpoint:
            return tracker
        if tracker is not None:
            LOGGER.debug("endpoint changed to %s, dropping old tracker", self.endpoint)
            tracker.close()
        self._tracker = LocationTracker(
            self.module_map,
            self.endpoint,
            transport_config=self.transport_config,
            session_config=self.session_config,
            log=self.log,
        )
        self._query = None
        return self._tracker

    def ensure_query(self) -> RemoteQuery:
        tracker = self.ensure_tracker()
        if self._query is None or self._query.tracker is not tracker:
            self._query = RemoteQuery(tracker)
        return self._query

    def disconnect(self) -> None:
        tracker = self._tracker
        if tracker is None:
            return
        tracker.close()
