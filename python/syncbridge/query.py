"""Remote query (``rln``): ask the peer about an address within a deadline."""

from __future__ import annotations

import itertools
import threading
import time
from dataclasses import dataclass
from typing import Optional

from . import protocol
from .errors import QueryInProgressError
from .tracker import LocationTracker

SENTINEL = "-"


@dataclass
class PendingQuery:
    request_id: int
    raddr: int
    deadline: float
    result: Optional[str] = None

    def remaining(self) -> float:
        return self.deadline - time.monotonic()


class RemoteQuery:
    """Request/response veneer over the tracker's tunnel.

    The stream carries no request ids, so only one query may be in flight.
    Callers must not send anything else on the tunnel until ``invoke``
    returns.
    """

    def __init__(self, tracker: LocationTracker, *, timeout: Optional[float] = None) -> None:
        self.tracker = tracker
        self.timeout = timeout if timeout is not None else tracker.session_config.query_timeout
        self._logger = tracker.log.child("query")
        self._ids = itertools.count(1)
        self._guard = threading.Lock()
        self._pending: Optional[PendingQuery] = None

    @property
    def pending(self) -> Optional[PendingQuery]:
        return self._pending

    def invoke(self, address: Optional[int], timeout: Optional[float] = None) -> str:
        """Return the peer's answer for ``address`` or ``SENTINEL``."""
        budget = self.timeout if timeout is None else timeout
        deadline = time.monotonic() + max(0.0, budget)
        if not self._guard.acquire(blocking=False):
            raise QueryInProgressError("a remote query is already pending")
        try:
            return self._invoke(address, deadline)
        finally:
            self._pending = None
            self._guard.release()

    def _invoke(self, address: Optional[int], deadline: float) -> str:
        self.tracker.report(address, deadline)
        if address is None:
            return SENTINEL
        tunnel = self.tracker.tunnel
        if tunnel is None or not tunnel.is_up():
            return SENTINEL
        pending = PendingQuery(request_id=next(self._ids), raddr=int(address), deadline=deadline)
        self._pending = pending
        tunnel.discard_input()
        if not tunnel.send(protocol.remote_query(pending.raddr), deadline):
            return SENTINEL
        while tunnel.is_up():
            answer = tunnel.poll(max(0.0, pending.remaining()))
            if answer is not None:
                pending.result = answer.rstrip()
                break
            if pending.remaining() <= 0:
                break
        if not pending.result:
            self._logger.debug("rln #%d for %#x got no answer", pending.request_id, pending.raddr)
            return SENTINEL
        return pending.result


__all__ = ["SENTINEL", "PendingQuery", "RemoteQuery"]
