"""Exception types shared across syncbridge."""

from __future__ import annotations


class SyncBridgeError(RuntimeError):
    """Base class for syncbridge failures."""


class TransportError(SyncBridgeError):
    """Raised by a transport when connect, read or write fails."""


class QueryInProgressError(SyncBridgeError):
    """Raised when a remote query is issued while another one is pending."""


__all__ = ["SyncBridgeError", "TransportError", "QueryInProgressError"]
