"""Configuration objects for syncbridge components."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 9100


@dataclass(frozen=True)
class Endpoint:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass
class TransportConfig:
    connect_timeout: float = 2.0
    write_timeout: float = 2.0
    read_size: int = 4096
    read_settle: float = 0.05


@dataclass
class SessionConfig:
    client_id: str = "ext_python"
    dialect: str = "gdb"
    query_timeout: float = 0.5


@dataclass
class LogConfig:
    """Logger plus verbosity level injected into each component.

    ``verbosity`` 0 keeps the bridge quiet apart from warnings, 1 reports
    connection changes, 2 also reports every resolved module hit.
    """

    verbosity: int = 1
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("syncbridge"))

    def child(self, name: str) -> logging.Logger:
        return self.logger.getChild(name)

    def verbose(self, level: int, logger: logging.Logger, msg: str, *args: object) -> None:
        if self.verbosity >= level:
            logger.info(msg, *args)


__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "Endpoint",
    "TransportConfig",
    "SessionConfig",
    "LogConfig",
]
