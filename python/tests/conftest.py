"""
Pytest fixtures for syncbridge tests.
"""

import socket

import pytest

from sync_stubs import DummySyncPeer, FakeTransport

from syncbridge import Endpoint, LogConfig, ModuleInfo


@pytest.fixture
def peer():
    server = DummySyncPeer()
    try:
        yield server
    finally:
        server.stop()


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def chatty_log():
    return LogConfig(verbosity=2)


@pytest.fixture
def module_x():
    return ModuleInfo(path="/bin/x", base=0x1000, size=0x1000)


@pytest.fixture
def module_y():
    return ModuleInfo(path="/lib/y.so", base=0x8000, size=0x2000)


@pytest.fixture
def closed_endpoint():
    """An endpoint nothing listens on."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return Endpoint("127.0.0.1", port)


@pytest.fixture
def unaccepting_endpoint():
    """An endpoint whose listen backlog is full, so new connects hang."""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(0)
    endpoint = Endpoint("127.0.0.1", server.getsockname()[1])
    fillers = []
    saturated = False
    try:
        for _ in range(16):
            try:
                fillers.append(socket.create_connection((endpoint.host, endpoint.port), timeout=0.2))
            except OSError:
                saturated = True
                break
        if not saturated:
            pytest.skip("listen backlog never filled on this platform")
        yield endpoint
    finally:
        for sock in fillers:
            sock.close()
        server.close()
