import threading
import time

import pytest
from sync_stubs import FakeTransport

from syncbridge import (
    Endpoint,
    SessionConfig,
    SessionState,
    SessionTunnel,
    SocketTransport,
    TransportConfig,
    TransportError,
)
from syncbridge.protocol import parse_line


def make_tunnel(transport, **kwargs):
    return SessionTunnel(Endpoint("127.0.0.1", 9100), transport=transport, **kwargs)


def test_connect_sends_handshake(fake_transport):
    tunnel = make_tunnel(fake_transport, session_config=SessionConfig(client_id="unit", dialect="lldb"))
    assert tunnel.state is SessionState.DISCONNECTED
    assert tunnel.connect()
    assert tunnel.is_up()
    assert tunnel.state is SessionState.CONNECTED
    handshake = parse_line(fake_transport.lines[0])
    assert handshake.type == "new_dbg"
    assert handshake.payload == {"type": "new_dbg", "msg": "dbg connect - unit", "dialect": "lldb"}


def test_connect_failure_is_logged_not_raised(caplog):
    transport = FakeTransport(fail_connect=True)
    tunnel = make_tunnel(transport)
    assert not tunnel.connect()
    assert not tunnel.is_up()
    assert tunnel.state is SessionState.DISCONNECTED
    assert "sync failed" in caplog.text


def test_tunnel_is_single_use():
    transport = FakeTransport(fail_connect=True)
    tunnel = make_tunnel(transport)
    tunnel.connect()
    transport.fail_connect = False
    assert not tunnel.connect()
    assert len(transport.connected_to) == 1


def test_send_when_down_is_noop(fake_transport):
    tunnel = make_tunnel(fake_transport)
    assert tunnel.send("[sync]{}\n") is False
    assert fake_transport.writes == []


def test_send_terminates_lines(fake_transport):
    tunnel = make_tunnel(fake_transport)
    tunnel.connect()
    assert tunnel.send('[sync]{"type":"loc","base":1,"offset":1}')
    assert fake_transport.lines[-1].endswith("}\n")


def test_write_failure_marks_tunnel_down(fake_transport):
    tunnel = make_tunnel(fake_transport)
    tunnel.connect()
    fake_transport.fail_writes = True
    assert tunnel.send("[sync]{}\n") is False
    assert not tunnel.is_up()
    assert tunnel.state is SessionState.DISCONNECTED
    assert not fake_transport.is_open


def test_poll_returns_whole_lines_across_chunks():
    transport = FakeTransport(reads=[b"ma", b"in\nrest"])
    tunnel = make_tunnel(transport)
    tunnel.connect()
    assert tunnel.poll(1.0) == "main\n"
    assert tunnel.poll(0.05) == "rest"
    assert tunnel.is_up()


def test_poll_returns_unterminated_data_once_peer_goes_quiet():
    transport = FakeTransport(reads=[b"main+4"])
    tunnel = make_tunnel(transport)
    tunnel.connect()
    start = time.monotonic()
    assert tunnel.poll(2.0) == "main+4"
    assert time.monotonic() - start < 0.5
    assert tunnel.is_up()


def test_poll_joins_unterminated_chunks_arriving_back_to_back():
    transport = FakeTransport(reads=[b"main", b"+4"])
    tunnel = make_tunnel(transport)
    tunnel.connect()
    assert tunnel.poll(2.0) == "main+4"


def test_poll_timeout_leaves_tunnel_usable(fake_transport):
    tunnel = make_tunnel(fake_transport)
    tunnel.connect()
    start = time.monotonic()
    assert tunnel.poll(0.1) is None
    assert time.monotonic() - start >= 0.1
    assert tunnel.is_up()
    assert tunnel.send("[sync]{}\n")


def test_poll_read_error_closes_tunnel():
    transport = FakeTransport(reads=[TransportError("read failed: reset")])
    tunnel = make_tunnel(transport)
    tunnel.connect()
    assert tunnel.poll(1.0) is None
    assert not tunnel.is_up()
    assert transport.close_calls == 1


def test_poll_when_down_returns_immediately(fake_transport):
    tunnel = make_tunnel(fake_transport)
    start = time.monotonic()
    assert tunnel.poll(5.0) is None
    assert time.monotonic() - start < 0.5


def test_discard_input_drops_stale_data():
    transport = FakeTransport(reads=[b"stale\n", b"older"])
    tunnel = make_tunnel(transport)
    tunnel.connect()
    tunnel.discard_input()
    assert tunnel.poll(0.0) is None
    assert tunnel.is_up()


def test_close_is_idempotent(fake_transport):
    tunnel = make_tunnel(fake_transport)
    tunnel.connect()
    tunnel.close()
    tunnel.close()
    quits = [line for line in fake_transport.lines if parse_line(line).type == "dbg_quit"]
    assert len(quits) == 1
    assert fake_transport.close_calls == 1
    assert tunnel.state is SessionState.DISCONNECTED


def test_close_when_never_connected_sends_nothing(fake_transport):
    tunnel = make_tunnel(fake_transport)
    tunnel.close()
    assert fake_transport.writes == []
    assert tunnel.state is SessionState.DISCONNECTED


def test_socket_tunnel_reaches_live_peer(peer):
    tunnel = SessionTunnel(peer.endpoint)
    assert tunnel.connect()
    lines = peer.wait_for_lines(1)
    assert parse_line(lines[0]).type == "new_dbg"
    tunnel.close()
    assert peer.wait_for_lines(2)[-1] == '[notice]{"type":"dbg_quit","msg":"dbg disconnected"}'


def test_socket_tunnel_unreachable_endpoint(closed_endpoint):
    tunnel = SessionTunnel(closed_endpoint)
    assert not tunnel.connect()
    assert not tunnel.is_up()


def test_socket_tunnel_detects_peer_hangup(peer):
    tunnel = SessionTunnel(peer.endpoint)
    tunnel.connect()
    peer.wait_for_lines(1)
    peer.drop_clients()
    assert tunnel.poll(1.0) is None
    assert not tunnel.is_up()


def test_concurrent_sends_never_interleave(peer):
    tunnel = SessionTunnel(peer.endpoint)
    tunnel.connect()
    payload = "x" * 2048

    def worker(tag):
        for idx in range(20):
            tunnel.send(f'[sync]{{"type":"loc","tag":"{tag}{idx}","pad":"{payload}"}}\n')

    threads = [threading.Thread(target=worker, args=(name,)) for name in "abcd"]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    lines = peer.wait_for_lines(81, timeout=5.0)
    assert len(lines) == 81
    assert all(parse_line(line) is not None for line in lines)
    for tag in "abcd":
        tags = [parse_line(line).payload.get("tag") for line in lines[1:]]
        mine = [t for t in tags if t.startswith(tag)]
        assert mine == [f"{tag}{idx}" for idx in range(20)]
    tunnel.close()


def test_socket_transport_connect_honours_shorter_timeout(unaccepting_endpoint):
    transport = SocketTransport(TransportConfig(connect_timeout=5.0))
    start = time.monotonic()
    with pytest.raises(TransportError):
        transport.connect(unaccepting_endpoint, timeout=0.3)
    assert time.monotonic() - start < 1.0
    assert not transport.is_open


def test_tunnel_connect_respects_deadline(unaccepting_endpoint):
    tunnel = SessionTunnel(unaccepting_endpoint)
    start = time.monotonic()
    assert not tunnel.connect(deadline=time.monotonic() + 0.2)
    assert time.monotonic() - start < 0.5
    assert tunnel.state is SessionState.DISCONNECTED
