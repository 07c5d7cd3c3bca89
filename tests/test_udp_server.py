import io
import threading

import pytest

from ostepcode.udp import BUFFER_SIZE, UdpSocket
from ostepcode.udp_server import handle, serve

LOOPBACK = "127.0.0.1"


def test_handle_replies_and_returns_message():
    out = io.StringIO()
    with UdpSocket(0) as server, UdpSocket(0) as client:
        client.send((LOOPBACK, server.port), b"hello world", BUFFER_SIZE)
        message = handle(server, out)
        client.timeout = 5
        reply, _ = client.receive(BUFFER_SIZE)
    assert message == "hello world"
    assert len(reply) == BUFFER_SIZE
    assert reply.rstrip(b"\0") == b"goodbye world"
    assert out.getvalue().splitlines() == [
        "server:: waiting...",
        "server:: read message [size:1000 contents:(hello world)]",
        "server:: reply",
    ]


def test_handle_does_not_answer_empty_datagram():
    out = io.StringIO()
    with UdpSocket(0) as server, UdpSocket(0) as client:
        client.send((LOOPBACK, server.port), b"")
        message = handle(server, out)
        client.timeout = 0.1
        with pytest.raises(TimeoutError):
            client.receive(BUFFER_SIZE)
    assert message == ""
    assert "server:: reply" not in out.getvalue()


def test_serve_with_no_messages_returns_at_once():
    assert serve(0, io.StringIO(), 0) == 0


def test_serve_handles_requested_number_of_messages():
    with UdpSocket(0) as probe:
        port = probe.port
    out = io.StringIO()
    result = {}
    thread = threading.Thread(
        target=lambda: result.update(count=serve(port, out, 1)), daemon=True
    )
    thread.start()
    reply = b""
    with UdpSocket(0) as client:
        client.timeout = 0.2
        for _ in range(25):
            client.send((LOOPBACK, port), b"ping", BUFFER_SIZE)
            try:
                reply, _ = client.receive(BUFFER_SIZE)
                break
            except OSError:
                continue
    thread.join(5)
    assert result["count"] == 1
    assert reply.rstrip(b"\0") == b"goodbye world"
    assert out.getvalue().count("server:: reply") == 1