"""Datagram sockets bound to a local port, and host name resolution."""

import socket

BUFFER_SIZE = 1000


def resolve_address(hostname, port):
    """Return the ``(IPv4 address, port)`` pair for ``hostname``.

    With no hostname the cleared address ``("0.0.0.0", 0)`` is returned.
    Raises OSError when the name cannot be resolved.
    """
    if hostname is None:
        return ("0.0.0.0", 0)
    if not 0 <= port <= 0xFFFF:
        raise ValueError(f"port {port} outside 0..65535")
    return (socket.gethostbyname(hostname), port)


class UdpSocket:
    """An IPv4 datagram socket bound to ``port`` on every local interface."""

    def __init__(self, port=0):
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            self._sock.bind(("", port))
        except BaseException:
            self._sock.close()
            raise

    @property
    def port(self):
        """The local port the socket is bound to."""
        return self._sock.getsockname()[1]

    @property
    def timeout(self):
        """Seconds a receive may block, or None to block forever."""
        return self._sock.gettimeout()

    @timeout.setter
    def timeout(self, seconds):
        self._sock.settimeout(seconds)

    def send(self, addr, data, size=None):
        """Send ``data`` to ``addr``; return the number of bytes sent.

        With ``size`` the datagram is exactly that long: ``data`` is cut
        short or padded with NUL bytes.
        """
        if isinstance(data, str):
            data = data.encode()
        if size is not None:
            data = data[:size].ljust(size, b"\0")
        return self._sock.sendto(data, addr)

    def receive(self, size=BUFFER_SIZE):
        """Receive one datagram of at most ``size`` bytes; return (data, addr)."""
        return self._sock.recvfrom(size)

    def close(self):
        self._sock.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()