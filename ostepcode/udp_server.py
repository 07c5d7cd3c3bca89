"""A server that answers every UDP datagram with a fixed reply."""

import argparse
import itertools
import sys

from ostepcode.udp import BUFFER_SIZE, UdpSocket

REPLY = "goodbye world"


def _cstring(data):
    return data.split(b"\0", 1)[0].decode(errors="replace")


def handle(sock, out=None):
    """Read one datagram from ``sock`` and answer it; return its text."""
    if out is None:
        out = sys.stdout
    out.write("server:: waiting...\n")
    data, addr = sock.receive(BUFFER_SIZE)
    message = _cstring(data)
    out.write(f"server:: read message [size:{len(data)} contents:({message})]\n")
    if data:
        sock.send(addr, REPLY.encode(), BUFFER_SIZE)
        out.write("server:: reply\n")
    return message


def serve(port=10000, out=None, max_messages=None):
    """Answer datagrams on ``port``; stop after ``max_messages`` if given.

    Returns the number of datagrams handled.
    """
    counter = itertools.count() if max_messages is None else range(max_messages)
    handled = 0
    with UdpSocket(port) as sock:
        for _ in counter:
            handle(sock, out)
            handled += 1
    return handled


def main(argv=None):
    parser = argparse.ArgumentParser(prog="udp-server")
    parser.add_argument("--port", type=int, default=10000)
    args = parser.parse_args(argv)
    try:
        serve(args.port)
    except OSError as exc:
        print(f"server:: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())