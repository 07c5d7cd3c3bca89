"""A client that sends one greeting over UDP and waits for the reply."""

import argparse
import sys

from ostepcode.udp import BUFFER_SIZE, UdpSocket, resolve_address


def _cstring(data):
    return data.split(b"\0", 1)[0].decode(errors="replace")


def request(message="hello world", server="localhost", port=10000,
            client_port=20000, out=None):
    """Send ``message`` to the server and return the text of its reply."""
    if out is None:
        out = sys.stdout
    addr = resolve_address(server, port)
    with UdpSocket(client_port) as sock:
        out.write(f"client:: send message [{message}]\n")
        try:
            sock.send(addr, message.encode(), BUFFER_SIZE)
        except OSError:
            out.write("client:: failed to send\n")
            raise
        out.write("client:: wait for reply...\n")
        data, _ = sock.receive(BUFFER_SIZE)
        reply = _cstring(data)
        out.write(f"client:: got reply [size:{len(data)} contents:({reply})\n")
    return reply


def main(argv=None):
    parser = argparse.ArgumentParser(prog="udp-client")
    parser.add_argument("--host", default="localhost")
    parser.add_argument("--port", type=int, default=10000)
    args = parser.parse_args(argv)
    try:
        request(server=args.host, port=args.port)
    except OSError as exc:
        print(f"client:: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())