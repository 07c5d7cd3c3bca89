"""Introductory demos: CPU and memory virtualisation, threads, and I/O."""

import argparse
import itertools
import os
import sys
import threading
import types

from ostepcode.timing import spin

DEFAULT_IO_PATH = "/tmp/file"
HEAP_BLOCK = 100_000_000


def _emit(out, text):
    out.write(text + "\n")
    out.flush()


def cpu(text, out=None, iterations=None):
    """Print ``text`` once a second, forever unless ``iterations`` is given.

    Returns the number of lines printed.
    """
    if out is None:
        out = sys.stdout
    counter = itertools.count() if iterations is None else range(iterations)
    printed = 0
    for _ in counter:
        _emit(out, text)
        printed += 1
        spin(1)
    return printed


def mem(value, out=None, iterations=None):
    """Increment a heap cell once a second, printing it; return its final value."""
    if out is None:
        out = sys.stdout
    pid = os.getpid()
    cell = [value]
    _emit(out, f"({pid}) addr pointed to by p: {id(cell):#x}")
    counter = itertools.count() if iterations is None else range(iterations)
    for _ in counter:
        spin(1)
        cell[0] += 1
        _emit(out, f"({pid}) value of p: {cell[0]}")
    return cell[0]


def write_hello(path=DEFAULT_IO_PATH):
    """Write "hello world" to ``path``, truncating it, and force it to disk.

    Returns the number of bytes written.
    """
    data = b"hello world\n"
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    try:
        written = os.write(fd, data)
        if written != len(data):
            raise OSError(f"short write: {written} of {len(data)} bytes")
        os.fsync(fd)
    finally:
        os.close(fd)
    return written


def count_threads(loops):
    """Two threads each add one to an unprotected counter ``loops`` times.

    Returns the final counter, which lost updates may leave below 2 * loops.
    """
    shared = types.SimpleNamespace(counter=0)

    def worker():
        for _ in range(loops):
            shared.counter = shared.counter + 1

    workers = [threading.Thread(target=worker) for _ in range(2)]
    for thread in workers:
        thread.start()
    for thread in workers:
        thread.join()
    return shared.counter


def address_layout(out=None):
    """Print where code, heap and stack objects live; return the addresses."""
    if out is None:
        out = sys.stdout
    heap = bytes(HEAP_BLOCK)
    local = 3
    layout = {
        "code": id(address_layout),
        "heap": id(heap),
        "stack": id(local),
    }
    _emit(out, f"location of code : {layout['code']:#x}")
    _emit(out, f"location of heap : {layout['heap']:#x}")
    _emit(out, f"location of stack: {layout['stack']:#x}")
    return layout


def main(argv=None):
    parser = argparse.ArgumentParser(prog="intro")
    commands = parser.add_subparsers(dest="command", required=True)
    cpu_cmd = commands.add_parser("cpu", help="print a string every second")
    cpu_cmd.add_argument("string")
    mem_cmd = commands.add_parser("mem", help="increment a heap value every second")
    mem_cmd.add_argument("value", type=int)
    io_cmd = commands.add_parser("io", help="write a file and sync it")
    io_cmd.add_argument("path", nargs="?", default=DEFAULT_IO_PATH)
    threads_cmd = commands.add_parser("threads", help="race two counting threads")
    threads_cmd.add_argument("loops", type=int)
    commands.add_parser("va", help="print code, heap and stack locations")
    args = parser.parse_args(argv)

    try:
        if args.command == "cpu":
            cpu(args.string)
        elif args.command == "mem":
            mem(args.value)
        elif args.command == "io":
            write_hello(args.path)
        elif args.command == "threads":
            print("Initial value : 0")
            print(f"Final value   : {count_threads(args.loops)}")
        else:
            address_layout()
    except KeyboardInterrupt:
        return 0
    except OSError as exc:
        print(f"intro: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())