"""Creating threads, passing them arguments and collecting their results."""

import argparse
import sys
import threading
import types
from concurrent.futures import ThreadPoolExecutor


def _emit(out, text):
    out.write(text + "\n")


def _run_in_thread(work, *args):
    with ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(work, *args).result()


def print_args(a=10, b=20, out=None):
    """A thread prints its two arguments; the caller then prints "done"."""
    if out is None:
        out = sys.stdout
    _run_in_thread(lambda: _emit(out, f"{a} {b}"))
    _emit(out, "done")


def return_incremented(value=100, out=None):
    """A thread prints ``value`` and returns it plus one; return that result."""
    if out is None:
        out = sys.stdout

    def mythread(arg):
        _emit(out, str(arg))
        return arg + 1

    result = _run_in_thread(mythread, value)
    _emit(out, f"returned {result}")
    return result


def return_pair(a=10, b=20, out=None):
    """A thread prints its arguments and returns the pair (1, 2)."""
    if out is None:
        out = sys.stdout

    def mythread():
        _emit(out, f"args {a} {b}")
        return (1, 2)

    x, y = _run_in_thread(mythread)
    _emit(out, f"returned {x} {y}")
    return (x, y)


def hello_threads(out=None):
    """Two threads print "A" and "B" between the main thread's messages."""
    if out is None:
        out = sys.stdout
    _emit(out, "main: begin")
    workers = [threading.Thread(target=_emit, args=(out, name)) for name in "AB"]
    for thread in workers:
        thread.start()
    for thread in workers:
        thread.join()
    _emit(out, "main: end")


def shared_counter(loops, out=None):
    """Two threads each add one to a shared counter ``loops`` times, unlocked.

    Returns the final counter.
    """
    if out is None:
        out = sys.stdout
    shared = types.SimpleNamespace(counter=0)

    def mythread(letter):
        private = []
        _emit(out, f"{letter}: begin [addr of i: {id(private):#x}]")
        for _ in range(loops):
            shared.counter = shared.counter + 1
        _emit(out, f"{letter}: done")

    _emit(out, f"main: begin [counter = {shared.counter}] [{id(shared):x}]")
    workers = [threading.Thread(target=mythread, args=(name,)) for name in "AB"]
    for thread in workers:
        thread.start()
    for thread in workers:
        thread.join()
    _emit(out, f"main: done\n [counter: {shared.counter}]\n [should: {loops * 2}]")
    return shared.counter


def main(argv=None):
    parser = argparse.ArgumentParser(prog="threads-demo")
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("create", help="pass a struct to a thread")
    commands.add_parser("simple-args", help="pass and return a plain value")
    commands.add_parser("return-args", help="return a struct from a thread")
    commands.add_parser("t0", help="two threads printing")
    t1 = commands.add_parser("t1", help="two threads sharing a counter")
    t1.add_argument("loopcount", type=int)
    args = parser.parse_args(argv)

    if args.command == "create":
        print_args()
    elif args.command == "simple-args":
        return_incremented()
    elif args.command == "return-args":
        return_pair()
    elif args.command == "t0":
        hello_threads()
    else:
        shared_counter(args.loopcount)
    return 0


if __name__ == "__main__":
    sys.exit(main())