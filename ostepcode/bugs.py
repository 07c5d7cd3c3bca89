"""Classic concurrency bugs: atomicity and ordering violations, and deadlock."""

import argparse
import contextlib
import sys
import threading
import time
import types
from dataclasses import dataclass
from typing import Optional

PR_STATE_INIT = 0
_T2 = " " * 17
_DEADLOCK_T2 = " " * 27


def _emit(out, text):
    out.write(text + "\n")


class _Thread(threading.Thread):
    """A thread that keeps any exception its work raised."""

    def __init__(self, work):
        super().__init__(daemon=True)
        self._work = work
        self._error = None

    def run(self):
        try:
            self._work()
        except BaseException as exc:
            self._error = exc

    def wait(self):
        """Join the thread and re-raise what its work raised."""
        self.join()
        if self._error is not None:
            raise self._error


def _join_all(threads):
    for thread in threads:
        thread.join()
    for thread in threads:
        thread.wait()


@dataclass
class _Proc:
    pid: int


@dataclass
class _ThreadInfo:
    proc_info: Optional[_Proc]


def atomicity(fixed=False, out=None, delay=1.0):
    """One thread checks then uses a pointer that another thread clears.

    Without ``fixed`` the use finds the pointer gone and AttributeError is
    raised; with it a lock makes check and use atomic and the pid is returned.
    """
    if out is None:
        out = sys.stdout
    info = _ThreadInfo(proc_info=_Proc(pid=100))
    lock = threading.Lock() if fixed else contextlib.nullcontext()
    used = []

    def thread1():
        _emit(out, "t1: before check")
        with lock:
            if info.proc_info:
                _emit(out, "t1: after check")
                time.sleep(2 * delay)
                _emit(out, "t1: use!")
                pid = info.proc_info.pid
                _emit(out, str(pid))
                used.append(pid)

    def thread2():
        _emit(out, f"{_T2}t2: begin")
        time.sleep(delay)
        with lock:
            _emit(out, f"{_T2}t2: set to NULL")
            info.proc_info = None

    _emit(out, "main: begin")
    threads = [_Thread(thread1), _Thread(thread2)]
    for thread in threads:
        thread.start()
    _join_all(threads)
    _emit(out, "main: end")
    return used[0] if used else None


@dataclass
class _PRThread:
    thread: _Thread
    state: int = PR_STATE_INIT


def _create_thread(start_routine, delay):
    handle = _PRThread(_Thread(start_routine))
    handle.thread.start()
    time.sleep(delay)
    return handle


def ordering(fixed=False, out=None, delay=1.0):
    """A new thread reads a handle its creator has not stored yet.

    Without ``fixed`` the thread finds no handle and AttributeError is raised;
    with it the thread waits on a condition variable and the state is returned.
    """
    if out is None:
        out = sys.stdout
    shared = types.SimpleNamespace(m_thread=None)
    cond = threading.Condition()
    initialised = False
    seen = []

    def m_main():
        _emit(out, "mMain: begin")
        if fixed:
            with cond:
                cond.wait_for(lambda: initialised)
        state = shared.m_thread.state
        _emit(out, f"mMain: state is {state}")
        seen.append(state)

    _emit(out, "ordering: begin")
    shared.m_thread = _create_thread(m_main, delay)
    if fixed:
        with cond:
            initialised = True
            cond.notify()
    shared.m_thread.thread.wait()
    _emit(out, "ordering: end")
    return seen[0]


def deadlock(out=None, timeout=None):
    """Two threads take two locks in opposite orders.

    A thread that waits longer than ``timeout`` for its second lock gives up
    and releases its first. Returns True if any thread had to give up.
    """
    if out is None:
        out = sys.stdout
    l1 = threading.Lock()
    l2 = threading.Lock()
    wait = -1 if timeout is None else timeout
    gave_up = []

    def take(name, indent, first, first_name, second, second_name):
        def say(text):
            _emit(out, f"{indent}{name}: {text}")

        say("begin")
        say(f"try to acquire {first_name}...")
        first.acquire()
        say(f"{first_name} acquired")
        say(f"try to acquire {second_name}...")
        if not second.acquire(timeout=wait):
            say(f"gave up waiting for {second_name}")
            gave_up.append(name)
            first.release()
            return
        say(f"{second_name} acquired")
        l1.release()
        l2.release()

    _emit(out, "main: begin")
    threads = [
        _Thread(lambda: take("t1", "", l1, "L1", l2, "L2")),
        _Thread(lambda: take("t2", _DEADLOCK_T2, l2, "L2", l1, "L1")),
    ]
    for thread in threads:
        thread.start()
    _join_all(threads)
    if gave_up:
        _emit(out, "main: deadlock")
        return True
    _emit(out, "main: end")
    return False


def main(argv=None):
    parser = argparse.ArgumentParser(prog="bugs")
    commands = parser.add_subparsers(dest="command", required=True)
    for name in ("atomicity", "ordering"):
        cmd = commands.add_parser(name)
        cmd.add_argument("--fixed", action="store_true")
        cmd.add_argument("--delay", type=float, default=1.0)
    dl = commands.add_parser("deadlock")
    dl.add_argument("--timeout", type=float, default=None)
    args = parser.parse_args(argv)

    try:
        if args.command == "atomicity":
            atomicity(args.fixed, delay=args.delay)
        elif args.command == "ordering":
            ordering(args.fixed, delay=args.delay)
        else:
            deadlock(timeout=args.timeout)
    except AttributeError as exc:
        print(f"{args.command}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())