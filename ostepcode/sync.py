"""Synchronisation primitives built from locks and condition variables."""

import argparse
import contextlib
import sys
import threading
import time


def _emit(out, text):
    out.write(text + "\n")


class Zemaphore:
    """A counting semaphore built from a lock and a condition variable."""

    def __init__(self, value=0):
        self._value = value
        self._cond = threading.Condition(threading.Lock())

    def wait(self):
        """Block until the value is positive, then decrement it."""
        with self._cond:
            while self._value <= 0:
                self._cond.wait()
            self._value -= 1

    def post(self):
        """Increment the value and wake one waiter."""
        with self._cond:
            self._value += 1
            self._cond.notify()


class Synchronizer:
    """A one-shot event that resets itself after each successful wait."""

    def __init__(self):
        self._done = False
        self._cond = threading.Condition(threading.Lock())

    def signal(self):
        """Mark the event done and wake a waiter."""
        with self._cond:
            self._done = True
            self._cond.notify()

    def wait(self):
        """Block until signalled, then reset for the next use."""
        with self._cond:
            while not self._done:
                self._cond.wait()
            self._done = False


class RWLock:
    """A reader-writer lock: many readers or one writer at a time."""

    def __init__(self):
        self._readers = 0
        self._lock = threading.Semaphore(1)
        self._writelock = threading.BoundedSemaphore(1)

    def acquire_readlock(self):
        with self._lock:
            self._readers += 1
            if self._readers == 1:
                self._writelock.acquire()

    def release_readlock(self):
        with self._lock:
            if self._readers == 0:
                raise RuntimeError("read lock released without being held")
            self._readers -= 1
            if self._readers == 0:
                self._writelock.release()

    def acquire_writelock(self):
        self._writelock.acquire()

    def release_writelock(self):
        """Release the write lock; raises ValueError if it was not held."""
        self._writelock.release()

    @contextlib.contextmanager
    def read_locked(self):
        """Hold the read lock for the duration of a with-block."""
        self.acquire_readlock()
        try:
            yield self
        finally:
            self.release_readlock()

    @contextlib.contextmanager
    def write_locked(self):
        """Hold the write lock for the duration of a with-block."""
        self.acquire_writelock()
        try:
            yield self
        finally:
            self.release_writelock()


def join_modular(out=None, delay=1.0):
    """Parent waits for a child thread through a Synchronizer."""
    if out is None:
        out = sys.stdout
    sync = Synchronizer()

    def child():
        _emit(out, "child")
        time.sleep(delay)
        sync.signal()

    _emit(out, "parent: begin")
    thread = threading.Thread(target=child)
    thread.start()
    sync.wait()
    _emit(out, "parent: end")
    thread.join()


def run_rwlock(read_loops, write_loops, out=None):
    """Run one reader and one writer over a shared counter; return its final value."""
    if out is None:
        out = sys.stdout
    lock = RWLock()
    counter = 0

    def reader():
        local = 0
        for _ in range(read_loops):
            with lock.read_locked():
                local = counter
            _emit(out, f"read {local}")
        _emit(out, f"read done: {local}")

    def writer():
        nonlocal counter
        for _ in range(write_loops):
            with lock.write_locked():
                counter += 1
        _emit(out, "write done")

    threads = [threading.Thread(target=reader), threading.Thread(target=writer)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    _emit(out, "all done")
    return counter


def main(argv=None):
    parser = argparse.ArgumentParser(prog="sync")
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("join", help="join a child thread with a synchronizer")
    rw = commands.add_parser("rwlock", help="reader and writer over a shared counter")
    rw.add_argument("readloops", type=int)
    rw.add_argument("writeloops", type=int)
    args = parser.parse_args(argv)

    if args.command == "join":
        join_modular()
    else:
        run_rwlock(args.readloops, args.writeloops)
    return 0


if __name__ == "__main__":
    sys.exit(main())