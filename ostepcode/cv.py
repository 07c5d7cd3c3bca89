"""Joining threads and bounded buffers with condition variables."""

import argparse
import collections
import sys
import threading
import time
import types

END_OF_PRODUCTION = -1


def _emit(out, text):
    out.write(text + "\n")


class _Signal:
    """A condition variable whose signal needs no lock.

    A signal sent while nobody waits is lost, as with a bare pthread
    condition variable signalled outside its mutex.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._waiters = collections.deque()

    def wait(self, lock, timeout=None):
        """Release ``lock``, wait for a signal, reacquire ``lock``.

        Returns False if ``timeout`` passed without a signal.
        """
        waiter = threading.Event()
        with self._guard:
            self._waiters.append(waiter)
        lock.release()
        woken = False
        try:
            woken = waiter.wait(timeout)
        finally:
            lock.acquire()
            if not woken:
                with self._guard:
                    if waiter in self._waiters:
                        self._waiters.remove(waiter)
                woken = waiter.is_set()
        return woken

    def signal(self):
        """Wake one waiter, if there is one."""
        with self._guard:
            if self._waiters:
                self._waiters.popleft().set()


class BoundedBuffer:
    """A fixed-size FIFO shared by producers and consumers.

    With ``single_cv`` producers and consumers share one condition variable,
    which can wake the wrong kind of thread when there are several consumers.
    """

    def __init__(self, size, single_cv=False):
        if size < 1:
            raise ValueError(f"buffer size must be at least 1, got {size}")
        self._size = size
        self._items = collections.deque()
        self._lock = threading.Lock()
        self._empty = threading.Condition(self._lock)
        self._fill = self._empty if single_cv else threading.Condition(self._lock)

    def put(self, value):
        """Add ``value``, blocking while the buffer is full."""
        with self._lock:
            while len(self._items) == self._size:
                self._empty.wait()
            self._items.append(value)
            self._fill.notify()

    def get(self):
        """Remove and return the oldest value, blocking while the buffer is empty."""
        with self._lock:
            while not self._items:
                self._fill.wait()
            value = self._items.popleft()
            self._empty.notify()
            return value


def join(out=None, delay=1.0):
    """Parent waits for a child on a condition variable guarded by a done flag."""
    if out is None:
        out = sys.stdout
    cond = threading.Condition()
    done = False

    def child():
        nonlocal done
        _emit(out, "child")
        time.sleep(delay)
        with cond:
            done = True
            cond.notify()

    _emit(out, "parent: begin")
    thread = threading.Thread(target=child)
    thread.start()
    with cond:
        while not done:
            cond.wait()
    _emit(out, "parent: end")
    thread.join()


def join_spin(out=None, delay=5.0):
    """Parent burns CPU polling a flag until the child sets it."""
    if out is None:
        out = sys.stdout
    shared = types.SimpleNamespace(done=False)

    def child():
        _emit(out, "child")
        time.sleep(delay)
        shared.done = True

    _emit(out, "parent: begin")
    thread = threading.Thread(target=child)
    thread.start()
    while not shared.done:
        pass
    _emit(out, "parent: end")
    thread.join()


def join_no_lock(out=None, delay=1.0, timeout=None):
    """The child sets the flag and signals without holding the lock.

    The parent checks the flag, dawdles, then waits: the signal has already
    gone by and the wait never ends unless ``timeout`` is given. Returns
    False if the parent's wait timed out, True otherwise.
    """
    if out is None:
        out = sys.stdout
    lock = threading.Lock()
    cond = _Signal()
    shared = types.SimpleNamespace(done=False)

    def child():
        _emit(out, "child: begin")
        time.sleep(delay)
        shared.done = True
        _emit(out, "child: signal")
        cond.signal()

    _emit(out, "parent: begin")
    thread = threading.Thread(target=child, daemon=True)
    thread.start()
    signalled = True
    with lock:
        _emit(out, "parent: check condition")
        while not shared.done:
            time.sleep(2 * delay)
            _emit(out, "parent: wait to be signalled...")
            if not cond.wait(lock, timeout):
                _emit(out, "parent: gave up waiting")
                signalled = False
                break
    _emit(out, "parent: end")
    thread.join()
    return signalled


def join_no_state_var(out=None, delay=1.0, timeout=None):
    """The parent waits with no flag to check, after the child has signalled.

    The wait never ends unless ``timeout`` is given. Returns False if the
    wait timed out, True if the parent was woken.
    """
    if out is None:
        out = sys.stdout
    cond = threading.Condition()

    def child():
        _emit(out, "child: begin")
        with cond:
            _emit(out, "child: signal")
            cond.notify()

    _emit(out, "parent: begin")
    thread = threading.Thread(target=child, daemon=True)
    thread.start()
    time.sleep(2 * delay)
    _emit(out, "parent: wait to be signalled...")
    with cond:
        woken = cond.wait(timeout)
    if not woken:
        _emit(out, "parent: gave up waiting")
    _emit(out, "parent: end")
    thread.join()
    return woken


def producer_consumer(buffer_size, loops, consumers=1, single_cv=False):
    """One producer feeds 0..loops-1 through a bounded buffer to the consumers.

    Each consumer stops at an end-of-production marker. Returns, for each
    consumer, the values it received in order.
    """
    buffer = BoundedBuffer(buffer_size, single_cv)
    received = [[] for _ in range(consumers)]

    def producer():
        for value in range(loops):
            buffer.put(value)
        for _ in range(consumers):
            buffer.put(END_OF_PRODUCTION)

    def consumer(mine):
        while (value := buffer.get()) != END_OF_PRODUCTION:
            mine.append(value)

    threads = [threading.Thread(target=producer)]
    threads += [threading.Thread(target=consumer, args=(mine,)) for mine in received]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return received


def main(argv=None):
    parser = argparse.ArgumentParser(prog="cv")
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("join", help="join with a condition variable")
    commands.add_parser("join-spin", help="join by spinning on a flag")
    no_lock = commands.add_parser("join-no-lock", help="signal without the lock")
    no_lock.add_argument("--timeout", type=float, default=None)
    no_state = commands.add_parser("join-no-state-var", help="wait with no flag")
    no_state.add_argument("--timeout", type=float, default=None)
    for name in ("pc", "pc-single-cv"):
        pc = commands.add_parser(name, help="producer and consumers")
        pc.add_argument("buffersize", type=int)
        pc.add_argument("loops", type=int)
        pc.add_argument("consumers", type=int)
    args = parser.parse_args(argv)

    if args.command == "join":
        join()
    elif args.command == "join-spin":
        join_spin()
    elif args.command == "join-no-lock":
        join_no_lock(timeout=args.timeout)
    elif args.command == "join-no-state-var":
        join_no_state_var(timeout=args.timeout)
    else:
        try:
            producer_consumer(args.buffersize, args.loops, args.consumers,
                              single_cv=args.command == "pc-single-cv")
        except ValueError as exc:
            print(f"cv: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())