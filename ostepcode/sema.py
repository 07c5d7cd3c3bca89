"""Semaphores at work: mutual exclusion, joining, dining philosophers,
bounded buffers and throttling."""

import argparse
import collections
import sys
import threading
import time

from ostepcode.sync import Zemaphore

NUM_PHILOSOPHERS = 5
CMAX = 10
END_OF_PRODUCTION = -1


def _emit(out, text):
    out.write(text + "\n")


def _run_all(threads):
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


def left(p):
    """The fork to the left of philosopher ``p``."""
    return p


def right(p):
    """The fork to the right of philosopher ``p``."""
    return (p + 1) % NUM_PHILOSOPHERS


def binary(loops=10_000_000):
    """Two threads each increment a counter ``loops`` times under a binary
    semaphore; return the final counter."""
    mutex = threading.Semaphore(1)
    counter = 0

    def child():
        nonlocal counter
        for _ in range(loops):
            with mutex:
                counter += 1

    _run_all([threading.Thread(target=child) for _ in range(2)])
    return counter


def dining(loops, avoid_deadlock=False, out=None, verbose=False):
    """Five philosophers each eat ``loops`` times, sharing five forks.

    Without ``avoid_deadlock`` every philosopher takes the left fork first
    and the table can deadlock; with it the last philosopher takes the right
    fork first. Returns how many times each philosopher ate.
    """
    if out is None:
        out = sys.stdout
    forks = [threading.Semaphore(1) for _ in range(NUM_PHILOSOPHERS)]
    print_lock = threading.Lock()
    meals = [0] * NUM_PHILOSOPHERS

    def say(p, text):
        if verbose:
            with print_lock:
                _emit(out, " " * (p * 10) + text)

    def get_forks(p):
        if avoid_deadlock and p == NUM_PHILOSOPHERS - 1:
            order = (right(p), left(p))
        else:
            order = (left(p), right(p))
        for fork in order:
            if not avoid_deadlock:
                say(p, f"{p}: try {fork}")
            elif p == NUM_PHILOSOPHERS - 1:
                say(p, f"{p} try {fork}")
            else:
                say(p, f"try {fork}")
            forks[fork].acquire()

    def put_forks(p):
        forks[left(p)].release()
        forks[right(p)].release()

    def philosopher(p):
        say(p, f"{p}: start")
        for _ in range(loops):
            say(p, f"{p}: think")
            get_forks(p)
            say(p, f"{p}: eat")
            meals[p] += 1
            put_forks(p)
            say(p, f"{p}: done")

    _emit(out, "dining: started")
    _run_all([threading.Thread(target=philosopher, args=(p,))
              for p in range(NUM_PHILOSOPHERS)])
    _emit(out, "dining: finished")
    return meals


def _join_with(semaphore, out, delay):
    def child():
        time.sleep(delay)
        _emit(out, "child")
        semaphore.post()

    _emit(out, "parent: begin")
    thread = threading.Thread(target=child)
    thread.start()
    semaphore.wait()
    _emit(out, "parent: end")
    thread.join()


class _SemaphoreAdapter:
    def __init__(self, value):
        self._sem = threading.Semaphore(value)

    def wait(self):
        self._sem.acquire()

    def post(self):
        self._sem.release()


def join(out=None, delay=2.0):
    """Parent waits on a semaphore, initially zero, that the child posts."""
    if out is None:
        out = sys.stdout
    _join_with(_SemaphoreAdapter(0), out, delay)


def zemaphore_join(out=None, delay=4.0):
    """Parent waits on a Zemaphore, initially zero, that the child posts."""
    if out is None:
        out = sys.stdout
    _join_with(Zemaphore(0), out, delay)


def producer_consumer(buffer_size, loops, consumers=1, out=None):
    """A producer feeds 0..loops-1 to consumers through a semaphore-guarded buffer.

    Each consumer prints its id and every value it takes, the end marker
    included. Returns, for each consumer, the values it received in order.
    """
    if out is None:
        out = sys.stdout
    if consumers > CMAX:
        raise ValueError(f"at most {CMAX} consumers, got {consumers}")
    if buffer_size < 1:
        raise ValueError(f"buffer size must be at least 1, got {buffer_size}")
    empty = threading.Semaphore(buffer_size)
    full = threading.Semaphore(0)
    mutex = threading.Semaphore(1)
    items = collections.deque()
    received = [[] for _ in range(consumers)]

    def fill(value):
        empty.acquire()
        with mutex:
            items.append(value)
        full.release()

    def producer():
        for value in range(loops):
            fill(value)
        for _ in range(consumers):
            fill(END_OF_PRODUCTION)

    def consumer(cid):
        value = 0
        while value != END_OF_PRODUCTION:
            full.acquire()
            with mutex:
                value = items.popleft()
            empty.release()
            _emit(out, f"{cid} {value}")
            if value != END_OF_PRODUCTION:
                received[cid].append(value)

    threads = [threading.Thread(target=producer)]
    threads += [threading.Thread(target=consumer, args=(cid,)) for cid in range(consumers)]
    _run_all(threads)
    return received


def throttle(num_threads, sem_value, out=None, delay=1.0):
    """Start ``num_threads`` children, at most ``sem_value`` of them working at once.

    Returns the largest number of children seen working at the same time.
    """
    if out is None:
        out = sys.stdout
    sem = threading.Semaphore(sem_value)
    guard = threading.Lock()
    inside = 0
    peak = 0

    def child(cid):
        nonlocal inside, peak
        with sem:
            with guard:
                inside += 1
                peak = max(peak, inside)
            _emit(out, f"child {cid}")
            time.sleep(delay)
            with guard:
                inside -= 1

    _emit(out, "parent: begin")
    _run_all([threading.Thread(target=child, args=(cid,)) for cid in range(num_threads)])
    _emit(out, "parent: end")
    return peak


def main(argv=None):
    parser = argparse.ArgumentParser(prog="sema")
    commands = parser.add_subparsers(dest="command", required=True)
    bin_cmd = commands.add_parser("binary", help="count under a binary semaphore")
    bin_cmd.add_argument("loops", type=int, nargs="?", default=10_000_000)
    din = commands.add_parser("dining", help="dining philosophers")
    din.add_argument("num_loops", type=int)
    din.add_argument("--no-deadlock", action="store_true")
    din.add_argument("--print", dest="verbose", action="store_true")
    commands.add_parser("join", help="join with a semaphore")
    commands.add_parser("zemaphore", help="join with a zemaphore")
    pc = commands.add_parser("pc", help="producer and consumers")
    pc.add_argument("buffersize", type=int)
    pc.add_argument("loops", type=int)
    pc.add_argument("consumers", type=int)
    thr = commands.add_parser("throttle", help="limit concurrent children")
    thr.add_argument("num_threads", type=int)
    thr.add_argument("sem_value", type=int)
    args = parser.parse_args(argv)

    try:
        if args.command == "binary":
            result = binary(args.loops)
            print(f"result: {result} (should be {2 * args.loops})")
        elif args.command == "dining":
            dining(args.num_loops, args.no_deadlock, verbose=args.verbose)
        elif args.command == "join":
            join()
        elif args.command == "zemaphore":
            zemaphore_join()
        elif args.command == "pc":
            producer_consumer(args.buffersize, args.loops, args.consumers)
        else:
            throttle(args.num_threads, args.sem_value)
    except ValueError as exc:
        print(f"sema: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())