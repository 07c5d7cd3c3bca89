# ostepcode

Small, runnable programs that show how an operating system looks from the
point of view of a program running on it: creating processes, lottery
scheduling, threads sharing memory, compare-and-swap, condition variables,
semaphores, a stack kept in a memory-mapped file, and a tiny UDP
client/server pair.

Several programs deliberately contain a concurrency bug (a race, an ordering
violation, a deadlock, a lost wake-up) next to a corrected version, so the
difference can be watched.

## Installation

```
pip install .
```

Python 3.10 or newer is needed, with no other dependencies. The process
demonstrations use `fork` and run `wc`, so they need a POSIX system.

## Commands

Every command takes a sub-command; `--help` lists them.

| Command            | Sub-commands and what they show |
|--------------------|---------------------------------|
| `ostep-intro`      | `cpu STRING` prints a string every second; `mem VALUE` increments a value every second; `io [PATH]` writes `hello world` to a file (default `/tmp/file`) and syncs it; `threads LOOPS` races two unlocked counting threads; `va` prints where code, heap and stack objects live |
| `ostep-procs`      | `fork`, `wait`, `exec [FILE]` (child runs `wc FILE`), `redirect [FILE] [--output PATH]` (child's output goes to a file, default `./p4.output`) |
| `ostep-lottery`    | `SEED LOOPS`: lottery draws over three jobs holding 25, 100 and 50 tickets |
| `ostep-threads`    | `create`, `simple-args`, `return-args`, `t0`, `t1 LOOPCOUNT` |
| `ostep-bugs`       | `atomicity [--fixed] [--delay S]`, `ordering [--fixed] [--delay S]`, `deadlock [--timeout S]` |
| `ostep-cas`        | one successful and one failing compare-and-swap |
| `ostep-cv`         | `join`, `join-spin`, `join-no-lock [--timeout S]`, `join-no-state-var [--timeout S]`, `pc BUFFERSIZE LOOPS CONSUMERS`, `pc-single-cv BUFFERSIZE LOOPS CONSUMERS` |
| `ostep-sema`       | `binary [LOOPS]`, `dining NUM_LOOPS [--no-deadlock] [--print]`, `join`, `zemaphore`, `pc BUFFERSIZE LOOPS CONSUMERS`, `throttle NUM_THREADS SEM_VALUE` |
| `ostep-sync`       | `join` (a reusable synchroniser), `rwlock READLOOPS WRITELOOPS` |
| `ostep-pstack`     | push the numbers given and pop on the word `pop` |
| `ostep-udp-server` | `[--port N]`: answer every datagram with `goodbye world` (default port 10000) |
| `ostep-udp-client` | `[--host H] [--port N]`: send `hello world` and print the reply |

Some of the buggy programs are meant to fail or hang: `ostep-bugs atomicity`
and `ostep-bugs ordering` without `--fixed` end with an error, and
`ostep-bugs deadlock`, `ostep-cv join-no-lock` and `ostep-cv join-no-state-var`
can wait forever unless `--timeout` is given. `ostep-intro cpu`,
`ostep-intro mem` and `ostep-udp-server` run until interrupted.

### Lottery

```
ostep-lottery 1 5
```

Draws use Python's `random.Random` seeded with the given seed.

### Persistent stack

`ostep-pstack` works on `ps.img` in the current directory, which must already
exist, be at least 8 bytes long and a multiple of 4. Create an empty one with
`truncate -s 4096 ps.img`, or from Python with
`ostepcode.pstack.create_image("ps.img", 4096)`. Then:

```
ostep-pstack 7 13 47 pop
47
ostep-pstack pop pop
13
7
```

What is left on the stack is still there on the next run. A push onto a full
stack and a pop from an empty one are silently ignored.

### UDP

Start the server in one terminal and the client in another:

```
ostep-udp-server
ostep-udp-client
```

The client binds local port 20000 and sends to `localhost:10000`.

## Using the pieces from Python

```python
from ostepcode.sync import Zemaphore, RWLock, Synchronizer
from ostepcode.lottery import LotteryScheduler
from ostepcode.cas import AtomicInt
from ostepcode.cv import BoundedBuffer
from ostepcode.pstack import PersistentStack, create_image

sem = Zemaphore(1)
sem.wait()
sem.post()

lock = RWLock()
with lock.read_locked():
    pass
with lock.write_locked():
    pass

scheduler = LotteryScheduler()
for tickets in (50, 100, 25):
    scheduler.insert(tickets)
print(scheduler.format_list())   # List: [25] [100] [50]
print(scheduler.choose(30))      # 100

counter = AtomicInt(0)
counter.compare_and_swap(0, 100)   # True
counter.compare_and_swap(0, 200)   # False, value stays 100

buffer = BoundedBuffer(4)
buffer.put(1)
print(buffer.get())

create_image("ps.img", 4096)
with PersistentStack("ps.img") as stack:
    stack.push(7)
    print(stack.pop())
```

Demonstrations are also plain functions taking an output stream, for example
`ostepcode.cv.producer_consumer(buffer_size, loops, consumers)`,
`ostepcode.sema.dining(loops, avoid_deadlock=True)` and
`ostepcode.lottery.run(seed, loops, out)`.

## Running the tests

```
pip install ".[test]"
pytest
```