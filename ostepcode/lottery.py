"""Lottery scheduling over a list of jobs holding tickets."""

import random
import sys
from collections import deque

USAGE = "usage: lottery <seed> <loops>"


class LotteryScheduler:
    """Jobs, each holding a number of tickets; newest job first."""

    def __init__(self):
        self._jobs = deque()

    def insert(self, tickets):
        """Add a job holding ``tickets`` tickets at the head of the list."""
        self._jobs.appendleft(tickets)

    def jobs(self):
        """Return the ticket counts of the jobs, in list order."""
        return list(self._jobs)

    def choose(self, winner):
        """Return the tickets of the job holding the winning ticket number."""
        total = sum(self._jobs)
        if not 0 <= winner < total:
            raise ValueError(f"winning ticket {winner} outside 0..{total - 1}")
        counter = 0
        for tickets in self._jobs:
            counter += tickets
            if counter > winner:
                return tickets
        raise ValueError(f"no job holds ticket {winner}")

    def draw(self, rng):
        """Draw a winning ticket with ``rng``; return (winner, tickets)."""
        total = sum(self._jobs)
        if total <= 0:
            raise ValueError("no tickets to draw from")
        winner = rng.randrange(total)
        return winner, self.choose(winner)

    def format_list(self):
        return "List: " + "".join(f"[{tickets}] " for tickets in self._jobs)


def run(seed, loops, out=None):
    """Run ``loops`` lottery draws over three jobs; return the draws."""
    if out is None:
        out = sys.stdout
    rng = random.Random(seed)
    scheduler = LotteryScheduler()
    for tickets in (50, 100, 25):
        scheduler.insert(tickets)

    out.write(scheduler.format_list() + "\n")
    draws = []
    for _ in range(loops):
        winner, tickets = scheduler.draw(rng)
        draws.append((winner, tickets))
        out.write(scheduler.format_list() + "\n")
        out.write(f"winner: {winner} {tickets}\n\n")
    return draws


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    if len(argv) != 2:
        print(USAGE, file=sys.stderr)
        return 1
    try:
        seed, loops = int(argv[0]), int(argv[1])
    except ValueError:
        print(USAGE, file=sys.stderr)
        return 1
    run(seed, loops)
    return 0


if __name__ == "__main__":
    sys.exit(main())