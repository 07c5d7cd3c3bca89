"""An integer cell with an atomic compare-and-swap."""

import sys
import threading


class AtomicInt:
    """An int whose compare-and-swap happens atomically."""

    def __init__(self, value=0):
        self._value = value
        self._lock = threading.Lock()

    def compare_and_swap(self, old, new):
        """Set the value to ``new`` if it equals ``old``; return whether it did."""
        with self._lock:
            if self._value == old:
                self._value = new
                return True
            return False

    def value(self):
        with self._lock:
            return self._value


def run(out=None):
    """Show one successful and one failing compare-and-swap; return the final value."""
    if out is None:
        out = sys.stdout
    cell = AtomicInt(0)
    out.write(f"before successful cas: {cell.value()}\n")
    success = cell.compare_and_swap(0, 100)
    out.write(f"after successful cas: {cell.value()} (success: {int(success)})\n")
    out.write(f"before failing cas: {cell.value()}\n")
    success = cell.compare_and_swap(0, 200)
    out.write(f"after failing cas: {cell.value()} (old: {int(success)})\n")
    return cell.value()


def main(argv=None):
    run()
    return 0


if __name__ == "__main__":
    sys.exit(main())