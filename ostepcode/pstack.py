"""A stack of ints that persists in a memory-mapped file.

The file starts with a native size_t holding the item count, followed by
native ints holding the items.
"""

import contextlib
import mmap
import os
import re
import struct
import sys

_HEADER = struct.Struct("@N")
_ITEM = struct.Struct("@i")
_INT_MIN = -(2 ** 31)
_INT_MAX = 2 ** 31 - 1
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

DEFAULT_IMAGE = "ps.img"


def _atoi(text):
    match = _LEADING_INT.match(text)
    if match is None:
        return 0
    value = int(match.group(1))
    return (value - _INT_MIN) % 2 ** 32 + _INT_MIN


class PersistentStack:
    """A stack of 32-bit ints stored in a memory-mapped backing file."""

    def __init__(self, path):
        self._file = open(path, "r+b")
        try:
            size = os.fstat(self._file.fileno()).st_size
            if size < _HEADER.size or size % _ITEM.size:
                raise ValueError(
                    f"backing file size {size} must be at least {_HEADER.size} "
                    f"and a multiple of {_ITEM.size}"
                )
            self._size = size
            self._map = mmap.mmap(self._file.fileno(), size, access=mmap.ACCESS_WRITE)
        except BaseException:
            self._file.close()
            raise
        if self._count > self.capacity():
            self.close()
            raise ValueError("backing file holds an impossible item count")

    @property
    def _count(self):
        return _HEADER.unpack_from(self._map, 0)[0]

    @_count.setter
    def _count(self, value):
        _HEADER.pack_into(self._map, 0, value)

    def _offset(self, index):
        return _HEADER.size + index * _ITEM.size

    def close(self):
        if self._map.closed:
            return
        self._map.flush()
        self._map.close()
        self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __len__(self):
        return self._count

    def capacity(self):
        """Return how many items the backing file can hold."""
        return (self._size - _HEADER.size) // _ITEM.size

    def push(self, value):
        """Push ``value``; raise OverflowError when the stack is full."""
        if not _INT_MIN <= value <= _INT_MAX:
            raise ValueError(f"{value} does not fit in a 32-bit int")
        count = self._count
        if count >= self.capacity():
            raise OverflowError("stack is full")
        _ITEM.pack_into(self._map, self._offset(count), value)
        self._count = count + 1

    def pop(self):
        """Pop and return the top item; raise IndexError when empty."""
        count = self._count
        if count == 0:
            raise IndexError("pop from empty stack")
        count -= 1
        self._count = count
        return _ITEM.unpack_from(self._map, self._offset(count))[0]


def create_image(path, size=mmap.PAGESIZE):
    """Create an empty, zero-filled backing file of ``size`` bytes."""
    if size < 0:
        raise ValueError("size must not be negative")
    with open(path, "wb") as image:
        image.truncate(size)


def run(path, args, out=None):
    """Apply pushes and "pop" commands to the stack at ``path``."""
    if out is None:
        out = sys.stdout
    with PersistentStack(path) as stack:
        for arg in args:
            if arg == "pop":
                if len(stack):
                    out.write(f"{stack.pop()}\n")
            else:
                with contextlib.suppress(OverflowError):
                    stack.push(_atoi(arg))


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    try:
        run(DEFAULT_IMAGE, argv)
    except (OSError, ValueError) as exc:
        print(f"pstack: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())