import io
import itertools

import pytest

from ostepcode.sema import (
    CMAX,
    binary,
    dining,
    join,
    left,
    main,
    producer_consumer,
    right,
    throttle,
    zemaphore_join,
)


def test_left_is_own_seat():
    assert [left(p) for p in range(5)] == list(range(5))


def test_right_wraps_around_table():
    assert sorted(right(p) for p in range(5)) == list(range(5))
    assert right(4) == left(0)
    assert all(right(p) != left(p) for p in range(5))


@pytest.mark.parametrize("loops", [0, 1, 1000])
def test_binary_counts_every_increment(loops):
    assert binary(loops) == 2 * loops


def test_dining_without_deadlock():
    out = io.StringIO()
    assert dining(50, avoid_deadlock=True, out=out) == [50] * 5
    assert out.getvalue().splitlines() == ["dining: started", "dining: finished"]


def test_dining_verbose_order_and_indent():
    out = io.StringIO()
    loops = 3
    dining(loops, avoid_deadlock=True, out=out, verbose=True)
    lines = out.getvalue().splitlines()
    assert lines[0] == "dining: started"
    assert lines[-1] == "dining: finished"
    first = lines.index(" " * 40 + f"4 try {right(4)}")
    second = lines.index(" " * 40 + f"4 try {left(4)}")
    assert first < second
    for p in range(5):
        indent = " " * (10 * p)
        assert lines.count(f"{indent}{p}: eat") == loops
        assert lines.count(f"{indent}{p}: start") == 1


def test_join_order():
    out = io.StringIO()
    join(out, delay=0.05)
    assert out.getvalue().splitlines() == ["parent: begin", "child", "parent: end"]


def test_zemaphore_join_order():
    out = io.StringIO()
    zemaphore_join(out, delay=0.05)
    assert out.getvalue().splitlines() == ["parent: begin", "child", "parent: end"]


@pytest.mark.parametrize("size,loops,consumers", [(1, 30, 1), (3, 100, 4)])
def test_producer_consumer_delivers_everything(size, loops, consumers):
    out = io.StringIO()
    received = producer_consumer(size, loops, consumers, out)
    assert sorted(itertools.chain.from_iterable(received)) == list(range(loops))
    lines = out.getvalue().splitlines()
    assert len(lines) == loops + consumers
    for cid in range(consumers):
        assert lines.count(f"{cid} -1") == 1


def test_producer_consumer_too_many_consumers():
    with pytest.raises(ValueError):
        producer_consumer(2, 5, CMAX + 1, io.StringIO())


def test_producer_consumer_bad_size():
    with pytest.raises(ValueError):
        producer_consumer(0, 5, 1, io.StringIO())


def test_throttle_limits_concurrency():
    out = io.StringIO()
    peak = throttle(6, 2, out, delay=0.05)
    assert 1 <= peak <= 2
    lines = out.getvalue().splitlines()
    assert lines[0] == "parent: begin"
    assert lines[-1] == "parent: end"
    assert sorted(lines[1:-1]) == sorted(f"child {i}" for i in range(6))


def test_main_binary(capsys):
    assert main(["binary", "100"]) == 0
    line = capsys.readouterr().out.strip()
    words = line.replace("(", " ").replace(")", " ").split()
    assert words[0] == "result:"
    assert words[1] == words[-1]


def test_main_pc_rejects_too_many_consumers():
    assert main(["pc", "2", "5", str(CMAX + 1)]) == 1