import time

from ostepcode.timing import get_time, spin


def test_get_time_matches_wall_clock():
    before = time.time()
    now = get_time()
    after = time.time()
    assert before <= now <= after


def test_get_time_does_not_go_backwards():
    first = get_time()
    second = get_time()
    assert second >= first


def test_spin_waits_at_least_requested_time():
    start = get_time()
    result = spin(0.05)
    elapsed = get_time() - start
    assert result is None
    assert elapsed >= 0.05


def test_spin_zero_returns_quickly():
    start = get_time()
    result = spin(0)
    elapsed = get_time() - start
    assert result is None
    assert 0 <= elapsed < 0.5


def test_spin_negative_returns_quickly():
    start = get_time()
    result = spin(-1)
    elapsed = get_time() - start
    assert result is None
    assert 0 <= elapsed < 0.5