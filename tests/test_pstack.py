import io
import struct

import pytest

from ostepcode.pstack import PersistentStack, create_image, main, run

HEADER = struct.calcsize("N")
ITEM = struct.calcsize("i")


@pytest.fixture
def image(tmp_path):
    path = tmp_path / "ps.img"
    create_image(path, 4096)
    return path


def _run(path, *args):
    out = io.StringIO()
    run(path, list(args), out)
    return out.getvalue()


def test_documented_session(image):
    assert _run(image, "7", "13", "47", "pop") == "47\n"
    assert _run(image, "pop", "pop", "99") == "13\n7\n"
    assert _run(image, "pop") == "99\n"


def test_new_image_is_empty(image):
    with PersistentStack(image) as stack:
        assert len(stack) == 0
        assert stack.capacity() == (4096 - HEADER) // ITEM


def test_push_pop_round_trip_and_persistence(image):
    with PersistentStack(image) as stack:
        for value in (1, -5, 2 ** 31 - 1):
            stack.push(value)
    with PersistentStack(image) as stack:
        assert len(stack) == 3
        assert [stack.pop(), stack.pop(), stack.pop()] == [2 ** 31 - 1, -5, 1]
        assert len(stack) == 0


def test_pop_empty_raises(image):
    with PersistentStack(image) as stack:
        with pytest.raises(IndexError):
            stack.pop()


def test_push_full_raises(tmp_path):
    path = tmp_path / "small.img"
    create_image(path, HEADER + 2 * ITEM)
    with PersistentStack(path) as stack:
        assert stack.capacity() == 2
        stack.push(1)
        stack.push(2)
        with pytest.raises(OverflowError):
            stack.push(3)
        assert len(stack) == 2


def test_push_out_of_range_raises(image):
    with PersistentStack(image) as stack:
        with pytest.raises(ValueError):
            stack.push(2 ** 31)


def test_run_ignores_push_when_full_and_pop_when_empty(tmp_path):
    path = tmp_path / "small.img"
    create_image(path, HEADER + 2 * ITEM)
    assert _run(path, "1", "2", "3", "pop", "pop", "pop") == "2\n1\n"


def test_run_parses_like_atoi(image):
    assert _run(image, "12abc", "abc", " -4", "pop", "pop", "pop") == "-4\n0\n12\n"


@pytest.mark.parametrize("size", [HEADER - 1, HEADER + 1])
def test_bad_image_size_raises(tmp_path, size):
    path = tmp_path / "bad.img"
    create_image(path, size)
    with pytest.raises(ValueError):
        PersistentStack(path)


def test_missing_image_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        PersistentStack(tmp_path / "missing.img")


def test_main_uses_image_in_cwd(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    create_image(tmp_path / "ps.img", 4096)
    assert main(["5", "pop"]) == 0
    assert capsys.readouterr().out == "5\n"


def test_main_reports_missing_image(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main(["pop"]) == 1
    assert capsys.readouterr().err.startswith("pstack:")