import io
import os
import time

import pytest

from ostepcode.intro import address_layout, count_threads, cpu, main, mem, write_hello


def test_write_hello_writes_and_truncates(tmp_path):
    target = tmp_path / "file"
    target.write_bytes(b"x" * 100)
    written = write_hello(target)
    assert target.read_bytes() == b"hello world\n"
    assert written == len(b"hello world\n")


def test_write_hello_into_missing_directory_raises(tmp_path):
    with pytest.raises(OSError):
        write_hello(tmp_path / "missing" / "file")


def test_count_threads_zero_loops():
    assert count_threads(0) == 0


def test_count_threads_never_exceeds_total():
    loops = 5000
    result = count_threads(loops)
    assert 1 <= result <= 2 * loops


def test_cpu_without_iterations_prints_nothing():
    out = io.StringIO()
    assert cpu("A", out, 0) == 0
    assert out.getvalue() == ""


def test_cpu_prints_then_spins():
    out = io.StringIO()
    start = time.time()
    assert cpu("A", out, 1) == 1
    assert time.time() - start >= 1
    assert out.getvalue() == "A\n"


def test_mem_increments_value():
    out = io.StringIO()
    assert mem(5, out, 1) == 6
    lines = out.getvalue().splitlines()
    pid = os.getpid()
    assert lines[0].startswith(f"({pid}) addr pointed to by p: 0x")
    assert lines[1] == f"({pid}) value of p: 6"


def test_mem_without_iterations_keeps_value():
    out = io.StringIO()
    assert mem(7, out, 0) == 7
    assert len(out.getvalue().splitlines()) == 1


def test_address_layout_prints_returned_addresses():
    out = io.StringIO()
    layout = address_layout(out)
    assert out.getvalue().splitlines() == [
        f"location of code : {layout['code']:#x}",
        f"location of heap : {layout['heap']:#x}",
        f"location of stack: {layout['stack']:#x}",
    ]


def test_main_io_writes_file(tmp_path):
    target = tmp_path / "out"
    assert main(["io", str(target)]) == 0
    assert target.read_bytes() == b"hello world\n"


def test_main_threads_reports_values(capsys):
    assert main(["threads", "0"]) == 0
    assert capsys.readouterr().out == "Initial value : 0\nFinal value   : 0\n"


def test_main_requires_argument():
    with pytest.raises(SystemExit):
        main(["cpu"])