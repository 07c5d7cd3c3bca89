import io

import pytest

from ostepcode.bugs import PR_STATE_INIT, atomicity, deadlock, main, ordering


def test_atomicity_fixed_uses_pid():
    out = io.StringIO()
    assert atomicity(True, out, 0.05) == 100
    lines = [line.strip() for line in out.getvalue().splitlines()]
    assert lines[0] == "main: begin"
    assert lines[-1] == "main: end"
    assert lines.index("t1: use!") < lines.index("t2: set to NULL")


def test_atomicity_bug_dereferences_cleared_pointer():
    out = io.StringIO()
    with pytest.raises(AttributeError):
        atomicity(False, out, 0.05)
    text = out.getvalue()
    assert "t1: use!" in text
    assert "main: end" not in text


def test_ordering_fixed_reads_initial_state():
    out = io.StringIO()
    assert ordering(True, out, 0.05) == PR_STATE_INIT
    lines = out.getvalue().splitlines()
    assert lines[0] == "ordering: begin"
    assert "mMain: state is 0" in lines
    assert lines[-1] == "ordering: end"


def test_ordering_bug_reads_missing_handle():
    out = io.StringIO()
    with pytest.raises(AttributeError):
        ordering(False, out, 0.2)
    assert "ordering: end" not in out.getvalue()


def test_deadlock_reports_consistent_outcome():
    out = io.StringIO()
    deadlocked = deadlock(out, 0.5)
    text = out.getvalue()
    assert "t1: begin" in text
    assert "t2: begin" in text
    assert ("main: end" in text) is (not deadlocked)
    assert ("main: deadlock" in text) is deadlocked


def test_main_fixed_atomicity_succeeds(capsys):
    assert main(["atomicity", "--fixed", "--delay", "0.01"]) == 0
    assert "100" in capsys.readouterr().out.split()


def test_main_buggy_atomicity_fails(capsys):
    assert main(["atomicity", "--delay", "0.05"]) == 1
    assert capsys.readouterr().err.startswith("atomicity: ")