"""Process creation: fork, wait, exec and output redirection."""

import argparse
import io
import os
import sys
import time

_REDIRECT_FLAGS = os.O_CREAT | os.O_WRONLY | os.O_TRUNC


def _emit(out, text):
    out.write(text)
    out.flush()


def _redirect_stdout(out):
    try:
        fd = out.fileno()
    except (AttributeError, io.UnsupportedOperation):
        return
    if fd != 1:
        os.dup2(fd, 1)


def _fork(out):
    out.flush()
    return os.fork()


def hello_fork(out=None):
    """Fork; parent and child each print a greeting. Return the child's pid.

    ``out`` must be backed by a file descriptor for the child's output to
    reach it. The parent does not wait for the child.
    """
    if out is None:
        out = sys.stdout
    _emit(out, f"hello world (pid:{os.getpid()})\n")
    rc = _fork(out)
    if rc == 0:
        try:
            _emit(out, f"hello, I am child (pid:{os.getpid()})\n")
        finally:
            os._exit(0)
    _emit(out, f"hello, I am parent of {rc} (pid:{os.getpid()})\n")
    return rc


def hello_wait(out=None):
    """Fork and wait for the child before the parent prints. Return the child's pid."""
    if out is None:
        out = sys.stdout
    _emit(out, f"hello world (pid:{os.getpid()})\n")
    rc = _fork(out)
    if rc == 0:
        try:
            _emit(out, f"hello, I am child (pid:{os.getpid()})\n")
            time.sleep(1)
        finally:
            os._exit(0)
    wc, _ = os.waitpid(rc, 0)
    _emit(out, f"hello, I am parent of {rc} (wc:{wc}) (pid:{os.getpid()})\n")
    return rc


def fork_exec(path, out=None):
    """Fork; the child runs ``wc`` on ``path``. Return the child's pid."""
    if out is None:
        out = sys.stdout
    _emit(out, f"hello world (pid:{os.getpid()})\n")
    rc = _fork(out)
    if rc == 0:
        try:
            _emit(out, f"hello, I am child (pid:{os.getpid()})\n")
            _redirect_stdout(out)
            os.execvp("wc", ["wc", os.fspath(path)])
        except OSError:
            _emit(out, "this shouldn't print out")
        finally:
            os._exit(0)
    wc, _ = os.waitpid(rc, 0)
    _emit(out, f"hello, I am parent of {rc} (wc:{wc}) (pid:{os.getpid()})\n")
    return rc


def fork_redirect(path, output_path="./p4.output"):
    """Run ``wc`` on ``path`` in a child whose stdout is ``output_path``.

    Return the child's exit code.
    """
    rc = os.fork()
    if rc == 0:
        try:
            fd = os.open(output_path, _REDIRECT_FLAGS, 0o700)
            if fd != 1:
                os.dup2(fd, 1)
                os.close(fd)
            os.execvp("wc", ["wc", os.fspath(path)])
        finally:
            os._exit(1)
    _, status = os.waitpid(rc, 0)
    return os.waitstatus_to_exitcode(status)


def main(argv=None):
    parser = argparse.ArgumentParser(prog="procs")
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("fork", help="fork without waiting")
    commands.add_parser("wait", help="fork and wait for the child")
    exec_cmd = commands.add_parser("exec", help="fork and run wc in the child")
    exec_cmd.add_argument("file", nargs="?", default=__file__)
    redirect = commands.add_parser("redirect", help="run wc with stdout sent to a file")
    redirect.add_argument("file", nargs="?", default=__file__)
    redirect.add_argument("--output", default="./p4.output")
    args = parser.parse_args(argv)

    try:
        if args.command == "fork":
            hello_fork()
        elif args.command == "wait":
            hello_wait()
        elif args.command == "exec":
            fork_exec(args.file)
        else:
            fork_redirect(args.file, args.output)
    except OSError:
        print("fork failed", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())