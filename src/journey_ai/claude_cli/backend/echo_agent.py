"""Local stand-in for ``claude --print`` used by executor integration tests."""

from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path


def main(argv: list[str] | None = None) -> int:
    """Read the prompt from stdin and answer deterministically."""

    parser = argparse.ArgumentParser()
    parser.add_argument("--print", dest="print_mode", action="store_true")
    parser.add_argument("--reply", default=None, help="Fixed stdout text.")
    parser.add_argument("--print-cwd", action="store_true")
    parser.add_argument("--sleep", type=float, default=0.0)
    parser.add_argument("--partial", default="", help="Stdout text flushed before sleeping.")
    parser.add_argument("--exit-code", type=int, default=0)
    parser.add_argument("--stderr", default="")
    parser.add_argument(
        "--fail-until",
        type=int,
        default=0,
        help="Exit with --exit-code until this many invocations were recorded.",
    )
    parser.add_argument("--counter-file", default=None)
    args = parser.parse_args(argv)

    prompt = sys.stdin.read()

    if args.partial:
        sys.stdout.write(args.partial)
        sys.stdout.flush()
    if args.sleep > 0:
        time.sleep(args.sleep)

    exit_code = args.exit_code
    if args.counter_file is not None:
        invocation = _bump_counter(Path(args.counter_file))
        if invocation > args.fail_until:
            exit_code = 0

    if args.stderr:
        sys.stderr.write(args.stderr)
    if exit_code != 0:
        return exit_code

    if args.print_cwd:
        sys.stdout.write(os.getcwd())
    elif args.reply is not None:
        sys.stdout.write(args.reply)
    else:
        sys.stdout.write(prompt)
    return 0


def _bump_counter(path: Path) -> int:
    current = int(path.read_text("utf-8")) if path.exists() else 0
    current += 1
    path.write_text(str(current), "utf-8")
    return current


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
