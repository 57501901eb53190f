#!/usr/bin/env python3
from __future__ import annotations

import argparse
import os
import re
import sys
import traceback

from passcraft.core.error_dialect import format_error_text
from passcraft.core.models import GenerationRequest
from passcraft.core.password_service import generate_result

DEFAULT_LENGTH = 16
DEFAULT_MEMORABLE_LENGTH = 20
DEFAULT_WORDS = 3
_TRUTHY = ("1", "true", "yes", "on")
_WORDS_ATTACHED = re.compile(r"^-s(\d+)$")


def expand_words_arg(argv: list[str]) -> list[str]:
    """Rewrite ``-s``, ``-sN`` and ``-s N`` into ``--words N``.

    A bare ``-s`` means the default word count. The token after it is consumed only
    when it is all digits.
    """
    out: list[str] = []
    idx = 0
    while idx < len(argv):
        arg = argv[idx]
        attached = _WORDS_ATTACHED.match(arg)
        if attached:
            out += ["--words", attached.group(1)]
        elif arg == "-s":
            nxt = argv[idx + 1] if idx + 1 < len(argv) else None
            if nxt is not None and nxt.isascii() and nxt.isdigit():
                out += ["--words", nxt]
                idx += 1
            else:
                out += ["--words", str(DEFAULT_WORDS)]
        else:
            out.append(arg)
        idx += 1
    return out


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generates a secure password")

    parser.add_argument(
        "-l",
        "--length",
        type=int,
        default=None,
        help=f"password length [default: {DEFAULT_LENGTH}, or {DEFAULT_MEMORABLE_LENGTH} with --memorable]",
    )
    parser.add_argument("-m", "--memorable", action="store_true", help="generates a memorable password")
    parser.add_argument(
        "-c",
        "--non-memorable",
        action="store_true",
        help="generates a non memorable password [default]",
    )
    parser.add_argument("-p", "--pattern", default=None, help="pattern to match for the generated password")
    parser.add_argument(
        "-i",
        "--ignore-security-recommendations",
        action="store_true",
        help="ignore security recommendations",
    )
    parser.add_argument(
        "-s",
        "--words",
        type=int,
        default=None,
        metavar="N",
        help=f"generate N memorable words (3-7 letters) separated by spaces [default: {DEFAULT_WORDS}]",
    )
    parser.add_argument("-n", "--count", type=int, default=1, help="number of outputs to print")
    parser.add_argument(
        "--entropy-seed",
        default=None,
        help="derive output deterministically from this seed (repeatable, not secret)",
    )
    parser.add_argument(
        "--show-meta",
        "--meta",
        action="store_true",
        help="Print estimated entropy metadata per output.",
    )
    return parser.parse_args(expand_words_arg(sys.argv[1:] if argv is None else argv))


def build_request(args: argparse.Namespace) -> GenerationRequest:
    memorable = args.memorable and not args.non_memorable
    if args.pattern is not None:
        memorable = False

    length = args.length
    if length is None:
        length = DEFAULT_MEMORABLE_LENGTH if memorable else DEFAULT_LENGTH

    fields: dict[str, object] = {
        "length": length,
        "memorable": memorable,
        "ignore_security_recommendations": args.ignore_security_recommendations,
        "entropy_seed": args.entropy_seed,
        "words": args.words,
    }
    if args.pattern is not None:
        fields["pattern"] = args.pattern
    return GenerationRequest(**fields)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.count <= 0:
        print(format_error_text(ValueError("count must be > 0")), file=sys.stderr)
        return 2

    try:
        request = build_request(args)
        lines = [generate_result(request).as_line(show_meta=args.show_meta) for _ in range(args.count)]
    except (OSError, RuntimeError, TypeError, ValueError) as exc:
        if os.environ.get("PASSCRAFT_VERBOSE_ERRORS", "").strip().lower() in _TRUTHY:
            traceback.print_exc(file=sys.stderr)
        print(format_error_text(exc), file=sys.stderr)
        return 2
    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
