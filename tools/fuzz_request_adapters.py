from __future__ import annotations

import argparse
import random
import string
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from passcraft.core.password_service import generate_with_options


def _rand_text(rng: random.Random, max_len: int = 64) -> str:
    n = rng.randint(0, max_len)
    alphabet = string.ascii_letters + string.digits + " _-./\\:;,+*'\"[]()|^$?"
    return "".join(rng.choice(alphabet) for _ in range(n))


def _rand_value(rng: random.Random, depth: int = 0) -> object:
    if depth > 2:
        return _rand_text(rng, 16)
    choices: list[object] = [
        None,
        True,
        False,
        rng.randint(-64, 256),
        rng.random() * rng.randint(-1000, 1000),
        _rand_text(rng, 16),
        [_rand_value(rng, depth + 1) for _ in range(rng.randint(0, 4))],
    ]
    return rng.choice(choices)


def _rand_payload(rng: random.Random) -> object:
    if rng.random() < 0.1:
        return _rand_value(rng)
    payload: dict[str, object] = {
        "length": rng.choice([rng.randint(0, 96), _rand_value(rng)]),
        "memorable": _rand_value(rng),
        "pattern": rng.choice([r"\w", r"\d", "[a-f]", "test", "(", _rand_text(rng, 8)]),
        "prefix": rng.choice(["", "pre-", _rand_text(rng, 8)]),
        "ignore_security_recommendations": rng.choice([True, False, _rand_value(rng)]),
        # Seeded so each iteration stays cheap and repeatable.
        "entropy_seed": rng.choice([f"fuzz-{rng.random()}", b"\x01\x02", b"", _rand_value(rng)]),
    }
    if rng.random() < 0.3:
        payload["words"] = rng.choice([rng.randint(-2, 12), _rand_value(rng)])
    if rng.random() < 0.15:
        payload["unknown"] = _rand_value(rng)
    return payload


def fuzz(iterations: int, seed: int) -> int:
    rng = random.Random(seed)
    failures = 0

    for i in range(iterations):
        payload = _rand_payload(rng)
        try:
            value = generate_with_options(payload)
        except (TypeError, ValueError):
            continue
        except Exception as exc:  # noqa: BLE001 - report and keep fuzzing
            failures += 1
            print(f"[fuzz] iteration={i} unexpected {type(exc).__name__}: {exc}", file=sys.stderr)
            continue
        if not isinstance(value, str):
            failures += 1
            print(f"[fuzz] iteration={i} returned {type(value).__name__}", file=sys.stderr)

    if failures:
        print(f"[fuzz] failures={failures}", file=sys.stderr)
        return 2
    print(f"[fuzz] ok iterations={iterations} seed={seed}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Quick fuzz harness for generation options (stdlib-only).")
    parser.add_argument("--iterations", type=int, default=2000)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args(argv)
    return fuzz(iterations=args.iterations, seed=args.seed)


if __name__ == "__main__":
    raise SystemExit(main())
