"""Random byte sources: the OS CSPRNG and a seeded HMAC-SHA-256 counter stream."""

from __future__ import annotations

import hashlib
import hmac
import math
import os
from typing import Callable, Optional, Union

RandomBytes = Callable[[int], bytes]
Seed = Union[bytes, bytearray, memoryview, str]

# Largest buffer filled by a single native call; bigger requests are chunked.
MAX_RANDOM_BYTES = 65_536
DETERMINISTIC_DIGEST = "sha256"
_COUNTER_BYTES = 8
_COUNTER_LIMIT = 1 << (8 * _COUNTER_BYTES)


def _validate_byte_count(length: object) -> int:
    if isinstance(length, bool) or not isinstance(length, (int, float)):
        raise TypeError("length must be a number")
    if isinstance(length, float):
        if not math.isfinite(length):
            raise ValueError("length must be a non-negative finite number")
        if not length.is_integer():
            raise ValueError("length must be a whole number of bytes")
        length = int(length)
    if length < 0:
        raise ValueError("length must be a non-negative finite number")
    return length


def _urandom_exact(length: int) -> bytes:
    try:
        chunk = os.urandom(length)
    except OSError as exc:
        raise OSError(f"OS CSPRNG failure requesting {length} byte(s): {exc}") from exc
    if len(chunk) != length:
        raise OSError(f"OS CSPRNG returned unexpected byte count (wanted {length}, got {len(chunk)})")
    return chunk


def secure_random_bytes(length: int) -> bytes:
    n = _validate_byte_count(length)
    if n <= MAX_RANDOM_BYTES:
        return _urandom_exact(n)
    parts = []
    for offset in range(0, n, MAX_RANDOM_BYTES):
        parts.append(_urandom_exact(min(MAX_RANDOM_BYTES, n - offset)))
    return b"".join(parts)


def assert_csprng_ready() -> None:
    """Fail fast when the OS CSPRNG cannot serve a small request."""
    secure_random_bytes(1)


def _check_digest(digest: str) -> None:
    try:
        hashlib.new(digest)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"HMAC-{str(digest).upper()} is required for deterministic entropy") from exc


def seed_to_bytes(seed: Seed) -> bytes:
    if isinstance(seed, str):
        return seed.encode("utf-8")
    if isinstance(seed, (bytes, bytearray, memoryview)):
        return bytes(seed)
    raise TypeError("entropy seed must be bytes or str")


class HmacCounterStream:
    """Keyed pseudorandom byte stream.

    Block ``i`` is ``HMAC(seed, i)`` with ``i`` as an 8-byte big-endian counter.
    Blocks are concatenated and the final block is truncated to the request.
    The counter persists across calls, so two streams built from the same seed
    produce the same bytes for the same sequence of requests.
    """

    def __init__(self, seed: Seed, digest: str = DETERMINISTIC_DIGEST) -> None:
        key = seed_to_bytes(seed)
        if not key:
            raise ValueError("entropy seed must not be empty")
        _check_digest(digest)
        self._key = key
        self._digest = digest
        self._counter = 0

    @property
    def counter(self) -> int:
        return self._counter

    def _next_block(self) -> bytes:
        if self._counter >= _COUNTER_LIMIT:
            raise OverflowError("deterministic stream counter exhausted")
        counter_bytes = self._counter.to_bytes(_COUNTER_BYTES, "big")
        self._counter += 1
        return hmac.new(self._key, counter_bytes, self._digest).digest()

    def __call__(self, length: int) -> bytes:
        n = _validate_byte_count(length)
        out = bytearray()
        while len(out) < n:
            block = self._next_block()
            out += block[: n - len(out)]
        return bytes(out)


def create_deterministic_random_bytes(seed: Seed, digest: str = DETERMINISTIC_DIGEST) -> RandomBytes:
    return HmacCounterStream(seed, digest)


def resolve_random_bytes(seed: Optional[Seed] = None) -> RandomBytes:
    if seed is None:
        return secure_random_bytes
    return create_deterministic_random_bytes(seed)
