from __future__ import annotations

from collections import Counter
import unittest

from passcraft.core.random_source import HmacCounterStream
from passcraft.core.sampler import bytes_needed, random_int


class _ScriptedBytes:
    """Serves queued byte strings and records requested sizes."""

    def __init__(self, *chunks: bytes) -> None:
        self._chunks = list(chunks)
        self.requests: list[int] = []

    def __call__(self, length: int) -> bytes:
        self.requests.append(length)
        chunk = self._chunks.pop(0)
        if len(chunk) != length:
            raise AssertionError(f"expected request for {len(chunk)} byte(s), got {length}")
        return chunk


class RandomIntTests(unittest.TestCase):
    def test_unit_range_draws_nothing(self) -> None:
        source = _ScriptedBytes()
        self.assertEqual(random_int(5, 6, source), 5)
        self.assertEqual(source.requests, [])

    def test_rejects_values_at_or_above_limit(self) -> None:
        # 256 % 10 == 6, so 250..255 are rejected.
        source = _ScriptedBytes(b"\xff", b"\xfa", b"\x07")
        self.assertEqual(random_int(0, 10, source), 7)
        self.assertEqual(source.requests, [1, 1, 1])

    def test_accepts_value_just_below_limit(self) -> None:
        source = _ScriptedBytes(b"\xf9")
        self.assertEqual(random_int(0, 10, source), 249 % 10)

    def test_offsets_by_min(self) -> None:
        source = _ScriptedBytes(b"\x04")
        self.assertEqual(random_int(3, 8, source), 3 + (4 % 5))

    def test_multi_byte_range_reads_big_endian(self) -> None:
        # 65536 % 257 == 1, so only 0xffff is rejected.
        source = _ScriptedBytes(b"\xff\xff", b"\x01\x02")
        self.assertEqual(random_int(0, 257, source), 258 % 257)
        self.assertEqual(source.requests, [2, 2])

    def test_power_of_256_range_never_rejects(self) -> None:
        source = _ScriptedBytes(b"\xff")
        self.assertEqual(random_int(0, 256, source), 255)

    def test_bytes_needed(self) -> None:
        self.assertEqual(bytes_needed(2), 1)
        self.assertEqual(bytes_needed(256), 1)
        self.assertEqual(bytes_needed(257), 2)
        self.assertEqual(bytes_needed(65_536), 2)
        self.assertEqual(bytes_needed(65_537), 3)

    def test_rejects_empty_or_inverted_range(self) -> None:
        with self.assertRaisesRegex(ValueError, "max must be greater than min"):
            random_int(5, 5)
        with self.assertRaisesRegex(ValueError, "max must be greater than min"):
            random_int(6, 5)

    def test_rejects_non_finite_bounds(self) -> None:
        with self.assertRaisesRegex(ValueError, "finite"):
            random_int(float("nan"), 10)
        with self.assertRaisesRegex(ValueError, "finite"):
            random_int(0, float("inf"))

    def test_uses_os_source_by_default(self) -> None:
        for _ in range(200):
            value = random_int(-3, 4)
            self.assertGreaterEqual(value, -3)
            self.assertLess(value, 4)

    def test_distribution_is_close_to_uniform(self) -> None:
        source = HmacCounterStream(b"uniformity-check")
        trials = 7000
        counts = Counter(random_int(0, 7, source) for _ in range(trials))
        self.assertEqual(set(counts), set(range(7)))
        expected = trials / 7
        for value, seen in counts.items():
            self.assertLess(abs(seen - expected), expected * 0.15, f"value {value} seen {seen} times")


if __name__ == "__main__":
    unittest.main()
