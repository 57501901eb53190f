from __future__ import annotations

import math
import unittest

from passcraft.core.password_entropy import (
    CONSONANTS,
    MIN_ENTROPY_BITS,
    VOWELS,
    ends_with_consonant,
    estimate_memorable_entropy,
    estimate_passphrase_entropy,
    estimate_pattern_entropy,
    memorable_chain_bits,
    minimum_memorable_length,
    quality_from_entropy_bits,
    recommended_word_count,
)

_PAIR_BITS = math.log2(len(CONSONANTS)) + math.log2(len(VOWELS))


class PatternEntropyTests(unittest.TestCase):
    def test_bits_scale_with_generated_characters(self) -> None:
        estimate = estimate_pattern_entropy(10, 8, 0)
        self.assertAlmostEqual(estimate.entropy_bits, 8 * math.log2(10))
        self.assertEqual(estimate.recommended_length, 20)
        self.assertFalse(estimate.meets_floor)

    def test_prefix_characters_carry_no_entropy(self) -> None:
        estimate = estimate_pattern_entropy(64, 12, 2)
        self.assertAlmostEqual(estimate.entropy_bits, 60.0)
        self.assertEqual(estimate.recommended_length, 2 + 11)

    def test_prefix_longer_than_length_yields_zero(self) -> None:
        self.assertEqual(estimate_pattern_entropy(64, 3, 7).entropy_bits, 0.0)

    def test_single_character_alphabet_has_no_recommendation(self) -> None:
        estimate = estimate_pattern_entropy(1, 100, 0)
        self.assertEqual(estimate.entropy_bits, 0.0)
        self.assertIsNone(estimate.recommended_length)

    def test_default_word_pattern_clears_floor_at_twelve(self) -> None:
        self.assertTrue(estimate_pattern_entropy(63, 12, 0).meets_floor)


class MemorableEntropyTests(unittest.TestCase):
    def test_minimum_memorable_length(self) -> None:
        self.assertEqual(minimum_memorable_length(), 19)
        self.assertGreaterEqual(memorable_chain_bits(19), MIN_ENTROPY_BITS)
        self.assertLess(memorable_chain_bits(18), MIN_ENTROPY_BITS)

    def test_short_memorable_is_below_floor(self) -> None:
        estimate = estimate_memorable_entropy(10, "")
        self.assertAlmostEqual(estimate.entropy_bits, 5 * _PAIR_BITS)
        self.assertEqual(estimate.recommended_length, 19)
        self.assertFalse(estimate.meets_floor)

    def test_twenty_characters_clear_floor(self) -> None:
        estimate = estimate_memorable_entropy(20, "")
        self.assertAlmostEqual(estimate.entropy_bits, 10 * _PAIR_BITS)
        self.assertTrue(estimate.meets_floor)

    def test_consonant_prefix_starts_on_vowel(self) -> None:
        estimate = estimate_memorable_entropy(3, "ab")
        self.assertAlmostEqual(estimate.entropy_bits, math.log2(len(VOWELS)))
        # Vowel-first chains need one extra character to clear the floor.
        self.assertEqual(estimate.recommended_length, 2 + 20)

    def test_vowel_prefix_starts_on_consonant(self) -> None:
        estimate = estimate_memorable_entropy(3, "ba")
        self.assertAlmostEqual(estimate.entropy_bits, math.log2(len(CONSONANTS)))
        self.assertEqual(estimate.recommended_length, 2 + 19)

    def test_consonant_detection_is_case_insensitive(self) -> None:
        self.assertTrue(ends_with_consonant("foo-B"))
        self.assertFalse(ends_with_consonant("foo-"))
        self.assertFalse(ends_with_consonant(""))
        self.assertFalse(ends_with_consonant("bE"))


class PassphraseEntropyTests(unittest.TestCase):
    def test_words_restart_the_chain(self) -> None:
        self.assertAlmostEqual(
            estimate_passphrase_entropy([3, 4]),
            memorable_chain_bits(3) + memorable_chain_bits(4),
        )

    def test_recommended_word_count(self) -> None:
        self.assertEqual(recommended_word_count(), 3)


class QualityBandTests(unittest.TestCase):
    def test_quality_bands_match_keepassxc_thresholds(self) -> None:
        self.assertEqual(quality_from_entropy_bits(0.0), "bad")
        self.assertEqual(quality_from_entropy_bits(39.999), "poor")
        self.assertEqual(quality_from_entropy_bits(40.0), "weak")
        self.assertEqual(quality_from_entropy_bits(74.999), "weak")
        self.assertEqual(quality_from_entropy_bits(75.0), "good")
        self.assertEqual(quality_from_entropy_bits(99.999), "good")
        self.assertEqual(quality_from_entropy_bits(100.0), "excellent")


if __name__ == "__main__":
    unittest.main()
