from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import math
import re
from typing import Iterable, Optional


MIN_ENTROPY_BITS = 64
VOWELS = "aeiou"
CONSONANTS = "bcdfghjklmnpqrstvwxyz"
MIN_WORD_LENGTH = 3
MAX_WORD_LENGTH = 7

_TRAILING_CONSONANT_RE = re.compile(f"[{CONSONANTS}]$", re.IGNORECASE)
_VOWEL_BITS = math.log2(len(VOWELS))
_CONSONANT_BITS = math.log2(len(CONSONANTS))


@dataclass(frozen=True)
class EntropyEstimate:
    entropy_bits: float
    # None when no length can reach the floor (alphabet too small).
    recommended_length: Optional[int]

    @property
    def meets_floor(self) -> bool:
        return self.entropy_bits >= MIN_ENTROPY_BITS


def ends_with_consonant(text: str) -> bool:
    return _TRAILING_CONSONANT_RE.search(text) is not None


def _alternation_bits(expects_vowel: bool) -> float:
    return _VOWEL_BITS if expects_vowel else _CONSONANT_BITS


def memorable_chain_bits(length: int, starts_with_vowel: bool = False) -> float:
    bits = 0.0
    expects_vowel = starts_with_vowel
    for _ in range(max(0, length)):
        bits += _alternation_bits(expects_vowel)
        expects_vowel = not expects_vowel
    return bits


def _floor_reaching_length(starts_with_vowel: bool) -> int:
    bits = 0.0
    length = 0
    expects_vowel = starts_with_vowel
    while bits < MIN_ENTROPY_BITS:
        bits += _alternation_bits(expects_vowel)
        expects_vowel = not expects_vowel
        length += 1
    return length


@lru_cache(maxsize=None)
def minimum_memorable_length() -> int:
    """Characters a fresh consonant-first chain needs to clear the floor."""
    return _floor_reaching_length(False)


def estimate_pattern_entropy(alphabet_size: int, length: int, prefix_length: int) -> EntropyEstimate:
    bits_per_char = math.log2(alphabet_size) if alphabet_size > 1 else 0.0
    entropy_bits = bits_per_char * max(0, length - prefix_length)
    recommended = None
    if bits_per_char > 0:
        recommended = prefix_length + math.ceil(MIN_ENTROPY_BITS / bits_per_char)
    return EntropyEstimate(entropy_bits=entropy_bits, recommended_length=recommended)


def estimate_memorable_entropy(length: int, prefix: str) -> EntropyEstimate:
    starts_with_vowel = ends_with_consonant(prefix)
    entropy_bits = memorable_chain_bits(length - len(prefix), starts_with_vowel)
    recommended = len(prefix) + _floor_reaching_length(starts_with_vowel)
    return EntropyEstimate(entropy_bits=entropy_bits, recommended_length=recommended)


def estimate_passphrase_entropy(word_lengths: Iterable[int]) -> float:
    return sum(memorable_chain_bits(n) for n in word_lengths)


def recommended_word_count() -> int:
    return math.ceil(minimum_memorable_length() / MAX_WORD_LENGTH)


def quality_from_entropy_bits(entropy_bits: float) -> str:
    """Mirror KeePassXC quality bands used by PasswordHealth::quality()."""
    if entropy_bits <= 0:
        return "bad"
    if entropy_bits < 40:
        return "poor"
    if entropy_bits < 75:
        return "weak"
    if entropy_bits < 100:
        return "good"
    return "excellent"
