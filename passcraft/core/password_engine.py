#!/usr/bin/env python3
r"""
password_engine.py - password / passphrase builders over an injected byte source

Modes:
  - pattern: unbiased characters from the printable ASCII range (33-126) matching a
    single-character pattern
  - memorable: strict consonant/vowel alternation
  - passphrase: N memorable words of 3-7 letters, lengths rebalanced toward a target

Every builder appends iteratively, so long outputs and narrow alphabets never grow the stack.
"""
from __future__ import annotations

import re
from typing import List, Optional, Sequence

from passcraft.core.error_dialect import AlphabetExhaustedError, make_error
from passcraft.core.models import CharPredicate, PatternLike
from passcraft.core.password_entropy import (
    CONSONANTS,
    MAX_WORD_LENGTH,
    MIN_WORD_LENGTH,
    VOWELS,
    ends_with_consonant,
)
from passcraft.core.random_source import RandomBytes, secure_random_bytes
from passcraft.core.sampler import random_int

PRINTABLE_MIN = 33
PRINTABLE_MAX = 126


# ---------------- Pattern mode ----------------

def describe_pattern(pattern: PatternLike) -> str:
    if isinstance(pattern, re.Pattern):
        return f"/{pattern.pattern}/"
    if isinstance(pattern, str):
        return f"/{pattern}/"
    return getattr(pattern, "__name__", repr(pattern))


def compile_char_predicate(pattern: PatternLike) -> CharPredicate:
    if isinstance(pattern, str):
        try:
            pattern = re.compile(pattern)
        except re.error as exc:
            raise make_error(f"pattern is not a valid regular expression: {exc}") from exc
    if isinstance(pattern, re.Pattern):
        if not isinstance(pattern.pattern, str):
            raise TypeError("pattern must be a text regular expression, not bytes")
        compiled = pattern
        return lambda ch: compiled.search(ch) is not None
    if callable(pattern):
        return pattern
    raise TypeError("pattern must be a regular expression, regex string, or character predicate")


def build_valid_chars(pattern: PatternLike) -> List[str]:
    matches = compile_char_predicate(pattern)
    chars = [chr(code) for code in range(PRINTABLE_MIN, PRINTABLE_MAX + 1) if matches(chr(code))]
    if not chars:
        raise AlphabetExhaustedError(
            f"Could not find characters that match the password pattern {describe_pattern(pattern)}. "
            "Patterns must match individual characters, not the password as a whole."
        )
    return chars


def generate_pattern_password(
    length: int,
    valid_chars: Sequence[str],
    prefix: str = "",
    random_bytes: RandomBytes = secure_random_bytes,
) -> str:
    if not valid_chars:
        raise AlphabetExhaustedError("character set is empty")
    out = [prefix]
    size = len(prefix)
    while size < length:
        out.append(valid_chars[random_int(0, len(valid_chars), random_bytes)])
        size += 1
    return "".join(out)


# ---------------- Memorable mode ----------------

def build_memorable(
    length: int,
    starts_with_vowel: bool,
    random_bytes: RandomBytes = secure_random_bytes,
) -> str:
    out = []
    expects_vowel = starts_with_vowel
    for _ in range(max(0, length)):
        alphabet = VOWELS if expects_vowel else CONSONANTS
        out.append(alphabet[random_int(0, len(alphabet), random_bytes)])
        expects_vowel = not expects_vowel
    return "".join(out)


def generate_memorable_password(
    length: int,
    prefix: str = "",
    random_bytes: RandomBytes = secure_random_bytes,
) -> str:
    remaining = max(0, length - len(prefix))
    return prefix + build_memorable(remaining, ends_with_consonant(prefix), random_bytes)


# ---------------- Passphrase mode ----------------

def build_word_lengths(
    count: int,
    random_bytes: RandomBytes = secure_random_bytes,
    target_length: Optional[int] = None,
) -> List[int]:
    """Draw per-word lengths in [3, 7], then grow random words until ``target_length`` is met."""
    lengths = [random_int(MIN_WORD_LENGTH, MAX_WORD_LENGTH + 1, random_bytes) for _ in range(count)]
    total = sum(lengths)

    if target_length is not None and total < target_length:
        adjustable = [idx for idx, n in enumerate(lengths) if n < MAX_WORD_LENGTH]
        remaining = target_length - total
        while remaining > 0 and adjustable:
            pick = random_int(0, len(adjustable), random_bytes)
            word_idx = adjustable[pick]
            lengths[word_idx] += 1
            remaining -= 1
            if lengths[word_idx] >= MAX_WORD_LENGTH:
                del adjustable[pick]
    return lengths


def generate_passphrase(
    word_count: int,
    random_bytes: RandomBytes = secure_random_bytes,
    target_length: Optional[int] = None,
    delim: str = " ",
) -> str:
    lengths = build_word_lengths(word_count, random_bytes, target_length)
    # Each word restarts the chain, so it opens with a consonant.
    return delim.join(build_memorable(n, False, random_bytes) for n in lengths)
