from __future__ import annotations

from dataclasses import dataclass
import math
import re
from typing import Callable, Optional, Union

from passcraft.core.random_source import Seed

DEFAULT_LENGTH = 12
DEFAULT_PATTERN: re.Pattern[str] = re.compile(r"\w")

CharPredicate = Callable[[str], bool]
PatternLike = Union[re.Pattern[str], str, CharPredicate]

MODE_PATTERN = "pattern"
MODE_MEMORABLE = "memorable"
MODE_PASSPHRASE = "passphrase"


@dataclass(frozen=True)
class GenerationRequest:
    length: int = DEFAULT_LENGTH
    memorable: bool = False
    pattern: PatternLike = DEFAULT_PATTERN
    prefix: str = ""
    ignore_security_recommendations: bool = False
    entropy_seed: Optional[Seed] = None
    words: Optional[int] = None

    @property
    def mode(self) -> str:
        if self.words is not None:
            return MODE_PASSPHRASE
        if self.memorable:
            return MODE_MEMORABLE
        return MODE_PATTERN


@dataclass(frozen=True)
class GenerationResult:
    value: str
    mode: str
    estimated_entropy_bits: float = 0.0
    quality: str = ""

    def as_line(self, show_meta: bool = False) -> str:
        if not show_meta:
            return self.value

        bits_value = self.estimated_entropy_bits
        if math.isfinite(bits_value):
            rounded = round(bits_value, 3)
            if rounded.is_integer():
                bits_text = str(int(rounded))
            else:
                bits_text = f"{rounded:.3f}".rstrip("0").rstrip(".")
        else:
            bits_text = "unknown"

        meta = f"[entropy={bits_text} bits"
        if self.quality:
            meta += f" quality={self.quality}"
        meta += "]"
        return f"{self.value}\t{meta}"
