"""Password and passphrase generator with an entropy floor."""

from __future__ import annotations

from passcraft.core.error_dialect import (
    AlphabetExhaustedError,
    PassCraftError,
    SecurityRecommendationError,
)
from passcraft.core.models import GenerationRequest, GenerationResult
from passcraft.core.password_service import generate, generate_result, generate_with_options

__version__ = "1.0.0"

__all__ = [
    "AlphabetExhaustedError",
    "GenerationRequest",
    "GenerationResult",
    "PassCraftError",
    "SecurityRecommendationError",
    "generate",
    "generate_result",
    "generate_with_options",
]
