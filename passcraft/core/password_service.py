from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Optional, Union

from passcraft.core import password_engine as engine
from passcraft.core.error_dialect import SecurityRecommendationError, make_error
from passcraft.core.models import (
    DEFAULT_LENGTH,
    DEFAULT_PATTERN,
    MODE_MEMORABLE,
    MODE_PASSPHRASE,
    MODE_PATTERN,
    GenerationRequest,
    GenerationResult,
    PatternLike,
)
from passcraft.core.password_entropy import (
    MAX_WORD_LENGTH,
    MIN_ENTROPY_BITS,
    MIN_WORD_LENGTH,
    estimate_memorable_entropy,
    estimate_passphrase_entropy,
    estimate_pattern_entropy,
    minimum_memorable_length,
    quality_from_entropy_bits,
    recommended_word_count,
)
from passcraft.core.random_source import RandomBytes, resolve_random_bytes
from passcraft.core.request_adapters import build_generation_request

MAX_SAFE_INTEGER = 2**53 - 1
_OVERRIDE_HINT = "To override, pass ignore_security_recommendations=True."

Options = Union[GenerationRequest, Mapping[str, Any], None]


def _require_safe_int(value: object, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or abs(value) > MAX_SAFE_INTEGER:
        raise make_error(f"{field} must be a safe integer")
    return value


def _require_bool(value: object, field: str) -> bool:
    if not isinstance(value, bool):
        raise make_error(f"{field} must be a boolean")
    return value


def _validate_request(request: GenerationRequest) -> None:
    _require_bool(request.memorable, "memorable")
    _require_bool(request.ignore_security_recommendations, "ignore_security_recommendations")
    length = _require_safe_int(request.length, "length")
    if length < 0:
        raise make_error("length must be a non-negative integer")
    if not isinstance(request.prefix, str):
        raise TypeError("prefix must be a string")
    engine.compile_char_predicate(request.pattern)
    if request.words is not None:
        words = _require_safe_int(request.words, "words")
        if words <= 0:
            raise make_error("words must be a positive integer")
        if request.prefix != "":
            raise make_error("prefix is not supported when words are enabled")


def _security_error(entropy_bits: float, recommendation: str) -> SecurityRecommendationError:
    message = (
        f"Security recommendation: estimated entropy {entropy_bits:.1f} bits is below "
        f"{MIN_ENTROPY_BITS} bits. {recommendation} {_OVERRIDE_HINT}"
    )
    return SecurityRecommendationError(message, entropy_bits=entropy_bits, recommendation=recommendation)


def _enforce_passphrase_floor(words: int) -> None:
    target = minimum_memorable_length()
    if words * MAX_WORD_LENGTH >= target:
        return
    recommended = recommended_word_count()
    recommendation = f"Use words >= {recommended}."
    raise SecurityRecommendationError(
        f"Security recommendation: word count {words} cannot reach {MIN_ENTROPY_BITS} bits with "
        f"{MIN_WORD_LENGTH}-{MAX_WORD_LENGTH} letter words. {recommendation} {_OVERRIDE_HINT}",
        entropy_bits=estimate_passphrase_entropy([MAX_WORD_LENGTH] * words),
        recommendation=recommendation,
    )


def _generate_passphrase(request: GenerationRequest, random_bytes: RandomBytes) -> GenerationResult:
    words = request.words
    assert words is not None
    target_length: Optional[int] = None
    if not request.ignore_security_recommendations:
        _enforce_passphrase_floor(words)
        target_length = minimum_memorable_length()
    value = engine.generate_passphrase(words, random_bytes, target_length)
    bits = estimate_passphrase_entropy(len(word) for word in value.split(" "))
    return GenerationResult(
        value=value,
        mode=MODE_PASSPHRASE,
        estimated_entropy_bits=bits,
        quality=quality_from_entropy_bits(bits),
    )


def _generate_memorable(request: GenerationRequest, random_bytes: RandomBytes) -> GenerationResult:
    estimate = estimate_memorable_entropy(request.length, request.prefix)
    if not request.ignore_security_recommendations and not estimate.meets_floor:
        raise _security_error(
            estimate.entropy_bits,
            f"Use length >= {estimate.recommended_length} or set memorable=False.",
        )
    value = engine.generate_memorable_password(request.length, request.prefix, random_bytes)
    return GenerationResult(
        value=value,
        mode=MODE_MEMORABLE,
        estimated_entropy_bits=estimate.entropy_bits,
        quality=quality_from_entropy_bits(estimate.entropy_bits),
    )


def _generate_pattern(request: GenerationRequest, random_bytes: RandomBytes) -> GenerationResult:
    valid_chars = engine.build_valid_chars(request.pattern)
    estimate = estimate_pattern_entropy(len(valid_chars), request.length, len(request.prefix))
    if not request.ignore_security_recommendations and not estimate.meets_floor:
        if estimate.recommended_length is None:
            recommendation = "Use a broader pattern to increase the character set."
        else:
            recommendation = f"Use length >= {estimate.recommended_length} or broaden the pattern."
        raise _security_error(estimate.entropy_bits, recommendation)
    value = engine.generate_pattern_password(request.length, valid_chars, request.prefix, random_bytes)
    return GenerationResult(
        value=value,
        mode=MODE_PATTERN,
        estimated_entropy_bits=estimate.entropy_bits,
        quality=quality_from_entropy_bits(estimate.entropy_bits),
    )


def generate_result(request: GenerationRequest, random_bytes: Optional[RandomBytes] = None) -> GenerationResult:
    """Validate ``request``, apply the entropy floor, and generate one value.

    ``random_bytes`` overrides the byte source; by default the OS CSPRNG is used,
    or an HMAC counter stream when ``request.entropy_seed`` is set.
    """
    _validate_request(request)
    if random_bytes is None:
        random_bytes = resolve_random_bytes(request.entropy_seed)

    if request.mode == MODE_PASSPHRASE:
        return _generate_passphrase(request, random_bytes)
    if request.mode == MODE_MEMORABLE:
        return _generate_memorable(request, random_bytes)
    return _generate_pattern(request, random_bytes)


def _coerce_request(options: Options, overrides: Mapping[str, Any]) -> GenerationRequest:
    if options is None:
        return build_generation_request(dict(overrides))
    if isinstance(options, GenerationRequest):
        if not overrides:
            return options
        unknown = sorted(set(overrides) - set(GenerationRequest.__dataclass_fields__))
        if unknown:
            raise make_error(f"generation options have unknown fields: {', '.join(unknown)}")
        return replace(options, **overrides)
    if isinstance(options, Mapping):
        return build_generation_request({**options, **overrides})
    raise TypeError("options must be a GenerationRequest or a mapping")


def generate_with_options(
    options: Options = None,
    /,
    *,
    random_bytes: Optional[RandomBytes] = None,
    **fields: Any,
) -> str:
    request = _coerce_request(options, fields)
    return generate_result(request, random_bytes).value


def generate(
    length: int = DEFAULT_LENGTH,
    memorable: bool = False,
    pattern: Optional[PatternLike] = None,
    prefix: str = "",
) -> str:
    request = GenerationRequest(
        length=length,
        memorable=memorable,
        pattern=DEFAULT_PATTERN if pattern is None else pattern,
        prefix=prefix,
    )
    return generate_result(request).value
