from __future__ import annotations

from dataclasses import fields
from typing import Any, Mapping

from passcraft.core.error_dialect import make_error
from passcraft.core.models import DEFAULT_LENGTH, DEFAULT_PATTERN, GenerationRequest


def _allowed_field_names(model_type: type[Any]) -> set[str]:
    return {field.name for field in fields(model_type)}


_REQUEST_FIELDS = _allowed_field_names(GenerationRequest)


def _ensure_object(payload: Mapping[str, Any] | Any, label: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise make_error(f"{label} options must be a mapping")
    return payload


def _reject_unknown_fields(payload: Mapping[str, Any], allowed: set[str], label: str) -> None:
    unknown = sorted(str(key) for key in set(payload.keys()) - allowed)
    if unknown:
        raise make_error(f"{label} options have unknown fields: {', '.join(unknown)}")


def _parse_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise make_error(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise make_error(f"{field} must be an integer")
        try:
            return int(raw)
        except ValueError as exc:
            raise make_error(f"{field} must be an integer") from exc
    raise make_error(f"{field} must be an integer")


def _parse_optional_int(value: Any, field: str) -> int | None:
    if value is None:
        return None
    return _parse_int(value, field)


def _parse_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise make_error(f"{field} must be a boolean")


def _parse_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise make_error(f"{field} must be a string")
    return value


def build_generation_request(payload: Mapping[str, Any] | Any) -> GenerationRequest:
    data = _ensure_object(payload, "generation")
    _reject_unknown_fields(data, _REQUEST_FIELDS, "generation")

    pattern = data.get("pattern")
    return GenerationRequest(
        length=_parse_int(data.get("length", DEFAULT_LENGTH), "length"),
        memorable=_parse_bool(data.get("memorable", False), "memorable"),
        pattern=DEFAULT_PATTERN if pattern is None else pattern,
        prefix=_parse_str(data.get("prefix", ""), "prefix"),
        ignore_security_recommendations=_parse_bool(
            data.get("ignore_security_recommendations", False),
            "ignore_security_recommendations",
        ),
        entropy_seed=data.get("entropy_seed"),
        words=_parse_optional_int(data.get("words"), "words"),
    )
