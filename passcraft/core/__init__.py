"""Core generation engine, entropy policy, models, and service API for passcraft."""

from __future__ import annotations


def generate(*args, **kwargs):
    from passcraft.core.password_service import generate as _generate

    return _generate(*args, **kwargs)


def generate_with_options(*args, **kwargs):
    from passcraft.core.password_service import generate_with_options as _generate_with_options

    return _generate_with_options(*args, **kwargs)


__all__ = ["generate", "generate_with_options"]
