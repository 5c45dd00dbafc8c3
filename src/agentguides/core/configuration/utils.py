"""Normalization helpers shared by configuration services."""

from __future__ import annotations

from .constants import VERBOSITY_PRESETS


def normalize_verbosity_label(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if not normalized:
        return None
    return normalized if normalized in VERBOSITY_PRESETS else None


def normalize_choice(value: object, allowed: frozenset[str], *, field_name: str) -> str | None:
    """Lower-case ``value`` and ensure it is one of ``allowed``."""

    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Field '{field_name}' must be a string.")
    normalized = value.strip().lower()
    if not normalized:
        return None
    if normalized not in allowed:
        raise ValueError(f"Invalid {field_name} '{value}'. Allowed values: {sorted(allowed)}.")
    return normalized
