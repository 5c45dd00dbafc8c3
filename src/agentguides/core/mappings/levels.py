"""Instruction-detail tiers used to size a bundle."""

from __future__ import annotations

LEVEL_BASIC = "basic"
LEVEL_STANDARD = "standard"
LEVEL_EXPERT = "expert"
LEVEL_FULL = "full"

LEVEL_ORDER: tuple[str, ...] = (LEVEL_BASIC, LEVEL_STANDARD, LEVEL_EXPERT, LEVEL_FULL)
ALLOWED_LEVELS = frozenset(LEVEL_ORDER)
DEFAULT_LEVEL = LEVEL_STANDARD


def level_includes(requested: str, declared: tuple[str, ...]) -> bool:
    """
    Return True when a guideline declared for ``declared`` tiers belongs in a ``requested`` bundle.

    An empty declaration means every tier. ``full`` always includes everything.
    """
    if requested == LEVEL_FULL or not declared:
        return True
    return requested in declared
