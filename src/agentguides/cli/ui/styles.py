"""Shared styling helpers for Questionary prompts."""

from __future__ import annotations

from typing import Any

import questionary
from questionary import Style

# Central style for all CLI Questionary prompts. Keeps the pointer and highlights
# branded while dimming the "any" choices.
CLI_STYLE = Style(
    [
        ("qmark", "fg:#00d1b2 bold"),
        ("question", "bold"),
        ("answer", "fg:#00d1b2 bold"),
        ("pointer", "fg:#00d1b2 bold"),
        ("highlighted", "fg:#00d1b2 bold"),
        ("selected", "fg:#00d1b2"),
        ("instruction", ""),
        ("text", ""),
        ("navigation", "fg:#888888 italic"),
        ("status.separator", "fg:#444444"),
        ("status.bracket", "fg:#666666"),
        ("status.value", "fg:#00d1b2"),
    ]
)


def navigation_choice(label: str, *, value: Any) -> questionary.Choice:
    """Return a dimmed choice (e.g. "Any language")."""

    tokens: list[tuple[str, str]] = [("class:navigation", label)]
    return questionary.Choice(tokens, value=value)


def value_choice(label: str, value_text: str, *, value: Any, checked: bool = False) -> questionary.Choice:
    """Return a choice showing a count or detail in accent color."""

    tokens: list[tuple[str, str]] = [
        ("class:text", label),
        ("class:status.separator", "  "),
        ("class:status.bracket", "["),
        ("class:status.value", value_text),
        ("class:status.bracket", "]"),
    ]
    return questionary.Choice(tokens, value=value, checked=checked)
