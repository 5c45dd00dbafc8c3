"""Assistant-specific bundle layouts."""

from __future__ import annotations

from dataclasses import dataclass

MODE_INLINE = "inline"
MODE_LINKED = "linked"
ALLOWED_MODES = frozenset({MODE_INLINE, MODE_LINKED})
DEFAULT_MODE = MODE_INLINE


@dataclass(frozen=True, slots=True)
class BundleTarget:
    name: str
    label: str
    main_file: str
    support_dir: str


TARGETS: dict[str, BundleTarget] = {
    "claude": BundleTarget("claude", "Claude", "CLAUDE.md", ".claude/guidelines"),
    "agents": BundleTarget("agents", "AGENTS.md-compatible agents", "AGENTS.md", ".agents/guidelines"),
    "cursor": BundleTarget("cursor", "Cursor", ".cursorrules", ".cursor/guidelines"),
    "copilot": BundleTarget(
        "copilot",
        "GitHub Copilot",
        ".github/copilot-instructions.md",
        ".github/guidelines",
    ),
}
ALLOWED_TARGETS = frozenset(TARGETS)
DEFAULT_TARGET = "claude"


def get_target(name: str) -> BundleTarget:
    normalized = name.strip().lower()
    target = TARGETS.get(normalized)
    if target is None:
        raise ValueError(f"Unknown target '{name}'. Allowed values: {sorted(ALLOWED_TARGETS)}.")
    return target
