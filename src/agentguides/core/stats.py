"""Corpus statistics and orphan detection for a guideline mapping."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from pathspec import PathSpec

from agentguides.core.mappings.levels import LEVEL_ORDER, level_includes
from agentguides.core.mappings.models import MappingIndex
from agentguides.core.utils.constants import MARKDOWN_SUFFIXES, ORPHAN_SCAN_ALWAYS_IGNORED

AGNOSTIC_KEY = "(any)"


@dataclass(frozen=True, slots=True)
class GuidelineStats:
    total: int
    by_category: dict[str, int]
    by_language: dict[str, int]
    by_level: dict[str, int]
    by_architecture: dict[str, int]
    by_tag: dict[str, int]
    missing_files: tuple[str, ...]
    error_count: int
    warning_count: int


def _count(values: Iterable[tuple[str, ...]]) -> dict[str, int]:
    counter: Counter[str] = Counter()
    for declared in values:
        if not declared:
            counter[AGNOSTIC_KEY] += 1
            continue
        counter.update(declared)
    return dict(sorted(counter.items(), key=lambda item: (-item[1], item[0])))


def compute_stats(index: MappingIndex) -> GuidelineStats:
    by_category = {category: 0 for category in index.categories}
    for guideline in index.guidelines:
        by_category[guideline.category] = by_category.get(guideline.category, 0) + 1

    # Each tier counts what a build at that tier would select.
    by_level = {
        level: sum(1 for guideline in index.guidelines if level_includes(level, guideline.levels))
        for level in LEVEL_ORDER
    }

    missing = tuple(
        guideline.id for guideline in index.guidelines if not index.resolve_path(guideline).is_file()
    )

    return GuidelineStats(
        total=len(index),
        by_category=by_category,
        by_language=_count(guideline.languages for guideline in index.guidelines),
        by_level=by_level,
        by_architecture=_count(guideline.architectures for guideline in index.guidelines),
        by_tag=_count(guideline.tags for guideline in index.guidelines),
        missing_files=missing,
        error_count=index.error_count,
        warning_count=index.warning_count,
    )


def find_orphan_guidelines(index: MappingIndex, *, ignore_patterns: Iterable[str] = ()) -> tuple[str, ...]:
    """Return markdown files under the content root that no mapping entry references."""

    root = index.content_root
    if not root.is_dir():
        return ()

    spec = PathSpec.from_lines("gitwildmatch", [*ORPHAN_SCAN_ALWAYS_IGNORED, *ignore_patterns])
    referenced = {index.resolve_path(guideline) for guideline in index.guidelines}
    orphans: list[str] = []
    for candidate in sorted(root.rglob("*")):
        if not candidate.is_file() or candidate.suffix.lower() not in MARKDOWN_SUFFIXES:
            continue
        relative = candidate.relative_to(root).as_posix()
        if any(part.startswith(".") for part in Path(relative).parts):
            continue
        if spec.match_file(relative):
            continue
        if candidate.resolve() == index.source_path or candidate.resolve() in referenced:
            continue
        orphans.append(relative)
    return tuple(orphans)
