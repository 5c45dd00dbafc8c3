"""Filter a ``MappingIndex`` down to the guidelines that belong in a bundle."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from agentguides.core.mappings.levels import ALLOWED_LEVELS, DEFAULT_LEVEL, level_includes
from agentguides.core.mappings.loader import normalize_str_list
from agentguides.core.mappings.models import Guideline, MappingIndex

logger = logging.getLogger(__name__)


def _normalize(values: Iterable[str] | None) -> tuple[str, ...]:
    if values is None:
        return ()
    return normalize_str_list(list(values))


@dataclass(frozen=True, slots=True)
class SelectionFilter:
    languages: tuple[str, ...] = ()
    level: str = DEFAULT_LEVEL
    architectures: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    include_ids: tuple[str, ...] = ()
    exclude_ids: tuple[str, ...] = ()

    @classmethod
    def create(
        cls,
        *,
        languages: Iterable[str] | None = None,
        level: str | None = None,
        architectures: Iterable[str] | None = None,
        tags: Iterable[str] | None = None,
        categories: Iterable[str] | None = None,
        include_ids: Iterable[str] | None = None,
        exclude_ids: Iterable[str] | None = None,
    ) -> SelectionFilter:
        normalized_level = (level or DEFAULT_LEVEL).strip().lower()
        if normalized_level not in ALLOWED_LEVELS:
            raise ValueError(f"Invalid level '{level}'. Allowed values: {sorted(ALLOWED_LEVELS)}.")
        return cls(
            languages=_normalize(languages),
            level=normalized_level,
            architectures=_normalize(architectures),
            tags=_normalize(tags),
            categories=_normalize(categories),
            # Ids keep their case; only whitespace is trimmed.
            include_ids=tuple(dict.fromkeys(item.strip() for item in include_ids or () if item.strip())),
            exclude_ids=tuple(dict.fromkeys(item.strip() for item in exclude_ids or () if item.strip())),
        )

    def describe(self) -> dict[str, Any]:
        """Return the active filters, omitting empty ones."""

        described: dict[str, Any] = {"level": self.level}
        for name in ("languages", "architectures", "tags", "categories", "include_ids", "exclude_ids"):
            value = getattr(self, name)
            if value:
                described[name] = list(value)
        return described


@dataclass(frozen=True, slots=True)
class SelectionResult:
    selection: SelectionFilter
    guidelines: tuple[Guideline, ...]
    excluded: dict[str, str] = field(default_factory=dict)

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(guideline.id for guideline in self.guidelines)

    def by_category(self) -> list[tuple[str, tuple[Guideline, ...]]]:
        grouped: dict[str, list[Guideline]] = {}
        for guideline in self.guidelines:
            grouped.setdefault(guideline.category, []).append(guideline)
        return [(category, tuple(items)) for category, items in grouped.items()]


def _overlaps(declared: tuple[str, ...], requested: tuple[str, ...]) -> bool:
    """An empty declaration is agnostic and matches any request."""

    if not requested or not declared:
        return True
    return any(value in declared for value in requested)


def exclusion_reason(guideline: Guideline, selection: SelectionFilter) -> str | None:
    """Return why ``guideline`` fails ``selection``, or None when it matches."""

    if not level_includes(selection.level, guideline.levels):
        return f"level '{selection.level}' not in {list(guideline.levels)}"
    if not _overlaps(guideline.languages, selection.languages):
        return f"languages {list(guideline.languages)} do not match {list(selection.languages)}"
    if not _overlaps(guideline.architectures, selection.architectures):
        return f"architectures {list(guideline.architectures)} do not match {list(selection.architectures)}"
    if selection.tags and not any(tag in guideline.tags for tag in selection.tags):
        return f"tags {list(guideline.tags)} do not match {list(selection.tags)}"
    if selection.categories and guideline.category not in selection.categories:
        return f"category '{guideline.category}' not selected"
    return None


def _ordered(index: MappingIndex, chosen: set[str]) -> tuple[Guideline, ...]:
    rank = {category: position for position, category in enumerate(index.categories)}
    declared = [guideline for guideline in index.guidelines if guideline.id in chosen]
    # sorted() is stable, so declaration order survives within a category.
    return tuple(sorted(declared, key=lambda guideline: rank.get(guideline.category, len(rank))))


def select_guidelines(index: MappingIndex, selection: SelectionFilter) -> SelectionResult:
    """
    Apply ``selection`` to ``index``.

    Forced includes bypass the filters and must name known ids; excludes
    always win, and unknown excludes are only logged. The result is grouped
    by category order and keeps declaration order within a category.
    """
    for guideline_id in selection.include_ids:
        index.require(guideline_id)
    for guideline_id in selection.exclude_ids:
        if guideline_id not in index:
            logger.warning("Ignoring unknown excluded guideline id '%s'", guideline_id)

    chosen: set[str] = set()
    excluded: dict[str, str] = {}
    forced = set(selection.include_ids)
    blocked = set(selection.exclude_ids)

    for guideline in index.guidelines:
        if guideline.id in blocked:
            excluded[guideline.id] = "excluded explicitly"
            continue
        if guideline.id in forced:
            chosen.add(guideline.id)
            continue
        reason = exclusion_reason(guideline, selection)
        if reason is None:
            chosen.add(guideline.id)
        else:
            excluded[guideline.id] = reason

    ordered = _ordered(index, chosen)
    logger.info("Selected %d of %d guideline(s)", len(ordered), len(index))
    for guideline_id, reason in excluded.items():
        logger.debug("Skipped %s: %s", guideline_id, reason)
    return SelectionResult(selection=selection, guidelines=ordered, excluded=excluded)


__all__ = [
    "SelectionFilter",
    "SelectionResult",
    "exclusion_reason",
    "select_guidelines",
]
