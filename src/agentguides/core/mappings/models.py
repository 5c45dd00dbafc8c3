"""Records produced from ``guideline-mappings.yml``."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from .errors import UnknownGuidelineError


@dataclass(frozen=True, slots=True)
class Guideline:
    id: str
    path: str
    category: str
    title: str | None = None
    description: str | None = None
    languages: tuple[str, ...] = ()
    levels: tuple[str, ...] = ()
    architectures: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    @property
    def display_title(self) -> str:
        if self.title:
            return self.title
        return self.id.replace("-", " ").replace("_", " ").title()


@dataclass(frozen=True, slots=True)
class MappingIssue:
    severity: Literal["warning", "error"]
    message: str
    guideline_id: str | None = None


@dataclass(frozen=True, slots=True)
class MappingIndex:
    source_path: Path
    content_root: Path
    guidelines: tuple[Guideline, ...]
    categories: tuple[str, ...]
    issues: tuple[MappingIssue, ...] = ()
    _by_id: dict[str, Guideline] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self._by_id:
            self._by_id.update({guideline.id: guideline for guideline in self.guidelines})

    def __len__(self) -> int:
        return len(self.guidelines)

    def __contains__(self, guideline_id: object) -> bool:
        return guideline_id in self._by_id

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(guideline.id for guideline in self.guidelines)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warning_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "warning")

    def get(self, guideline_id: str) -> Guideline | None:
        return self._by_id.get(guideline_id)

    def require(self, guideline_id: str) -> Guideline:
        guideline = self._by_id.get(guideline_id)
        if guideline is None:
            raise UnknownGuidelineError(guideline_id, self._by_id)
        return guideline

    def resolve_path(self, guideline: Guideline) -> Path:
        return (self.content_root / guideline.path).resolve()
