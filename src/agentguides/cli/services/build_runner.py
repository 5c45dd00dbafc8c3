"""Resolve build settings and drive the select → assemble → write pipeline."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from pathlib import Path

from agentguides.core.bundle import (
    BundlePlan,
    BundleWriteResult,
    assemble_bundle,
    get_target,
    write_bundle,
)
from agentguides.core.configuration.models import CLIConfig
from agentguides.core.configuration.project import ProjectSettings, load_project_config, project_config_path
from agentguides.core.mappings import MappingIndex, load_guideline_mappings
from agentguides.core.selection import SelectionFilter, SelectionResult, select_guidelines

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BuildOverrides:
    """Values passed on the command line; ``None``/empty means "not given"."""

    mappings: Path | None = None
    target: str | None = None
    mode: str | None = None
    level: str | None = None
    output: Path | None = None
    languages: Sequence[str] = ()
    architectures: Sequence[str] = ()
    tags: Sequence[str] = ()
    categories: Sequence[str] = ()
    include: Sequence[str] = ()
    exclude: Sequence[str] = ()


@dataclass(frozen=True, slots=True)
class BuildOutcome:
    index: MappingIndex
    selection: SelectionResult
    plan: BundlePlan
    output_dir: Path
    write_result: BundleWriteResult | None


def _resolve_path(root: Path, value: Path) -> Path:
    return value.resolve() if value.is_absolute() else (root / value).resolve()


def resolve_settings(
    root: Path,
    overrides: BuildOverrides,
    *,
    user_config: CLIConfig | None = None,
) -> ProjectSettings:
    """Merge command-line overrides over ``.agentguides.toml`` over user defaults."""

    settings = load_project_config(root)
    project_file_exists = project_config_path(root).exists()
    if user_config is not None and not project_file_exists:
        if user_config.default_target:
            settings.target = user_config.default_target
        if user_config.default_mode:
            settings.mode = user_config.default_mode

    scalar_updates: dict[str, str] = {}
    if overrides.mappings is not None:
        scalar_updates["mappings"] = overrides.mappings.as_posix()
    if overrides.output is not None:
        scalar_updates["output"] = overrides.output.as_posix()
    for name in ("target", "mode", "level"):
        value = getattr(overrides, name)
        if value:
            scalar_updates[name] = value.strip().lower()

    list_updates = {
        name: list(getattr(overrides, name))
        for name in ("languages", "architectures", "tags", "categories", "include", "exclude")
        if getattr(overrides, name)
    }
    return replace(settings, **scalar_updates, **list_updates)


def load_index(root: Path, settings: ProjectSettings) -> MappingIndex:
    return load_guideline_mappings(_resolve_path(root, Path(settings.mappings)))


def select_from_settings(index: MappingIndex, settings: ProjectSettings) -> SelectionResult:
    selection = SelectionFilter.create(
        languages=settings.languages,
        level=settings.level,
        architectures=settings.architectures,
        tags=settings.tags,
        categories=settings.categories,
        include_ids=settings.include,
        exclude_ids=settings.exclude,
    )
    return select_guidelines(index, selection)


def run_build(
    root: Path,
    settings: ProjectSettings,
    *,
    check: bool = False,
    force: bool = False,
    dry_run: bool = False,
    include_timestamp: bool = False,
) -> BuildOutcome:
    """
    Load the mapping, select guidelines, assemble the bundle and write it.

    Mapping errors abort the build before anything is written. ``dry_run``
    assembles the bundle without touching the filesystem.
    """
    index = load_index(root, settings)
    if index.error_count:
        raise ValueError(
            f"{index.source_path.name} has {index.error_count} error(s); run `agentguides validate` for details."
        )

    target = get_target(settings.target)
    selection = select_from_settings(index, settings)
    plan = assemble_bundle(
        index,
        selection,
        target=target,
        mode=settings.mode,
        include_timestamp=include_timestamp,
    )
    output_dir = _resolve_path(root, Path(settings.output))

    if dry_run:
        logger.info("Dry run: skipping writes to %s", output_dir)
        return BuildOutcome(index, selection, plan, output_dir, None)

    write_result = write_bundle(plan, output_dir, check=check, force=force)
    return BuildOutcome(index, selection, plan, output_dir, write_result)
