"""Materialize a ``BundlePlan`` on disk with drift-check and forced updates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from agentguides.core.utils.constants import MARKDOWN_SUFFIXES
from agentguides.core.utils.file_writes import assert_path_safe, atomic_write_text, backup_file

from .assembler import BundlePlan, artifact_destination

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BundleWriteResult:
    ok: bool
    changed: bool
    messages: tuple[str, ...]
    written: tuple[Path, ...] = ()


def _stale_support_files(plan: BundlePlan, output_dir: Path) -> list[tuple[Path, str]]:
    """Markdown files under the target's support directory that the plan no longer produces."""

    support_root = output_dir.joinpath(*plan.target.support_dir.split("/"))
    if support_root.is_symlink() or not support_root.is_dir():
        return []
    planned = {artifact.relative_path for artifact in plan.artifacts}
    stale: list[tuple[Path, str]] = []
    for candidate in sorted(support_root.rglob("*")):
        if candidate.is_symlink() or not candidate.is_file():
            continue
        if candidate.suffix.lower() not in MARKDOWN_SUFFIXES:
            continue
        relative_path = candidate.relative_to(output_dir).as_posix()
        if relative_path not in planned:
            stale.append((candidate, relative_path))
    return stale


def write_bundle(
    plan: BundlePlan,
    output_dir: Path,
    *,
    check: bool = False,
    force: bool = False,
) -> BundleWriteResult:
    """
    Write ``plan`` under ``output_dir``.

    Missing artifacts are created. Differing files are kept unless ``force``
    is set, in which case they are backed up first. Markdown files left in
    the support directory by earlier builds are stale: ``force`` backs them
    up and removes them. ``check`` never writes and reports drift through ``ok``.
    """
    if check and force:
        raise ValueError("Cannot combine check and force modes.")
    if not output_dir.exists():
        if check:
            return BundleWriteResult(
                ok=False,
                changed=False,
                messages=tuple(f"Missing {artifact.relative_path}" for artifact in plan.artifacts),
            )
        output_dir.mkdir(parents=True, exist_ok=True)
    if not output_dir.is_dir():
        raise NotADirectoryError(f"Output path is not a directory: {output_dir}")

    destinations = [(artifact_destination(output_dir, artifact), artifact) for artifact in plan.artifacts]
    for destination, _ in destinations:
        assert_path_safe(destination, target_directory=output_dir)

    messages: list[str] = []
    written: list[Path] = []
    changed = False
    drift_detected = False

    for destination, artifact in destinations:
        relative_path = artifact.relative_path

        if not destination.exists():
            if check:
                drift_detected = True
                messages.append(f"Missing {relative_path}")
                continue
            atomic_write_text(destination, artifact.content)
            changed = True
            written.append(destination)
            messages.append(f"Created {relative_path}")
            continue

        if not destination.is_file():
            raise IsADirectoryError(f"Destination exists but is not a file: {destination}")

        current_content = destination.read_text(encoding="utf-8")
        if current_content == artifact.content:
            messages.append(f"Up-to-date {relative_path}")
            continue

        if check:
            drift_detected = True
            messages.append(f"Outdated {relative_path}")
            continue

        if not force:
            messages.append(f"Outdated {relative_path} (kept existing file; run with --force to update)")
            continue

        backup_path = backup_file(destination)
        atomic_write_text(destination, artifact.content)
        changed = True
        written.append(destination)
        backup_relative = backup_path.relative_to(output_dir).as_posix()
        messages.append(f"Updated {relative_path} (backup: {backup_relative})")

    for stale_path, relative_path in _stale_support_files(plan, output_dir):
        if check:
            drift_detected = True
            messages.append(f"Stale {relative_path}")
            continue
        if not force:
            messages.append(f"Stale {relative_path} (kept existing file; run with --force to remove)")
            continue
        assert_path_safe(stale_path, target_directory=output_dir)
        backup_path = backup_file(stale_path)
        stale_path.unlink()
        changed = True
        backup_relative = backup_path.relative_to(output_dir).as_posix()
        messages.append(f"Removed {relative_path} (backup: {backup_relative})")

    logger.debug("Bundle write finished: changed=%s drift=%s", changed, drift_detected)
    return BundleWriteResult(
        ok=not drift_detected,
        changed=changed,
        messages=tuple(messages),
        written=tuple(written),
    )
