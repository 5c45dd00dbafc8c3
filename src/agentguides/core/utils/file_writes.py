"""Atomic, containment-checked file writes for generated artifacts."""

from __future__ import annotations

import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path

from .constants import BACKUP_TIMESTAMP_FORMAT


def atomic_write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    file_descriptor, temporary_path = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=path.parent,
    )
    try:
        with os.fdopen(file_descriptor, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temporary_path, path)
    finally:
        if os.path.exists(temporary_path):
            os.remove(temporary_path)


def assert_path_safe(destination: Path, *, target_directory: Path) -> None:
    """Reject destinations that are symlinked or resolve outside ``target_directory``."""

    resolved_target_directory = target_directory.resolve()
    try:
        relative_parts = destination.relative_to(target_directory).parts
    except ValueError as error:
        raise ValueError(f"Output path must stay inside target directory: {destination}") from error

    current = target_directory
    for part in relative_parts:
        current = current / part
        if current.is_symlink():
            raise ValueError(f"Symlinked output path is not allowed: {current}")

    if destination.exists():
        resolved_destination = destination.resolve()
    else:
        resolved_destination = destination.parent.resolve() / destination.name
    try:
        resolved_destination.relative_to(resolved_target_directory)
    except ValueError as error:
        raise ValueError(
            f"Output path escapes target directory: {destination} -> {resolved_destination}"
        ) from error


def backup_file(destination: Path) -> Path:
    if destination.is_symlink():
        raise ValueError(f"Symlinked output path is not allowed: {destination}")
    timestamp = datetime.now(UTC).strftime(BACKUP_TIMESTAMP_FORMAT)
    backup_path = destination.with_name(f"{destination.name}.bak.{timestamp}")
    suffix = 1
    while backup_path.exists():
        backup_path = destination.with_name(f"{destination.name}.bak.{timestamp}.{suffix}")
        suffix += 1
    atomic_write_text(backup_path, destination.read_text(encoding="utf-8"))
    return backup_path
