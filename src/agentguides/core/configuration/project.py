"""Per-project build settings stored in ``.agentguides.toml``."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import tomli_w

from agentguides.core.bundle.targets import ALLOWED_MODES, ALLOWED_TARGETS, DEFAULT_MODE, DEFAULT_TARGET
from agentguides.core.mappings.levels import ALLOWED_LEVELS, DEFAULT_LEVEL
from agentguides.core.mappings.loader import normalize_str_list
from agentguides.core.utils.file_writes import atomic_write_text

from .constants import DEFAULT_MAPPINGS_FILENAME, PROJECT_CONFIG_FILENAME
from .utils import normalize_choice

LIST_SETTINGS = ("languages", "architectures", "tags", "categories", "include", "exclude", "ignore")


@dataclass
class ProjectSettings:
    mappings: str = DEFAULT_MAPPINGS_FILENAME
    target: str = DEFAULT_TARGET
    mode: str = DEFAULT_MODE
    level: str = DEFAULT_LEVEL
    output: str = "."
    languages: list[str] = field(default_factory=list)
    architectures: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    include: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    ignore: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, list) and not value:
                continue
            payload[item.name] = value
        return {"build": payload}


def project_config_path(root: Path) -> Path:
    return root / PROJECT_CONFIG_FILENAME


def _ensure_str_list(value: Any, *, field_name: str) -> list[str]:
    if value is None:
        return []
    if field_name in ("include", "exclude", "ignore"):
        # Ids and glob patterns are case sensitive.
        if isinstance(value, str):
            return [value.strip()] if value.strip() else []
        if isinstance(value, list):
            return [str(item).strip() for item in value if str(item).strip()]
        raise ValueError(f"Field '{field_name}' must be a list of strings.")
    if not isinstance(value, (str, list)):
        raise ValueError(f"Field '{field_name}' must be a list of strings.")
    return list(normalize_str_list(value))


def settings_from_dict(payload: dict[str, Any]) -> ProjectSettings:
    build = payload.get("build", {})
    if not isinstance(build, dict):
        raise ValueError("Section [build] must be a table.")

    settings = ProjectSettings()
    if build.get("mappings"):
        settings.mappings = str(build["mappings"]).strip()
    if build.get("output"):
        settings.output = str(build["output"]).strip()
    settings.target = normalize_choice(build.get("target"), ALLOWED_TARGETS, field_name="target") or DEFAULT_TARGET
    settings.mode = normalize_choice(build.get("mode"), ALLOWED_MODES, field_name="mode") or DEFAULT_MODE
    settings.level = normalize_choice(build.get("level"), ALLOWED_LEVELS, field_name="level") or DEFAULT_LEVEL
    for name in LIST_SETTINGS:
        setattr(settings, name, _ensure_str_list(build.get(name), field_name=name))
    return settings


def load_project_config(root: Path) -> ProjectSettings:
    """Read ``.agentguides.toml`` under ``root``; a missing file yields defaults."""

    path = project_config_path(root)
    if not path.exists():
        return ProjectSettings()
    try:
        with path.open("rb") as handle:
            payload = tomllib.load(handle)
    except tomllib.TOMLDecodeError as error:
        raise ValueError(f"Invalid TOML in {path.name}: {error}") from error
    return settings_from_dict(payload)


def validate_project_settings(settings: ProjectSettings) -> ProjectSettings:
    """Return a normalized copy of ``settings``; invalid choices raise ``ValueError``."""

    return settings_from_dict(settings.to_dict())


def init_project_config(root: Path, settings: ProjectSettings, *, force: bool = False) -> Path:
    """Write ``settings`` to ``.agentguides.toml``; refuses to overwrite unless ``force``."""

    if not root.exists():
        raise FileNotFoundError(f"Project root does not exist: {root}")
    path = project_config_path(root)
    if path.exists() and not force:
        raise FileExistsError(f"{path.name} already exists; rerun with --force to overwrite.")
    validated = validate_project_settings(settings)
    atomic_write_text(path, tomli_w.dumps(validated.to_dict()))
    return path
