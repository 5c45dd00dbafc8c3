"""Conversion between ``CLIConfig`` and its TOML payload."""

from __future__ import annotations

from typing import Any

from .models import CLIConfig
from .utils import normalize_verbosity_label


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_choice(value: Any) -> str | None:
    text = _optional_str(value)
    return text.lower() if text else None


def config_from_dict(payload: dict[str, Any]) -> CLIConfig:
    general = payload.get("general", {})
    if not isinstance(general, dict):
        general = {}
    build = payload.get("build", {})
    if not isinstance(build, dict):
        build = {}
    return CLIConfig(
        verbosity=normalize_verbosity_label(_optional_str(general.get("verbosity"))),
        default_target=_optional_choice(build.get("target")),
        default_mode=_optional_choice(build.get("mode")),
    )


def config_to_dict(config: CLIConfig) -> dict[str, Any]:
    # tomli_w cannot serialize None, so unset values are omitted.
    general: dict[str, Any] = {}
    if config.verbosity:
        general["verbosity"] = config.verbosity

    build: dict[str, Any] = {}
    if config.default_target:
        build["target"] = config.default_target
    if config.default_mode:
        build["mode"] = config.default_mode

    payload: dict[str, Any] = {}
    if general:
        payload["general"] = general
    if build:
        payload["build"] = build
    return payload
