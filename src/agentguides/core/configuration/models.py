"""Dataclasses describing persisted CLI configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CLIConfig:
    verbosity: str | None = None
    default_target: str | None = None
    default_mode: str | None = None
