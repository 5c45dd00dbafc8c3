"""Runtime context shared by CLI commands."""

from __future__ import annotations

from dataclasses import dataclass, field

from rich.console import Console

from agentguides.core.configuration import ConfigManager


@dataclass
class CliContext:
    console: Console = field(default_factory=Console)
    config_manager: ConfigManager | None = None
