"""Prepare configuration, environment and logging before a command runs."""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console

from agentguides.core.configuration import get_config_manager
from agentguides.logging_setup import configure_logging

from .context import CliContext


def _load_env_files() -> None:
    env_path = Path(".env")
    if env_path.exists():
        load_dotenv(env_path)


def bootstrap_runtime() -> CliContext:
    _load_env_files()
    config_manager = get_config_manager()
    configure_logging(config_manager.resolve_log_level())
    return CliContext(console=Console(), config_manager=config_manager)
