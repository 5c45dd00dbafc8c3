from __future__ import annotations

import logging
from pathlib import Path

from agentguides.core.configuration import CLIConfig, ConfigManager
from agentguides.core.configuration.environment import EnvironmentManager
from agentguides.core.configuration.repository import TomlConfigRepository
from agentguides.core.configuration.serde import config_from_dict, config_to_dict


def test_environment_overrides_configured_verbosity() -> None:
    environment = EnvironmentManager({"AGENTGUIDES_LOG_LEVEL": "Verbose"})

    assert environment.resolve_log_level(CLIConfig(verbosity="quiet")) == logging.DEBUG


def test_unknown_environment_value_falls_back_to_config() -> None:
    environment = EnvironmentManager({"AGENTGUIDES_LOG_LEVEL": "loud"})

    assert environment.resolve_log_level(CLIConfig(verbosity="standard")) == logging.INFO
    assert environment.resolve_log_level(CLIConfig()) == logging.WARNING
    assert environment.resolve_log_level(CLIConfig(), default=logging.ERROR) == logging.ERROR


def test_serde_omits_unset_values() -> None:
    assert config_to_dict(CLIConfig()) == {}
    assert config_to_dict(CLIConfig(verbosity="verbose", default_target="cursor")) == {
        "general": {"verbosity": "verbose"},
        "build": {"target": "cursor"},
    }
    assert config_from_dict({"general": "oops", "build": {"mode": " linked "}}) == CLIConfig(default_mode="linked")


def test_manager_persists_verbosity(tmp_path: Path) -> None:
    repository = TomlConfigRepository(tmp_path / "nested" / "config.toml")
    manager = ConfigManager(repository=repository, environment=EnvironmentManager({}))

    manager.set_logging_verbosity("STANDARD")

    assert repository.path.exists()
    reloaded = ConfigManager(repository=repository, environment=EnvironmentManager({}))
    assert reloaded.get_logging_verbosity() == "standard"
    assert reloaded.resolve_log_level() == logging.INFO


def test_repository_defaults_when_file_missing(tmp_path: Path) -> None:
    repository = TomlConfigRepository(tmp_path / "config.toml")

    assert repository.load() == CLIConfig()
