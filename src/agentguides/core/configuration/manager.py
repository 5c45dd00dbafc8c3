"""High-level access to persisted CLI preferences."""

from __future__ import annotations

from .environment import EnvironmentManager
from .models import CLIConfig
from .repository import ConfigRepository, TomlConfigRepository
from .utils import normalize_verbosity_label


class ConfigManager:
    """Loads, caches and saves the user-level CLI configuration."""

    def __init__(
        self,
        repository: ConfigRepository | None = None,
        environment: EnvironmentManager | None = None,
    ) -> None:
        self._repository = repository or TomlConfigRepository()
        self._environment = environment or EnvironmentManager()
        self._config: CLIConfig | None = None

    def load(self) -> CLIConfig:
        if self._config is None:
            self._config = self._repository.load()
        return self._config

    def save(self, config: CLIConfig) -> None:
        self._repository.save(config)
        self._config = config

    def resolve_log_level(self) -> int:
        return self._environment.resolve_log_level(self.load())

    def set_logging_verbosity(self, verbosity: str | None) -> None:
        config = self.load()
        config.verbosity = normalize_verbosity_label(verbosity)
        self.save(config)

    def get_logging_verbosity(self) -> str | None:
        return self.load().verbosity
