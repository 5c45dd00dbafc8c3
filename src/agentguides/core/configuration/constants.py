"""Constants used throughout the configuration subsystem."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from platformdirs import user_config_dir

CONFIG_DIR = Path(os.getenv("AGENTGUIDES_CONFIG_DIR", user_config_dir("agentguides", "agentguides")))
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_VERBOSITY = "quiet"
VERBOSITY_ENV_VAR = "AGENTGUIDES_LOG_LEVEL"
VERBOSITY_PRESETS = {
    "quiet": logging.WARNING,
    "standard": logging.INFO,
    "verbose": logging.DEBUG,
}

PROJECT_CONFIG_FILENAME = ".agentguides.toml"
DEFAULT_MAPPINGS_FILENAME = "guideline-mappings.yml"
