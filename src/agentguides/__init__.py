"""Select and bundle coding guidelines into AI assistant configuration files."""

__version__ = "0.3.0"
