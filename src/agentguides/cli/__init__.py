"""Command-line interface for agentguides."""

from .app import app

__all__ = ["app"]
