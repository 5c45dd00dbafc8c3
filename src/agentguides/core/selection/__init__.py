"""Guideline selection by language, level, architecture and tags."""

from .filters import SelectionFilter, SelectionResult, exclusion_reason, select_guidelines

__all__ = ["SelectionFilter", "SelectionResult", "exclusion_reason", "select_guidelines"]
