"""Guideline mapping file model and loader."""

from .errors import MappingFileError, UnknownGuidelineError
from .levels import ALLOWED_LEVELS, DEFAULT_LEVEL, LEVEL_FULL, LEVEL_ORDER, level_includes
from .loader import load_guideline_mappings, normalize_str_list
from .models import Guideline, MappingIndex, MappingIssue

__all__ = [
    "ALLOWED_LEVELS",
    "DEFAULT_LEVEL",
    "Guideline",
    "LEVEL_FULL",
    "LEVEL_ORDER",
    "MappingFileError",
    "MappingIndex",
    "MappingIssue",
    "UnknownGuidelineError",
    "level_includes",
    "load_guideline_mappings",
    "normalize_str_list",
]
