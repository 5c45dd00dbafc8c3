"""Exceptions raised while loading and querying guideline mappings."""

from __future__ import annotations

import difflib
from collections.abc import Iterable


class MappingFileError(ValueError):
    """The mapping file could not be parsed into guideline entries."""


class UnknownGuidelineError(KeyError):
    """A guideline id was requested that the mapping file does not define."""

    def __init__(self, guideline_id: str, known_ids: Iterable[str] = ()) -> None:
        self.guideline_id = guideline_id
        self.suggestions = tuple(difflib.get_close_matches(guideline_id, list(known_ids), n=3))
        super().__init__(guideline_id)

    def __str__(self) -> str:
        message = f"Unknown guideline id '{self.guideline_id}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        return message
