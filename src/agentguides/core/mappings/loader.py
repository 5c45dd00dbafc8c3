"""Parse and validate ``guideline-mappings.yml`` into a ``MappingIndex``."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Any

import yaml

from agentguides.core.utils.constants import MARKDOWN_SUFFIXES

from .errors import MappingFileError
from .levels import ALLOWED_LEVELS
from .models import Guideline, MappingIndex, MappingIssue

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMA_VERSIONS = frozenset({1})
LIST_FIELDS = ("languages", "levels", "architectures", "tags")


def _parse_inline_list(raw: str) -> list[str]:
    value = raw.strip()
    if not value:
        return []
    if not (value.startswith("[") and value.endswith("]")):
        return [value]

    inner = value[1:-1].strip()
    if not inner:
        return []

    result: list[str] = []
    token = ""
    quote: str | None = None
    for char in inner:
        if char in {"'", '"'}:
            if quote is None:
                quote = char
                continue
            if quote == char:
                quote = None
                continue
        if char == "," and quote is None:
            cleaned = token.strip()
            if cleaned:
                result.append(cleaned)
            token = ""
            continue
        token += char

    cleaned = token.strip()
    if cleaned:
        result.append(cleaned)
    return result


def normalize_str_list(value: Any) -> tuple[str, ...]:
    """Coerce a YAML scalar or sequence into a de-duplicated tuple of lower-case strings."""

    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        items = [str(item) for item in value if item is not None]
    elif isinstance(value, str):
        items = _parse_inline_list(value)
    else:
        items = [str(value)]

    normalized: list[str] = []
    for item in items:
        cleaned = item.strip().lower()
        if cleaned and cleaned not in normalized:
            normalized.append(cleaned)
    return tuple(normalized)


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _load_document(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"Mapping file not found: {path}")
    if not path.is_file():
        raise MappingFileError(f"Mapping path is not a file: {path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    except yaml.YAMLError as error:
        raise MappingFileError(f"Invalid YAML in {path.name}: {error}") from error


def _iter_raw_entries(document: Any) -> list[tuple[str | None, Any]]:
    """Return ``(id_from_key, entry)`` pairs for both the mapping and list layouts."""

    if isinstance(document, list):
        raw_guidelines: Any = document
    elif isinstance(document, dict):
        raw_guidelines = document.get("guidelines")
        if raw_guidelines is None:
            raise MappingFileError("Mapping file must define a top-level 'guidelines' key.")
    else:
        raise MappingFileError("Mapping file root must be a mapping or a list of guideline entries.")

    if isinstance(raw_guidelines, dict):
        return [(str(key), entry) for key, entry in raw_guidelines.items()]
    if isinstance(raw_guidelines, list):
        return [(None, entry) for entry in raw_guidelines]
    raise MappingFileError("'guidelines' must be a mapping of id to entry or a list of entries.")


def _is_within(path: Path, root: Path) -> bool:
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True


def _build_guideline(
    key_id: str | None,
    entry: Any,
    *,
    position: int,
    defaults: dict[str, tuple[str, ...]],
    content_root: Path,
    known_categories: tuple[str, ...],
) -> tuple[Guideline | None, list[MappingIssue]]:
    issues: list[MappingIssue] = []
    label = key_id or f"entry #{position}"

    if isinstance(entry, str) and key_id is not None:
        # Shorthand: ``id: path/to/file.md`` with the category taken from the parent folder.
        entry = {"path": entry}
    if not isinstance(entry, dict):
        issues.append(MappingIssue("error", f"Guideline {label} must be a mapping."))
        return None, issues

    guideline_id = _optional_text(entry.get("id")) or key_id
    if key_id is not None and entry.get("id") is not None and str(entry["id"]).strip() != key_id:
        issues.append(
            MappingIssue(
                "error",
                f"Entry id '{str(entry['id']).strip()}' does not match its key '{key_id}'.",
                guideline_id=key_id,
            )
        )
    if not guideline_id:
        issues.append(MappingIssue("error", f"Guideline {label} is missing an 'id'."))
        return None, issues

    path_text = _optional_text(entry.get("path"))
    if path_text is None:
        issues.append(MappingIssue("error", "Missing required field 'path'.", guideline_id=guideline_id))
        return None, issues
    path_text = PurePosixPath(path_text.replace("\\", "/")).as_posix()

    category = _optional_text(entry.get("category"))
    if category is None:
        parent = PurePosixPath(path_text).parent.name
        category = parent or None
    if category is None:
        issues.append(MappingIssue("error", "Missing required field 'category'.", guideline_id=guideline_id))
        return None, issues
    category = category.lower()

    values: dict[str, tuple[str, ...]] = {}
    for field_name in LIST_FIELDS:
        if field_name in entry:
            values[field_name] = normalize_str_list(entry.get(field_name))
        else:
            values[field_name] = defaults.get(field_name, ())

    unknown_levels = [level for level in values["levels"] if level not in ALLOWED_LEVELS]
    for level in unknown_levels:
        issues.append(
            MappingIssue(
                "error",
                f"Unknown level '{level}'. Allowed values: {sorted(ALLOWED_LEVELS)}.",
                guideline_id=guideline_id,
            )
        )

    resolved_path = (content_root / path_text).resolve()
    if PurePosixPath(path_text).is_absolute() or not _is_within(resolved_path, content_root.resolve()):
        issues.append(
            MappingIssue(
                "error",
                f"Path '{path_text}' escapes the content root.",
                guideline_id=guideline_id,
            )
        )
    else:
        if resolved_path.suffix.lower() not in MARKDOWN_SUFFIXES:
            issues.append(
                MappingIssue("warning", f"Path '{path_text}' is not a markdown file.", guideline_id=guideline_id)
            )
        if not resolved_path.is_file():
            issues.append(
                MappingIssue("warning", f"Referenced file '{path_text}' does not exist.", guideline_id=guideline_id)
            )

    if known_categories and category not in known_categories:
        issues.append(
            MappingIssue(
                "warning",
                f"Category '{category}' is not listed under 'categories'.",
                guideline_id=guideline_id,
            )
        )

    if any(issue.severity == "error" for issue in issues):
        return None, issues

    return (
        Guideline(
            id=guideline_id,
            path=path_text,
            category=category,
            title=_optional_text(entry.get("title")),
            description=_optional_text(entry.get("description")),
            languages=values["languages"],
            levels=values["levels"],
            architectures=values["architectures"],
            tags=values["tags"],
        ),
        issues,
    )


def _read_defaults(document: Any, issues: list[MappingIssue]) -> dict[str, tuple[str, ...]]:
    if not isinstance(document, dict):
        return {}
    raw_defaults = document.get("defaults")
    if raw_defaults is None:
        return {}
    if not isinstance(raw_defaults, dict):
        issues.append(MappingIssue("error", "'defaults' must be a mapping when provided."))
        return {}
    defaults = {name: normalize_str_list(raw_defaults[name]) for name in LIST_FIELDS if name in raw_defaults}
    for level in defaults.get("levels", ()):
        if level not in ALLOWED_LEVELS:
            issues.append(MappingIssue("error", f"Unknown default level '{level}'."))
    return defaults


def _resolve_content_root(document: Any, mapping_path: Path, override: Path | None) -> Path:
    if override is not None:
        return override.resolve()
    base = mapping_path.resolve().parent
    if isinstance(document, dict):
        configured = _optional_text(document.get("content_root"))
        if configured is not None:
            candidate = Path(configured)
            return candidate.resolve() if candidate.is_absolute() else (base / candidate).resolve()
    return base


def load_guideline_mappings(path: Path, *, content_root: Path | None = None) -> MappingIndex:
    """
    Load the mapping file at ``path``.

    Entry-level problems are reported as ``MappingIssue`` records and the
    offending entries are dropped. Only an unreadable document raises.
    """
    document = _load_document(path)
    issues: list[MappingIssue] = []

    if isinstance(document, dict) and "version" in document:
        version = document.get("version")
        if version not in SUPPORTED_SCHEMA_VERSIONS:
            issues.append(
                MappingIssue(
                    "error",
                    f"Unsupported mapping schema version {version!r}. Supported: {sorted(SUPPORTED_SCHEMA_VERSIONS)}.",
                )
            )

    raw_entries = _iter_raw_entries(document)
    defaults = _read_defaults(document, issues)
    resolved_root = _resolve_content_root(document, path, content_root)

    declared_categories: tuple[str, ...] = ()
    if isinstance(document, dict) and document.get("categories") is not None:
        declared_categories = normalize_str_list(document.get("categories"))

    guidelines: list[Guideline] = []
    seen: dict[str, int] = {}
    for position, (key_id, entry) in enumerate(raw_entries, start=1):
        guideline, entry_issues = _build_guideline(
            key_id,
            entry,
            position=position,
            defaults=defaults,
            content_root=resolved_root,
            known_categories=declared_categories,
        )
        issues.extend(entry_issues)
        if guideline is None:
            continue
        if guideline.id in seen:
            issues.append(
                MappingIssue(
                    "error",
                    f"Duplicate guideline id '{guideline.id}' (entries #{seen[guideline.id]} and #{position}).",
                    guideline_id=guideline.id,
                )
            )
            continue
        seen[guideline.id] = position
        guidelines.append(guideline)

    category_order = list(declared_categories)
    for guideline in guidelines:
        if guideline.category not in category_order:
            category_order.append(guideline.category)

    logger.debug(
        "Loaded %d guideline(s) from %s (%d issue(s))",
        len(guidelines),
        path,
        len(issues),
    )
    return MappingIndex(
        source_path=path.resolve(),
        content_root=resolved_root,
        guidelines=tuple(guidelines),
        categories=tuple(category_order),
        issues=tuple(issues),
    )
