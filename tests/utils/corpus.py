"""Builders for small on-disk guideline corpora used across tests."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

MAPPINGS_YAML = dedent(
    """
    version: 1
    content_root: docs
    categories: [architecture, languages, testing]
    guidelines:
      clean-architecture:
        path: architecture/clean.md
        category: architecture
        title: Clean Architecture
        architectures: [clean, hexagonal]
        tags: [layering]
        levels: [basic, standard, expert]
      ddd:
        path: architecture/ddd.md
        category: architecture
        architectures: [ddd]
        levels: [expert]
      python-idioms:
        path: languages/python.md
        category: languages
        languages: [python]
        tags: [style]
      typescript-idioms:
        path: languages/typescript.md
        category: languages
        languages: [TypeScript]
        tags: [style]
      unit-tests:
        path: testing/unit.md
        category: testing
        description: Keep tests fast.
        levels: [standard, expert]
        tags: [testing]
    """
).lstrip()

DOCUMENTS = {
    "architecture/clean.md": "# Clean Architecture\n\nDependencies point inward.\n\n## Rules\n\n- Keep the domain pure.\n",
    "architecture/ddd.md": "# Domain-Driven Design\n\nModel the domain.\n",
    "languages/python.md": "---\nowner: py\n---\n# Python\n\nUse pathlib.\n\n```python\n# not a heading\n```\n",
    "languages/typescript.md": "# TypeScript\n\nEnable strict mode.\n",
    "testing/unit.md": "# Unit Tests\n\nOne behavior per test.\n",
}


def write_corpus(root: Path, *, mappings: str = MAPPINGS_YAML, documents: dict[str, str] | None = None) -> Path:
    """Write a mapping file plus its documents under ``root`` and return the mapping path."""

    root.mkdir(parents=True, exist_ok=True)
    for relative, content in (DOCUMENTS if documents is None else documents).items():
        path = root / "docs" / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    mapping_path = root / "guideline-mappings.yml"
    mapping_path.write_text(mappings, encoding="utf-8")
    return mapping_path
