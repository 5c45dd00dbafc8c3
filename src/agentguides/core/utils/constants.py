"""Shared constants for core utilities.

Centralizes filenames and other cross-cutting settings so they can be
updated in one place without combing through multiple modules.
"""

FRONT_MATTER_PATTERN = r"\A\s*---\s*\n(.*?)\n---\s*(?:\n|$)"
"""Leading YAML front matter block in a markdown guideline."""

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d%H%M%SZ"

ORPHAN_SCAN_ALWAYS_IGNORED = ("README.md", "readme.md", "CHANGELOG.md", "LICENSE.md")

MARKDOWN_SUFFIXES = frozenset({".md", ".markdown", ".mdc"})
