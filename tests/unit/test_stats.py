from __future__ import annotations

from pathlib import Path

from agentguides.core.mappings import load_guideline_mappings
from agentguides.core.stats import AGNOSTIC_KEY, compute_stats, find_orphan_guidelines
from tests.utils.corpus import write_corpus


def test_compute_stats_counts_corpus(tmp_path: Path) -> None:
    index = load_guideline_mappings(write_corpus(tmp_path))

    stats = compute_stats(index)

    assert stats.total == 5
    assert stats.by_category == {"architecture": 2, "languages": 2, "testing": 1}
    assert stats.by_level == {"basic": 3, "standard": 4, "expert": 5, "full": 5}
    assert stats.by_language == {AGNOSTIC_KEY: 3, "python": 1, "typescript": 1}
    assert stats.by_tag["style"] == 2
    assert stats.missing_files == ()
    assert stats.error_count == 0


def test_compute_stats_reports_missing_files(tmp_path: Path) -> None:
    documents = {"architecture/clean.md": "# Clean\n"}
    index = load_guideline_mappings(write_corpus(tmp_path, documents=documents))

    stats = compute_stats(index)

    assert stats.missing_files == ("ddd", "python-idioms", "typescript-idioms", "unit-tests")
    assert stats.warning_count == 4


def test_find_orphans_lists_unreferenced_markdown(tmp_path: Path) -> None:
    index = load_guideline_mappings(write_corpus(tmp_path))
    docs = tmp_path / "docs"
    (docs / "languages" / "go.md").write_text("# Go\n", encoding="utf-8")
    (docs / "README.md").write_text("# Docs\n", encoding="utf-8")
    (docs / "notes.txt").write_text("not markdown\n", encoding="utf-8")
    (docs / ".drafts").mkdir()
    (docs / ".drafts" / "wip.md").write_text("# WIP\n", encoding="utf-8")

    assert find_orphan_guidelines(index) == ("languages/go.md",)


def test_find_orphans_honours_ignore_patterns(tmp_path: Path) -> None:
    index = load_guideline_mappings(write_corpus(tmp_path))
    docs = tmp_path / "docs"
    (docs / "archive").mkdir()
    (docs / "archive" / "old.md").write_text("# Old\n", encoding="utf-8")
    (docs / "languages" / "go.md").write_text("# Go\n", encoding="utf-8")

    orphans = find_orphan_guidelines(index, ignore_patterns=["archive/"])

    assert orphans == ("languages/go.md",)
