from __future__ import annotations

import logging
from pathlib import Path

import pytest

from agentguides.core.mappings import MappingIndex, UnknownGuidelineError, level_includes, load_guideline_mappings
from agentguides.core.selection import SelectionFilter, select_guidelines
from tests.utils.corpus import write_corpus


@pytest.fixture()
def index(tmp_path: Path) -> MappingIndex:
    return load_guideline_mappings(write_corpus(tmp_path))


def test_level_includes_treats_empty_declaration_as_every_tier() -> None:
    assert level_includes("basic", ())
    assert level_includes("full", ("expert",))
    assert level_includes("expert", ("expert",))
    assert not level_includes("basic", ("standard", "expert"))


def test_default_selection_uses_standard_level(index: MappingIndex) -> None:
    result = select_guidelines(index, SelectionFilter.create())

    assert result.selection.level == "standard"
    assert result.ids == ("clean-architecture", "python-idioms", "typescript-idioms", "unit-tests")
    assert "ddd" in result.excluded


def test_language_filter_keeps_language_agnostic_guidelines(index: MappingIndex) -> None:
    result = select_guidelines(index, SelectionFilter.create(languages=["Python"]))

    assert "python-idioms" in result.ids
    assert "typescript-idioms" not in result.ids
    assert "clean-architecture" in result.ids
    assert "languages" in result.excluded["typescript-idioms"]


def test_full_level_includes_everything(index: MappingIndex) -> None:
    result = select_guidelines(index, SelectionFilter.create(level="full"))

    assert result.ids == index.ids


def test_architecture_and_tag_filters(index: MappingIndex) -> None:
    by_architecture = select_guidelines(index, SelectionFilter.create(level="expert", architectures=["ddd"]))
    assert "ddd" in by_architecture.ids
    assert "clean-architecture" not in by_architecture.ids

    by_tag = select_guidelines(index, SelectionFilter.create(tags=["style"]))
    assert by_tag.ids == ("python-idioms", "typescript-idioms")


def test_category_filter(index: MappingIndex) -> None:
    result = select_guidelines(index, SelectionFilter.create(categories=["testing"]))

    assert result.ids == ("unit-tests",)


def test_include_bypasses_filters_and_exclude_wins(index: MappingIndex) -> None:
    result = select_guidelines(
        index,
        SelectionFilter.create(level="basic", include_ids=["ddd", "unit-tests"], exclude_ids=["unit-tests"]),
    )

    assert "ddd" in result.ids
    assert "unit-tests" not in result.ids
    assert result.excluded["unit-tests"] == "excluded explicitly"


def test_unknown_include_id_raises(index: MappingIndex) -> None:
    with pytest.raises(UnknownGuidelineError):
        select_guidelines(index, SelectionFilter.create(include_ids=["nope"]))


def test_invalid_level_raises() -> None:
    with pytest.raises(ValueError, match="Invalid level"):
        SelectionFilter.create(level="wizard")


def test_order_follows_category_order_not_declaration_order(tmp_path: Path) -> None:
    mappings = (
        "categories: [testing, design]\n"
        "guidelines:\n"
        "  b: {path: docs/b.md, category: design}\n"
        "  t: {path: docs/t.md, category: testing}\n"
        "  a: {path: docs/a.md, category: design}\n"
    )
    documents = {"b.md": "# B\n", "t.md": "# T\n", "a.md": "# A\n"}
    index = load_guideline_mappings(write_corpus(tmp_path, mappings=mappings, documents=documents))

    result = select_guidelines(index, SelectionFilter.create())

    assert result.ids == ("t", "b", "a")
    assert [category for category, _ in result.by_category()] == ["testing", "design"]


def test_describe_omits_empty_filters() -> None:
    selection = SelectionFilter.create(languages=["python"], level="expert")

    assert selection.describe() == {"level": "expert", "languages": ["python"]}


def test_unknown_exclude_id_is_logged_not_raised(index: MappingIndex, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="agentguides.core.selection.filters"):
        result = select_guidelines(index, SelectionFilter.create(exclude_ids=["retired-rule", "ddd"]))

    assert "ddd" not in result.ids
    assert "python-idioms" in result.ids
    assert "retired-rule" in caplog.text
