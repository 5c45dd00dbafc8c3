import tempfile
import unittest
from pathlib import Path
from textwrap import dedent

from agentguides.core.mappings import (
    MappingFileError,
    UnknownGuidelineError,
    load_guideline_mappings,
    normalize_str_list,
)
from tests.utils.corpus import write_corpus


def _write_mapping(root: Path, text: str) -> Path:
    path = root / "guideline-mappings.yml"
    path.write_text(dedent(text).lstrip(), encoding="utf-8")
    return path


class MappingLoaderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_loads_mapping_layout_in_declaration_order(self) -> None:
        mapping_path = write_corpus(self.root)

        index = load_guideline_mappings(mapping_path)

        self.assertEqual(
            ("clean-architecture", "ddd", "python-idioms", "typescript-idioms", "unit-tests"),
            index.ids,
        )
        self.assertEqual((), index.issues)
        self.assertEqual(("architecture", "languages", "testing"), index.categories)
        self.assertEqual((self.root / "docs").resolve(), index.content_root)

    def test_list_fields_are_lower_cased(self) -> None:
        index = load_guideline_mappings(write_corpus(self.root))

        self.assertEqual(("typescript",), index.require("typescript-idioms").languages)
        self.assertEqual(("clean", "hexagonal"), index.require("clean-architecture").architectures)

    def test_list_layout_and_defaults_are_supported(self) -> None:
        (self.root / "a.md").write_text("# A\n", encoding="utf-8")
        (self.root / "b.md").write_text("# B\n", encoding="utf-8")
        mapping_path = _write_mapping(
            self.root,
            """
            defaults:
              levels: [expert, full]
              languages: python
            guidelines:
              - id: a
                path: a.md
                category: design
              - id: b
                path: b.md
                category: design
                languages: [go, rust]
            """,
        )

        index = load_guideline_mappings(mapping_path)

        self.assertEqual(("expert", "full"), index.require("a").levels)
        self.assertEqual(("python",), index.require("a").languages)
        self.assertEqual(("go", "rust"), index.require("b").languages)

    def test_shorthand_entry_takes_category_from_parent_folder(self) -> None:
        (self.root / "security").mkdir()
        (self.root / "security" / "owasp.md").write_text("# OWASP\n", encoding="utf-8")
        mapping_path = _write_mapping(
            self.root,
            """
            guidelines:
              owasp: security/owasp.md
            """,
        )

        guideline = load_guideline_mappings(mapping_path).require("owasp")

        self.assertEqual("security", guideline.category)
        self.assertEqual("security/owasp.md", guideline.path)

    def test_inline_list_strings_are_parsed(self) -> None:
        self.assertEqual(("python", "go"), normalize_str_list("[Python, 'go']"))
        self.assertEqual(("python",), normalize_str_list("python"))
        self.assertEqual((), normalize_str_list(None))

    def test_invalid_entries_are_reported_and_dropped(self) -> None:
        (self.root / "ok.md").write_text("# OK\n", encoding="utf-8")
        mapping_path = _write_mapping(
            self.root,
            """
            guidelines:
              - id: ok
                path: ok.md
                category: design
              - id: ok
                path: ok.md
                category: design
              - id: no-path
                category: design
              - id: bad-level
                path: ok.md
                category: design
                levels: [novice]
              - id: escape
                path: ../outside.md
                category: design
              - just-a-string
            """,
        )

        index = load_guideline_mappings(mapping_path)

        self.assertEqual(("ok",), index.ids)
        messages = [issue.message for issue in index.issues if issue.severity == "error"]
        self.assertTrue(any("Duplicate guideline id 'ok'" in message for message in messages))
        self.assertTrue(any("Missing required field 'path'" in message for message in messages))
        self.assertTrue(any("Unknown level 'novice'" in message for message in messages))
        self.assertTrue(any("escapes the content root" in message for message in messages))
        self.assertTrue(any("must be a mapping" in message for message in messages))
        self.assertEqual(5, index.error_count)

    def test_missing_file_and_unknown_category_are_warnings(self) -> None:
        mapping_path = _write_mapping(
            self.root,
            """
            categories: [design]
            guidelines:
              ghost:
                path: testing/ghost.md
                category: testing
            """,
        )

        index = load_guideline_mappings(mapping_path)

        self.assertEqual(("ghost",), index.ids)
        self.assertEqual(0, index.error_count)
        self.assertEqual(2, index.warning_count)
        self.assertEqual(("design", "testing"), index.categories)

    def test_unsupported_version_is_an_error(self) -> None:
        mapping_path = _write_mapping(
            self.root,
            """
            version: 7
            guidelines: {}
            """,
        )

        index = load_guideline_mappings(mapping_path)

        self.assertEqual(1, index.error_count)
        self.assertIn("Unsupported mapping schema version", index.issues[0].message)

    def test_malformed_yaml_raises(self) -> None:
        mapping_path = _write_mapping(self.root, "guidelines: [unterminated\n")

        with self.assertRaises(MappingFileError):
            load_guideline_mappings(mapping_path)

    def test_scalar_root_raises(self) -> None:
        mapping_path = _write_mapping(self.root, "just text\n")

        with self.assertRaisesRegex(MappingFileError, "root must be a mapping"):
            load_guideline_mappings(mapping_path)

    def test_missing_file_raises_file_not_found(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_guideline_mappings(self.root / "missing.yml")

    def test_require_suggests_close_matches(self) -> None:
        index = load_guideline_mappings(write_corpus(self.root))

        with self.assertRaises(UnknownGuidelineError) as captured:
            index.require("python-idiom")

        self.assertIn("python-idioms", captured.exception.suggestions)
        self.assertIn("Did you mean", str(captured.exception))
        self.assertIsNone(index.get("python-idiom"))
        self.assertEqual("languages", index.get("python-idioms").category)


if __name__ == "__main__":
    unittest.main()
