from __future__ import annotations

from pathlib import Path

from agentguides.core.mappings import load_guideline_mappings
from agentguides.core.stats import compute_stats, find_orphan_guidelines

REPO_ROOT = Path(__file__).resolve().parents[2]


def test_shipped_mapping_is_clean() -> None:
    index = load_guideline_mappings(REPO_ROOT / "guideline-mappings.yml")

    assert index.issues == ()
    assert len(index) == 10
    assert compute_stats(index).missing_files == ()
    assert find_orphan_guidelines(index) == ()
