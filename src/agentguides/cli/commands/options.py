"""Typer options shared by commands that load and filter the mapping file."""

from __future__ import annotations

import typer

from agentguides.core.mappings import LEVEL_ORDER

ROOT_OPTION = typer.Option(
    None,
    "--root",
    help="Project root directory. Defaults to current working directory.",
)
MAPPINGS_OPTION = typer.Option(
    None,
    "--mappings",
    "-m",
    help="Path to guideline-mappings.yml (relative to --root unless absolute).",
)
LANGUAGE_OPTION = typer.Option(
    None,
    "--language",
    "-l",
    help="Restrict to guidelines for this language. Repeat for several.",
)
LEVEL_OPTION = typer.Option(
    None,
    "--level",
    help=f"Instruction-detail tier: {', '.join(LEVEL_ORDER)}.",
)
ARCHITECTURE_OPTION = typer.Option(
    None,
    "--architecture",
    "-a",
    help="Restrict to guidelines for this architecture style. Repeat for several.",
)
TAG_OPTION = typer.Option(None, "--tag", help="Require at least one of these tags. Repeat for several.")
CATEGORY_OPTION = typer.Option(None, "--category", "-c", help="Restrict to these categories.")
INCLUDE_OPTION = typer.Option(None, "--include", help="Always include this guideline id.")
EXCLUDE_OPTION = typer.Option(None, "--exclude", help="Never include this guideline id.")
