"""Implementation of the `start` command group (`init`, `stats`)."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import questionary
import typer
from rich.console import Console
from rich.table import Table

from agentguides.core.bundle import ALLOWED_MODES, ALLOWED_TARGETS, DEFAULT_MODE, DEFAULT_TARGET, TARGETS
from agentguides.core.configuration.project import (
    ProjectSettings,
    init_project_config,
    validate_project_settings,
)
from agentguides.core.mappings import (
    DEFAULT_LEVEL,
    LEVEL_ORDER,
    MappingFileError,
    MappingIndex,
    load_guideline_mappings,
)
from agentguides.core.stats import compute_stats, find_orphan_guidelines

from ..bootstrap import bootstrap_runtime
from ..services.build_runner import BuildOverrides, load_index, resolve_settings
from ..ui.styles import CLI_STYLE, navigation_choice, value_choice
from . import options

INTERACTIVE_OPTION = typer.Option(
    None,
    "--interactive/--no-interactive",
    help="Prompt for missing values. Defaults to prompting when attached to a terminal.",
)


class _PromptCancelled(Exception):
    pass


def _ask(question: questionary.Question) -> Any:
    answer = question.ask()
    if answer is None:
        raise _PromptCancelled
    return answer


def _counts(index: MappingIndex | None, attribute: str) -> dict[str, int]:
    counts: dict[str, int] = {}
    if index is None:
        return counts
    for guideline in index.guidelines:
        for value in getattr(guideline, attribute):
            counts[value] = counts.get(value, 0) + 1
    return dict(sorted(counts.items()))


def _prompt_settings(settings: ProjectSettings, index: MappingIndex | None) -> ProjectSettings:
    target_choices = [
        questionary.Choice(f"{target.label} ({target.main_file})", value=name) for name, target in TARGETS.items()
    ]
    settings.target = str(
        _ask(
            questionary.select(
                "Which assistant should the bundle target?",
                choices=target_choices,
                default=settings.target,
                style=CLI_STYLE,
            )
        )
    )
    settings.level = str(
        _ask(
            questionary.select(
                "How detailed should the instructions be?",
                choices=list(LEVEL_ORDER),
                default=settings.level,
                style=CLI_STYLE,
            )
        )
    )
    settings.mode = str(
        _ask(
            questionary.select(
                "Inline every guideline into one file, or link to copies?",
                choices=sorted(ALLOWED_MODES),
                default=settings.mode,
                style=CLI_STYLE,
            )
        )
    )

    for attribute, question in (
        ("languages", "Which languages does this project use?"),
        ("architectures", "Which architecture styles apply?"),
    ):
        counts = _counts(index, attribute)
        if not counts:
            continue
        current = set(getattr(settings, attribute))
        choices = [navigation_choice("(none: keep only agnostic filters)", value="__NONE__")]
        choices.extend(
            value_choice(value, f"{count} guideline(s)", value=value, checked=value in current)
            for value, count in counts.items()
        )
        picked = _ask(questionary.checkbox(question, choices=choices, style=CLI_STYLE))
        setattr(settings, attribute, [value for value in picked if value != "__NONE__"])
    return settings


def _render_counts(console: Console, title: str, counts: dict[str, int]) -> None:
    if not counts:
        return
    table = Table(title=title, show_header=False, title_justify="left")
    table.add_column("Value", style="cyan")
    table.add_column("Guidelines", justify="right")
    for key, count in counts.items():
        table.add_row(key, str(count))
    console.print(table)


def register(app: typer.Typer) -> None:
    """Register the `start` command group."""

    start_app = typer.Typer(help="Set up a project and inspect the guideline corpus.")
    app.add_typer(start_app, name="start")

    @start_app.command("init")
    def init(  # type: ignore[func-returns-value]
        root: Path | None = options.ROOT_OPTION,
        mappings: Path | None = options.MAPPINGS_OPTION,
        languages: list[str] | None = options.LANGUAGE_OPTION,
        level: str | None = options.LEVEL_OPTION,
        architectures: list[str] | None = options.ARCHITECTURE_OPTION,
        tags: list[str] | None = options.TAG_OPTION,
        target: str | None = typer.Option(
            None,
            "--target",
            "-t",
            help=f"Assistant layout to generate: {', '.join(sorted(ALLOWED_TARGETS))}.",
        ),
        mode: str | None = typer.Option(None, "--mode", help=f"Bundle mode: {', '.join(sorted(ALLOWED_MODES))}."),
        out: Path | None = typer.Option(None, "--out", "-o", help="Bundle output directory."),
        interactive: bool | None = INTERACTIVE_OPTION,
        force: bool = typer.Option(False, "--force", help="Overwrite an existing .agentguides.toml."),
    ) -> None:
        context = bootstrap_runtime()
        console = context.console

        resolved_root = (root or Path.cwd()).resolve()
        user_config = context.config_manager.load() if context.config_manager is not None else None
        settings = ProjectSettings(
            target=(user_config.default_target if user_config and user_config.default_target else DEFAULT_TARGET),
            mode=(user_config.default_mode if user_config and user_config.default_mode else DEFAULT_MODE),
            level=DEFAULT_LEVEL,
        )
        if mappings is not None:
            settings.mappings = mappings.as_posix()
        if out is not None:
            settings.output = out.as_posix()
        if target:
            settings.target = target.strip().lower()
        if mode:
            settings.mode = mode.strip().lower()
        if level:
            settings.level = level.strip().lower()
        settings.languages = list(languages or [])
        settings.architectures = list(architectures or [])
        settings.tags = list(tags or [])

        try:
            settings = validate_project_settings(settings)
        except ValueError as error:
            raise typer.BadParameter(str(error)) from error

        should_prompt = sys.stdin.isatty() if interactive is None else interactive
        if should_prompt:
            index: MappingIndex | None = None
            mapping_path = resolved_root / settings.mappings
            try:
                index = load_guideline_mappings(mapping_path)
            except (FileNotFoundError, MappingFileError) as error:
                console.print(f"[yellow]Mapping file not loaded ({error}); skipping filter prompts.[/]")
            try:
                settings = _prompt_settings(settings, index)
            except _PromptCancelled:
                console.print("[yellow]Initialization cancelled.[/]")
                raise typer.Exit(1) from None

        try:
            path = init_project_config(resolved_root, settings, force=force)
        except ValueError as error:
            raise typer.BadParameter(str(error)) from error
        except FileExistsError as error:
            console.print(f"[red]{error}[/]")
            raise typer.Exit(2) from error
        except OSError as error:
            console.print(f"[red]Initialization failed due to filesystem error: {error}[/]")
            raise typer.Exit(2) from error

        console.print(f"[green]Wrote[/] {path.as_posix()}")
        console.print("Run [bold]agentguides build[/] to generate the bundle.")
        raise typer.Exit(0)

    @start_app.command("stats")
    def stats(  # type: ignore[func-returns-value]
        root: Path | None = options.ROOT_OPTION,
        mappings: Path | None = options.MAPPINGS_OPTION,
        orphans: bool = typer.Option(True, "--orphans/--no-orphans", help="Report unreferenced markdown files."),
    ) -> None:
        context = bootstrap_runtime()
        console = context.console

        resolved_root = (root or Path.cwd()).resolve()
        try:
            settings = resolve_settings(resolved_root, BuildOverrides(mappings=mappings))
            index = load_index(resolved_root, settings)
        except (FileNotFoundError, MappingFileError, ValueError) as error:
            console.print(f"[red]Cannot load mapping file: {error}[/]")
            raise typer.Exit(2) from error

        summary = compute_stats(index)
        console.print(
            f"[bold]{summary.total}[/] guideline(s) in [bold]{len(summary.by_category)}[/] categories "
            f"(errors={summary.error_count}, warnings={summary.warning_count})"
        )
        _render_counts(console, "By category", summary.by_category)
        _render_counts(console, "By level", summary.by_level)
        _render_counts(console, "By language", summary.by_language)
        _render_counts(console, "By architecture", summary.by_architecture)
        _render_counts(console, "By tag", summary.by_tag)

        if summary.missing_files:
            console.print(f"[yellow]Missing files:[/] {', '.join(summary.missing_files)}")

        if orphans:
            orphan_paths = find_orphan_guidelines(index, ignore_patterns=settings.ignore)
            if orphan_paths:
                console.print(f"[yellow]Unreferenced markdown files:[/] {len(orphan_paths)}")
                for orphan in orphan_paths:
                    console.print(f"  {orphan}")
            else:
                console.print("[green]Every markdown file is referenced by the mapping.[/]")
        raise typer.Exit(0)
