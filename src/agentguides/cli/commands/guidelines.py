"""Implementation of the `list`, `show` and `validate` commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from agentguides.core.bundle.assembler import BundleError, read_guideline_body, strip_front_matter
from agentguides.core.mappings import MappingFileError, MappingIndex, UnknownGuidelineError

from ..bootstrap import bootstrap_runtime
from ..services.build_runner import BuildOverrides, load_index, resolve_settings, select_from_settings
from . import options

GUIDELINE_ID_ARGUMENT = typer.Argument(..., help="Guideline id as declared in the mapping file.")


def _load(root: Path | None, mappings: Path | None, console: Console) -> tuple[Path, MappingIndex]:
    resolved_root = (root or Path.cwd()).resolve()
    try:
        settings = resolve_settings(resolved_root, BuildOverrides(mappings=mappings))
        return resolved_root, load_index(resolved_root, settings)
    except (FileNotFoundError, MappingFileError, ValueError) as error:
        console.print(f"[red]Cannot load mapping file: {error}[/]")
        raise typer.Exit(2) from error


def _join(values: tuple[str, ...]) -> str:
    return ", ".join(values) if values else "[dim]any[/]"


def register(app: typer.Typer) -> None:
    """Register the guideline inspection commands."""

    @app.command("list")
    def list_guidelines(  # type: ignore[func-returns-value]
        root: Path | None = options.ROOT_OPTION,
        mappings: Path | None = options.MAPPINGS_OPTION,
        languages: list[str] | None = options.LANGUAGE_OPTION,
        level: str | None = options.LEVEL_OPTION,
        architectures: list[str] | None = options.ARCHITECTURE_OPTION,
        tags: list[str] | None = options.TAG_OPTION,
        categories: list[str] | None = options.CATEGORY_OPTION,
        include_path: bool = typer.Option(True, "--path/--no-path", help="Show the file path column."),
    ) -> None:
        context = bootstrap_runtime()
        console = context.console

        resolved_root = (root or Path.cwd()).resolve()
        overrides = BuildOverrides(
            mappings=mappings,
            level=level,
            languages=languages or (),
            architectures=architectures or (),
            tags=tags or (),
            categories=categories or (),
        )
        try:
            settings = resolve_settings(resolved_root, overrides)
            index = load_index(resolved_root, settings)
            selection = select_from_settings(index, settings)
        except UnknownGuidelineError as error:
            raise typer.BadParameter(str(error)) from error
        except (FileNotFoundError, MappingFileError, ValueError) as error:
            console.print(f"[red]Cannot list guidelines: {error}[/]")
            raise typer.Exit(2) from error

        if index.error_count:
            console.print(
                "[yellow]Mapping errors detected; listing valid entries only.[/] "
                "Run `agentguides validate` for details."
            )
        if not selection.guidelines:
            console.print("[yellow]No guidelines match the current filters.[/]")
            raise typer.Exit(0)

        table = Table(title=f"{len(selection.guidelines)} of {len(index)} guideline(s)")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Category")
        table.add_column("Title")
        table.add_column("Languages")
        table.add_column("Levels")
        if include_path:
            table.add_column("Path", style="dim")
        for guideline in selection.guidelines:
            row = [
                guideline.id,
                guideline.category,
                guideline.display_title,
                _join(guideline.languages),
                _join(guideline.levels),
            ]
            if include_path:
                row.append(guideline.path)
            table.add_row(*row)
        console.print(table)
        raise typer.Exit(0)

    @app.command("show")
    def show_guideline(  # type: ignore[func-returns-value]
        guideline_id: str = GUIDELINE_ID_ARGUMENT,
        root: Path | None = options.ROOT_OPTION,
        mappings: Path | None = options.MAPPINGS_OPTION,
        raw: bool = typer.Option(False, "--raw", help="Print the markdown source instead of rendering it."),
    ) -> None:
        context = bootstrap_runtime()
        console = context.console

        _, index = _load(root, mappings, console)
        try:
            guideline = index.require(guideline_id.strip())
        except UnknownGuidelineError as error:
            raise typer.BadParameter(str(error)) from error

        console.print(f"[bold cyan]{guideline.id}[/] {guideline.display_title}")
        console.print(f"[green]Category:[/] {guideline.category}")
        console.print(f"[green]Path:[/] {guideline.path}")
        console.print(f"[green]Languages:[/] {_join(guideline.languages)}")
        console.print(f"[green]Levels:[/] {_join(guideline.levels)}")
        console.print(f"[green]Architectures:[/] {_join(guideline.architectures)}")
        console.print(f"[green]Tags:[/] {_join(guideline.tags)}")
        if guideline.description:
            console.print(f"[green]Description:[/] {guideline.description}")

        try:
            body = strip_front_matter(read_guideline_body(index, guideline))
        except BundleError as error:
            console.print(f"[red]{error}[/]")
            raise typer.Exit(2) from error

        console.print("")
        if raw:
            console.print(body, markup=False, highlight=False)
        else:
            console.print(Markdown(body))
        raise typer.Exit(0)

    @app.command("validate")
    def validate_mappings(  # type: ignore[func-returns-value]
        root: Path | None = options.ROOT_OPTION,
        mappings: Path | None = options.MAPPINGS_OPTION,
        strict: bool = typer.Option(False, "--strict", help="Treat warnings as failures."),
    ) -> None:
        context = bootstrap_runtime()
        console = context.console

        _, index = _load(root, mappings, console)

        for issue in index.issues:
            prefix = "[yellow]WARNING[/]" if issue.severity == "warning" else "[red]ERROR[/]"
            if issue.guideline_id:
                console.print(f"{prefix} {issue.guideline_id}: {issue.message}")
            else:
                console.print(f"{prefix} {issue.message}")

        summary = f"guidelines={len(index)}, errors={index.error_count}, warnings={index.warning_count}"
        if index.error_count > 0:
            console.print(f"[red]Mapping validation failed.[/] {summary}")
            raise typer.Exit(1)
        if strict and index.warning_count > 0:
            console.print(f"[yellow]Mapping validation failed on warnings.[/] {summary}")
            raise typer.Exit(1)
        console.print(f"[green]Mapping file is valid.[/] {summary}")
        raise typer.Exit(0)
