"""Implementation of the `build` command."""

from __future__ import annotations

from pathlib import Path

import typer

from agentguides.core.bundle import ALLOWED_MODES, ALLOWED_TARGETS, BundleError
from agentguides.core.mappings import ALLOWED_LEVELS, MappingFileError, UnknownGuidelineError

from ..bootstrap import bootstrap_runtime
from ..services.build_runner import BuildOverrides, resolve_settings, run_build
from . import options


def _message_style(message: str) -> str:
    normalized = message.lower()
    if normalized.startswith("up-to-date"):
        return "dim"
    if normalized.startswith(("missing", "outdated", "stale")):
        return "yellow"
    return "green"


def register(app: typer.Typer) -> None:
    """Register the `build` command with the provided Typer app."""

    @app.command("build")
    def build(  # type: ignore[func-returns-value]
        root: Path | None = options.ROOT_OPTION,
        mappings: Path | None = options.MAPPINGS_OPTION,
        languages: list[str] | None = options.LANGUAGE_OPTION,
        level: str | None = options.LEVEL_OPTION,
        architectures: list[str] | None = options.ARCHITECTURE_OPTION,
        tags: list[str] | None = options.TAG_OPTION,
        categories: list[str] | None = options.CATEGORY_OPTION,
        include: list[str] | None = options.INCLUDE_OPTION,
        exclude: list[str] | None = options.EXCLUDE_OPTION,
        target: str | None = typer.Option(
            None,
            "--target",
            "-t",
            help=f"Assistant layout to generate: {', '.join(sorted(ALLOWED_TARGETS))}.",
        ),
        mode: str | None = typer.Option(
            None,
            "--mode",
            help=f"Bundle mode: {', '.join(sorted(ALLOWED_MODES))}.",
        ),
        out: Path | None = typer.Option(
            None,
            "--out",
            "-o",
            help="Output directory (relative to --root unless absolute).",
        ),
        check: bool = typer.Option(
            False,
            "--check",
            help="Validate the generated bundle without writing files. Exits non-zero on drift.",
        ),
        force: bool = typer.Option(
            False,
            "--force",
            help="Overwrite outdated bundle files and create timestamped .bak backups.",
        ),
        dry_run: bool = typer.Option(False, "--dry-run", help="Print the planned artifacts without writing."),
        timestamp: bool = typer.Option(False, "--timestamp", help="Record the generation time in the bundle header."),
    ) -> None:
        context = bootstrap_runtime()
        console = context.console

        if check and force:
            raise typer.BadParameter("Choose either --check or --force, not both.")
        if level is not None and level.strip().lower() not in ALLOWED_LEVELS:
            raise typer.BadParameter(f"Invalid level '{level}'. Allowed values: {sorted(ALLOWED_LEVELS)}.")

        resolved_root = (root or Path.cwd()).resolve()
        overrides = BuildOverrides(
            mappings=mappings,
            target=target,
            mode=mode,
            level=level,
            output=out,
            languages=languages or (),
            architectures=architectures or (),
            tags=tags or (),
            categories=categories or (),
            include=include or (),
            exclude=exclude or (),
        )
        user_config = context.config_manager.load() if context.config_manager is not None else None

        try:
            settings = resolve_settings(resolved_root, overrides, user_config=user_config)
            outcome = run_build(
                resolved_root,
                settings,
                check=check,
                force=force,
                dry_run=dry_run,
                include_timestamp=timestamp,
            )
        except UnknownGuidelineError as error:
            raise typer.BadParameter(str(error)) from error
        except (FileNotFoundError, MappingFileError, BundleError, ValueError) as error:
            console.print(f"[red]Build failed: {error}[/]")
            raise typer.Exit(2) from error
        except OSError as error:
            console.print(f"[red]Build failed due to filesystem error: {error}[/]")
            raise typer.Exit(2) from error

        plan = outcome.plan
        console.print(
            f"[green]Selected {len(plan.guideline_ids)} guideline(s)[/] "
            f"for [bold]{plan.target.name}[/] ({plan.mode}, level {outcome.selection.selection.level})"
        )

        if outcome.write_result is None:
            for artifact in plan.artifacts:
                console.print(f"[dim]Would write[/] {artifact.relative_path} ({len(artifact.content)} chars)")
            raise typer.Exit(0)

        result = outcome.write_result
        for message in result.messages:
            console.print(f"[{_message_style(message)}]{message}[/]")

        if check:
            if result.ok:
                console.print("[green]Bundle is up-to-date.[/]")
                raise typer.Exit(0)
            console.print("[yellow]Bundle is missing or outdated; run `agentguides build` to refresh it.[/]")
            raise typer.Exit(1)

        console.print(f"[green]Bundle written to[/] {outcome.output_dir.as_posix()}")
        raise typer.Exit(0)
