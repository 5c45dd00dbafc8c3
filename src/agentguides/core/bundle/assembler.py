"""Turn a guideline selection into the in-memory artifacts of a bundle."""

from __future__ import annotations

import logging
import posixpath
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path, PurePosixPath

from agentguides.core.mappings.models import Guideline, MappingIndex
from agentguides.core.selection.filters import SelectionResult
from agentguides.core.utils.constants import FRONT_MATTER_PATTERN

from .targets import ALLOWED_MODES, MODE_INLINE, MODE_LINKED, BundleTarget

logger = logging.getLogger(__name__)

FRONT_MATTER_RE = re.compile(FRONT_MATTER_PATTERN, re.DOTALL)
HEADING_RE = re.compile(r"^(#{1,6})(\s+.*)$")
FENCE_RE = re.compile(r"^\s*(```|~~~)")

BUNDLE_TITLE = "Coding Guidelines"
HEADING_SHIFT = 2


class BundleError(ValueError):
    """A bundle could not be assembled from the selected guidelines."""


@dataclass(frozen=True, slots=True)
class BundleArtifact:
    relative_path: str
    content: str


@dataclass(frozen=True, slots=True)
class BundlePlan:
    target: BundleTarget
    mode: str
    artifacts: tuple[BundleArtifact, ...]
    guideline_ids: tuple[str, ...]

    @property
    def main_artifact(self) -> BundleArtifact:
        return self.artifacts[0]


def _category_label(category: str) -> str:
    return category.replace("-", " ").replace("_", " ").title()


def read_guideline_body(index: MappingIndex, guideline: Guideline) -> str:
    path = index.resolve_path(guideline)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as error:
        raise BundleError(f"Guideline '{guideline.id}' references a missing file: {guideline.path}") from error
    except UnicodeDecodeError as error:
        raise BundleError(f"Guideline '{guideline.id}' is not valid UTF-8: {guideline.path}") from error
    return text.replace("\r\n", "\n")


def strip_front_matter(text: str) -> str:
    match = FRONT_MATTER_RE.match(text)
    if match is None:
        return text
    return text[match.end():]


def _split_leading_title(text: str) -> tuple[str | None, str]:
    lines = text.split("\n")
    for position, line in enumerate(lines):
        if not line.strip():
            continue
        if line.startswith("# "):
            return line[2:].strip(), "\n".join(lines[position + 1:])
        break
    return None, text


def demote_headings(text: str, shift: int = HEADING_SHIFT) -> str:
    """Shift ATX headings down by ``shift`` levels, leaving fenced code untouched."""

    output: list[str] = []
    fence: str | None = None
    for line in text.split("\n"):
        fence_match = FENCE_RE.match(line)
        if fence_match is not None:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif marker == fence:
                fence = None
            output.append(line)
            continue
        if fence is None:
            heading = HEADING_RE.match(line)
            if heading is not None:
                depth = min(len(heading.group(1)) + shift, 6)
                line = "#" * depth + heading.group(2)
        output.append(line)
    return "\n".join(output)


def _describe_filters(selection: SelectionResult) -> list[str]:
    lines: list[str] = []
    for name, value in selection.selection.describe().items():
        label = name.replace("_", " ").capitalize()
        rendered = ", ".join(value) if isinstance(value, list) else str(value)
        lines.append(f"- {label}: {rendered}")
    return lines


def _render_header(
    index: MappingIndex,
    selection: SelectionResult,
    target: BundleTarget,
    *,
    include_timestamp: bool,
) -> list[str]:
    lines = [
        f"# {BUNDLE_TITLE}",
        "",
        (
            f"<!-- Generated by agentguides from {index.source_path.name} for {target.label}. "
            "Edit the source guidelines and rebuild instead of editing this file. -->"
        ),
        "",
    ]
    if include_timestamp:
        generated_at = datetime.now(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")
        lines.extend([f"Generated at {generated_at}.", ""])
    lines.append(f"This bundle contains {len(selection.guidelines)} guideline(s) selected with:")
    lines.append("")
    lines.extend(_describe_filters(selection))
    lines.append("")
    return lines


def _support_path(target: BundleTarget, guideline: Guideline) -> str:
    suffix = PurePosixPath(guideline.path).suffix or ".md"
    return f"{target.support_dir}/{guideline.category}/{guideline.id}{suffix}"


def _link_from_main(target: BundleTarget, artifact_path: str) -> str:
    main_dir = posixpath.dirname(target.main_file) or "."
    return posixpath.relpath(artifact_path, main_dir)


def _assemble_inline(
    index: MappingIndex,
    selection: SelectionResult,
    target: BundleTarget,
    header: list[str],
) -> tuple[BundleArtifact, ...]:
    grouped = selection.by_category()
    lines = list(header)
    lines.extend(["## Contents", ""])
    for category, guidelines in grouped:
        lines.append(f"- {_category_label(category)}")
        for guideline in guidelines:
            lines.append(f"  - [{guideline.display_title}](#{guideline.id})")
    lines.append("")

    for category, guidelines in grouped:
        lines.extend(["---", "", f"## {_category_label(category)}", ""])
        for guideline in guidelines:
            body = strip_front_matter(read_guideline_body(index, guideline))
            document_title, body = _split_leading_title(body)
            title = guideline.title or document_title or guideline.display_title
            lines.extend([f'<a id="{guideline.id}"></a>', "", f"### {title}", ""])
            if guideline.description:
                lines.extend([f"_{guideline.description}_", ""])
            lines.append(demote_headings(body.strip("\n")))
            lines.append("")

    content = "\n".join(lines).rstrip("\n") + "\n"
    return (BundleArtifact(target.main_file, content),)


def _assemble_linked(
    index: MappingIndex,
    selection: SelectionResult,
    target: BundleTarget,
    header: list[str],
) -> tuple[BundleArtifact, ...]:
    lines = list(header)
    lines.extend([
        "Read the guidelines relevant to the task before changing code.",
        "",
    ])
    supporting: list[BundleArtifact] = []
    for category, guidelines in selection.by_category():
        lines.extend([f"## {_category_label(category)}", ""])
        for guideline in guidelines:
            artifact_path = _support_path(target, guideline)
            body = strip_front_matter(read_guideline_body(index, guideline))
            supporting.append(BundleArtifact(artifact_path, body))
            entry = f"- [{guideline.display_title}]({_link_from_main(target, artifact_path)})"
            if guideline.description:
                entry += f": {guideline.description}"
            lines.append(entry)
        lines.append("")

    content = "\n".join(lines).rstrip("\n") + "\n"
    return (BundleArtifact(target.main_file, content), *supporting)


def assemble_bundle(
    index: MappingIndex,
    selection: SelectionResult,
    *,
    target: BundleTarget,
    mode: str = MODE_INLINE,
    include_timestamp: bool = False,
) -> BundlePlan:
    """
    Build the artifacts for ``target`` from ``selection``.

    The main file is always the first artifact. Without ``include_timestamp``
    the output depends only on the inputs, so rebuilding is a no-op.
    """
    if mode not in ALLOWED_MODES:
        raise ValueError(f"Unknown mode '{mode}'. Allowed values: {sorted(ALLOWED_MODES)}.")
    if not selection.guidelines:
        raise BundleError("No guidelines matched the selection; nothing to bundle.")

    header = _render_header(index, selection, target, include_timestamp=include_timestamp)
    if mode == MODE_LINKED:
        artifacts = _assemble_linked(index, selection, target, header)
    else:
        artifacts = _assemble_inline(index, selection, target, header)

    logger.info(
        "Assembled %s bundle for [bold]%s[/bold] with %d artifact(s)",
        mode,
        target.name,
        len(artifacts),
    )
    return BundlePlan(
        target=target,
        mode=mode,
        artifacts=artifacts,
        guideline_ids=selection.ids,
    )


def artifact_destination(output_dir: Path, artifact: BundleArtifact) -> Path:
    return output_dir.joinpath(*artifact.relative_path.split("/"))
