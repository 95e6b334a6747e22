"""Splicing of extracted documentation into a README."""

from __future__ import annotations

import os
import re

from .constants import MARKER_END, MARKER_START
from .exceptions import MarkerError
from .extractor import extract_inner_doc, line_separator
from .intralinks import rewrite_intralinks
from .markers import scan_markers
from .models import MarkerKind, MarkerScan, TransformResult

_NEWLINE_PATTERN = re.compile(r"\r?\n")


def render_block(doc: str, crlf: bool = False) -> str:
    """Frame documentation with the start and end markers.

    Line breaks inside `doc` are normalized to the requested convention. The
    returned text has no trailing line break.

    Raises:
        MarkerError: If a documentation line is the end marker on its own.
            The next run would close the region on that line.

    Examples:
        render_block("Hello")
        # "<!-- cargo-sync-readme start -->\\n\\nHello\\n\\n<!-- cargo-sync-readme end -->"
    """
    newline = line_separator(crlf)
    if not doc:
        return newline.join([MARKER_START, "", MARKER_END])
    lines = _NEWLINE_PATTERN.split(doc)
    if any(line.strip() == MARKER_END for line in lines):
        raise MarkerError("documentation contains the end marker on a line of its own")
    return newline.join([MARKER_START, "", *lines, "", MARKER_END])


def _line_ending(line: str) -> str:
    parts = line.splitlines()
    return line[len(parts[0]) :] if parts else ""


def apply_markers(readme: str, doc: str, scan: MarkerScan, crlf: bool = False) -> str:
    """Replace the marked region of a README with `doc`.

    Args:
        readme: Original README content.
        doc: Documentation to insert, already rewritten.
        scan: Result of `scan_markers` on `readme`.
        crlf: Use ``\\r\\n`` line breaks inside the inserted region.

    Returns:
        str: New README content. Text before the placeholder or start marker
            and after the placeholder or end marker is copied unchanged.

    Raises:
        MarkerError: If `scan` did not resolve a placeholder or a block.
    """
    if scan.kind is MarkerKind.PLACEHOLDER:
        first_line = last_line = scan.placeholder_line
    elif scan.kind is MarkerKind.BLOCK:
        first_line, last_line = scan.start_line, scan.end_line
    else:
        raise MarkerError(scan.reason or "invalid markers")

    lines = readme.splitlines(keepends=True)
    block = render_block(doc, crlf)
    if _line_ending(lines[last_line]):
        block += line_separator(crlf)

    return "".join(lines[:first_line]) + block + "".join(lines[last_line + 1 :])


def transform_readme(
    readme: str,
    doc: str,
    crate_name: str,
    entry_point: str | os.PathLike | None = None,
    crlf: bool = False,
) -> TransformResult:
    """Synchronize a README with already extracted documentation.

    Intra-links in `doc` are rewritten before it is inserted. Unsupported
    intra-links do not stop the transformation; they are reported in the
    result's warnings.

    Args:
        readme: Original README content.
        doc: Extracted documentation (see `extract_inner_doc`).
        crate_name: Crate name used to build docs.rs links.
        entry_point: Path of the documented entry point.
        crlf: Use ``\\r\\n`` line breaks inside the inserted region.

    Returns:
        TransformResult: The new README content and collected warnings.

    Raises:
        MarkerError: If the markers are missing or ambiguous, or if `doc`
            holds a lone end marker line. No content is produced in that case.

    Examples:
        result = transform_readme(readme, doc, "mycrate", "src/lib.rs")
        if result.content != readme:
            ...
    """
    scan = scan_markers(readme)
    if scan.kind is MarkerKind.INVALID:
        raise MarkerError(scan.reason)

    warnings: list[str] = []
    doc = rewrite_intralinks(doc, crate_name, entry_point, warn=warnings.append)
    return TransformResult(content=apply_markers(readme, doc, scan, crlf), warnings=warnings)


def sync_readme(
    entry_source: str,
    readme: str,
    crate_name: str,
    entry_point: str | os.PathLike | None = None,
    show_hidden_doc: bool = False,
    crlf: bool = False,
) -> TransformResult:
    """Run the whole pipeline: extract, rewrite links, splice.

    Raises:
        MarkerError: If the README markers are missing or ambiguous, or the
            documentation holds a lone end marker line.
    """
    doc = extract_inner_doc(entry_source, show_hidden_doc=show_hidden_doc, crlf=crlf)
    return transform_readme(readme, doc, crate_name, entry_point=entry_point, crlf=crlf)
