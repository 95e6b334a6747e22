"""Inner documentation extraction from Rust entry points."""

from __future__ import annotations

from .constants import HIDDEN_LINE_MARKER, INNER_DOC_PREFIX
from .fences import closes_fence, opens_fence, track_fence
from .models import DocLine, ExtractorContext, ExtractorState, FenceContext


def line_separator(crlf: bool = False) -> str:
    return "\r\n" if crlf else "\n"


def is_fence_delimiter(text: str) -> bool:
    """Check whether a documentation line opens a code fence.

    A fence is three or more backticks or tildes, indented by at most three
    columns and optionally followed by an info string such as ``rust`` or
    ``rust,no_run``.

    Examples:
        is_fence_delimiter("```")  # True
        is_fence_delimiter("~~~rust,ignore")  # True
        is_fence_delimiter("`inline`")  # False
    """
    return opens_fence(text)


def is_hidden_line(text: str) -> bool:
    """Check whether a code line is hidden from rendered documentation.

    Rustdoc hides code lines that consist of a single ``#`` or start with
    ``#`` followed by whitespace.

    Examples:
        is_hidden_line("# use std::io;")  # True
        is_hidden_line("#[derive(Debug)]")  # False
    """
    stripped = text.lstrip()
    if stripped == HIDDEN_LINE_MARKER:
        return True
    return stripped.startswith((f"{HIDDEN_LINE_MARKER} ", f"{HIDDEN_LINE_MARKER}\t"))


def classify_line(
    line: str, line_number: int = 0, fence: FenceContext | None = None
) -> DocLine | None:
    """Classify a single source line.

    Strips the ``//!`` marker and at most one following space. Lines that are
    not inner documentation comments (``///``, ``//``, code, blank lines)
    yield None. The fence context is only read, never updated.

    Args:
        line: Source line, with or without its line ending.
        line_number: One-based position of the line in the source file.
        fence: Code fence left open by the previous documentation lines.
            Only lines inside a fence can be hidden.

    Returns:
        DocLine | None: The documentation line, or None when the line is not
            part of the inner documentation.

    Examples:
        classify_line("//! # Title")  # DocLine(0, "# Title")
        classify_line("//! # let x = 1;", fence=FenceContext("`", 3)).hidden  # True
        classify_line("/// item doc")  # None
    """
    stripped = line.rstrip("\r\n").lstrip()
    if not stripped.startswith(INNER_DOC_PREFIX):
        return None

    text = stripped[len(INNER_DOC_PREFIX) :]
    if text.startswith(" "):
        text = text[1:]

    if fence is None or not fence.in_fence:
        return DocLine(line_number=line_number, text=text, fence=opens_fence(text))

    if closes_fence(fence, text):
        return DocLine(line_number=line_number, text=text, fence=True)

    return DocLine(line_number=line_number, text=text, hidden=is_hidden_line(text))


def _iter_source_lines(source: str):
    # Rust sources only break lines on LF; CR is dropped from CRLF endings.
    for line_number, line in enumerate(source.split("\n"), start=1):
        yield line_number, line.removesuffix("\r")


def _skip_before_block(ctx: ExtractorContext, line: str) -> bool:
    """Tell whether a line may precede the documentation block.

    Blank lines, comments and inner attributes (``#![...]``) are allowed
    before the first ``//!`` line. Anything else is code.
    """
    stripped = line.strip()
    if ctx.comment_depth or stripped.startswith("/*"):
        depth = ctx.comment_depth + stripped.count("/*") - stripped.count("*/")
        ctx.comment_depth = max(depth, 0)
        return True
    if ctx.attribute_depth or stripped.startswith("#!["):
        depth = ctx.attribute_depth + stripped.count("[") - stripped.count("]")
        ctx.attribute_depth = max(depth, 0)
        return True
    return not stripped or stripped.startswith("//")


def _advance(ctx: ExtractorContext, doc_line: DocLine | None, line: str = "") -> bool:
    """Update the extractor state for one classified line.

    Args:
        ctx: Extraction state to update.
        doc_line: Classification of the line, None for non-documentation.
        line: Raw source line, inspected before the block starts.

    Returns:
        bool: True when the line belongs to the documentation block.
    """
    if ctx.state is ExtractorState.ENDED:
        return False

    if ctx.state is ExtractorState.BEFORE_BLOCK:
        # A `//!` line inside a comment or attribute does not start the block.
        if doc_line is None or ctx.comment_depth or ctx.attribute_depth:
            if not _skip_before_block(ctx, line):
                ctx.state = ExtractorState.ENDED
            return False
        ctx.state = ExtractorState.IN_DOC_RUN

    if doc_line is None:
        ctx.state = ExtractorState.ENDED
        return False

    if doc_line.fence:
        track_fence(ctx.fence, doc_line.text)
        ctx.state = ExtractorState.IN_FENCE if ctx.fence.in_fence else ExtractorState.IN_DOC_RUN

    return True


def collect_doc_lines(source: str) -> list[DocLine]:
    """Collect the leading inner documentation run of a Rust source file.

    Only blank lines, comments and inner attributes may come before the first
    ``//!`` comment. Any other line there means the file has no leading
    documentation. After the run starts, the first line that is not an inner
    doc comment ends it.

    Args:
        source: Full text of the entry point.

    Returns:
        list[DocLine]: Documentation lines in source order, hidden lines
            included and flagged.
    """
    ctx = ExtractorContext()
    doc_lines: list[DocLine] = []

    for line_number, line in _iter_source_lines(source):
        doc_line = classify_line(line, line_number, fence=ctx.fence)
        if _advance(ctx, doc_line, line):
            doc_lines.append(doc_line)
        elif ctx.state is ExtractorState.ENDED:
            break

    return doc_lines


def extract_inner_doc(source: str, show_hidden_doc: bool = False, crlf: bool = False) -> str:
    """Extract the inner documentation of a Rust entry point as Markdown.

    Args:
        source: Full text of ``lib.rs`` or ``main.rs``.
        show_hidden_doc: Keep hidden code lines instead of dropping them.
        crlf: Join lines with ``\\r\\n`` instead of ``\\n``.

    Returns:
        str: The documentation text, or an empty string when the file has no
            leading inner documentation.

    Examples:
        extract_inner_doc("//! Hello\\n//! world\\n")  # "Hello\\nworld"
    """
    lines = [
        doc_line.text
        for doc_line in collect_doc_lines(source)
        if show_hidden_doc or not doc_line.hidden
    ]
    return line_separator(crlf).join(lines)
