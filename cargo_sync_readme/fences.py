"""Fenced code block detection shared by every line scanner.

Documentation lines, rewritten documentation and README lines all follow the
same rule: a fence opens with three or more backticks or tildes indented by at
most three columns, and closes with a run of the same character that is at
least as long and carries nothing else.
"""

from __future__ import annotations

from .constants import CLOSING_FENCE_MAX_INDENT, CODE_FENCE_PATTERN
from .models import FenceContext


def leading_whitespace_columns(line: str) -> int:
    """Compute the column width of leading whitespace.

    Tabs advance to the next multiple of four columns to match Markdown
    indentation rules.

    Examples:
        leading_whitespace_columns("    text")  # 4
        leading_whitespace_columns("\\ttext")  # 4
    """
    columns = 0
    for character in line:
        if character == " ":
            columns += 1
            continue
        if character == "\t":
            columns += 4 - (columns % 4)
            continue
        break
    return columns


def _match_opening_fence(line: str) -> tuple[str, int, int] | None:
    fence_match = CODE_FENCE_PATTERN.match(line)
    if not fence_match:
        return None

    indent_columns = leading_whitespace_columns(fence_match.group("indent") or "")
    if indent_columns > CLOSING_FENCE_MAX_INDENT:
        return None

    fence_sequence = fence_match.group("fence")
    # Backtick fences cannot carry backticks in their info string.
    if fence_sequence[0] == "`" and "`" in fence_match.group("info"):
        return None

    return fence_sequence[0], len(fence_sequence), indent_columns


def opens_fence(line: str) -> bool:
    """Check whether a line would open a fenced code block.

    Examples:
        opens_fence("```rust,no_run")  # True
        opens_fence("~~~")  # True
        opens_fence("```inline``` code")  # False
    """
    return _match_opening_fence(line) is not None


def closes_fence(ctx: FenceContext, line: str) -> bool:
    """Check whether a line closes the fence tracked by `ctx`, without updating it."""
    if not ctx.in_fence:
        return False

    if leading_whitespace_columns(line) > CLOSING_FENCE_MAX_INDENT:
        return False

    stripped_line = line.lstrip(" \t")
    if not stripped_line or stripped_line[0] != ctx.fence_char:
        return False

    fence_run_length = len(stripped_line) - len(stripped_line.lstrip(ctx.fence_char))
    if fence_run_length < ctx.fence_length:
        return False

    return not stripped_line[fence_run_length:].strip()


def try_open_fence(ctx: FenceContext, line: str) -> bool:
    """Detect the start of a fenced code block.

    Args:
        ctx: Fence context to update when a fence opens.
        line: Current line being scanned.

    Returns:
        bool: True when the line begins a fence and the context is updated.
    """
    if ctx.in_fence:
        return False

    opening = _match_opening_fence(line)
    if opening is None:
        return False

    ctx.fence_char, ctx.fence_length, ctx.fence_indent_columns = opening
    return True


def try_close_fence(ctx: FenceContext, line: str) -> bool:
    """Attempt to close the active fenced code block.

    Returns:
        bool: True when the line closes the fence; otherwise False.
    """
    if not closes_fence(ctx, line):
        return False

    ctx.fence_char = None
    ctx.fence_length = 0
    ctx.fence_indent_columns = 0
    return True


def track_fence(ctx: FenceContext, line: str) -> bool:
    """Open or close a fence on `line`.

    Returns:
        bool: True when the line is a fence delimiter.
    """
    if ctx.in_fence:
        return try_close_fence(ctx, line)
    return try_open_fence(ctx, line)
