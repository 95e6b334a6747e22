"""Detection of synchronization markers in a README."""

from __future__ import annotations

from .constants import MARKER, MARKER_END, MARKER_START
from .fences import track_fence
from .models import FenceContext, MarkerKind, MarkerScan


def _resolve(placeholders: list[int], starts: list[int], ends: list[int]) -> MarkerScan:
    if not placeholders and not starts and not ends:
        return MarkerScan(MarkerKind.INVALID, reason="no synchronization markers found")

    if placeholders and (starts or ends):
        return MarkerScan(
            MarkerKind.INVALID, reason="placeholder marker found alongside start/end markers"
        )

    if placeholders:
        if len(placeholders) > 1:
            return MarkerScan(MarkerKind.INVALID, reason="multiple placeholder markers found")
        return MarkerScan(MarkerKind.PLACEHOLDER, placeholder_line=placeholders[0])

    if len(starts) > 1:
        return MarkerScan(MarkerKind.INVALID, reason="multiple start markers found")
    if len(ends) > 1:
        return MarkerScan(MarkerKind.INVALID, reason="multiple end markers found")
    if not ends:
        return MarkerScan(MarkerKind.INVALID, reason="start marker without matching end marker")
    if not starts:
        return MarkerScan(MarkerKind.INVALID, reason="end marker without matching start marker")
    if starts[0] > ends[0]:
        return MarkerScan(MarkerKind.INVALID, reason="start marker found after end marker")

    return MarkerScan(MarkerKind.BLOCK, start_line=starts[0], end_line=ends[0])


def scan_markers(document: str) -> MarkerScan:
    """Locate the synchronization markers of a README.

    A marker only counts when it stands alone on its line (surrounding
    whitespace allowed) outside fenced code blocks. Once a start marker is
    found, the region it opens is opaque: placeholders, start markers and
    fences inside it are ignored and the first end marker closes it.

    Args:
        document: Full README content.

    Returns:
        MarkerScan: `MarkerKind.PLACEHOLDER` with the placeholder line,
            `MarkerKind.BLOCK` with the start and end lines, or
            `MarkerKind.INVALID` with a reason. Line numbers index
            ``document.splitlines(keepends=True)``.

    Examples:
        scan_markers("# Title\\n<!-- cargo-sync-readme -->\\n").placeholder_line  # 1
        scan_markers("nothing here").reason  # "no synchronization markers found"
    """
    placeholders: list[int] = []
    starts: list[int] = []
    ends: list[int] = []

    ctx = FenceContext()
    in_region = False

    for line_number, line in enumerate(document.splitlines(keepends=True)):
        marker = line.strip()

        if in_region:
            if marker == MARKER_END:
                ends.append(line_number)
                in_region = False
            continue

        if track_fence(ctx, line) or ctx.in_fence:
            continue

        if marker == MARKER:
            placeholders.append(line_number)
        elif marker == MARKER_START:
            starts.append(line_number)
            in_region = True
        elif marker == MARKER_END:
            ends.append(line_number)

    return _resolve(placeholders, starts, ends)
