"""Rewriting of ``crate::`` intra-doc links into docs.rs URLs."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

from .constants import (
    DOCS_RS_URL,
    INTRALINK_PATTERN,
    LOOSE_INTRALINK_PATTERN,
    REFERENCE_INTRALINK_PATTERN,
)
from .fences import track_fence
from .models import FenceContext


def is_escaped(text: str, pos: int) -> bool:
    """Determine whether a character is escaped by preceding backslashes.

    Counts consecutive backslashes immediately before `pos`; an odd count marks
    the character as escaped.

    Examples:
        is_escaped("\\\\`", 2)  # False, two backslashes
        is_escaped("\\`", 1)  # True, one backslash
    """
    backslash_count = 0
    i = pos - 1
    while i >= 0 and text[i] == "\\":
        backslash_count += 1
        i -= 1
    return backslash_count % 2 == 1


def find_inline_code_spans(text: str) -> list[tuple[int, int]]:
    """Locate inline code spans delimited by equal-length backtick runs.

    Args:
        text: The text to scan for inline code spans.

    Returns:
        list[tuple[int, int]]: Start (inclusive) and end (exclusive) positions
            for each inline code span.

    Examples:
        find_inline_code_spans("`code`")  # [(0, 6)]
        find_inline_code_spans("[``Foo``](crate::Foo)")  # [(1, 8)]
    """
    spans = []
    i = 0

    while i < len(text):
        if text[i] != "`" or is_escaped(text, i):
            i += 1
            continue

        start = i
        while i < len(text) and text[i] == "`":
            i += 1
        opening_length = i - start

        while i < len(text):
            if text[i] != "`":
                i += 1
                continue
            run_start = i
            while i < len(text) and text[i] == "`":
                i += 1
            if i - run_start == opening_length:
                spans.append((start, i))
                break
        else:
            # Unmatched opener: the backticks are literal text.
            i = start + opening_length

    return spans


def is_binary_entry_point(entry_point: str | os.PathLike) -> bool:
    """Tell whether an entry point is a binary target.

    ``main.rs`` files and files under a ``bin`` directory are binaries;
    anything else is treated as a library root.
    """
    path = Path(entry_point)
    return path.name == "main.rs" or path.parent.name == "bin"


def docs_rs_target(crate_name: str, entry_point: str | os.PathLike | None = None) -> str:
    """Return the docs.rs path segment naming the documented target.

    Libraries are documented under the crate name; binaries under their own
    name (the file stem, or the crate name for ``main.rs``). Hyphens become
    underscores, as rustdoc does.

    Examples:
        docs_rs_target("my-crate")  # "my_crate"
        docs_rs_target("tools", "src/bin/fmt-check.rs")  # "fmt_check"
    """
    name = crate_name
    if entry_point is not None and is_binary_entry_point(entry_point):
        path = Path(entry_point)
        if path.stem != "main":
            name = path.stem
        elif path.parent.parent.name == "bin":
            name = path.parent.name
    return name.replace("-", "_")


def docs_rs_url(
    crate_name: str, item_path: str, entry_point: str | os.PathLike | None = None
) -> str:
    """Build the docs.rs URL for a ``::``-separated item path.

    Examples:
        docs_rs_url("mycrate", "foo::Bar")
        # "https://docs.rs/mycrate/latest/mycrate/foo/Bar"
    """
    return DOCS_RS_URL.format(
        crate=crate_name,
        target=docs_rs_target(crate_name, entry_point),
        path=item_path.replace("::", "/"),
    )


def _rewrite_line(
    line: str,
    crate_name: str,
    entry_point: str | os.PathLike | None,
    warn: Callable[[str], None] | None,
) -> str:
    reference = REFERENCE_INTRALINK_PATTERN.match(line)
    if reference is not None and warn is not None:
        warn(f'unsupported reference-style intra-link "{reference.group("dest")}" left unchanged')

    # Hide inline code behind placeholders so link text may contain it
    # while link syntax inside code stays literal.
    code_texts = []
    parts = []
    offset = 0
    for start, end in find_inline_code_spans(line):
        parts.append(line[offset:start])
        code_texts.append(line[start:end])
        parts.append(f"\x00CODE_{len(code_texts) - 1}\x00")
        offset = end
    parts.append(line[offset:])
    masked = "".join(parts)

    def _replace(match) -> str:
        url = docs_rs_url(crate_name, match.group("path"), entry_point)
        return f"[{match.group('text')}]({url})"

    masked = INTRALINK_PATTERN.sub(_replace, masked)

    if warn is not None:
        for loose in LOOSE_INTRALINK_PATTERN.finditer(masked):
            warn(f'unsupported intra-link "{loose.group("dest")}" left unchanged')

    for index, code_text in enumerate(code_texts):
        masked = masked.replace(f"\x00CODE_{index}\x00", code_text)
    return masked


def rewrite_intralinks(
    doc: str,
    crate_name: str,
    entry_point: str | os.PathLike | None = None,
    warn: Callable[[str], None] | None = None,
) -> str:
    """Rewrite ``[text](crate::path::Item)`` links to absolute docs.rs links.

    Only inline links whose destination is exactly ``crate::`` followed by a
    ``::``-separated identifier path are rewritten. Links inside fenced code
    blocks or inline code are left alone. Destinations that start with
    ``crate::`` but do not match that form are kept as they are and reported
    through `warn`.

    Args:
        doc: Extracted documentation text.
        crate_name: Name of the crate as published on crates.io.
        entry_point: Path of the documented entry point, used to tell
            libraries from binaries.
        warn: Optional callback receiving one message per unsupported link.

    Returns:
        str: Documentation with supported intra-links rewritten. Line endings
            are preserved.

    Examples:
        rewrite_intralinks("[see](crate::foo::Bar)", "mycrate")
        # "[see](https://docs.rs/mycrate/latest/mycrate/foo/Bar)"
    """
    rewritten = []
    fence = FenceContext()

    for line in doc.splitlines(keepends=True):
        if track_fence(fence, line) or fence.in_fence:
            rewritten.append(line)
            continue

        rewritten.append(_rewrite_line(line, crate_name, entry_point, warn))

    return "".join(rewritten)
