from __future__ import annotations

import string

from hypothesis import given
from hypothesis import strategies as st

from cargo_sync_readme.constants import MARKER, MARKER_END, MARKER_START
from cargo_sync_readme.extractor import extract_inner_doc
from cargo_sync_readme.markers import scan_markers
from cargo_sync_readme.transform import sync_readme

# No backticks, tildes or angle brackets: plain lines never open a fence or
# look like a marker.
plain_line = st.text(alphabet=string.ascii_letters + string.digits + " #-*.,()[]:", max_size=30)
plain_lines = st.lists(plain_line, max_size=8)
newline = st.sampled_from(["\n", "\r\n"])


def _source(doc_lines: list[str]) -> str:
    return "".join(f"//! {line}\n" for line in doc_lines) + "\npub fn f() {}\n"


@given(plain_lines, plain_lines, plain_lines, newline, st.booleans())
def test_sync_is_idempotent(prefix, suffix, doc_lines, line_break, crlf):
    readme = "".join(f"{line}{line_break}" for line in [*prefix, MARKER, *suffix])
    source = _source(doc_lines)

    first = sync_readme(source, readme, "mycrate", crlf=crlf).content
    second = sync_readme(source, first, "mycrate", crlf=crlf).content

    assert second == first


doc_line_with_markers = st.one_of(plain_line, st.sampled_from([MARKER, MARKER_START, "```", "~~~"]))


@given(plain_lines, plain_lines, st.lists(doc_line_with_markers, max_size=10))
def test_sync_is_idempotent_when_docs_contain_markers_and_fences(prefix, suffix, doc_lines):
    readme = "".join(f"{line}\n" for line in [*prefix, MARKER, *suffix])
    source = _source(doc_lines)

    first = sync_readme(source, readme, "mycrate").content
    second = sync_readme(source, first, "mycrate").content

    assert second == first


@given(plain_lines, plain_lines, plain_lines, newline, st.booleans())
def test_sync_preserves_text_around_markers(prefix, suffix, doc_lines, line_break, crlf):
    before = "".join(f"{line}{line_break}" for line in prefix)
    after = "".join(f"{line}{line_break}" for line in suffix)
    readme = f"{before}{MARKER}{line_break}{after}"

    content = sync_readme(_source(doc_lines), readme, "mycrate", crlf=crlf).content

    assert content.startswith(before + MARKER_START)
    assert content.endswith(MARKER_END + ("\r\n" if crlf else "\n") + after)
    assert content.count(MARKER_START) == 1
    assert content.count(MARKER_END) == 1


@given(plain_lines, st.lists(st.tuples(st.booleans(), plain_line), max_size=8))
def test_hidden_lines_are_dropped_only_inside_fences(outside, code):
    doc_lines = [f"# {line}" for line in outside] + ["```"]
    doc_lines += [f"# {text}" if hidden else f"x{text}" for hidden, text in code]
    doc_lines.append("```")
    source = _source(doc_lines)

    visible = extract_inner_doc(source).split("\n")
    everything = extract_inner_doc(source, show_hidden_doc=True).split("\n")

    assert visible[: len(outside)] == [f"# {line}" for line in outside]
    assert visible[len(outside) :] == ["```", *(f"x{text}" for hidden, text in code if not hidden), "```"]
    assert everything == doc_lines


@given(st.text(max_size=200))
def test_scan_markers_is_deterministic(content: str):
    assert scan_markers(content) == scan_markers(content)
