"""Constants used across the cargo-sync-readme package."""

from __future__ import annotations

import re

# README markers
MARKER = "<!-- cargo-sync-readme -->"
MARKER_START = "<!-- cargo-sync-readme start -->"
MARKER_END = "<!-- cargo-sync-readme end -->"

# Rust source patterns
INNER_DOC_PREFIX = "//!"
HIDDEN_LINE_MARKER = "#"

# Markdown code fences, in documentation and in the target document
CODE_FENCE_PATTERN = re.compile(r"^(?P<indent>\s{0,3})(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
CLOSING_FENCE_MAX_INDENT = 3

# Intra-links
RUST_IDENT = r"[A-Za-z_][A-Za-z0-9_]*"
INTRALINK_PATTERN = re.compile(
    rf"(?<!\\)\[(?P<text>[^\]]*)\]\(crate::(?P<path>{RUST_IDENT}(?:::{RUST_IDENT})*)\)"
)
LOOSE_INTRALINK_PATTERN = re.compile(r"(?<!\\)\[[^\]]*\]\(\s*(?P<dest>crate::[^)\s]*)")
REFERENCE_INTRALINK_PATTERN = re.compile(r"^\s{0,3}\[[^\]]+\]:\s*(?P<dest>crate::\S*)")
DOCS_RS_URL = "https://docs.rs/{crate}/latest/{target}/{path}"

# Limits
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
