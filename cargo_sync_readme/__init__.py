"""
cargo-sync-readme: keep a crate's README in sync with its Rust documentation.

This package can be used both as a Cargo subcommand and as a library.

CLI Usage:
    cargo sync-readme
    cargo sync-readme --check

Library Usage:
    from pathlib import Path
    from cargo_sync_readme import extract_inner_doc, transform_readme

    doc = extract_inner_doc(Path("src/lib.rs").read_text())
    result = transform_readme(Path("README.md").read_text(), doc, "mycrate", "src/lib.rs")
    new_readme = result.content
"""

from .constants import MARKER, MARKER_END, MARKER_START
from .exceptions import ManifestError, MarkerError, SyncError
from .extractor import classify_line, collect_doc_lines, extract_inner_doc
from .intralinks import docs_rs_url, rewrite_intralinks
from .manifest import Manifest, PreferDocFrom
from .markers import scan_markers
from .models import DocLine, MarkerKind, MarkerScan, TransformResult
from .transform import apply_markers, render_block, sync_readme, transform_readme

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "extract_inner_doc",
    "rewrite_intralinks",
    "scan_markers",
    "transform_readme",
    "sync_readme",
    # Building blocks
    "classify_line",
    "collect_doc_lines",
    "docs_rs_url",
    "apply_markers",
    "render_block",
    # Data models
    "DocLine",
    "MarkerKind",
    "MarkerScan",
    "TransformResult",
    "Manifest",
    "PreferDocFrom",
    # Markers
    "MARKER",
    "MARKER_START",
    "MARKER_END",
    # Exceptions
    "SyncError",
    "MarkerError",
    "ManifestError",
    # Version
    "__version__",
]
