"""Data models for cargo-sync-readme."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


@dataclass
class FenceContext:
    """Track the fenced code block open while scanning Markdown lines.

    Attributes:
        fence_char: Fence character that opened the block, if any.
        fence_length: Number of fence characters that opened the block.
        fence_indent_columns: Indentation width preceding the opening fence.
    """

    fence_char: str | None = None
    fence_length: int = 0
    fence_indent_columns: int = 0

    @property
    def in_fence(self) -> bool:
        return self.fence_char is not None


class ExtractorState(Enum):
    """States of the inner-documentation extractor.

    Attributes:
        BEFORE_BLOCK: No `//!` line seen yet.
        IN_DOC_RUN: Inside the leading doc-comment run, outside code fences.
        IN_FENCE: Inside a fenced code block of the doc-comment run.
        ENDED: The doc-comment run is over; remaining lines are ignored.
    """

    BEFORE_BLOCK = auto()
    IN_DOC_RUN = auto()
    IN_FENCE = auto()
    ENDED = auto()


@dataclass
class ExtractorContext:
    """Mutable state for a single extraction pass.

    Attributes:
        state: Current extractor state.
        fence: Code fence opened by the documentation lines, if any.
        comment_depth: Nesting of ``/* */`` comments open before the block.
        attribute_depth: Unclosed brackets of a ``#![...]`` attribute before
            the block.
    """

    state: ExtractorState = ExtractorState.BEFORE_BLOCK
    fence: FenceContext = field(default_factory=FenceContext)
    comment_depth: int = 0
    attribute_depth: int = 0


@dataclass(frozen=True)
class DocLine:
    """A documentation line with its `//!` prefix removed.

    Attributes:
        line_number: One-based line number in the source file.
        text: Line content without the comment marker.
        hidden: Whether the line is a hidden line inside a code fence.
        fence: Whether the line is a code-fence delimiter.
    """

    line_number: int
    text: str
    hidden: bool = False
    fence: bool = False


class MarkerKind(Enum):
    """Outcome of scanning a document for synchronization markers."""

    PLACEHOLDER = auto()
    BLOCK = auto()
    INVALID = auto()


@dataclass(frozen=True)
class MarkerScan:
    """Marker positions found in a document.

    Attributes:
        kind: Which marker configuration was found.
        placeholder_line: Zero-based index of the placeholder marker line.
        start_line: Zero-based index of the start marker line.
        end_line: Zero-based index of the end marker line.
        reason: Why the scan failed, set only for `MarkerKind.INVALID`.
    """

    kind: MarkerKind
    placeholder_line: int | None = None
    start_line: int | None = None
    end_line: int | None = None
    reason: str | None = None


@dataclass
class TransformResult:
    """New document content plus the warnings raised while producing it."""

    content: str
    warnings: list[str] = field(default_factory=list)

