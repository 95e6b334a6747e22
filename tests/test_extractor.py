from __future__ import annotations

import textwrap

from cargo_sync_readme.extractor import (
    classify_line,
    collect_doc_lines,
    extract_inner_doc,
    is_fence_delimiter,
    is_hidden_line,
)
from cargo_sync_readme.models import DocLine, FenceContext

BACKTICK_FENCE = FenceContext(fence_char="`", fence_length=3)


def _source(text: str) -> str:
    return textwrap.dedent(text).lstrip()


def test_classify_line_strips_marker_and_one_space():
    assert classify_line("//! Hello") == DocLine(line_number=0, text="Hello")
    assert classify_line("//!   indented").text == "  indented"
    assert classify_line("//!").text == ""
    assert classify_line("//!no space").text == "no space"


def test_classify_line_ignores_other_lines():
    assert classify_line("/// Item documentation") is None
    assert classify_line("// Regular comment") is None
    assert classify_line("fn main() {}") is None
    assert classify_line("") is None


def test_classify_line_keeps_line_number_and_drops_line_ending():
    line = classify_line("    //! nested\r\n", line_number=7)

    assert line == DocLine(line_number=7, text="nested")


def test_classify_line_flags_hidden_lines_only_inside_fences():
    assert classify_line("//! # use std::io;", fence=BACKTICK_FENCE).hidden is True
    assert classify_line("//! #", fence=BACKTICK_FENCE).hidden is True
    assert classify_line("//! # Heading").hidden is False
    assert classify_line("//! #[derive(Debug)]", fence=BACKTICK_FENCE).hidden is False


def test_classify_line_marks_fences_as_visible():
    opening = classify_line("//! ```rust,no_run")
    closing = classify_line("//! ```", fence=BACKTICK_FENCE)

    assert opening.fence is True
    assert closing.fence is True
    assert closing.hidden is False


def test_classify_line_only_closes_fence_with_matching_delimiter():
    assert classify_line("//! ~~~", fence=BACKTICK_FENCE).fence is False
    assert classify_line("//! ```rust", fence=BACKTICK_FENCE).fence is False
    assert classify_line("//! ````", fence=BACKTICK_FENCE).fence is True


def test_is_fence_delimiter():
    assert is_fence_delimiter("```")
    assert is_fence_delimiter("````")
    assert is_fence_delimiter("```rust")
    assert is_fence_delimiter("```rust,ignore")
    assert is_fence_delimiter("~~~")
    assert is_fence_delimiter("   ```")
    assert not is_fence_delimiter("    ```")
    assert not is_fence_delimiter("``")
    assert not is_fence_delimiter("Use `foo` here")
    assert not is_fence_delimiter("```inline``` code")


def test_is_hidden_line():
    assert is_hidden_line("# fn main() {}")
    assert is_hidden_line("    # let x = 1;")
    assert is_hidden_line("#")
    assert is_hidden_line("#\tindented")
    assert not is_hidden_line("#![allow(unused)]")
    assert not is_hidden_line("let x = 1; # not hidden")


def test_extract_inner_doc_reads_leading_run():
    source = _source(
        """
        //! # My crate
        //!
        //! Does things.

        /// Item docs are not included.
        pub fn run() {}
        """
    )

    assert extract_inner_doc(source) == "# My crate\n\nDoes things."


def test_extract_inner_doc_skips_lines_before_the_run():
    source = _source(
        """
        // Copyright (c) the authors.

        //! Documentation.
        use std::io;
        //! Not part of the leading run.
        """
    )

    assert extract_inner_doc(source) == "Documentation."


def test_extract_inner_doc_skips_comments_and_inner_attributes():
    source = _source(
        """
        /*
         * Licensed under the MIT license.
         */
        #![deny(missing_docs)]
        #![cfg_attr(
            docsrs,
            feature(doc_cfg)
        )]

        //! Crate documentation.
        """
    )

    assert extract_inner_doc(source) == "Crate documentation."


def test_extract_inner_doc_ignores_docs_after_code():
    source = _source(
        """
        use std::io;

        mod inner {
            //! Inner module docs.
        }
        """
    )

    assert extract_inner_doc(source) == ""
    assert collect_doc_lines(source) == []


def test_extract_inner_doc_ignores_doc_comments_inside_block_comments():
    source = _source(
        """
        /*
        //! Commented out.
        */
        //! Real documentation.
        """
    )

    assert extract_inner_doc(source) == "Real documentation."


def test_extract_inner_doc_drops_hidden_lines_in_tilde_fences():
    source = _source(
        """
        //! ~~~rust
        //! # use mycrate::Foo;
        //! let foo = Foo::new();
        //! ~~~
        //! # Heading
        """
    )

    assert extract_inner_doc(source) == "~~~rust\nlet foo = Foo::new();\n~~~\n# Heading"


def test_extract_inner_doc_keeps_fence_open_until_matching_delimiter():
    source = _source(
        """
        //! ````markdown
        //! ```
        //! # hidden
        //! ```
        //! ````
        //! # Heading
        """
    )

    assert extract_inner_doc(source).split("\n") == [
        "````markdown",
        "```",
        "```",
        "````",
        "# Heading",
    ]


def test_extract_inner_doc_without_documentation_is_empty():
    assert extract_inner_doc("fn main() {}\n") == ""
    assert extract_inner_doc("") == ""


def test_extract_inner_doc_drops_hidden_lines_in_code_blocks():
    source = _source(
        """
        //! Example:
        //!
        //! ```
        //! # use mycrate::Foo;
        //! let foo = Foo::new();
        //! ```
        //!
        //! # Not hidden
        """
    )

    assert extract_inner_doc(source) == (
        "Example:\n\n```\nlet foo = Foo::new();\n```\n\n# Not hidden"
    )


def test_extract_inner_doc_shows_hidden_lines_on_request():
    source = _source(
        """
        //! ```rust
        //! # use mycrate::Foo;
        //! let foo = Foo::new();
        //! ```
        """
    )

    assert extract_inner_doc(source, show_hidden_doc=True) == (
        "```rust\n# use mycrate::Foo;\nlet foo = Foo::new();\n```"
    )


def test_extract_inner_doc_tracks_several_code_blocks():
    source = _source(
        """
        //! ```
        //! # fn hidden_one() {}
        //! visible_one();
        //! ```
        //! # Section
        //! ```rust,no_run
        //! # fn hidden_two() {}
        //! visible_two();
        //! ```
        """
    )

    assert extract_inner_doc(source).split("\n") == [
        "```",
        "visible_one();",
        "```",
        "# Section",
        "```rust,no_run",
        "visible_two();",
        "```",
    ]


def test_extract_inner_doc_newline_convention():
    source = "//! first\r\n//! second\r\n\r\nfn main() {}\r\n"

    assert extract_inner_doc(source) == "first\nsecond"
    assert extract_inner_doc(source, crlf=True) == "first\r\nsecond"


def test_collect_doc_lines_reports_source_line_numbers():
    source = "\n//! a\n//! ```\n//! # b\n//! ```\n"

    assert collect_doc_lines(source) == [
        DocLine(line_number=2, text="a"),
        DocLine(line_number=3, text="```", fence=True),
        DocLine(line_number=4, text="# b", hidden=True),
        DocLine(line_number=5, text="```", fence=True),
    ]
