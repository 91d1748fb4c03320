"""Tests for document structure: pairing of documentation and code blocks."""

from __future__ import annotations

import time

from picolit.ast import TextRun
from tests.conftest import assert_text, code_text


class TestEmptyDocument:
    def test_empty(self, parse_source):
        doc = parse_source("")
        assert doc.blocks == ()

    def test_only_newlines_are_code(self, parse_source):
        doc = parse_source("\n\n")
        assert len(doc.blocks) == 1
        assert code_text(doc.blocks[0]) == ["", ""]


class TestPureCode:
    def test_single_code_block(self, parse_source):
        source = "int main() {\n    return 0;\n}\n"
        doc = parse_source(source)
        assert len(doc.blocks) == 1
        block = doc.blocks[0]
        assert block.doc.is_empty
        assert block.doc.elements == ()
        assert block.code.as_mapping() == {
            1: "int main() {",
            2: "    return 0;",
            3: "}",
        }
        assert block.start_line == 1

    def test_empty_doc_placeholder_anchored_at_code(self, parse_source):
        doc = parse_source("x = 1\n")
        assert doc.blocks[0].doc.start_line == 1

    def test_blank_lines_kept_verbatim(self, parse_source):
        doc = parse_source("a\n\n   \nb\n")
        assert code_text(doc.blocks[0]) == ["a", "", "   ", "b"]

    def test_last_line_without_newline(self, parse_source):
        doc = parse_source("a\nb")
        assert doc.blocks[0].code.as_mapping() == {1: "a", 2: "b"}

    def test_crlf_stripped_from_code(self, parse_source):
        doc = parse_source("a\r\nb\r\n")
        assert code_text(doc.blocks[0]) == ["a", "b"]

    def test_plain_comments_are_code(self, parse_source):
        doc = parse_source("// just a comment\n/* and another */\n")
        assert len(doc.blocks) == 1
        assert doc.blocks[0].doc.is_empty
        assert len(doc.blocks[0].code.lines) == 2


class TestPairing:
    def test_doc_then_code_is_one_block(self, parse_source):
        doc = parse_source("/// Adds one.\nint inc(int x);\n")
        assert len(doc.blocks) == 1
        block = doc.blocks[0]
        assert_text(block.doc.elements[0], "Adds one.", 1)
        assert block.code.as_mapping() == {2: "int inc(int x);"}
        assert block.start_line == 1

    def test_code_doc_code(self, parse_source):
        source = "package x;\n/// Doc\nclass A {}\n"
        doc = parse_source(source)
        assert len(doc.blocks) == 2
        assert doc.blocks[0].doc.is_empty
        assert code_text(doc.blocks[0]) == ["package x;"]
        assert_text(doc.blocks[1].doc.elements[0], "Doc", 2)
        assert code_text(doc.blocks[1]) == ["class A {}"]
        assert doc.blocks[1].start_line == 2

    def test_trailing_doc_is_standalone(self, parse_source):
        doc = parse_source("code();\n/// closing remarks\n")
        assert len(doc.blocks) == 2
        last = doc.blocks[1]
        assert last.code.is_empty
        assert last.start_line == 2
        assert_text(last.doc.elements[0], "closing remarks", 2)

    def test_doc_only_file(self, parse_source):
        doc = parse_source("/// one\n/// two\n")
        assert len(doc.blocks) == 1
        assert doc.blocks[0].code.is_empty
        assert_text(doc.blocks[0].doc.elements[0], "one\ntwo", 1)

    def test_blank_line_splits_documentation(self, parse_source):
        doc = parse_source("/// first\n\n/// second\nx\n")
        assert len(doc.blocks) == 2
        assert_text(doc.blocks[0].doc.elements[0], "first", 1)
        assert code_text(doc.blocks[0]) == [""]
        assert_text(doc.blocks[1].doc.elements[0], "second", 3)
        assert code_text(doc.blocks[1]) == ["x"]

    def test_blocks_in_source_order(self, parse_source):
        source = "/// a\n1\n/// b\n2\n/// c\n3\n"
        doc = parse_source(source)
        starts = [b.start_line for b in doc.blocks]
        assert starts == [1, 3, 5]


class TestTextRuns:
    def test_marker_and_one_space_stripped(self, parse_source):
        doc = parse_source("///  indented\n")
        assert_text(doc.blocks[0].doc.elements[0], " indented", 1)

    def test_marker_without_space(self, parse_source):
        doc = parse_source("///tight\n")
        assert_text(doc.blocks[0].doc.elements[0], "tight", 1)

    def test_leading_whitespace_before_marker(self, parse_source):
        doc = parse_source("    /// nested\n")
        assert_text(doc.blocks[0].doc.elements[0], "nested", 1)

    def test_empty_doc_line_at_end_of_input(self, parse_source):
        doc = parse_source("x\n///")
        assert_text(doc.blocks[1].doc.elements[0], "", 2)

    def test_trailing_whitespace_preserved(self, parse_source):
        doc = parse_source("/// keep  \n")
        assert_text(doc.blocks[0].doc.elements[0], "keep  ", 1)

    def test_consecutive_lines_merge(self, parse_source):
        doc = parse_source("/// a\n/// b\n/// c\nx\n")
        elements = doc.blocks[0].doc.elements
        assert len(elements) == 1
        assert isinstance(elements[0], TextRun)
        assert elements[0].text == "a\nb\nc"


class TestLargeInputs:
    """Building is linear: a block holding every line of a big file stays fast."""

    LINES = 100_000

    def test_long_code_block(self, parse_source):
        started = time.perf_counter()
        doc = parse_source("x = 1\n" * self.LINES)
        elapsed = time.perf_counter() - started
        assert len(doc.blocks) == 1
        assert doc.blocks[0].code.end_line == self.LINES
        assert elapsed < 10.0, f"{self.LINES} code lines took {elapsed:.1f}s"

    def test_long_text_run(self, parse_source):
        started = time.perf_counter()
        doc = parse_source("/// prose\n" * self.LINES + "x\n")
        elapsed = time.perf_counter() - started
        run = doc.blocks[0].doc.elements[0]
        assert isinstance(run, TextRun)
        assert run.text.count("\n") == self.LINES - 1
        assert elapsed < 10.0, f"{self.LINES} documentation lines took {elapsed:.1f}s"

    def test_many_blocks(self, parse_source):
        started = time.perf_counter()
        doc = parse_source("/// doc\ncode\n" * (self.LINES // 2))
        elapsed = time.perf_counter() - started
        assert len(doc.blocks) == self.LINES // 2
        assert elapsed < 10.0, f"{self.LINES // 2} blocks took {elapsed:.1f}s"
