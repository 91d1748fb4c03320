"""Backtracking grammar that splits source text into documentation and code.

Rules are methods of ``Grammar``. Each takes a ``Cursor`` and returns either
``Ok`` (the match, the cursor after it, and the furthest failed attempt seen
on the way) or ``Fail``. Cursors are values, so ordered choice is just trying
the next alternative with the same cursor.

    SourceFile      = (Block / DocBlock / CodeBlock)+
    Block           = DocBlock CodeBlock
    DocBlock        = (Directive / TextRun)+
    CodeBlock       = (!DocLineStart RemainingLine)+
    Directive       = DocLineStart '@' (LongDirective / ShortDirective)
    LongDirective   = (DOC / EXAMPLE) DocRemainder TextRun?
    ShortDirective  = (AUTHOR / ORG / COPYRIGHT) DocRemainder
    TextRun         = (DocLineStart !DirectiveHead DocRemainder)+
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from picolit import builder
from picolit.ast import (
    Block,
    CodeBlock,
    CodeLine,
    Directive,
    DirectiveKind,
    DocBlock,
    DocElement,
    SourceFile,
    TextRun,
)
from picolit.cursor import SPACE, Cursor
from picolit.markers import Markers

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Fail:
    """A failed match: where it failed and what was expected there."""

    cursor: Cursor
    expected: str


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    cursor: Cursor
    failure: Fail | None = None


def furthest(first: Fail, *others: Fail | None) -> Fail:
    """Return the failure that got furthest into the input (earliest on ties)."""
    best = first
    for fail in others:
        if fail is not None and fail.cursor.offset > best.cursor.offset:
            best = fail
    return best


def _merge(failure: Fail | None, other: Fail | None) -> Fail | None:
    if failure is None:
        return other
    return furthest(failure, other)


def _optional_space(cursor: Cursor) -> Cursor:
    if cursor.peek() and cursor.peek() in SPACE:
        return cursor.advance()
    return cursor


def _is_word_char(ch: str) -> bool:
    return bool(ch) and (ch.isalnum() or ch == "_")


class Grammar:
    """Documentation grammar for one comment-marker configuration."""

    def __init__(self, markers: Markers) -> None:
        self._markers = markers

    @property
    def markers(self) -> Markers:
        return self._markers

    # ------------------------------------------------------------------
    # Top level
    # ------------------------------------------------------------------

    def source_file(self, cursor: Cursor) -> Ok[SourceFile] | Fail:
        if cursor.at_end():
            return Ok(builder.source_file(()), cursor)

        blocks: list[Block] = []
        failure: Fail | None = None
        while True:
            result = self._any_block(cursor)
            if isinstance(result, Fail):
                stop = furthest(result, failure)
                break
            failure = _merge(failure, result.failure)
            blocks.append(result.value)
            cursor = result.cursor

        # Every alternative failed at or beyond the cursor, so ``stop`` is
        # where the input stopped matching
        if cursor.at_end() and not cursor.in_comment:
            return Ok(builder.source_file(blocks), cursor, stop)
        return stop

    def _any_block(self, cursor: Cursor) -> Ok[Block] | Fail:
        paired = self.block(cursor)
        if isinstance(paired, Ok):
            return paired

        doc = self.doc_block(cursor)
        if isinstance(doc, Ok):
            code = builder.empty_code_block(doc.cursor.line)
            return Ok(builder.pair(doc.value, code), doc.cursor, furthest(paired, doc.failure))

        code_only = self.code_block(cursor)
        if isinstance(code_only, Ok):
            block = builder.pair(builder.empty_doc_block(cursor.line), code_only.value)
            return Ok(block, code_only.cursor, furthest(paired, doc, code_only.failure))

        return furthest(paired, doc, code_only)

    def block(self, cursor: Cursor) -> Ok[Block] | Fail:
        doc = self.doc_block(cursor)
        if isinstance(doc, Fail):
            return doc
        code = self.code_block(doc.cursor)
        if isinstance(code, Fail):
            return furthest(code, doc.failure)
        block = builder.pair(doc.value, code.value)
        return Ok(block, code.cursor, _merge(code.failure, doc.failure))

    # ------------------------------------------------------------------
    # Documentation
    # ------------------------------------------------------------------

    def doc_block(self, cursor: Cursor) -> Ok[DocBlock] | Fail:
        start_line = cursor.line
        elements: list[DocElement] = []
        failure: Fail | None = None
        while True:
            result = self._doc_element(cursor)
            if isinstance(result, Fail):
                stop = furthest(result, failure)
                break
            failure = _merge(failure, result.failure)
            elements.append(result.value)
            cursor = result.cursor

        if not elements:
            return stop
        # The last element ends on the line before the cursor it left behind
        return Ok(builder.doc_block(start_line, elements, cursor.line - 1), cursor, stop)

    def _doc_element(self, cursor: Cursor) -> Ok[DocElement] | Fail:
        directive = self.directive(cursor)
        if isinstance(directive, Ok):
            return directive
        text = self.text_run(cursor)
        if isinstance(text, Ok):
            return Ok(text.value, text.cursor, furthest(directive, text.failure))
        return furthest(directive, text)

    def directive(self, cursor: Cursor) -> Ok[Directive] | Fail:
        start = self._doc_line_start(cursor)
        if isinstance(start, Fail):
            return start
        head = self._directive_head(start.cursor)
        if isinstance(head, Fail):
            return head
        rest = self._doc_remainder(head.cursor)
        if isinstance(rest, Fail):
            return rest

        directive = Directive(head.value, rest.value.strip(), start.cursor.line)
        if not head.value.is_long:
            return Ok(directive, rest.cursor, rest.failure)

        extended = self.text_run(rest.cursor)
        if isinstance(extended, Fail):
            return Ok(directive, rest.cursor, furthest(extended, rest.failure))
        return Ok(
            builder.extend_directive(directive, extended.value),
            extended.cursor,
            _merge(extended.failure, rest.failure),
        )

    def text_run(self, cursor: Cursor) -> Ok[TextRun] | Fail:
        first_line = cursor.line
        parts: list[str] = []
        failure: Fail | None = None
        while True:
            result = self._prose_line(cursor)
            if isinstance(result, Fail):
                stop = furthest(result, failure)
                break
            failure = _merge(failure, result.failure)
            line, text = result.value
            if not parts:
                first_line = line
            parts.append(text)
            cursor = result.cursor

        if not parts:
            return stop
        return Ok(builder.text_run(first_line, parts), cursor, stop)

    def _prose_line(self, cursor: Cursor) -> Ok[tuple[int, str]] | Fail:
        start = self._doc_line_start(cursor)
        if isinstance(start, Fail):
            return start
        if isinstance(self._directive_head(start.cursor), Ok):
            return Fail(start.cursor, "documentation text")
        rest = self._doc_remainder(start.cursor)
        if isinstance(rest, Fail):
            return rest
        return Ok((start.cursor.line, rest.value), rest.cursor, rest.failure)

    def _directive_head(self, cursor: Cursor) -> Ok[DirectiveKind] | Fail:
        if cursor.peek() != "@":
            return Fail(cursor, "'@'")
        name = cursor.advance()
        text = cursor.text
        for kind in DirectiveKind:
            end = name.offset + len(kind.value)
            if text[name.offset : end].lower() == kind.value and not _is_word_char(
                text[end : end + 1]
            ):
                return Ok(kind, name.advance(len(kind.value)))
        return Fail(name, "directive name")

    # ------------------------------------------------------------------
    # Line starts and remainders
    # ------------------------------------------------------------------

    def _doc_line_start(self, cursor: Cursor) -> Ok[None] | Fail:
        if cursor.in_comment:
            return self._continuation_start(cursor)

        m = self._markers
        start = cursor.skip_space()
        if start.startswith(m.line):
            return Ok(None, _optional_space(start.advance(len(m.line))))

        if m.block_start is not None and self._opens_block(start):
            opened = start.advance(len(m.block_start)).entering_comment()
            bare = opened.skip_space()
            if bare.at_eol():
                # A bare opener line belongs to the first content line after it
                next_line = bare.terminate_line()
                if next_line is not None:
                    first = self._continuation_start(next_line)
                    if isinstance(first, Ok):
                        return first
            return Ok(None, _optional_space(opened))

        return Fail(start, "documentation marker")

    def _opens_block(self, cursor: Cursor) -> bool:
        """True if a documentation comment opens here.

        An end marker that begins inside the start marker, as in ``/**/``,
        closes an ordinary empty comment instead.
        """
        m = self._markers
        if not cursor.startswith(m.block_start):
            return False
        return not any(
            cursor.text.startswith(m.block_end, cursor.offset + i)
            for i in range(1, len(m.block_start))
        )

    def _continuation_start(self, cursor: Cursor) -> Ok[None] | Fail:
        m = self._markers
        start = cursor.skip_space()
        if start.at_end():
            return Fail(start, f"'{m.block_end}' to close the documentation comment")
        # The end marker is tested first so a continuation character that
        # prefixes it cannot swallow the terminator.
        if m.block_end is not None and start.startswith(m.block_end):
            return Fail(start, "documentation line")
        if start.peek() in m.continuation:
            return Ok(None, _optional_space(start.advance()))
        return Ok(None, start)

    def _doc_remainder(self, cursor: Cursor) -> Ok[str] | Fail:
        m = self._markers
        end = cursor.line_end()

        if cursor.in_comment and m.block_end is not None:
            close = cursor.text.find(m.block_end, cursor.offset, end)
            if close >= 0:
                content = cursor.text[cursor.offset : close].rstrip(SPACE)
                after = cursor.advance(close - cursor.offset + len(m.block_end)).skip_space()
                next_line = after.terminate_line()
                if next_line is None:
                    return Fail(after, f"end of line after '{m.block_end}'")
                return Ok(content, next_line.leaving_comment())

        content = cursor.text[cursor.offset : end]
        line_end = cursor.advance(end - cursor.offset)
        next_line = line_end.terminate_line()
        if next_line is None:
            return Fail(line_end, "end of line")
        if next_line.in_comment:
            return self._absorb_closer(content, next_line)
        return Ok(content, next_line)

    def _absorb_closer(self, content: str, cursor: Cursor) -> Ok[str]:
        """Consume a following line holding only the comment end marker."""
        end_marker = self._markers.block_end
        start = cursor.skip_space()
        if end_marker is None or not start.startswith(end_marker):
            return Ok(content, cursor)
        after = start.advance(len(end_marker)).skip_space()
        next_line = after.terminate_line()
        if next_line is None:
            return Ok(content, cursor, Fail(after, f"end of line after '{end_marker}'"))
        return Ok(content, next_line.leaving_comment())

    # ------------------------------------------------------------------
    # Code
    # ------------------------------------------------------------------

    def code_block(self, cursor: Cursor) -> Ok[CodeBlock] | Fail:
        start_line = cursor.line
        lines: list[CodeLine] = []
        while True:
            result = self._code_line(cursor)
            if isinstance(result, Fail):
                stop = result
                break
            lines.append(CodeLine(cursor.line, result.value))
            cursor = result.cursor

        if not lines:
            return stop
        return Ok(builder.code_block(start_line, lines), cursor, stop)

    def _code_line(self, cursor: Cursor) -> Ok[str] | Fail:
        if cursor.in_comment:
            return Fail(cursor, f"'{self._markers.block_end}' to close the documentation comment")
        if isinstance(self._doc_line_start(cursor), Ok):
            return Fail(cursor, "code line")
        end = cursor.line_end()
        line_end = cursor.advance(end - cursor.offset)
        next_line = line_end.terminate_line()
        if next_line is None:
            return Fail(cursor, "code line")
        return Ok(cursor.text[cursor.offset : end], next_line)
