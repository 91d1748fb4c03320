"""AST node types for parsed literate source files."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DirectiveKind(Enum):
    AUTHOR = "author"
    ORG = "org"
    COPYRIGHT = "copyright"
    DOC = "doc"
    EXAMPLE = "example"

    @property
    def is_long(self) -> bool:
        """Long directives may absorb the documentation lines that follow."""
        return self in (DirectiveKind.DOC, DirectiveKind.EXAMPLE)


@dataclass(frozen=True, slots=True)
class Directive:
    """An ``@keyword value`` line inside a documentation block."""

    kind: DirectiveKind
    value: str
    line: int


@dataclass(frozen=True, slots=True)
class TextRun:
    """Consecutive prose lines, markers stripped, joined with newlines."""

    text: str
    line: int


DocElement = Directive | TextRun


@dataclass(frozen=True, slots=True)
class DocBlock:
    """Documentation elements in source order.

    ``start_line``..``end_line`` spans every physical line the comment used,
    including bare opener and closer lines. An empty placeholder ends one
    line before it starts.
    """

    elements: tuple[DocElement, ...]
    start_line: int
    end_line: int

    @property
    def is_empty(self) -> bool:
        return not self.elements

    def directives(self) -> tuple[Directive, ...]:
        return tuple(e for e in self.elements if isinstance(e, Directive))

    def text_runs(self) -> tuple[TextRun, ...]:
        return tuple(e for e in self.elements if isinstance(e, TextRun))


@dataclass(frozen=True, slots=True)
class CodeLine:
    """One verbatim source line, without its terminator."""

    line: int
    text: str


@dataclass(frozen=True, slots=True)
class CodeBlock:
    """Contiguous lines that are not documentation."""

    lines: tuple[CodeLine, ...]
    start_line: int

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def end_line(self) -> int:
        if self.lines:
            return self.lines[-1].line
        return self.start_line - 1

    def as_mapping(self) -> dict[int, str]:
        """Line number to line text, in source order."""
        return {cl.line: cl.text for cl in self.lines}


@dataclass(frozen=True, slots=True)
class Block:
    """Documentation paired with the code it describes."""

    code: CodeBlock
    doc: DocBlock
    start_line: int


@dataclass(frozen=True, slots=True)
class SourceFile:
    """Root node: the blocks of one input text, in source order."""

    blocks: tuple[Block, ...]

    def line_numbers(self) -> list[int]:
        """Every physical line covered by documentation or code, in order."""
        numbers: list[int] = []
        for block in self.blocks:
            numbers.extend(range(block.doc.start_line, block.doc.end_line + 1))
            numbers.extend(cl.line for cl in block.code.lines)
        return sorted(numbers)
