"""Pure functions that fold grammar matches into AST nodes.

Every function returns a new node and leaves its inputs untouched. The
grammar collects the pieces of a repetition locally and builds the node once
the repetition ends, so a node discarded on backtrack is never observed
elsewhere and building stays linear in the input.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from picolit.ast import (
    Block,
    CodeBlock,
    CodeLine,
    Directive,
    DocBlock,
    DocElement,
    SourceFile,
    TextRun,
)
from picolit.errors import InternalConsistencyError


def empty_doc_block(line: int) -> DocBlock:
    return DocBlock((), line, line - 1)


def empty_code_block(line: int) -> CodeBlock:
    return CodeBlock((), line)


def code_block(start_line: int, lines: Iterable[CodeLine]) -> CodeBlock:
    lines = tuple(lines)
    for cl in lines:
        if not isinstance(cl, CodeLine):
            raise InternalConsistencyError(
                f"cannot add {type(cl).__name__} to a code block"
            )
    return CodeBlock(lines, start_line)


def doc_block(start_line: int, elements: Iterable[DocElement], end_line: int) -> DocBlock:
    """Make a documentation block; ``end_line`` is the last line it consumed."""
    elements = tuple(elements)
    for element in elements:
        if not isinstance(element, (Directive, TextRun)):
            raise InternalConsistencyError(
                f"cannot add {type(element).__name__} to a documentation block"
            )
    return DocBlock(elements, start_line, end_line)


def text_run(line: int, parts: Iterable[str]) -> TextRun:
    return TextRun("\n".join(parts), line)


def extend_directive(directive: Directive, run: TextRun) -> Directive:
    """Attach a following text run as the directive's extended description."""
    if not directive.kind.is_long:
        raise InternalConsistencyError(
            f"@{directive.kind.value} does not take an extended description"
        )
    if not directive.value:
        return replace(directive, value=run.text)
    return replace(directive, value=f"{directive.value}\n{run.text}")


def pair(doc: DocBlock, code: CodeBlock) -> Block:
    """Make a block; it starts wherever its first non-empty part starts."""
    if not isinstance(doc, DocBlock) or not isinstance(code, CodeBlock):
        raise InternalConsistencyError(
            f"cannot pair {type(doc).__name__} with {type(code).__name__}"
        )
    if doc.is_empty:
        start = code.start_line
    elif code.is_empty:
        start = doc.start_line
    else:
        start = min(doc.start_line, code.start_line)
    return Block(code, doc, start)


def source_file(blocks: Iterable[Block]) -> SourceFile:
    blocks = tuple(blocks)
    for block in blocks:
        if not isinstance(block, Block):
            raise InternalConsistencyError(
                f"cannot add {type(block).__name__} to a source file"
            )
    return SourceFile(blocks)
