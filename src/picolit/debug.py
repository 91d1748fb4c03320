"""Human-readable SourceFile dump."""

from __future__ import annotations

import sys
from typing import TextIO

from picolit.ast import Block, CodeBlock, Directive, DocBlock, SourceFile, TextRun


def dump_ast(doc: SourceFile, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable AST tree to *file*."""
    _dump_source_file(doc, 0, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_source_file(doc: SourceFile, depth: int, f: TextIO) -> None:
    f.write(f"{_indent(depth)}SourceFile\n")
    for block in doc.blocks:
        _dump_block(block, depth + 1, f)


def _dump_block(block: Block, depth: int, f: TextIO) -> None:
    f.write(f"{_indent(depth)}Block @{block.start_line}\n")
    _dump_doc(block.doc, depth + 1, f)
    _dump_code(block.code, depth + 1, f)


def _dump_doc(doc: DocBlock, depth: int, f: TextIO) -> None:
    if doc.is_empty:
        f.write(f"{_indent(depth)}DocBlock (empty)\n")
        return
    f.write(f"{_indent(depth)}DocBlock {doc.start_line}-{doc.end_line}\n")
    for element in doc.elements:
        if isinstance(element, Directive):
            f.write(
                f"{_indent(depth + 1)}{element.line}: "
                f"Directive @{element.kind.value} {element.value!r}\n"
            )
        elif isinstance(element, TextRun):
            f.write(f"{_indent(depth + 1)}{element.line}: TextRun {element.text!r}\n")


def _dump_code(code: CodeBlock, depth: int, f: TextIO) -> None:
    if code.is_empty:
        f.write(f"{_indent(depth)}CodeBlock (empty)\n")
        return
    f.write(f"{_indent(depth)}CodeBlock {code.start_line}-{code.end_line}\n")
    for cl in code.lines:
        f.write(f"{_indent(depth + 1)}{cl.line}: {cl.text!r}\n")
