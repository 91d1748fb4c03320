"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from picolit.ast import Block, Directive, DirectiveKind, SourceFile, TextRun
from picolit.markers import Markers
from picolit.parser import parse


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns a SourceFile."""

    def _parse(source: str, markers: Markers | None = None) -> SourceFile:
        return parse(source, "test.java", markers)

    return _parse


def count_lines(source: str) -> int:
    """Number of physical lines, counting \\r\\n, \\n and \\r terminators."""
    normalized = source.replace("\r\n", "\n").replace("\r", "\n")
    if not normalized:
        return 0
    return normalized.count("\n") + (0 if normalized.endswith("\n") else 1)


def assert_directive(element: object, kind: DirectiveKind, value: str, line: int) -> None:
    """Assert basic properties of a Directive node."""
    assert isinstance(element, Directive), f"Expected Directive, got {type(element).__name__}"
    assert element.kind == kind, f"Expected kind {kind}, got {element.kind}"
    assert element.value == value, f"Expected value {value!r}, got {element.value!r}"
    assert element.line == line, f"Expected line {line}, got {element.line}"


def assert_text(element: object, text: str, line: int) -> None:
    """Assert basic properties of a TextRun node."""
    assert isinstance(element, TextRun), f"Expected TextRun, got {type(element).__name__}"
    assert element.text == text, f"Expected text {text!r}, got {element.text!r}"
    assert element.line == line, f"Expected line {line}, got {element.line}"


def code_text(block: Block) -> list[str]:
    """The raw code lines of a block, in order."""
    return [cl.text for cl in block.code.lines]
