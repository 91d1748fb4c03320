"""Error types with formatted source context."""

from __future__ import annotations

import re

from picolit.cursor import Position

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class ConfigurationError(Exception):
    """Raised when a comment-marker configuration is empty or ambiguous."""

    def __init__(self, message: str, option: str | None = None) -> None:
        self.message = message
        self.option = option
        super().__init__(self.format())

    def format(self) -> str:
        if self.option is None:
            return f"error: {self.message}"
        return f"error: invalid '{self.option}': {self.message}"


class ParseError(Exception):
    """Raised when the input cannot be matched as a whole, at the furthest position reached."""

    def __init__(self, message: str, position: Position, source: str) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    @property
    def line(self) -> int:
        return self.position.line

    def format(self, filename: str = "<input>") -> str:
        # Split exactly where the cursor counts lines
        lines = _LINE_BREAK.split(self.source)
        line_idx = self.position.line - 1
        col = self.position.column

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx]
        else:
            source_line = ""

        # Underline to the end of the line, at least one caret
        underline_len = max(1, len(source_line) - col + 1)

        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(self.position.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.position.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )


class InternalConsistencyError(Exception):
    """Raised when the AST builder receives a node it cannot merge (a parser bug)."""
