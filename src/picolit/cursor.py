"""Immutable cursor over source text with 1-based line tracking."""

from __future__ import annotations

from dataclasses import dataclass, replace

# Horizontal whitespace allowed before markers
SPACE = " \t"

_EOL_CHARS = "\r\n"


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Cursor:
    """A position in the input text.

    Every operation returns a new cursor, so a failed rule backtracks by
    simply reusing the cursor it was given.
    """

    text: str
    offset: int = 0
    line: int = 1
    line_start: int = 0
    in_comment: bool = False

    def at_end(self) -> bool:
        return self.offset >= len(self.text)

    def peek(self, ahead: int = 0) -> str:
        idx = self.offset + ahead
        if idx < len(self.text):
            return self.text[idx]
        return ""

    def startswith(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.offset)

    def at_eol(self) -> bool:
        """True when the next character starts a line terminator."""
        return self.peek() in _EOL_CHARS and not self.at_end()

    def line_end(self) -> int:
        """Offset of the terminator (or end of input) ending the current line."""
        idx = self.offset
        text = self.text
        while idx < len(text) and text[idx] not in _EOL_CHARS:
            idx += 1
        return idx

    def advance(self, count: int = 1) -> Cursor:
        """Consume `count` characters; never crosses a line terminator."""
        return replace(self, offset=min(self.offset + count, len(self.text)))

    def skip_space(self) -> Cursor:
        idx = self.offset
        while idx < len(self.text) and self.text[idx] in SPACE:
            idx += 1
        return replace(self, offset=idx)

    def terminate_line(self) -> Cursor | None:
        """Consume one line terminator and move to the next line.

        End of input terminates the line only if something was consumed on
        it, so a repetition can never match an empty line at the end forever.
        """
        if self.startswith("\r\n"):
            end = self.offset + 2
        elif self.at_eol():
            end = self.offset + 1
        elif self.at_end() and self.offset > self.line_start:
            end = self.offset
        else:
            return None
        return replace(self, offset=end, line=self.line + 1, line_start=end)

    def entering_comment(self) -> Cursor:
        return replace(self, in_comment=True)

    def leaving_comment(self) -> Cursor:
        return replace(self, in_comment=False)

    def position(self) -> Position:
        return Position(self.line, self.offset - self.line_start + 1, self.offset)

    def __repr__(self) -> str:
        flag = " comment" if self.in_comment else ""
        return f"Cursor(line={self.line}, col={self.offset - self.line_start + 1}{flag})"
