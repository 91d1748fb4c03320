"""picolit parser: runs the documentation grammar over a whole input text."""

from __future__ import annotations

import logging

from picolit.ast import SourceFile
from picolit.cursor import Cursor
from picolit.errors import ParseError
from picolit.grammar import Fail, Grammar
from picolit.markers import Markers

logger = logging.getLogger(__name__)


class Parser:
    """Parse source text into a SourceFile for one marker configuration.

    The instance holds only its (immutable) configuration, so it can be
    reused for any number of inputs; each call starts from a fresh cursor.
    """

    def __init__(self, markers: Markers | None = None) -> None:
        self._markers = markers if markers is not None else Markers()
        self._grammar = Grammar(self._markers)

    @property
    def markers(self) -> Markers:
        return self._markers

    def parse(self, source: str, filename: str = "<input>") -> SourceFile:
        """Parse *source* as a whole or raise ``ParseError``.

        Empty input yields a ``SourceFile`` with no blocks. Any non-empty
        input yields at least one block.
        """
        logger.debug("parsing %s (%d characters)", filename, len(source))
        result = self._grammar.source_file(Cursor(source))
        if isinstance(result, Fail):
            raise self._error(result, source, filename)
        logger.debug("parsed %s into %d block(s)", filename, len(result.value.blocks))
        return result.value

    def _error(self, failure: Fail, source: str, filename: str) -> ParseError:
        position = failure.cursor.position()
        logger.debug(
            "parse of %s failed at %d:%d", filename, position.line, position.column
        )
        return ParseError(f"expected {failure.expected}", position, source)


def parse(source: str, filename: str = "<input>", markers: Markers | None = None) -> SourceFile:
    """Convenience function: parse source text and return a SourceFile AST."""
    return Parser(markers).parse(source, filename)
