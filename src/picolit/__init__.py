"""picolit: literate documentation extracted from source-code comments."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from picolit.ast import SourceFile
    from picolit.markers import Markers

__version__ = "0.1.0"


def extract(
    source: str,
    filename: str = "<input>",
    markers: Markers | None = None,
) -> SourceFile:
    """Split source text into paired documentation and code blocks."""
    from picolit.parser import parse

    return parse(source, filename, markers)
