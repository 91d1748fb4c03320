"""Comment-marker configuration for the documentation grammar."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from picolit.errors import ConfigurationError

DEFAULT_LINE_MARKER = "///"
DEFAULT_BLOCK_START = "/**"
DEFAULT_BLOCK_END = "*/"
DEFAULT_CONTINUATION = frozenset("*|")

_FORBIDDEN = frozenset(" \t\r\n")


@dataclass(frozen=True, slots=True)
class Markers:
    """Documentation comment convention.

    ``line`` marks a single documentation line.  ``block_start`` and
    ``block_end`` delimit a multi-line documentation comment; set
    ``block_start`` to ``None`` (or ``""``) to recognize line markers only.
    Inside a block comment a line may begin with any character from
    ``continuation`` (followed by an optional space), which is stripped.
    """

    line: str = DEFAULT_LINE_MARKER
    block_start: str | None = DEFAULT_BLOCK_START
    block_end: str | None = DEFAULT_BLOCK_END
    continuation: frozenset[str] = field(default=DEFAULT_CONTINUATION)

    def __post_init__(self) -> None:
        # Accept any iterable of characters, including a plain string
        if not isinstance(self.continuation, frozenset):
            object.__setattr__(self, "continuation", frozenset(self.continuation))
        if not self.block_start:
            object.__setattr__(self, "block_start", None)
            object.__setattr__(self, "block_end", None)
        self._validate()

    @property
    def block_enabled(self) -> bool:
        return self.block_start is not None

    def _validate(self) -> None:
        _check_token(self.line, "line")

        if self.block_start is not None:
            _check_token(self.block_start, "block_start")
            if not self.block_end:
                raise ConfigurationError(
                    "block_end is required when block_start is set", "block_end"
                )
            _check_token(self.block_end, "block_end")
            if self.line.startswith(self.block_start) or self.block_start.startswith(self.line):
                raise ConfigurationError(
                    f"'{self.line}' and '{self.block_start}' overlap; "
                    "neither marker may be a prefix of the other",
                    "block_start",
                )

        for ch in self.continuation:
            if len(ch) != 1:
                raise ConfigurationError(
                    f"expected single characters, got '{ch}'", "continuation"
                )
            if ch in _FORBIDDEN or ch == "@":
                raise ConfigurationError(
                    f"'{ch!r}' cannot be a continuation character", "continuation"
                )

    @classmethod
    def from_mapping(cls, table: Mapping[str, Any]) -> Markers:
        """Build markers from a config table (e.g. ``[markers]`` in picolit.toml)."""
        kwargs: dict[str, Any] = {}
        for key in ("line", "block_start", "block_end"):
            value = table.get(key)
            if value is not None:
                if not isinstance(value, str):
                    raise ConfigurationError(f"expected a string, got {value!r}", key)
                kwargs[key] = value
        cont = table.get("continuation")
        if cont is not None:
            kwargs["continuation"] = _as_chars(cont, "continuation")
        if table.get("block") is False:
            kwargs["block_start"] = None
        return cls(**kwargs)


def _check_token(token: str, option: str) -> None:
    if not token:
        raise ConfigurationError("marker must not be empty", option)
    if any(ch in _FORBIDDEN for ch in token):
        raise ConfigurationError(
            f"marker '{token}' must not contain whitespace or line breaks", option
        )
    if token.startswith("@"):
        raise ConfigurationError(f"marker '{token}' must not start with '@'", option)


def _as_chars(value: Any, option: str) -> frozenset[str]:
    if isinstance(value, str):
        return frozenset(value)
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return frozenset(value)
    raise ConfigurationError(
        f"expected a string or a list of characters, got {value!r}", option
    )
