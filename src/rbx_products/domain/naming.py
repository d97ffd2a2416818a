"""Name canonicalization, slug derivation and redaction detection."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

CENSOR_CHARACTER = "#"

_WHITESPACE = re.compile(r"\s+")

DEFAULT_NAME_FILTERS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        # discount banner added at upload time
        r"💲.*?% OFF💲",
        # bracketed tags, brackets included
        r"\[.*?\]",
        r"[^a-zA-Z0-9!?,.\-\s]",
    )
)


def canonical_name(name: str, filters: Sequence[re.Pattern[str]] | None = None) -> str:
    """Strip decorations from ``name`` and collapse whitespace.

    Each filter's matches are replaced with a single space. An empty or missing
    filter list falls back to :data:`DEFAULT_NAME_FILTERS`.
    """

    active_filters = filters or DEFAULT_NAME_FILTERS
    out = name
    for pattern in active_filters:
        out = pattern.sub(" ", out)
    return _WHITESPACE.sub(" ", out).strip()


def slugify(name: str) -> str:
    lowered = name.lower()
    kept = "".join(c for c in lowered if (c.isascii() and c.isalnum()) or c.isspace())
    return _WHITESPACE.sub("-", kept.strip())


def is_censored(text: str) -> bool:
    """True when ``text`` is nothing but redaction characters and whitespace."""

    return all(c == CENSOR_CHARACTER or c.isspace() for c in text.strip())


def compile_name_filters(patterns: Sequence[str]) -> tuple[re.Pattern[str], ...]:
    """Compile user-supplied filter patterns, naming the offending one on error."""

    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise ValueError(f"Invalid regex `{pattern}`: {exc}") from exc
    return tuple(compiled)
