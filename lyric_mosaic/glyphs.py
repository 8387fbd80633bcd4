"""Cyclic glyph stream drawn one character per mosaic cell."""

from __future__ import annotations

import re

PLACEHOLDER = "•"

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim the ends."""
    return _WHITESPACE.sub(" ", text).strip()


class GlyphSequencer:
    """Endless, wrap-around access to the characters of a text.

    Characters are Python code points; combining marks and multi-codepoint
    emoji occupy more than one position.
    """

    def __init__(self, text: str):
        normalized = normalize_text(text or "")
        self.glyphs: tuple[str, ...] = tuple(normalized) if normalized else (PLACEHOLDER,)

    def __len__(self) -> int:
        return len(self.glyphs)

    def at(self, index: int) -> str:
        char = self.glyphs[index % len(self.glyphs)]
        return " " if char == "\n" else char
