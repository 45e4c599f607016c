"""Markup text helpers — code fences, words, headings, sentences.

Pure functions over raw MDX body text, shared by the validators and
the content store.
"""

from __future__ import annotations

import math
import re

WORDS_PER_MINUTE = 200

CODE_FENCE_PATTERN = re.compile(r"```[\s\S]*?```")
_INLINE_CODE_PATTERN = re.compile(r"`[^`]+`")
_H2_PATTERN = re.compile(r"^## .+$", re.MULTILINE)
_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_NON_PROSE_PREFIXES = ("#", "import ", "export ", "<", "```", "|", ">", "- ", "* ")


def strip_code_fences(text: str) -> str:
    """Remove fenced code blocks."""
    return CODE_FENCE_PATTERN.sub("", text)


def strip_code(text: str) -> str:
    """Remove fenced code blocks and inline code spans."""
    return _INLINE_CODE_PATTERN.sub("", strip_code_fences(text))


def count_words(text: str) -> int:
    """Whitespace-delimited word count, code fences excluded."""
    return len(strip_code_fences(text).split())


def reading_time(text: str) -> str:
    """Human reading-time estimate, e.g. ``"4 min read"``."""
    minutes = max(1, math.ceil(len(text.split()) / WORDS_PER_MINUTE))
    return f"{minutes} min read"


def code_blocks(text: str) -> list[str]:
    """All fenced code blocks, delimiters included."""
    return CODE_FENCE_PATTERN.findall(text)


def h2_headings(text: str) -> list[str]:
    """Level-2 heading lines (``## ...``)."""
    return _H2_PATTERN.findall(text)


def split_sentences(text: str) -> list[str]:
    """Split prose on terminal punctuation, dropping empty fragments."""
    return [s for s in _SENTENCE_SPLIT.split(text) if s.strip()]


def first_paragraph(text: str) -> str:
    """The first blank-line-separated block of prose.

    Headings, MDX import/export lines, JSX tags, lists, tables, quotes
    and code fences are skipped.
    """
    for block in strip_code_fences(text).split("\n\n"):
        stripped = block.strip()
        if stripped and not stripped.startswith(_NON_PROSE_PREFIXES):
            return stripped
    return ""
