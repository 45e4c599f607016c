"""Pattern-language metadata — chapters and body extraction helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Chapter:
    """A chapter grouping patterns in the pattern language."""

    number: int
    name: str
    slug: str
    description: str


CHAPTERS: tuple[Chapter, ...] = (
    Chapter(1, "Foundation", "foundation", "Setting up your environment, codebase, and tools for agent success."),
    Chapter(2, "Context", "context", "Managing what the agent knows, and doesn't know."),
    Chapter(3, "Task", "task", "Breaking work into units that agents handle well."),
    Chapter(4, "Steering", "steering", "Guiding agent behavior toward the output you actually want."),
    Chapter(5, "Verification", "verification", "Ensuring the agent's output is correct, complete, and safe."),
    Chapter(6, "Recovery", "recovery", "What to do when things go wrong."),
)

_SIGNALS_HEADING = re.compile(r"^##\s+Signals")
_BULLET = re.compile(r"^[-*]\s+")


def get_chapter_by_slug(slug: str) -> Chapter | None:
    for chapter in CHAPTERS:
        if chapter.slug == slug:
            return chapter
    return None


def pattern_sort_key(number: str) -> float:
    """Numeric ordering for in-chapter numbers such as ``"3.2"``.

    Unparseable numbers sort last.
    """
    try:
        return float(number)
    except ValueError:
        return float("inf")


def extract_signals(body: str, max_items: int = 3) -> list[str]:
    """First *max_items* bullets under the ``## Signals`` heading."""
    lines = body.split("\n")
    start = next((i for i, line in enumerate(lines) if _SIGNALS_HEADING.match(line.strip())), None)
    if start is None:
        return []

    signals: list[str] = []
    for line in lines[start + 1 :]:
        stripped = line.strip()
        if stripped.startswith("## "):
            break
        if stripped.startswith(("- ", "* ")):
            signals.append(_BULLET.sub("", stripped))
            if len(signals) >= max_items:
                break
    return signals
