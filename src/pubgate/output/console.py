"""Rich Console factory and theme for pubgate output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PUBGATE_THEME = Theme(
    {
        "pg.ok": "bold green",
        "pg.error": "bold red",
        "pg.warning": "bold yellow",
        "pg.op": "bold cyan",
        "pg.key": "dim",
        "pg.slug": "bold blue",
        "pg.path": "dim",
        "pg.title": "bold",
        "pg.category": "bold magenta",
        "pg.suggestion": "italic dim",
        "pg.score.good": "green",
        "pg.score.fair": "yellow",
        "pg.score.poor": "red",
    }
)

# Score bands used to color scores in tables and headers.
GOOD_SCORE = 85
FAIR_SCORE = 70


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=PUBGATE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_score(score: int) -> str:
    """Return the Rich style name for a 0-100 score."""
    if score >= GOOD_SCORE:
        return "pg.score.good"
    if score >= FAIR_SCORE:
        return "pg.score.fair"
    return "pg.score.poor"
