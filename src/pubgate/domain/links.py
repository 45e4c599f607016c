"""Internal link extraction — same-site markdown links in a body.

Pure functions, no infrastructure dependencies. Consumed by the links
validator and by the site link graph.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pubgate.domain.types import DocumentKind

# [text](/blog/slug), [text](/patterns/slug#anchor), [text](/blog/slug/?ref=x)
_INTERNAL_LINK_PATTERN = re.compile(
    r"\[([^\]]*)\]\((/(blog|patterns)/([^)\s#?/]+))/?(?:[#?][^)\s]*)?\)"
)

_SECTION_KINDS: dict[str, DocumentKind] = {
    "blog": DocumentKind.POST,
    "patterns": DocumentKind.PATTERN,
}


@dataclass(frozen=True)
class InternalLink:
    """A markdown link pointing at another document on the site."""

    href: str
    kind: DocumentKind
    slug: str
    line: int
    text: str = ""


def extract_internal_links(body: str) -> list[InternalLink]:
    """Extract every ``/blog/<slug>`` and ``/patterns/<slug>`` link.

    Links inside fenced code blocks are skipped. Line numbers are 1-based
    positions within *body*. Returns an empty list if no internal links
    are found.
    """
    results: list[InternalLink] = []
    in_fence = False
    for lineno, line in enumerate(body.split("\n"), start=1):
        if line.lstrip().startswith("```"):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        for match in _INTERNAL_LINK_PATTERN.finditer(line):
            results.append(
                InternalLink(
                    href=match.group(2),
                    kind=_SECTION_KINDS[match.group(3)],
                    slug=match.group(4),
                    line=lineno,
                    text=match.group(1),
                )
            )
    return results
