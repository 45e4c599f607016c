"""Tag domain logic — slugs, counts, and tag-overlap relatedness."""

from __future__ import annotations

import re
from collections import Counter
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pubgate.domain.content import Document


def slugify_tag(tag: str) -> str:
    """URL slug for a tag name.

    Examples:
        >>> slugify_tag("Claude Code")
        'claude-code'
        >>> slugify_tag("  C++ / Rust_tips ")
        'c-rust-tips'
    """
    slug = tag.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


def get_all_tags(documents: Iterable[Document]) -> list[str]:
    """Sorted unique tags across *documents*."""
    return sorted({tag for doc in documents for tag in doc.tags})


def get_tag_counts(documents: Iterable[Document]) -> Counter[str]:
    """How many documents carry each tag."""
    return Counter(tag for doc in documents for tag in doc.tags)


def filter_by_tag(documents: Iterable[Document], tag_slug: str) -> list[Document]:
    """Documents having a tag whose slug is *tag_slug*."""
    return [doc for doc in documents if any(slugify_tag(t) == tag_slug for t in doc.tags)]


def tag_name_from_slug(documents: Iterable[Document], tag_slug: str) -> str | None:
    """Original tag spelling for *tag_slug*, or None."""
    for tag in get_all_tags(documents):
        if slugify_tag(tag) == tag_slug:
            return tag
    return None


def related_documents(
    current: Document,
    candidates: list[Document],
    limit: int = 3,
) -> list[Document]:
    """Rank *candidates* by shared tags with *current*.

    Ties are broken by most recent date. If fewer than *limit* share a
    tag, the remaining slots are filled with the first other candidates
    in their given order (callers pass them newest first).
    """
    current_tags = set(current.tags)
    others = [doc for doc in candidates if doc.slug != current.slug]

    scored = [(len(current_tags & set(doc.tags)), doc) for doc in others]
    matching = [item for item in scored if item[0] > 0]
    # Stable sorts: date descending first, then score descending.
    matching.sort(key=lambda item: item[1].date, reverse=True)
    matching.sort(key=lambda item: item[0], reverse=True)

    related = [doc for _, doc in matching[:limit]]
    if len(related) < limit:
        chosen = {doc.slug for doc in related}
        for doc in others:
            if len(related) >= limit:
                break
            if doc.slug not in chosen:
                related.append(doc)
                chosen.add(doc.slug)
    return related
