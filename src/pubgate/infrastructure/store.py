"""Content stores — load posts and patterns from a directory of MDX files.

Each file name (minus extension) is the slug.  Lookups never raise:
a missing or malformed file yields :class:`~pubgate.domain.content.NotFound`
(logged at debug level), so callers treat ``NotFound`` as the only
error signal.  Listings only include published documents; unpublished
ones stay loadable by slug for validation and preview.

Loaded documents are cached per store; fixers that rewrite a file call
:meth:`ContentStore.invalidate` so the next lookup re-reads it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError
from ruamel.yaml.error import YAMLError

from pubgate.domain.content import (
    Document,
    LoadResult,
    NotFound,
    PatternFrontmatter,
    PostFrontmatter,
)
from pubgate.domain.markup import reading_time
from pubgate.domain.patterns import pattern_sort_key
from pubgate.domain.tags import filter_by_tag, related_documents
from pubgate.domain.types import DocumentKind
from pubgate.errors import ContentStoreError
from pubgate.infrastructure.filesystem import content_path, find_content_files, read_content_file

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_FRONTMATTER_MODELS: dict[DocumentKind, type[PostFrontmatter] | type[PatternFrontmatter]] = {
    DocumentKind.POST: PostFrontmatter,
    DocumentKind.PATTERN: PatternFrontmatter,
}


class ContentStore:
    """Read access to one content directory.

    Args:
        directory: Folder holding ``<slug><extension>`` files.
        kind: Which frontmatter schema the files follow.
        extension: Content file suffix.
        required: When True, listing a missing directory raises
            :class:`ContentStoreError` instead of returning nothing.
    """

    def __init__(
        self,
        directory: Path,
        kind: DocumentKind,
        *,
        extension: str = ".mdx",
        required: bool = True,
    ) -> None:
        self.directory = directory
        self.kind = kind
        self.extension = extension
        self.required = required
        self._cache: dict[str, LoadResult] = {}

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_by_slug(self, slug: str) -> LoadResult:
        """Load one document, published or not."""
        if slug not in self._cache:
            self._cache[slug] = self._load(slug)
        return self._cache[slug]

    def get_all_slugs(self) -> list[str]:
        """Every slug in the directory regardless of published state."""
        self._check_directory()
        return [p.stem for p in find_content_files(self.directory, self.extension)]

    def get_all(self) -> list[Document]:
        """Published documents in display order."""
        documents = [
            doc
            for slug in self.get_all_slugs()
            if isinstance(doc := self.get_by_slug(slug), Document) and doc.published
        ]
        return self._sort(documents)

    def get_related(self, slug: str, limit: int = 3) -> list[Document]:
        """Published documents sharing the most tags with *slug*."""
        published = self.get_all()
        current = next((doc for doc in published if doc.slug == slug), None)
        if current is None:
            return []
        return related_documents(current, published, limit)

    def get_by_tag(self, tag_slug: str) -> list[Document]:
        return filter_by_tag(self.get_all(), tag_slug)

    def invalidate(self, slug: str | None = None) -> None:
        """Forget cached documents (one slug, or all)."""
        if slug is None:
            self._cache.clear()
        else:
            self._cache.pop(slug, None)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_directory(self) -> None:
        if self.required and not self.directory.is_dir():
            msg = f"Content directory not found: {self.directory}"
            raise ContentStoreError(msg)

    def _sort(self, documents: list[Document]) -> list[Document]:
        # ISO dates sort lexically; newest first.
        return sorted(documents, key=lambda doc: doc.date, reverse=True)

    def _load(self, slug: str) -> LoadResult:
        try:
            path = content_path(self.directory, slug, self.extension)
            fm, body = read_content_file(path)
            model = _FRONTMATTER_MODELS[self.kind].model_validate(fm)
        except FileNotFoundError:
            return NotFound(slug)
        except (OSError, ValueError, YAMLError, ValidationError) as exc:
            logger.debug("Failed to load %s %s: %s", self.kind, slug, exc)
            return NotFound(slug, reason=f"unreadable: {exc}")

        return Document(
            slug=slug,
            kind=self.kind,
            frontmatter=model,
            body=body,
            reading_time=reading_time(body),
            path=path,
        )


class PatternStore(ContentStore):
    """Pattern-language entries, ordered by chapter then number."""

    def __init__(self, directory: Path, *, extension: str = ".mdx", required: bool = False) -> None:
        super().__init__(directory, DocumentKind.PATTERN, extension=extension, required=required)

    def _sort(self, documents: list[Document]) -> list[Document]:
        def key(doc: Document) -> tuple[int, float]:
            fm = doc.frontmatter
            assert isinstance(fm, PatternFrontmatter)
            return fm.chapter, pattern_sort_key(fm.number)

        return sorted(documents, key=key)

    def get_by_chapter(self, chapter: int) -> list[Document]:
        return [
            doc
            for doc in self.get_all()
            if isinstance(doc.frontmatter, PatternFrontmatter) and doc.frontmatter.chapter == chapter
        ]

    def get_related_patterns(self, pattern: Document) -> list[tuple[Document, str]]:
        """Published targets of *pattern*'s ``relatedPatterns`` with edge type."""
        fm = pattern.frontmatter
        if not isinstance(fm, PatternFrontmatter):
            return []
        results: list[tuple[Document, str]] = []
        for rel in fm.related_patterns:
            target = self.get_by_slug(rel.slug)
            if isinstance(target, Document) and target.published:
                results.append((target, str(rel.type)))
        return results
