"""Site — the single dependency injected into every service.

The Site owns the content stores, the guideline ruleset and the lazy
link graph for one site root.  Everything it holds is built from
:class:`~pubgate.config.settings.PubgateSettings`; nothing touches the
disk until first use, so ``--help`` never reads content.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pubgate.config.guidelines import Guidelines
from pubgate.domain.types import DocumentKind
from pubgate.infrastructure.graph import LinkGraph
from pubgate.infrastructure.store import ContentStore, PatternStore

if TYPE_CHECKING:
    from pathlib import Path

    from pubgate.config.settings import PubgateSettings
    from pubgate.domain.content import LoadResult

logger = logging.getLogger(__name__)


class Site:
    """Content, rules and link graph for one site root."""

    def __init__(self, settings: PubgateSettings) -> None:
        self.settings = settings
        self.root = settings.site_root
        content = settings.content

        self.posts = ContentStore(
            settings.resolve(content.posts_dir),
            DocumentKind.POST,
            extension=content.extension,
            required=True,
        )
        self.patterns = PatternStore(
            settings.resolve(content.patterns_dir),
            extension=content.extension,
            required=False,
        )
        self.guidelines = Guidelines(settings.resolve(settings.guidelines.path))
        self._link_graph: LinkGraph | None = None

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @property
    def public_dir(self) -> Path:
        return self.settings.resolve(self.settings.content.public_dir)

    @property
    def calendar_path(self) -> Path:
        return self.settings.resolve(self.settings.calendar.path)

    @property
    def report_path(self) -> Path:
        return self.settings.resolve(self.settings.report.path)

    @property
    def fetch_timeout(self) -> float:
        return self.settings.images.fetch_timeout

    # ------------------------------------------------------------------
    # Content access
    # ------------------------------------------------------------------

    @property
    def link_graph(self) -> LinkGraph:
        """Internal-link graph over published posts and patterns (lazy)."""
        if self._link_graph is None:
            self._link_graph = LinkGraph(self.posts, self.patterns)
        return self._link_graph

    def store_for(self, kind: DocumentKind) -> ContentStore:
        return self.posts if kind is DocumentKind.POST else self.patterns

    def lookup(self, kind: DocumentKind, slug: str) -> LoadResult:
        return self.store_for(kind).get_by_slug(slug)

    def invalidate(self, slug: str | None = None) -> None:
        """Drop cached documents and the link graph after a write."""
        logger.debug("Invalidating site caches (slug=%s)", slug)
        self.posts.invalidate(slug)
        self.patterns.invalidate(slug)
        if self._link_graph is not None:
            self._link_graph.invalidate()
