"""LinkGraph — lazy-built NetworkX graph of internal links between documents.

Nodes are keyed ``"<kind>:<slug>"`` so a post and a pattern may share a
slug.  Only published documents contribute outgoing edges.  Link targets
that are unpublished or missing still get a bare node, so a draft can
ask who links to it.

Rebuilt per invocation.  Commands that never ask about inbound links
never build it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx

from pubgate.domain.links import extract_internal_links
from pubgate.domain.types import DocumentKind

if TYPE_CHECKING:
    from pubgate.infrastructure.store import ContentStore

type _Graph = nx.DiGraph


def node_key(kind: DocumentKind, slug: str) -> str:
    return f"{kind}:{slug}"


class LinkGraph:
    """Directed link graph over the published documents of one or more stores."""

    def __init__(self, *stores: ContentStore) -> None:
        self._stores = stores
        self._graph: _Graph | None = None

    @property
    def graph(self) -> _Graph:
        """Return the graph, building from the stores on first access."""
        if self._graph is None:
            self._graph = self._build()
        return self._graph

    def invalidate(self) -> None:
        """Clear the cached graph, forcing rebuild on next access."""
        self._graph = None

    def inbound(self, kind: DocumentKind, slug: str) -> list[str]:
        """Node keys of published documents linking to the given document."""
        key = node_key(kind, slug)
        if key not in self.graph:
            return []
        return sorted(src for src in self.graph.predecessors(key) if src != key)

    def outbound(self, kind: DocumentKind, slug: str) -> list[str]:
        key = node_key(kind, slug)
        if key not in self.graph:
            return []
        return sorted(self.graph.successors(key))

    def orphans(self, kind: DocumentKind | None = None) -> list[str]:
        """Published documents no other document links to."""
        return sorted(
            node
            for node, data in self.graph.nodes(data=True)
            if data.get("published")
            and (kind is None or data["kind"] == kind)
            and not any(src != node for src in self.graph.predecessors(node))
        )

    def _build(self) -> _Graph:
        """Add every published document first so isolated ones are present."""
        g: _Graph = nx.DiGraph()
        documents = [doc for store in self._stores for doc in store.get_all()]
        for doc in documents:
            g.add_node(
                node_key(doc.kind, doc.slug), kind=doc.kind, title=doc.title, published=True
            )

        for doc in documents:
            source = node_key(doc.kind, doc.slug)
            for link in extract_internal_links(doc.body):
                g.add_edge(source, node_key(link.kind, link.slug), line=link.line)
        return g
