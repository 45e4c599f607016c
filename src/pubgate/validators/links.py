"""Internal link checks — broken and unpublished targets, link count,
cross-link suggestions and orphan detection.

Links to ``/blog/<slug>`` resolve against the post store and links to
``/patterns/<slug>`` against the pattern store.  A broken link is one
error per occurrence; everything else here is a warning.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pubgate.domain.content import Document
from pubgate.domain.issues import ValidationIssue, ValidationResult
from pubgate.domain.links import extract_internal_links
from pubgate.domain.tags import related_documents
from pubgate.domain.types import Category, DocumentKind

if TYPE_CHECKING:
    from pubgate.config.guidelines import GuidelineConfig
    from pubgate.infrastructure.site import Site

RELATED_POOL = 5
MAX_SUGGESTIONS = 3


def validate_links(document: Document, site: Site, guidelines: GuidelineConfig) -> ValidationResult:
    issues: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []
    min_links = guidelines.validation_rules.seo_strategy.internal_linking.min_internal_links_per_post

    links = extract_internal_links(document.body)
    valid_count = 0
    for link in links:
        target = site.lookup(link.kind, link.slug)
        if not isinstance(target, Document):
            issues.append(
                ValidationIssue.error(
                    Category.LINKS,
                    f"Broken internal link: {link.href} ({link.kind} not found)",
                    field=link.href,
                    suggestion=f"Remove or fix the link on line {link.line}",
                    line=link.line,
                )
            )
            continue

        valid_count += 1
        if not target.published:
            warnings.append(
                ValidationIssue.warning(
                    Category.LINKS,
                    f"Link to unpublished {link.kind}: {link.href}",
                    field=link.href,
                    suggestion=f'The target {link.kind} "{target.title}" is not published yet',
                    line=link.line,
                )
            )

    if valid_count < min_links:
        warnings.append(
            ValidationIssue.warning(
                Category.LINKS,
                f"Only {valid_count} internal links (recommended minimum: {min_links})",
                suggestion="Add more internal links to related posts for better SEO",
            )
        )

    if document.kind is DocumentKind.POST:
        linked = {link.slug for link in links if link.kind is DocumentKind.POST}
        related = related_documents(document, site.posts.get_all(), RELATED_POOL)
        suggestions = [doc for doc in related if doc.slug not in linked][:MAX_SUGGESTIONS]
        if suggestions:
            listing = ", ".join(f'"{doc.title}" ({doc.url})' for doc in suggestions)
            warnings.append(
                ValidationIssue.warning(
                    Category.LINKS,
                    f"Consider linking to related posts: {listing}",
                    suggestion="Cross-linking improves SEO and user engagement",
                )
            )

    if not site.link_graph.inbound(document.kind, document.slug):
        warnings.append(
            ValidationIssue.warning(
                Category.LINKS,
                f"Orphan {document.kind}: no other published documents link to this {document.kind}",
                suggestion=f"Ask related posts to add a link to this {document.kind} for discoverability",
            )
        )

    return ValidationResult.from_findings(issues, warnings)
