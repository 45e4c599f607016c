"""Tests for the internal links validator."""

from __future__ import annotations

from pathlib import Path

from pubgate.config.guidelines import GuidelineConfig
from pubgate.domain.content import Document
from pubgate.domain.types import Category, Severity
from pubgate.infrastructure.site import Site
from pubgate.validators import validate_links
from tests.conftest import make_body, write_post


def _doc(site: Site, slug: str) -> Document:
    doc = site.posts.get_by_slug(slug)
    assert isinstance(doc, Document)
    return doc


class TestValidateLinks:
    def test_clean(self, site: Site, rules: GuidelineConfig) -> None:
        result = validate_links(_doc(site, "alpha"), site, rules)
        assert result.passed is True
        assert result.warnings == []

    def test_broken_link_is_one_error(
        self, site_root: Path, site: Site, rules: GuidelineConfig
    ) -> None:
        write_post(site_root, "alpha", links=["beta", "gamma", "missing"])
        result = validate_links(_doc(site, "alpha"), site, rules)
        assert result.passed is False
        [issue] = result.issues
        assert issue.severity is Severity.ERROR
        assert issue.category is Category.LINKS
        assert issue.message == "Broken internal link: /blog/missing (post not found)"
        assert issue.line == 5
        assert issue.suggestion == "Remove or fix the link on line 5"

    def test_repeated_broken_link_counts_each(
        self, site_root: Path, site: Site, rules: GuidelineConfig
    ) -> None:
        write_post(site_root, "alpha", links=["beta", "gamma", "missing", "missing"])
        result = validate_links(_doc(site, "alpha"), site, rules)
        assert len(result.issues) == 2

    def test_unpublished_target_is_warning(
        self, site_root: Path, site: Site, rules: GuidelineConfig
    ) -> None:
        write_post(site_root, "alpha", links=["beta", "gamma", "delta"])
        result = validate_links(_doc(site, "alpha"), site, rules)
        assert result.passed is True
        assert result.issues == []
        [warning] = result.warnings
        assert warning.message == "Link to unpublished post: /blog/delta"

    def test_pattern_links_resolve_against_patterns(
        self, site_root: Path, site: Site, rules: GuidelineConfig
    ) -> None:
        patterns = site_root / "content" / "patterns"
        patterns.mkdir(parents=True)
        (patterns / "alpha.mdx").write_text(
            "---\nname: Alpha\nchapter: 1\nnumber: '1.1'\npublished: true\n---\n\nBody\n"
        )
        body = make_body(["beta", "gamma"]) + "\nSee [p](/patterns/alpha) and [q](/patterns/beta).\n"
        write_post(site_root, "alpha", body=body)
        result = validate_links(_doc(site, "alpha"), site, rules)
        assert [i.message for i in result.issues] == [
            "Broken internal link: /patterns/beta (pattern not found)"
        ]

    def test_too_few_links(self, site_root: Path, site: Site, rules: GuidelineConfig) -> None:
        write_post(site_root, "alpha", links=["beta"])
        result = validate_links(_doc(site, "alpha"), site, rules)
        messages = [w.message for w in result.warnings]
        assert "Only 1 internal links (recommended minimum: 2)" in messages

    def test_related_suggestions(self, site_root: Path, site: Site, rules: GuidelineConfig) -> None:
        write_post(site_root, "alpha", links=["beta"])
        result = validate_links(_doc(site, "alpha"), site, rules)
        suggestion = next(w for w in result.warnings if w.message.startswith("Consider linking"))
        assert suggestion.message == (
            'Consider linking to related posts: "Practical Python workflows for teams" (/blog/gamma)'
        )

    def test_orphan(self, site_root: Path, site: Site, rules: GuidelineConfig) -> None:
        write_post(site_root, "lonely", links=["alpha", "beta"], tags=["misc", "other"])
        result = validate_links(_doc(site, "lonely"), site, rules)
        orphan = [w for w in result.warnings if w.message.startswith("Orphan")]
        assert [w.message for w in orphan] == [
            "Orphan post: no other published documents link to this post"
        ]

    def test_draft_linked_from_published_is_not_orphan(
        self, site_root: Path, site: Site, rules: GuidelineConfig
    ) -> None:
        write_post(site_root, "beta", links=["alpha", "gamma", "delta"])
        result = validate_links(_doc(site, "delta"), site, rules)
        assert not any(w.message.startswith("Orphan") for w in result.warnings)
