"""ValidationService — run every field validator over a post and aggregate.

The aggregate score is a weighted average of four validators, keyed by
the guideline ``scoring.weights``:

    technical_depth -> frontmatter
    voice_alignment -> voice
    structure       -> structure
    seo_readiness   -> seo

Images and links contribute their issues and warnings but no weight.
``passed`` is true iff the merged error list is empty.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pubgate.domain.content import Document, PostFrontmatter
from pubgate.domain.issues import AggregateResult, ValidationIssue, ValidationMetrics
from pubgate.domain.types import Category
from pubgate.errors import PubgateError
from pubgate.services._helpers import round_half_up
from pubgate.services.base import BaseService
from pubgate.services.result import ServiceResult
from pubgate.services.telemetry import trace_span, traced
from pubgate.validators import (
    validate_frontmatter,
    validate_images,
    validate_links,
    validate_seo,
    validate_structure,
    validate_voice,
)

if TYPE_CHECKING:
    from pubgate.config.guidelines import GuidelineConfig
    from pubgate.domain.issues import ValidationResult

# Free text scoring below this fails ``brand-check``.
BRAND_CHECK_MIN_SCORE = 80

# Order in which validator findings are merged and reported.
VALIDATOR_ORDER = ("frontmatter", "structure", "voice", "seo", "images", "links")


def weighted_score(breakdown: dict[str, ValidationResult], rules: GuidelineConfig) -> int:
    """Overall score from the four weighted validators.

    Falls back to a plain average when every weight is zero.
    """
    weights = rules.scoring.weights
    pairs = [
        (breakdown["frontmatter"].score, weights.technical_depth),
        (breakdown["voice"].score, weights.voice_alignment),
        (breakdown["structure"].score, weights.structure),
        (breakdown["seo"].score, weights.seo_readiness),
    ]
    total = weights.total
    if total <= 0:
        return round_half_up(sum(score for score, _ in pairs) / len(pairs))
    return round_half_up(sum(score * weight for score, weight in pairs) / total)


def not_found_result(slug: str, reason: str = "missing") -> AggregateResult:
    """Synthetic failing result for a slug the store could not load."""
    message = f"Post not found: {slug}"
    if reason != "missing":
        message = f"{message} ({reason})"
    return AggregateResult(
        slug=slug,
        passed=False,
        score=0,
        issues=[ValidationIssue.error(Category.FRONTMATTER, message)],
    )


class ValidationService(BaseService):
    """Aggregates the field validators for posts and free text."""

    # ------------------------------------------------------------------
    # Aggregator
    # ------------------------------------------------------------------

    @traced
    def validate(self, slug: str) -> AggregateResult:
        """Validate one post by slug.

        Raises:
            GuidelinesError: If the guideline ruleset cannot be loaded.
        """
        document = self._site.posts.get_by_slug(slug)
        if not isinstance(document, Document):
            return not_found_result(slug, document.reason)
        return self.validate_document(document)

    def validate_document(self, document: Document) -> AggregateResult:
        rules = self._site.guidelines.load()
        fm = document.frontmatter
        assert isinstance(fm, PostFrontmatter)

        breakdown: dict[str, ValidationResult] = {}
        with trace_span("frontmatter"):
            breakdown["frontmatter"] = validate_frontmatter(fm, rules)
        with trace_span("structure"):
            breakdown["structure"] = validate_structure(document.body, rules)
        with trace_span("voice"):
            breakdown["voice"] = validate_voice(document.body, rules)
        with trace_span("seo"):
            breakdown["seo"] = validate_seo(fm, document.body, rules)
        with trace_span("images"):
            breakdown["images"] = validate_images(
                fm,
                rules,
                public_dir=self._site.public_dir,
                timeout=self._site.fetch_timeout,
            )
        with trace_span("links"):
            breakdown["links"] = validate_links(document, self._site, rules)

        issues = [i for name in VALIDATOR_ORDER for i in breakdown[name].issues]
        warnings = [w for name in VALIDATOR_ORDER for w in breakdown[name].warnings]
        structure, voice = breakdown["structure"].metrics, breakdown["voice"].metrics

        return AggregateResult(
            slug=document.slug,
            title=document.title,
            passed=not issues,
            score=weighted_score(breakdown, rules),
            issues=issues,
            warnings=warnings,
            metrics=ValidationMetrics(
                word_count=structure.word_count,
                heading_count=structure.heading_count,
                code_block_count=structure.code_block_count,
                passive_voice_percentage=voice.passive_voice_percentage,
                avg_sentence_length=voice.avg_sentence_length,
            ),
            breakdown=breakdown,
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    @traced
    def validate_post(self, slug: str) -> ServiceResult:
        """Full aggregate report for one post."""
        try:
            report = self.validate(slug)
        except PubgateError as exc:
            return self._fatal("validate", exc)
        return ServiceResult(ok=True, op="validate", data=report.model_dump(mode="json"))

    @traced
    def brand_check(self, text: str) -> ServiceResult:
        """Run the voice validator over free text."""
        try:
            rules = self._site.guidelines.load()
        except PubgateError as exc:
            return self._fatal("brand_check", exc)

        result = validate_voice(text, rules)
        preview = text if len(text) <= 100 else f"{text[:100]}..."
        return ServiceResult(
            ok=True,
            op="brand_check",
            data={
                "text": preview,
                "score": result.score,
                "passed": result.score >= BRAND_CHECK_MIN_SCORE,
                "min_score": BRAND_CHECK_MIN_SCORE,
                "warnings": [w.model_dump(mode="json") for w in result.warnings],
                "metrics": result.metrics.model_dump(mode="json"),
            },
        )

    @traced
    def list_posts(self) -> ServiceResult:
        """Every published post with its status and validation outcome."""
        try:
            posts = self._site.posts.get_all()
            items: list[dict[str, Any]] = []
            for post in posts:
                report = self.validate_document(post)
                items.append(
                    {
                        "slug": post.slug,
                        "title": post.title,
                        "status": "published" if post.published else "draft",
                        "passed": report.passed,
                        "score": report.score,
                    }
                )
        except PubgateError as exc:
            return self._fatal("list_posts", exc)
        return ServiceResult(ok=True, op="list_posts", data={"count": len(items), "items": items})
