"""Frontmatter checks — title, excerpt, tag and keyword counts, date, image paths."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pubgate.domain.issues import ValidationIssue, ValidationResult
from pubgate.domain.types import Category, ImageRole

if TYPE_CHECKING:
    from pubgate.config.guidelines import GuidelineConfig
    from pubgate.domain.content import PostFrontmatter

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_frontmatter(fm: PostFrontmatter, guidelines: GuidelineConfig) -> ValidationResult:
    rules = guidelines.validation_rules
    issues: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    # Title
    title_len = len(fm.title)
    if title_len < rules.title.min_length:
        issues.append(
            ValidationIssue.error(
                Category.FRONTMATTER,
                f"Title too short: {title_len} chars (min: {rules.title.min_length})",
                field="title",
                suggestion="Expand the title to be more descriptive",
            )
        )
    if title_len > rules.title.max_length:
        issues.append(
            ValidationIssue.error(
                Category.FRONTMATTER,
                f"Title too long: {title_len} chars (max: {rules.title.max_length})",
                field="title",
                suggestion="Shorten the title while keeping it descriptive",
            )
        )
    title_lower = fm.title.lower()
    for word in rules.title.forbidden_words:
        if word.lower() in title_lower:
            warnings.append(
                ValidationIssue.warning(
                    Category.FRONTMATTER,
                    f'Title contains discouraged word: "{word}"',
                    field="title",
                    suggestion="Consider using more specific language",
                )
            )

    # Excerpt
    excerpt_len = len(fm.excerpt)
    if excerpt_len < rules.excerpt.min_length:
        issues.append(
            ValidationIssue.error(
                Category.FRONTMATTER,
                f"Excerpt too short: {excerpt_len} chars (min: {rules.excerpt.min_length})",
                field="excerpt",
                suggestion="Expand the excerpt to be more compelling",
            )
        )
    if excerpt_len > rules.excerpt.max_length:
        issues.append(
            ValidationIssue.error(
                Category.FRONTMATTER,
                f"Excerpt too long: {excerpt_len} chars (max: {rules.excerpt.max_length})",
                field="excerpt",
                suggestion="Trim the excerpt to fit meta description limits",
            )
        )

    # Tags and keywords are SEO concerns even though they live in frontmatter.
    seo = rules.seo
    tag_count = len(fm.tags)
    if tag_count < seo.min_tags:
        issues.append(
            ValidationIssue.error(
                Category.SEO,
                f"Too few tags: {tag_count} (min: {seo.min_tags})",
                field="tags",
                suggestion="Add relevant category tags",
            )
        )
    if tag_count > seo.max_tags:
        warnings.append(
            ValidationIssue.warning(
                Category.SEO,
                f"Too many tags: {tag_count} (max: {seo.max_tags})",
                field="tags",
                suggestion="Focus on the most relevant tags",
            )
        )

    keyword_count = len(fm.keywords)
    if keyword_count < seo.min_keywords:
        issues.append(
            ValidationIssue.error(
                Category.SEO,
                f"Too few keywords: {keyword_count} (min: {seo.min_keywords})",
                field="keywords",
                suggestion="Add SEO keywords to improve discoverability",
            )
        )
    if keyword_count > seo.max_keywords:
        warnings.append(
            ValidationIssue.warning(
                Category.SEO,
                f"Too many keywords: {keyword_count} (max: {seo.max_keywords})",
                field="keywords",
                suggestion="Focus on primary keywords",
            )
        )

    # Date
    if not _ISO_DATE.match(fm.date):
        issues.append(
            ValidationIssue.error(
                Category.FRONTMATTER,
                "Invalid date format",
                field="date",
                suggestion="Use ISO 8601 format: YYYY-MM-DD",
            )
        )

    # Image paths only; the files themselves are checked by the images validator.
    for role in ImageRole:
        if rules.images.for_role(role).required and not fm.image_path(role):
            warnings.append(
                ValidationIssue.warning(
                    Category.IMAGES,
                    f"{role.value.capitalize()} image path not defined",
                    field=role.value,
                    suggestion=f"Add {role.value} path: /images/posts/{{slug}}/{role.value}.jpg",
                )
            )

    return ValidationResult.from_findings(issues, warnings)
