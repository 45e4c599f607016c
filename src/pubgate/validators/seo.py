"""SEO checks — primary keyword placement and density.

The primary keyword is the first entry of ``keywords``.  A document
without keywords (or with a blank first keyword) gets no SEO findings
here; the frontmatter validator already reports the missing keywords.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pubgate.domain.issues import ValidationIssue, ValidationResult
from pubgate.domain.markup import first_paragraph, h2_headings, strip_code
from pubgate.domain.types import Category

if TYPE_CHECKING:
    from pubgate.config.guidelines import GuidelineConfig
    from pubgate.domain.content import PostFrontmatter


def keyword_density(body: str, keyword: str) -> float:
    """Share of body words taken by *keyword*, as a percentage.

    Code is stripped first.  A multi-word keyword counts every substring
    occurrence as that many words; a single word counts each body word
    containing it.

    Examples:
        >>> keyword_density("python tips for python users", "python")
        40.0
        >>> keyword_density("use type hints, type hints help", "type hints")
        66.66666666666667
        >>> keyword_density("", "python")
        0.0
    """
    text = strip_code(body).lower()
    words = text.split()
    if not words:
        return 0.0

    keyword = keyword.lower()
    keyword_words = keyword.split()
    if len(keyword_words) > 1:
        occurrences = " ".join(words).count(keyword)
        return occurrences * len(keyword_words) * 100 / len(words)

    occurrences = sum(1 for word in words if keyword in word)
    return occurrences * 100 / len(words)


def validate_seo(fm: PostFrontmatter, body: str, guidelines: GuidelineConfig) -> ValidationResult:
    issues: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []
    if not fm.keywords or not fm.keywords[0].strip():
        return ValidationResult.from_findings(issues, warnings)

    keyword = fm.keywords[0].lower()

    if keyword not in fm.title.lower():
        warnings.append(
            ValidationIssue.warning(
                Category.SEO,
                f'Primary keyword "{keyword}" not in title',
                suggestion="Include primary keyword in the title for better SEO",
            )
        )

    if keyword not in first_paragraph(body).lower():
        warnings.append(
            ValidationIssue.warning(
                Category.SEO,
                f'Primary keyword "{keyword}" not in first paragraph',
                suggestion="Mention primary keyword early in the content",
            )
        )

    if not any(keyword in heading.lower() for heading in h2_headings(body)):
        warnings.append(
            ValidationIssue.warning(
                Category.SEO,
                f'Primary keyword "{keyword}" not in any H2 heading',
                suggestion="Include primary keyword in at least one section heading",
            )
        )

    limits = guidelines.validation_rules.seo_strategy.keyword_requirements
    density = keyword_density(body, keyword)
    shown = round(density, 2)
    if density > limits.max_keyword_density_percent:
        issues.append(
            ValidationIssue.error(
                Category.SEO,
                f'Keyword "{keyword}" density too high: {shown:g}% '
                f"(max {limits.max_keyword_density_percent:g}%)",
                field="keywords",
                suggestion="Reduce keyword repetition to avoid over-stuffing",
            )
        )
    elif density < limits.min_keyword_density_percent:
        warnings.append(
            ValidationIssue.warning(
                Category.SEO,
                f'Keyword "{keyword}" density low: {shown:g}% '
                f"(recommended {limits.min_keyword_density_percent:g}-"
                f"{limits.max_keyword_density_percent:g}%)",
                field="keywords",
                suggestion="Consider mentioning the primary keyword more naturally throughout the content",
            )
        )

    return ValidationResult.from_findings(issues, warnings)
