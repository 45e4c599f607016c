"""Structure checks — length, section headings, code fences, conclusion."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pubgate.domain.issues import ValidationIssue, ValidationMetrics, ValidationResult
from pubgate.domain.markup import code_blocks, count_words, h2_headings
from pubgate.domain.types import Category

if TYPE_CHECKING:
    from pubgate.config.guidelines import GuidelineConfig

_CONCLUSION_HEADING = re.compile(
    r"^##\s*(Conclusion|Summary|Takeaways|Key Takeaways|Wrapping Up)",
    re.IGNORECASE | re.MULTILINE,
)
_BARE_FENCE = re.compile(r"^```[ \t]*\n")


def has_conclusion(body: str) -> bool:
    return _CONCLUSION_HEADING.search(body) is not None


def validate_structure(body: str, guidelines: GuidelineConfig) -> ValidationResult:
    rules = guidelines.validation_rules.structure
    issues: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    word_count = count_words(body)
    if word_count < rules.min_word_count:
        issues.append(
            ValidationIssue.error(
                Category.STRUCTURE,
                f"Content too short: {word_count} words (min: {rules.min_word_count})",
                suggestion="Expand the content with more details and examples",
            )
        )
    if word_count > rules.max_word_count:
        warnings.append(
            ValidationIssue.warning(
                Category.STRUCTURE,
                f"Content very long: {word_count} words (max: {rules.max_word_count})",
                suggestion="Consider splitting into multiple posts",
            )
        )

    heading_count = len(h2_headings(body))
    if heading_count < rules.min_headings:
        issues.append(
            ValidationIssue.error(
                Category.STRUCTURE,
                f"Too few H2 headings: {heading_count} (min: {rules.min_headings})",
                suggestion="Break content into more logical sections",
            )
        )

    blocks = code_blocks(body)
    if guidelines.validation_rules.code_blocks.require_language_identifier and any(
        _BARE_FENCE.match(block) for block in blocks
    ):
        # One warning per document, however many fences lack a language.
        warnings.append(
            ValidationIssue.warning(
                Category.STRUCTURE,
                "Code block missing language identifier",
                suggestion="Add language after ```: ```typescript, ```python, etc.",
            )
        )

    if rules.require_conclusion and not has_conclusion(body):
        warnings.append(
            ValidationIssue.warning(
                Category.STRUCTURE,
                "No conclusion section detected",
                suggestion='Add a "## Conclusion" section with key takeaways',
            )
        )

    metrics = ValidationMetrics(
        word_count=word_count,
        heading_count=heading_count,
        code_block_count=len(blocks),
    )
    return ValidationResult.from_findings(issues, warnings, metrics)
