"""Brand-voice heuristics — forbidden phrases, passive voice, sentence length.

Code fences are removed before any text analysis.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pubgate.domain.issues import ValidationIssue, ValidationMetrics, ValidationResult
from pubgate.domain.markup import split_sentences, strip_code_fences
from pubgate.domain.types import Category

if TYPE_CHECKING:
    from pubgate.config.guidelines import GuidelineConfig

PASSIVE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(was|were|been|being)\s+\w+ed\b", re.IGNORECASE),
    re.compile(r"\b(is|are)\s+being\s+\w+ed\b", re.IGNORECASE),
    re.compile(r"\b(has|have|had)\s+been\s+\w+ed\b", re.IGNORECASE),
)

# More long sentences than this before a warning is raised.
LONG_SENTENCE_ALLOWANCE = 3


def count_passive(text: str) -> int:
    """Passive constructions across all patterns (overlaps count per pattern)."""
    return sum(len(pattern.findall(text)) for pattern in PASSIVE_PATTERNS)


def validate_voice(text: str, guidelines: GuidelineConfig) -> ValidationResult:
    rules = guidelines.validation_rules.tone
    warnings: list[ValidationIssue] = []
    prose = strip_code_fences(text)

    for phrase in rules.forbidden_phrases:
        hits = re.findall(rf"\b{re.escape(phrase)}\b", prose, re.IGNORECASE)
        if hits:
            warnings.append(
                ValidationIssue.warning(
                    Category.VOICE,
                    f'Forbidden phrase found: "{phrase}" ({len(hits)}x)',
                    suggestion="Replace with more direct, confident language",
                )
            )

    sentences = split_sentences(prose)
    sentence_count = len(sentences)
    passive_pct = count_passive(prose) / sentence_count * 100 if sentence_count else 0.0

    if passive_pct > rules.max_passive_voice_percentage:
        warnings.append(
            ValidationIssue.warning(
                Category.VOICE,
                f"High passive voice usage: {passive_pct:.1f}% "
                f"(max: {rules.max_passive_voice_percentage:g}%)",
                suggestion="Convert passive sentences to active voice",
            )
        )

    lengths = [len(sentence.split()) for sentence in sentences]
    long_count = sum(1 for n in lengths if n > rules.max_sentence_length)
    avg_length = sum(lengths) / sentence_count if sentence_count else 0.0

    if long_count > LONG_SENTENCE_ALLOWANCE:
        warnings.append(
            ValidationIssue.warning(
                Category.VOICE,
                f"{long_count} sentences exceed {rules.max_sentence_length} words",
                suggestion="Break long sentences into shorter, clearer ones",
            )
        )

    metrics = ValidationMetrics(
        passive_voice_percentage=passive_pct,
        avg_sentence_length=avg_length,
    )
    return ValidationResult.from_findings([], warnings, metrics)
