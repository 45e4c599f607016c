"""Validation issues and results shared by every validator.

INVARIANT: ``passed`` is true iff ``issues`` (errors) is empty.
Warnings lower the score but never fail validation.
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, Field

from pubgate.domain.types import Category, Severity

ERROR_PENALTY = 15
WARNING_PENALTY = 5


def compute_score(error_count: int, warning_count: int) -> int:
    """Per-validator score: 100 minus penalties, floored at zero."""
    return max(0, 100 - ERROR_PENALTY * error_count - WARNING_PENALTY * warning_count)


class ValidationIssue(BaseModel):
    """A single content finding produced by one validator run."""

    model_config = {"frozen": True}

    severity: Severity
    category: Category
    message: str
    field: str | None = None
    suggestion: str | None = None
    line: int | None = None

    @classmethod
    def error(cls, category: Category, message: str, **kwargs: Any) -> Self:
        return cls(severity=Severity.ERROR, category=category, message=message, **kwargs)

    @classmethod
    def warning(cls, category: Category, message: str, **kwargs: Any) -> Self:
        return cls(severity=Severity.WARNING, category=category, message=message, **kwargs)


class ValidationMetrics(BaseModel):
    """Body measurements collected while validating."""

    model_config = {"frozen": True}

    word_count: int = 0
    heading_count: int = 0
    code_block_count: int = 0
    passive_voice_percentage: float = 0.0
    avg_sentence_length: float = 0.0


class ValidationResult(BaseModel):
    """Outcome of one validator (or the merge of several)."""

    model_config = {"frozen": True}

    passed: bool
    score: int = Field(ge=0, le=100)
    issues: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)
    metrics: ValidationMetrics = Field(default_factory=ValidationMetrics)

    @classmethod
    def from_findings(
        cls,
        issues: list[ValidationIssue],
        warnings: list[ValidationIssue],
        metrics: ValidationMetrics | None = None,
    ) -> Self:
        """Build a result, deriving ``passed`` and ``score`` from the findings."""
        return cls(
            passed=len(issues) == 0,
            score=compute_score(len(issues), len(warnings)),
            issues=list(issues),
            warnings=list(warnings),
            metrics=metrics or ValidationMetrics(),
        )


class AggregateResult(ValidationResult):
    """Merged result for one document with the per-validator breakdown."""

    slug: str
    title: str = ""
    breakdown: dict[str, ValidationResult] = Field(default_factory=dict)
