"""PipelineService — batch validation, optional fixes, and the JSON report.

Two pipelines share one runner:

* ``publish-prepare`` — one slug, all posts, or published posts only;
  with ``fix`` it also injects blur placeholders and syncs the content
  calendar.
* ``validate-all`` — published posts (or every post with drafts).

A failure while processing one document is recorded against that
document and the batch carries on.  The report artifact is overwritten
on every batch that selected at least one document.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from pubgate.domain.content import Document
from pubgate.domain.issues import AggregateResult, ValidationIssue
from pubgate.domain.types import Category
from pubgate.errors import PubgateError
from pubgate.services._helpers import now_iso, round_half_up
from pubgate.services.base import BaseService
from pubgate.services.fix import FixService
from pubgate.services.result import ServiceResult
from pubgate.services.telemetry import trace_span, traced
from pubgate.services.validate import ValidationService

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

PUBLISH_PREPARE = "publish-prepare"
VALIDATE_ALL = "validate-all"


class PipelineEntry(BaseModel):
    """One document's outcome within a batch run."""

    model_config = {"frozen": True}

    slug: str
    title: str
    report: AggregateResult
    fixes: dict[str, str] = Field(default_factory=dict)
    error: str | None = None

    @property
    def passed(self) -> bool:
        return self.report.passed and self.error is None

    def report_row(self) -> dict[str, Any]:
        """Row for the report artifact."""
        return {
            "slug": self.slug,
            "title": self.title,
            "passed": self.passed,
            "score": self.report.score,
            "issueCount": len(self.report.issues),
            "warningCount": len(self.report.warnings),
        }

    def to_data(self) -> dict[str, Any]:
        """Row plus full findings, for rendering and ``--json``."""
        return {
            **self.report_row(),
            "issues": [i.model_dump(mode="json") for i in self.report.issues],
            "warnings": [w.model_dump(mode="json") for w in self.report.warnings],
            "metrics": self.report.metrics.model_dump(mode="json"),
            "steps": [
                {
                    "name": name,
                    "passed": step.passed,
                    "score": step.score,
                    "issues": [i.model_dump(mode="json") for i in step.issues],
                    "warnings": [w.model_dump(mode="json") for w in step.warnings],
                    "fix": self.fixes.get(name),
                }
                for name, step in self.report.breakdown.items()
            ],
            "fixes": dict(self.fixes),
            "error": self.error,
        }


def summarize(entries: list[PipelineEntry]) -> dict[str, Any]:
    passed = sum(1 for e in entries if e.passed)
    scores = [e.report.score for e in entries]
    return {
        "total": len(entries),
        "passed": passed,
        "failed": len(entries) - passed,
        "warnings": sum(len(e.report.warnings) for e in entries),
        "average_score": round_half_up(sum(scores) / len(scores)) if scores else 0,
    }


def write_report(
    path: Path,
    *,
    pipeline: str,
    fix_mode: bool,
    summary: dict[str, Any],
    entries: list[PipelineEntry],
) -> None:
    """Overwrite the JSON report artifact, creating parent directories."""
    document = {
        "generated_at": now_iso(),
        "pipeline": pipeline,
        "fix_mode": fix_mode,
        "summary": summary,
        "results": [e.report_row() for e in entries],
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


class PipelineService(BaseService):
    """Runs the aggregator and fixers over a selection of posts."""

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    @traced
    def publish_prepare(
        self,
        *,
        slug: str | None = None,
        all_posts: bool = False,
        fix: bool = False,
    ) -> ServiceResult:
        """Validate the selected posts, optionally apply fixes, write the report."""
        if slug:
            mode = f"Single ({slug})"
        elif all_posts:
            mode = "All posts"
        else:
            mode = "Published posts"
        try:
            slugs = [slug] if slug else self._select(include_drafts=all_posts)
            return self._run("publish_prepare", PUBLISH_PREPARE, slugs, fix=fix, mode=mode)
        except PubgateError as exc:
            return self._fatal("publish_prepare", exc)

    @traced
    def validate_all(self, *, include_drafts: bool = False) -> ServiceResult:
        """Validate published posts (or every post) and write the report."""
        mode = "All posts" if include_drafts else "Published posts only"
        try:
            slugs = self._select(include_drafts=include_drafts)
            return self._run("validate_all", VALIDATE_ALL, slugs, fix=False, mode=mode)
        except PubgateError as exc:
            return self._fatal("validate_all", exc)

    # ------------------------------------------------------------------
    # Runner
    # ------------------------------------------------------------------

    def _select(self, *, include_drafts: bool) -> list[str]:
        posts = self._site.posts
        slugs = posts.get_all_slugs()
        if include_drafts:
            return slugs
        return [
            s for s in slugs if isinstance(doc := posts.get_by_slug(s), Document) and doc.published
        ]

    def _run(
        self,
        op: str,
        pipeline: str,
        slugs: list[str],
        *,
        fix: bool,
        mode: str,
    ) -> ServiceResult:
        # Fail fast on a broken ruleset before touching any document.
        self._site.guidelines.load()

        warnings: list[str] = []
        entries: list[PipelineEntry] = []
        validator = ValidationService(self._site)
        fixer = FixService(self._site)

        for slug in slugs:
            with trace_span(slug):
                entries.append(self._process(slug, validator, fixer, fix=fix))

        summary = summarize(entries)
        data: dict[str, Any] = {
            "pipeline": pipeline,
            "mode": mode,
            "fix_mode": fix,
            "summary": summary,
            "results": [e.to_data() for e in entries],
            "report_path": None,
        }

        if not entries:
            warnings.append("No posts found to validate")
        else:
            report_path = self._site.report_path
            try:
                write_report(
                    report_path, pipeline=pipeline, fix_mode=fix, summary=summary, entries=entries
                )
                data["report_path"] = str(report_path)
            except OSError as exc:
                warnings.append(f"Could not write report to {report_path}: {exc}")

        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def _process(
        self,
        slug: str,
        validator: ValidationService,
        fixer: FixService,
        *,
        fix: bool,
    ) -> PipelineEntry:
        try:
            report = validator.validate(slug)
        except PubgateError:
            raise
        except Exception as exc:
            logger.warning("Validating %s failed: %s", slug, exc)
            failure = ValidationIssue.error(Category.FRONTMATTER, f"Validation failed: {exc}")
            report = AggregateResult(slug=slug, passed=False, score=0, issues=[failure])
            return PipelineEntry(slug=slug, title=slug, report=report, error=str(exc))

        title = report.title or slug
        if not fix or not report.breakdown:
            return PipelineEntry(slug=slug, title=title, report=report)

        fixes: dict[str, str] = {}
        try:
            blur = fixer.inject_blur_placeholders(slug)
            if (note := blur.summary()) is not None:
                fixes["images"] = note
            calendar = fixer.sync_calendar_status(slug, report.passed)
            fixes["calendar"] = calendar.summary()
        except PubgateError:
            raise
        except Exception as exc:
            logger.warning("Fixing %s failed: %s", slug, exc)
            failure = ValidationIssue.error(
                Category.FRONTMATTER,
                f"Fix step failed: {exc}",
                suggestion="Check file permissions and rerun with --fix",
            )
            report = report.model_copy(
                update={"passed": False, "issues": [*report.issues, failure]}
            )
            return PipelineEntry(slug=slug, title=title, report=report, fixes=fixes, error=str(exc))

        return PipelineEntry(slug=slug, title=title, report=report, fixes=fixes)

