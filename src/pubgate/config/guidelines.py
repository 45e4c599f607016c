"""Brand guidelines — the ruleset every validator reads its thresholds from.

The ruleset lives in a JSON file maintained alongside the content
(``.content/brand/guidelines.json`` by default).  :class:`Guidelines`
loads it lazily on first use and keeps it for the lifetime of the
owning :class:`~pubgate.infrastructure.site.Site`; ``invalidate()``
forces a re-read.

INVARIANT: There is no fallback ruleset.  A missing or malformed file
raises :class:`GuidelinesError` and the run stops.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from pubgate.domain.types import ImageRole
from pubgate.errors import GuidelinesError

logger = logging.getLogger(__name__)


class _Rules(BaseModel):
    model_config = {"frozen": True, "extra": "ignore"}


class TitleRules(_Rules):
    min_length: int
    max_length: int
    must_start_with_capital: bool = False
    forbidden_words: list[str] = Field(default_factory=list)


class ExcerptRules(_Rules):
    min_length: int
    max_length: int
    must_contain_action_verb: bool = False


class StructureRules(_Rules):
    min_word_count: int
    max_word_count: int
    min_headings: int
    require_introduction: bool = False
    require_conclusion: bool = False


class SeoRules(_Rules):
    min_keywords: int
    max_keywords: int
    min_tags: int
    max_tags: int


class KeywordRequirements(_Rules):
    max_keyword_density_percent: float = 2.5
    min_keyword_density_percent: float = 0.5


class InternalLinking(_Rules):
    min_internal_links_per_post: int = 2
    max_internal_links_per_post: int = 10


class SeoStrategy(_Rules):
    keyword_requirements: KeywordRequirements = Field(default_factory=KeywordRequirements)
    internal_linking: InternalLinking = Field(default_factory=InternalLinking)


class ToneRules(_Rules):
    forbidden_phrases: list[str] = Field(default_factory=list)
    preferred_phrases: list[str] = Field(default_factory=list)
    max_passive_voice_percentage: float
    max_sentence_length: int


class CodeBlockRules(_Rules):
    require_language_identifier: bool = True
    encourage_line_highlighting: bool = False
    max_lines_without_comment: int = 30


class ImageSpec(_Rules):
    required: bool = False
    width: int
    height: int
    max_size_kb: int


class ImageRules(_Rules):
    thumbnail: ImageSpec = Field(
        default_factory=lambda: ImageSpec(required=True, width=800, height=450, max_size_kb=500)
    )
    hero: ImageSpec = Field(
        default_factory=lambda: ImageSpec(required=True, width=1600, height=900, max_size_kb=1000)
    )

    def for_role(self, role: ImageRole) -> ImageSpec:
        return self.thumbnail if role is ImageRole.THUMBNAIL else self.hero


class ValidationRules(_Rules):
    title: TitleRules
    excerpt: ExcerptRules
    structure: StructureRules
    seo: SeoRules
    seo_strategy: SeoStrategy = Field(default_factory=SeoStrategy)
    tone: ToneRules
    code_blocks: CodeBlockRules = Field(default_factory=CodeBlockRules)
    images: ImageRules = Field(default_factory=ImageRules)


class ScoringWeights(_Rules):
    technical_depth: float
    voice_alignment: float
    structure: float
    seo_readiness: float

    @property
    def total(self) -> float:
        return self.technical_depth + self.voice_alignment + self.structure + self.seo_readiness


class ScoringThresholds(_Rules):
    publish_ready: int = 85
    needs_minor_edits: int = 70
    needs_major_revision: int = 50


class Scoring(_Rules):
    weights: ScoringWeights
    thresholds: ScoringThresholds = Field(default_factory=ScoringThresholds)


class GuidelineConfig(_Rules):
    """The parsed guidelines file."""

    validation_rules: ValidationRules
    scoring: Scoring


# An omitted max_size_kb falls back to the per-role budget.
_DEFAULT_MAX_SIZE_KB = {ImageRole.THUMBNAIL: 500, ImageRole.HERO: 1000}


def _apply_image_defaults(raw: dict) -> dict:
    images = raw.get("validation_rules", {}).get("images")
    if isinstance(images, dict):
        for role in ImageRole:
            spec = images.get(role.value)
            if isinstance(spec, dict):
                spec.setdefault("max_size_kb", _DEFAULT_MAX_SIZE_KB[role])
    return raw


class Guidelines:
    """Lazily loaded, cached guideline ruleset backed by a JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._cached: GuidelineConfig | None = None

    def load(self) -> GuidelineConfig:
        """Return the ruleset, reading the file on first access.

        Raises:
            GuidelinesError: If the file is missing, unreadable, not JSON,
                or does not match the expected schema.
        """
        if self._cached is not None:
            return self._cached

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            msg = f"Guidelines file not found: {self.path}"
            raise GuidelinesError(msg) from exc
        except OSError as exc:
            msg = f"Guidelines file could not be read: {self.path}: {exc}"
            raise GuidelinesError(msg) from exc
        except UnicodeDecodeError as exc:
            msg = f"Guidelines file is not valid UTF-8: {self.path}: {exc}"
            raise GuidelinesError(msg) from exc
        except json.JSONDecodeError as exc:
            msg = f"Guidelines file is not valid JSON: {self.path}: {exc}"
            raise GuidelinesError(msg) from exc

        if not isinstance(raw, dict):
            msg = f"Guidelines file must hold a JSON object: {self.path}"
            raise GuidelinesError(msg)

        try:
            config = GuidelineConfig.model_validate(_apply_image_defaults(raw))
        except ValidationError as exc:
            msg = f"Guidelines file does not match the expected schema: {self.path}\n{exc}"
            raise GuidelinesError(msg) from exc

        logger.debug("Loaded guidelines from %s", self.path)
        self._cached = config
        return config

    def invalidate(self) -> None:
        """Drop the cached ruleset so the next ``load()`` re-reads the file."""
        self._cached = None

    @property
    def loaded(self) -> bool:
        return self._cached is not None
