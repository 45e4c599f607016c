"""Field validators — one rule family each, no shared state between calls.

Every validator takes document fields plus the loaded
:class:`~pubgate.config.guidelines.GuidelineConfig` and returns a
:class:`~pubgate.domain.issues.ValidationResult`.  Content that misses a
guideline becomes an issue; validators never raise for it.
"""

from __future__ import annotations

from pubgate.validators.frontmatter import validate_frontmatter
from pubgate.validators.images import validate_images
from pubgate.validators.links import validate_links
from pubgate.validators.seo import keyword_density, validate_seo
from pubgate.validators.structure import validate_structure
from pubgate.validators.voice import validate_voice

__all__ = [
    "keyword_density",
    "validate_frontmatter",
    "validate_images",
    "validate_links",
    "validate_seo",
    "validate_structure",
    "validate_voice",
]
