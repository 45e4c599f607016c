"""Content kinds and classification enums."""

from __future__ import annotations

from enum import StrEnum


class DocumentKind(StrEnum):
    """Kinds of content documents on the site."""

    POST = "post"
    PATTERN = "pattern"


class Severity(StrEnum):
    """Issue severity. Only errors block publishing."""

    ERROR = "error"
    WARNING = "warning"


class Category(StrEnum):
    """Which concern produced a validation issue."""

    FRONTMATTER = "frontmatter"
    STRUCTURE = "structure"
    SEO = "seo"
    VOICE = "voice"
    IMAGES = "images"
    LINKS = "links"


class Difficulty(StrEnum):
    """Pattern difficulty levels."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class RelationshipType(StrEnum):
    """Edge types between related patterns."""

    ENABLES = "enables"
    COMPOSES = "composes"
    PREVENTS = "prevents"
    CONTRASTS = "contrasts"


class PlanStatus(StrEnum):
    """Content-plan topic statuses touched by calendar sync."""

    READY = "ready"
    REVIEW = "review"
    PUBLISHED = "published"


class ImageRole(StrEnum):
    """Frontmatter image roles with distinct size specs."""

    THUMBNAIL = "thumbnail"
    HERO = "hero"

    @property
    def blur_field(self) -> str:
        """Frontmatter key holding this role's blur placeholder."""
        return f"{self.value}Blur"
