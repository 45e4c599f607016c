"""Content models — frontmatter schemas, documents, and MDX parsing.

Frontmatter models map 1:1 to the YAML keys of posts and patterns.
They are deliberately lenient: missing or short values are reported by
the validators, not rejected at load time.  Only structurally broken
frontmatter (unparseable YAML, wrong value types) fails to load.

Pure parsing utilities (``parse_frontmatter``, ``render_frontmatter``)
live here so that the dependency direction stays clean:
infrastructure -> domain, never the reverse.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from io import StringIO
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from pubgate.domain.types import Difficulty, DocumentKind, ImageRole, RelationshipType

# ---------------------------------------------------------------------------
# YAML parser (round-trip preserves comments, key order and quote styles)
# ---------------------------------------------------------------------------


def _new_yaml() -> YAML:
    """Create a fresh round-trip YAML parser.

    ruamel.yaml's YAML object is stateful and a failed dump can leave a
    shared instance broken, so every call gets its own.
    """
    y = YAML()
    y.preserve_quotes = True
    y.default_flow_style = False
    # Blur placeholders are long unbroken base64 strings.
    y.width = 4096
    return y


_FRONTMATTER_DELIMITER = "---"


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Parse YAML frontmatter and body from MDX content.

    Expects the file to start with ``---`` on the first line. The second
    ``---`` closes the YAML block. Everything after is the body, minus
    the single newline that separates it from the closing delimiter.

    Returns:
        A ``(frontmatter_dict, body_text)`` tuple. If no valid
        frontmatter delimiters are found, returns ``({}, content)``.
        The dict is a ruamel ``CommentedMap`` so that writing it back
        keeps the author's key order and quoting.
    """
    normalized = content.replace("\r\n", "\n")
    lines = normalized.split("\n")
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        return {}, content

    end_idx: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        return {}, content

    yaml_block = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1 :])

    if body.startswith("\n"):
        body = body[1:]

    fm = _new_yaml().load(yaml_block) or CommentedMap()
    if not isinstance(fm, dict):
        msg = f"Frontmatter must be a mapping, got {type(fm).__name__}"
        raise ValueError(msg)
    return fm, body


def render_frontmatter(frontmatter: dict[str, Any], body: str) -> str:
    """Render a frontmatter dict and body text back into MDX.

    A blank line separates the closing delimiter from the body, which
    :func:`parse_frontmatter` strips again, so the body round-trips
    byte for byte.
    """
    buf = StringIO()
    _new_yaml().dump(frontmatter, buf)
    yaml_text = buf.getvalue()

    parts = [_FRONTMATTER_DELIMITER, "\n", yaml_text, _FRONTMATTER_DELIMITER, "\n"]
    if body:
        parts.extend(["\n", body])
    return "".join(parts)


def insert_after(frontmatter: dict[str, Any], anchor: str, key: str, value: Any) -> None:
    """Set *key* directly after *anchor* when the mapping supports ordering."""
    if isinstance(frontmatter, CommentedMap) and anchor in frontmatter and key not in frontmatter:
        position = list(frontmatter.keys()).index(anchor) + 1
        frontmatter.insert(position, key, value)
    else:
        frontmatter[key] = value


# ---------------------------------------------------------------------------
# Frontmatter models
# ---------------------------------------------------------------------------


def _coerce_date(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _coerce_list(value: Any) -> Any:
    return [] if value is None else value


class PostFrontmatter(BaseModel):
    """Frontmatter for blog posts."""

    model_config = {"frozen": True, "extra": "allow", "populate_by_name": True}

    title: str = ""
    date: str = ""
    excerpt: str = ""
    tags: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    published: bool = False
    author: str | None = None
    thumbnail: str | None = None
    thumbnail_blur: str | None = Field(default=None, alias="thumbnailBlur")
    hero: str | None = None
    hero_blur: str | None = Field(default=None, alias="heroBlur")

    @field_validator("date", mode="before")
    @classmethod
    def _date_to_iso(cls, value: Any) -> str:
        return _coerce_date(value)

    @field_validator("tags", "keywords", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return _coerce_list(value)

    @field_validator("title", "excerpt", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def image_path(self, role: ImageRole) -> str | None:
        return self.thumbnail if role is ImageRole.THUMBNAIL else self.hero

    def blur(self, role: ImageRole) -> str | None:
        return self.thumbnail_blur if role is ImageRole.THUMBNAIL else self.hero_blur


class PatternRelationship(BaseModel):
    """A typed edge from one pattern to another."""

    model_config = {"frozen": True}

    slug: str
    type: RelationshipType
    note: str = ""


class PatternFrontmatter(BaseModel):
    """Frontmatter for pattern-language entries."""

    model_config = {"frozen": True, "extra": "allow", "populate_by_name": True}

    name: str
    chapter: int
    number: str
    intent: str = ""
    difficulty: Difficulty = Difficulty.BEGINNER
    published: bool = False
    keywords: list[str] = Field(default_factory=list)
    related_patterns: list[PatternRelationship] = Field(
        default_factory=list, alias="relatedPatterns"
    )

    @field_validator("keywords", "related_patterns", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return _coerce_list(value)

    @field_validator("number", mode="before")
    @classmethod
    def _number_to_str(cls, value: Any) -> Any:
        # ``number: 3.2`` arrives from YAML as a float.
        return str(value) if isinstance(value, (int, float)) else value


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Document:
    """A loaded post or pattern: slug, frontmatter and raw body."""

    slug: str
    kind: DocumentKind
    frontmatter: PostFrontmatter | PatternFrontmatter
    body: str
    reading_time: str
    path: Path

    @property
    def title(self) -> str:
        if isinstance(self.frontmatter, PatternFrontmatter):
            return self.frontmatter.name
        return self.frontmatter.title

    @property
    def published(self) -> bool:
        return self.frontmatter.published

    @property
    def date(self) -> str:
        if isinstance(self.frontmatter, PostFrontmatter):
            return self.frontmatter.date
        return ""

    @property
    def tags(self) -> list[str]:
        if isinstance(self.frontmatter, PostFrontmatter):
            return self.frontmatter.tags
        return []

    @property
    def url(self) -> str:
        prefix = "/blog" if self.kind is DocumentKind.POST else "/patterns"
        return f"{prefix}/{self.slug}"


@dataclass(frozen=True)
class NotFound:
    """Lookup miss: the document is absent or could not be loaded."""

    slug: str
    reason: str = "missing"


type LoadResult = Document | NotFound
