"""Shared pytest fixtures and test helpers for pubgate tests.

The ``site_root`` fixture builds a small but complete site: a guidelines
file, three published posts that link to each other (alpha, beta, gamma),
one draft (delta), correctly sized images for every published post and a
content plan.  With the default layout every published post passes with
a perfect score, so tests break things on purpose.
"""

from __future__ import annotations

import json
import logging
import struct
import zlib
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from PIL import Image

from pubgate.config.guidelines import GuidelineConfig
from pubgate.config.settings import PubgateSettings
from pubgate.infrastructure.site import Site

GUIDELINES: dict[str, Any] = {
    "version": "1.0",
    "validation_rules": {
        "title": {
            "min_length": 10,
            "max_length": 70,
            "must_start_with_capital": True,
            "forbidden_words": ["ultimate", "amazing"],
        },
        "excerpt": {"min_length": 20, "max_length": 200, "must_contain_action_verb": False},
        "structure": {
            "min_word_count": 50,
            "max_word_count": 3000,
            "min_headings": 2,
            "require_introduction": True,
            "require_conclusion": True,
        },
        "seo": {"min_keywords": 1, "max_keywords": 5, "min_tags": 2, "max_tags": 5},
        "seo_strategy": {
            "keyword_requirements": {
                "max_keyword_density_percent": 2.5,
                "min_keyword_density_percent": 0.5,
            },
            "internal_linking": {
                "min_internal_links_per_post": 2,
                "max_internal_links_per_post": 10,
            },
        },
        "tone": {
            "forbidden_phrases": ["I think", "just", "simply", "obviously"],
            "preferred_phrases": ["we shipped"],
            "max_passive_voice_percentage": 20,
            "max_sentence_length": 30,
        },
        "code_blocks": {
            "require_language_identifier": True,
            "encourage_line_highlighting": False,
            "max_lines_without_comment": 30,
        },
        "images": {
            "thumbnail": {"required": True, "width": 800, "height": 450, "max_size_kb": 500},
            "hero": {"required": True, "width": 1600, "height": 900, "max_size_kb": 1000},
        },
    },
    "scoring": {
        "weights": {
            "technical_depth": 0.3,
            "voice_alignment": 0.25,
            "structure": 0.25,
            "seo_readiness": 0.2,
        },
        "thresholds": {"publish_ready": 85, "needs_minor_edits": 70, "needs_major_revision": 50},
    },
}

FILLER = (
    "Teams ship small changes often and review each step with care before release. "
    "Clear notes help the next reader follow the reasoning behind every decision. "
)

BLUR = "data:image/jpeg;base64,/9j/4AAQSkZJRgABAQAAAQABAAD"

POSTS: dict[str, dict[str, Any]] = {
    "alpha": {"date": "2024-03-03", "tags": ["python", "workflow"], "links": ["beta", "gamma"]},
    "beta": {"date": "2024-03-02", "tags": ["python", "testing"], "links": ["alpha", "gamma"]},
    "gamma": {"date": "2024-03-01", "tags": ["workflow", "tooling"], "links": ["alpha", "beta"]},
}


def make_body(links: list[str] | tuple[str, ...] = (), *, keyword: str = "python") -> str:
    """A body that satisfies every structure, voice and SEO rule."""
    link_text = " ".join(f"See [post {slug}](/blog/{slug}) for more." for slug in links)
    return (
        f"{keyword.capitalize()} workflows reward steady habits. {FILLER}\n"
        "\n"
        f"## Getting started with {keyword}\n"
        "\n"
        f"{FILLER}{FILLER}{link_text}\n"
        "\n"
        "```python\n"
        'print("hello")\n'
        "```\n"
        "\n"
        "## Conclusion\n"
        "\n"
        f"{FILLER}\n"
    )


def render_post(
    slug: str,
    *,
    title: str = "Practical Python workflows for teams",
    date: str = "2024-03-01",
    excerpt: str = "How small teams keep Python projects healthy.",
    tags: list[str] | None = None,
    keywords: list[str] | None = None,
    published: bool = True,
    images: bool = True,
    blur: bool = True,
    body: str | None = None,
    links: list[str] | tuple[str, ...] = (),
) -> str:
    """MDX source for a post; every argument maps to one frontmatter key."""
    tags = ["python", "workflow"] if tags is None else tags
    keywords = ["python"] if keywords is None else keywords
    lines = [
        "---",
        f'title: "{title}"',
        f"date: {date}",
        f'excerpt: "{excerpt}"',
        f"tags: [{', '.join(tags)}]",
        f"keywords: [{', '.join(keywords)}]",
        f"published: {'true' if published else 'false'}",
        "author: Test Author",
    ]
    if images:
        lines.append(f"thumbnail: /images/posts/{slug}/thumbnail.jpg")
        if blur:
            lines.append(f'thumbnailBlur: "{BLUR}"')
        lines.append(f"hero: /images/posts/{slug}/hero.jpg")
        if blur:
            lines.append(f'heroBlur: "{BLUR}"')
    lines.append("---")
    text = body if body is not None else make_body(links)
    return "\n".join(lines) + "\n\n" + text


def write_post(root: Path, slug: str, **kwargs: Any) -> Path:
    path = root / "content" / "posts" / f"{slug}.mdx"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_post(slug, **kwargs), encoding="utf-8")
    return path


def make_image(path: Path, size: tuple[int, int], *, fmt: str = "JPEG") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, (40, 90, 160)).save(path, format=fmt)
    return path


def make_oversized_png(path: Path, size: tuple[int, int] = (20000, 20000)) -> Path:
    """A few hundred bytes of PNG whose header declares *size* pixels."""

    def chunk(kind: bytes, data: bytes) -> bytes:
        crc = zlib.crc32(kind + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)

    header = struct.pack(">IIBBBBB", size[0], size[1], 8, 2, 0, 0, 0)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", header)
        + chunk(b"IDAT", zlib.compress(b"\0" * 64))
        + chunk(b"IEND", b"")
    )
    return path


def make_post_images(root: Path, slug: str) -> None:
    base = root / "public" / "images" / "posts" / slug
    make_image(base / "thumbnail.jpg", (800, 450))
    make_image(base / "hero.jpg", (1600, 900))


def write_plan(root: Path, topics: list[dict[str, Any]]) -> Path:
    path = root / ".content" / "calendar" / "content-plan.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"version": 2, "topics": topics}, indent=2) + "\n")
    return path


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of settings discovery."""
    monkeypatch.delenv("PUBGATE_CONFIG", raising=False)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """``-v`` enables telemetry in the shared context; switch it off again."""
    from pubgate.services.telemetry import disable_telemetry

    try:
        yield
    finally:
        disable_telemetry()


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Every CLI run reconfigures the root logger; restore it afterwards."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pubgate_logger = logging.getLogger("pubgate")
    pubgate_level = pubgate_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pubgate_logger.setLevel(pubgate_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Temporary site with guidelines, posts, images and a content plan.

    This is the single source of truth for the site layout.
    """
    guidelines = tmp_path / ".content" / "brand" / "guidelines.json"
    guidelines.parent.mkdir(parents=True)
    guidelines.write_text(json.dumps(GUIDELINES, indent=2))

    for slug, meta in POSTS.items():
        write_post(tmp_path, slug, date=meta["date"], tags=meta["tags"], links=meta["links"])
        make_post_images(tmp_path, slug)
    write_post(tmp_path, "delta", published=False, tags=["python", "drafts"], links=["alpha"])

    write_plan(
        tmp_path,
        [
            {"id": "t1", "slug": "alpha", "status": "draft", "target_date": "2024-03-03"},
            {"id": "t2", "slug": "beta", "status": "published"},
            {"id": "t3", "slug": "gamma", "status": "ready"},
        ],
    )
    return tmp_path


@pytest.fixture
def settings(site_root: Path) -> PubgateSettings:
    return PubgateSettings.from_cli(site_root=site_root)


@pytest.fixture
def site(settings: PubgateSettings) -> Site:
    """Site context over ``site_root``."""
    return Site(settings)


@pytest.fixture
def rules(site: Site) -> GuidelineConfig:
    """The loaded guideline ruleset."""
    return site.guidelines.load()


@pytest.fixture
def _isolated_site(site_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp site root so the CLI picks it up.

    Use via ``@pytest.mark.usefixtures("_isolated_site")`` on command test
    classes.
    """
    monkeypatch.chdir(site_root)
